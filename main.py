"""Application entry point for the rotalog command line tool."""
from __future__ import annotations

import sys

from rotalog.cli import main


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
