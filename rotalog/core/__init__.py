"""Per-logger state machine: levels, rotation, output targets."""
