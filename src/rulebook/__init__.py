"""Rulebook — user-defined threshold rules: store state machine and YAML presets."""
