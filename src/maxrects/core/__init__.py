"""Core value types, configuration, errors and layout validation."""
