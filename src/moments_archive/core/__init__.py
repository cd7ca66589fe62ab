"""Configuration, shared enumerations and error types."""
