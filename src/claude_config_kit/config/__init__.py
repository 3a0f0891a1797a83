"""Static paths, user-facing messages and runtime settings."""
