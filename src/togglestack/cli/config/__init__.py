"""Settings commands."""
