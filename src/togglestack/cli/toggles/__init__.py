"""Toggle resolution commands."""
