"""HTTP API for the hour bank."""
