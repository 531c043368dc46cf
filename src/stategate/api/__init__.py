"""HTTP API for stategate."""
