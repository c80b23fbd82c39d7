"""HTTP API host."""
