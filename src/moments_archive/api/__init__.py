"""HTTP API for the moments archive."""
