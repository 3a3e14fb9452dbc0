"""HTTP API for studio finance."""
