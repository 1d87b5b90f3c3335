"""HTTP API for Fleet Finance."""
