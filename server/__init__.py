"""HTTP API for processgraph."""
