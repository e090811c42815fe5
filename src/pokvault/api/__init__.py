"""HTTP API for the market index."""
