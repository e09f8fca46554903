"""Response normalization for backend payloads."""
