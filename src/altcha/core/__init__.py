"""Core primitives: algorithms, settings, errors and challenge issuance."""
