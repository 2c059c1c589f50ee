"""Hashing helpers and the client-side solver."""
