"""Exceptions raised for operational faults.

Verification outcomes never raise; these cover misconfiguration such as an
unknown hash algorithm or a cipher backend that cannot complete its work.
"""
from __future__ import annotations


class AltchaError(RuntimeError):
    """Base exception for library failures."""


class UnsupportedAlgorithmError(AltchaError, ValueError):
    """Raised when an algorithm identifier is outside SHA-1/SHA-256/SHA-512."""

    def __init__(self, algorithm: object) -> None:
        super().__init__(f"Unsupported algorithm: {algorithm!r}")
        self.algorithm = algorithm


class EncryptionError(AltchaError):
    """Raised when the cipher backend cannot encrypt a payload."""


class DecryptionError(EncryptionError):
    """Raised when an obfuscated payload cannot be opened with the given counter."""
