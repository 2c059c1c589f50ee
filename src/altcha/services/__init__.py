# src/altcha/services/__init__.py
"""Services built on the core primitives: verification, ciphers, obfuscation."""

from .altcha import Altcha
from .crypto import AesGcmCipher, AuthenticatedCipher
from .obfuscator import Obfuscator, RevealedData

__all__ = [
    "Altcha",
    "AesGcmCipher",
    "AuthenticatedCipher",
    "Obfuscator",
    "RevealedData",
]
