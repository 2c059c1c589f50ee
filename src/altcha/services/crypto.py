# src/altcha/services/crypto.py
"""Authenticated-encryption backends used by the obfuscator."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from altcha.core.errors import DecryptionError, EncryptionError

logger = logging.getLogger(__name__)

AES_256_KEY_BYTES = 32
GCM_IV_BYTES = 12
GCM_TAG_BYTES = 16


@runtime_checkable
class AuthenticatedCipher(Protocol):
    """Protocol for an AEAD cipher with an explicit key, IV and detached tag."""

    @property
    def iv_length(self) -> int | None: ...

    @property
    def tag_length(self) -> int: ...

    def encrypt(self, key: bytes, iv: bytes, plaintext: bytes) -> tuple[bytes, bytes]: ...

    def decrypt(self, key: bytes, iv: bytes, ciphertext: bytes, tag: bytes) -> bytes: ...


class AesGcmCipher:
    """AES-256-GCM built on `cryptography`'s AESGCM primitive."""

    @property
    def iv_length(self) -> int:
        return GCM_IV_BYTES

    @property
    def tag_length(self) -> int:
        return GCM_TAG_BYTES

    def encrypt(self, key: bytes, iv: bytes, plaintext: bytes) -> tuple[bytes, bytes]:
        """Encrypt `plaintext` without associated data.

        Returns:
            Tuple of (ciphertext, tag).

        Raises:
            EncryptionError: If the key or IV is rejected by the backend.
        """
        if len(key) != AES_256_KEY_BYTES:
            raise EncryptionError(f"AES-256 requires a {AES_256_KEY_BYTES}-byte key")
        try:
            sealed = AESGCM(key).encrypt(iv, plaintext, None)
        except (ValueError, OverflowError) as err:
            logger.warning("AES-GCM encryption failed: %s", err)
            raise EncryptionError("Data encryption failed.") from err
        return sealed[:-GCM_TAG_BYTES], sealed[-GCM_TAG_BYTES:]

    def decrypt(self, key: bytes, iv: bytes, ciphertext: bytes, tag: bytes) -> bytes:
        """Decrypt and authenticate `ciphertext`.

        Raises:
            DecryptionError: If authentication fails or the inputs are rejected.
        """
        if len(key) != AES_256_KEY_BYTES:
            raise DecryptionError(f"AES-256 requires a {AES_256_KEY_BYTES}-byte key")
        try:
            return AESGCM(key).decrypt(iv, ciphertext + tag, None)
        except InvalidTag as err:
            raise DecryptionError("Authentication tag mismatch") from err
        except (ValueError, OverflowError) as err:
            raise DecryptionError(f"Data decryption failed: {err}") from err
