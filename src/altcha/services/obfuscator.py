"""Counter-keyed obfuscation of small payloads such as contact details.

The IV is derived from a PoW counter, so a reader who does not know the
counter has to search for it. This rate-limits bulk harvesting; it is not a
secrecy guarantee when no shared key is configured.
"""

from __future__ import annotations

import base64
import binascii
import logging
import secrets
from dataclasses import dataclass

from altcha.core.algorithm import Algorithm
from altcha.core.errors import DecryptionError, EncryptionError
from altcha.core.settings import settings
from altcha.services.crypto import AesGcmCipher, AuthenticatedCipher
from altcha.utils.hash import BytesLike, Hasher, default_hasher

logger = logging.getLogger(__name__)

BYTE_RANGE = 256


@dataclass(frozen=True)
class RevealedData:
    """Plaintext recovered by searching for the counter."""

    plaintext: bytes
    counter: int


def counter_iv(counter: int, iv_length: int) -> bytes:
    """Encode `counter` little-endian into exactly `iv_length` bytes.

    Bits above `iv_length` bytes are dropped, so counters must stay below
    256**iv_length to be distinguishable.
    """
    if counter < 0:
        raise ValueError("counter must be non-negative")
    return (counter % BYTE_RANGE**iv_length).to_bytes(iv_length, "little")


class Obfuscator:
    """Encrypts payloads with AES-256-GCM under a counter-derived IV."""

    def __init__(
        self,
        max_number: int | None = None,
        hasher: Hasher = default_hasher,
        cipher: AuthenticatedCipher | None = None,
    ) -> None:
        self._max_number = settings.obfuscation_max_number if max_number is None else max_number
        if self._max_number < 0:
            raise ValueError("max_number must be non-negative")
        self._hasher = hasher
        self._cipher = cipher or AesGcmCipher()

    @property
    def max_number(self) -> int:
        return self._max_number

    def _key_material(self, key: BytesLike) -> bytes:
        # Always SHA-256, independent of the challenge algorithm
        return self._hasher.hash(Algorithm.SHA256, key)

    def _iv_length(self) -> int:
        iv_length = self._cipher.iv_length
        if not iv_length or iv_length <= 0:
            raise EncryptionError("Getting cipher iv length failed.")
        return iv_length

    def obfuscate_data(self, raw: BytesLike, key: BytesLike = "", counter: int | None = None) -> str:
        """Encrypt a payload for PoW-based reveal.

        Args:
            raw: Plaintext payload.
            key: Optional shared secret; empty means anyone who finds the counter can read it.
            counter: Fixed counter for the IV. Random in [0, max_number] when None.

        Returns:
            Base64 of ciphertext followed by the 16-byte GCM tag.

        Raises:
            EncryptionError: If the cipher cannot report an IV length or encrypt.
        """
        key_material = self._key_material(key)
        iv_length = self._iv_length()
        num = secrets.randbelow(self._max_number + 1) if counter is None else counter
        iv = counter_iv(num, iv_length)

        plaintext = raw if isinstance(raw, bytes) else raw.encode("utf-8")
        ciphertext, tag = self._cipher.encrypt(key_material, iv, plaintext)
        return base64.b64encode(ciphertext + tag).decode("ascii")

    def _split(self, data: str) -> tuple[bytes, bytes]:
        try:
            sealed = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as err:
            raise DecryptionError("Obfuscated data is not valid base64") from err

        tag_length = self._cipher.tag_length
        if len(sealed) < tag_length:
            raise DecryptionError("Obfuscated data is shorter than the authentication tag")
        return sealed[:-tag_length], sealed[-tag_length:]

    def deobfuscate_data(self, data: str, counter: int, key: BytesLike = "") -> bytes:
        """Decrypt an obfuscated payload given the counter that produced it.

        Raises:
            DecryptionError: If `data` is malformed or does not open under `counter`.
        """
        ciphertext, tag = self._split(data)
        iv = counter_iv(counter, self._iv_length())
        return self._cipher.decrypt(self._key_material(key), iv, ciphertext, tag)

    def reveal_data(
        self,
        data: str,
        key: BytesLike = "",
        max_number: int | None = None,
    ) -> RevealedData | None:
        """Search counters 0..max_number for the one that opens `data`.

        Returns:
            The plaintext and counter, or None when no counter in range works.

        Raises:
            DecryptionError: If `data` is not well-formed obfuscated output.
        """
        limit = self._max_number if max_number is None else max_number
        ciphertext, tag = self._split(data)
        key_material = self._key_material(key)
        iv_length = self._iv_length()
        for counter in range(limit + 1):
            try:
                plaintext = self._cipher.decrypt(
                    key_material, counter_iv(counter, iv_length), ciphertext, tag
                )
            except DecryptionError:
                continue
            return RevealedData(plaintext=plaintext, counter=counter)

        logger.debug("No counter in [0, %d] opened the payload", limit)
        return None
