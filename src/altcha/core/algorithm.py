"""Hash algorithms understood by the challenge protocol."""
from __future__ import annotations

from enum import Enum

from altcha.core.errors import UnsupportedAlgorithmError

SHA1_DIGEST_BYTES = 20
SHA256_DIGEST_BYTES = 32
SHA512_DIGEST_BYTES = 64


class Algorithm(str, Enum):
    """Closed set of digest algorithms, valued by their wire string."""

    SHA1 = "SHA-1"
    SHA256 = "SHA-256"
    SHA512 = "SHA-512"

    @property
    def hashlib_name(self) -> str:
        """Name accepted by `hashlib.new` and `hmac.new`."""
        return _HASHLIB_NAMES[self]

    @property
    def digest_size(self) -> int:
        return _DIGEST_SIZES[self]

    @classmethod
    def parse(cls, value: object) -> Algorithm:
        """Return the member for `value`, a member or its exact wire string.

        Raises:
            UnsupportedAlgorithmError: For any other value, including
                lowercase spellings such as "sha-256".
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        raise UnsupportedAlgorithmError(value)


_HASHLIB_NAMES = {
    Algorithm.SHA1: "sha1",
    Algorithm.SHA256: "sha256",
    Algorithm.SHA512: "sha512",
}

_DIGEST_SIZES = {
    Algorithm.SHA1: SHA1_DIGEST_BYTES,
    Algorithm.SHA256: SHA256_DIGEST_BYTES,
    Algorithm.SHA512: SHA512_DIGEST_BYTES,
}
