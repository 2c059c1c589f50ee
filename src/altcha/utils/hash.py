# src/altcha/utils/hash.py
"""Hashing helpers providing digest and HMAC behind a swappable interface."""

from __future__ import annotations

import hashlib
import hmac
from typing import Protocol, runtime_checkable

from altcha.core.algorithm import Algorithm

BytesLike = str | bytes


@runtime_checkable
class Hasher(Protocol):
    """Protocol capturing the digest and HMAC operations the protocol relies on."""

    def hash(self, algorithm: Algorithm, data: BytesLike) -> bytes: ...

    def hash_hex(self, algorithm: Algorithm, data: BytesLike) -> str: ...

    def hmac(self, algorithm: Algorithm, data: BytesLike, key: BytesLike) -> bytes: ...

    def hmac_hex(self, algorithm: Algorithm, data: BytesLike, key: BytesLike) -> str: ...


def _to_bytes(value: BytesLike) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def _hashlib_name(algorithm: Algorithm) -> str:
    return Algorithm.parse(algorithm).hashlib_name


class HashlibHasher:
    """Default hasher backed by `hashlib` and `hmac`.

    Stateless, so a single instance can be shared between threads.
    """

    def hash(self, algorithm: Algorithm, data: BytesLike) -> bytes:
        """Return the raw digest of `data`."""
        return hashlib.new(_hashlib_name(algorithm), _to_bytes(data)).digest()

    def hash_hex(self, algorithm: Algorithm, data: BytesLike) -> str:
        """Return the hexadecimal digest of `data`."""
        return self.hash(algorithm, data).hex()

    def hmac(self, algorithm: Algorithm, data: BytesLike, key: BytesLike) -> bytes:
        """Return the raw HMAC of `data` under `key`."""
        return hmac.new(_to_bytes(key), _to_bytes(data), _hashlib_name(algorithm)).digest()

    def hmac_hex(self, algorithm: Algorithm, data: BytesLike, key: BytesLike) -> str:
        """Return the hexadecimal HMAC of `data` under `key`."""
        return self.hmac(algorithm, data, key).hex()


default_hasher = HashlibHasher()
