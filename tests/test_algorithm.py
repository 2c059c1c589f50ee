"""Tests for the algorithm enumeration."""

from __future__ import annotations

import pytest

from altcha.core.algorithm import Algorithm
from altcha.core.errors import UnsupportedAlgorithmError


@pytest.mark.parametrize(
    ("wire", "member"),
    [("SHA-1", Algorithm.SHA1), ("SHA-256", Algorithm.SHA256), ("SHA-512", Algorithm.SHA512)],
)
def test_wire_strings_round_trip(wire: str, member: Algorithm) -> None:
    """Each wire string maps to exactly one member and back."""
    assert Algorithm.parse(wire) is member
    assert member.value == wire


def test_parse_accepts_members() -> None:
    assert Algorithm.parse(Algorithm.SHA512) is Algorithm.SHA512


@pytest.mark.parametrize("value", ["md5", "sha-256", "SHA256", "", None, 256])
def test_parse_rejects_unknown_values(value: object) -> None:
    """Unknown identifiers never fall back to a default."""
    with pytest.raises(UnsupportedAlgorithmError):
        Algorithm.parse(value)


def test_unsupported_algorithm_is_value_error() -> None:
    with pytest.raises(ValueError, match="Unsupported algorithm"):
        Algorithm.parse("md5")


def test_digest_sizes() -> None:
    assert Algorithm.SHA1.digest_size == 20
    assert Algorithm.SHA256.digest_size == 32
    assert Algorithm.SHA512.digest_size == 64
