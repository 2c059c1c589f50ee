# tests/conftest.py
from __future__ import annotations

import pytest

from altcha.core.algorithm import Algorithm
from altcha.schemas.challenge import Challenge, ChallengeOptions
from altcha.services.altcha import Altcha
from altcha.utils.hash import HashlibHasher

TEST_HMAC_KEY = "test-key"
SMALL_MAX_NUMBER = 100


@pytest.fixture(scope="session")
def hasher() -> HashlibHasher:
    return HashlibHasher()


@pytest.fixture(scope="session")
def altcha(hasher: HashlibHasher) -> Altcha:
    return Altcha(TEST_HMAC_KEY, hasher)


@pytest.fixture()
def small_challenge(altcha: Altcha) -> Challenge:
    """A cheap challenge so solving stays fast."""
    return altcha.create_challenge(
        ChallengeOptions(algorithm=Algorithm.SHA256, max_number=SMALL_MAX_NUMBER)
    )
