"""Client-side proof-of-work utilities.

The browser widget normally does this work; the Python solver exists for
tests, load generation and server-to-server clients.
"""

from __future__ import annotations

import logging
import threading
import time

from altcha.core.algorithm import Algorithm
from altcha.schemas.challenge import Challenge, Solution
from altcha.utils.hash import Hasher, default_hasher

logger = logging.getLogger(__name__)


def solve_challenge(
    challenge: str,
    salt: str,
    algorithm: Algorithm | str,
    max_number: int,
    start_number: int = 0,
    hasher: Hasher = default_hasher,
    stop_event: threading.Event | None = None,
) -> Solution | None:
    """Find the number whose digest reproduces `challenge` by brute force.

    Args:
        challenge: Target hex digest.
        salt: Salt from the issued challenge, query suffix included.
        algorithm: Algorithm member or wire string.
        max_number: Inclusive upper bound of the search.
        start_number: First number to try.
        hasher: Digest backend.
        stop_event: Optional event; once set the search gives up.

    Returns:
        A `Solution`, or None when the range is exhausted or the search is stopped.

    Raises:
        UnsupportedAlgorithmError: If `algorithm` is not supported.
    """
    algorithm = Algorithm.parse(algorithm)
    started = time.perf_counter()

    for number in range(start_number, max_number + 1):
        if stop_event is not None and stop_event.is_set():
            logger.debug("Search stopped at %d", number)
            return None
        if hasher.hash_hex(algorithm, f"{salt}{number}") == challenge:
            return Solution(number=number, took=time.perf_counter() - started)

    logger.debug("No solution in [%d, %d]", start_number, max_number)
    return None


def solve(challenge: Challenge, hasher: Hasher = default_hasher) -> Solution | None:
    """Solve an issued `Challenge` over its full range."""
    return solve_challenge(
        challenge.challenge,
        challenge.salt,
        challenge.algorithm,
        challenge.max_number,
        hasher=hasher,
    )
