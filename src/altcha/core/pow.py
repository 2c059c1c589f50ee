"""Proof-of-Work challenge issuance.

A challenge is the digest of `salt + str(number)` for a secret number drawn
from `[0, max_number]`, signed with an HMAC so the verifier can trust it
without storing anything. Expiry and caller parameters travel inside the
salt, so the signature covers them too.
"""
from __future__ import annotations

import logging
import secrets
from datetime import UTC, datetime, timedelta
from urllib.parse import parse_qsl, urlencode

from altcha.core.algorithm import Algorithm
from altcha.core.settings import settings
from altcha.schemas.challenge import Challenge, ChallengeOptions
from altcha.utils.hash import Hasher, default_hasher

logger = logging.getLogger(__name__)

SALT_PARAMS_SEPARATOR = "?"
SALT_PARAMS_TERMINATOR = "&"
EXPIRES_PARAM = "expires"


def challenge_digest(
    algorithm: Algorithm,
    salt: str,
    number: int,
    hasher: Hasher = default_hasher,
) -> str:
    """Return the hex digest a solver must reproduce for `number`."""
    return hasher.hash_hex(algorithm, f"{salt}{number}")


def build_salt(
    salt_length: int,
    expires: datetime | None = None,
    params: dict[str, str] | None = None,
    salt: str | None = None,
) -> str:
    """Return a random hex salt with an optional query-string suffix.

    The suffix ends with `&` so that trailing digits of the number can not be
    read as part of the last parameter (e.g. stretching `expires`).
    """
    base = salt if salt is not None else secrets.token_hex(salt_length)
    query: dict[str, str] = {}
    if expires is not None:
        query[EXPIRES_PARAM] = str(int(expires.timestamp()))
    if params:
        query.update(params)
    if not query:
        return base
    return f"{base}{SALT_PARAMS_SEPARATOR}{urlencode(query)}{SALT_PARAMS_TERMINATOR}"


def extract_params(salt: str) -> dict[str, str]:
    """Return the query-string parameters embedded in a salt."""
    _, sep, query = salt.partition(SALT_PARAMS_SEPARATOR)
    if not sep:
        return {}
    return dict(parse_qsl(query, keep_blank_values=True))


def create_challenge(
    hmac_key: str | bytes,
    options: ChallengeOptions | None = None,
    hasher: Hasher = default_hasher,
) -> Challenge:
    """Issue a signed challenge.

    Args:
        hmac_key: Shared secret used to sign the challenge.
        options: Per-call overrides; unset values come from `settings`.
        hasher: Digest/HMAC backend.

    Returns:
        A `Challenge` ready to serialize for the client.
    """
    options = options or ChallengeOptions()
    algorithm = options.algorithm or settings.algorithm
    max_number = settings.max_number if options.max_number is None else options.max_number
    salt_length = options.salt_length or settings.salt_length

    expires = options.expires
    if expires is None and settings.challenge_ttl_seconds:
        expires = datetime.now(UTC) + timedelta(seconds=settings.challenge_ttl_seconds)

    if options.number is not None:
        if options.number > max_number:
            raise ValueError("number must not exceed max_number")
        number = options.number
    else:
        number = secrets.randbelow(max_number + 1)

    salt = build_salt(salt_length, expires, options.params, options.salt)
    challenge = challenge_digest(algorithm, salt, number, hasher)
    signature = hasher.hmac_hex(algorithm, challenge, hmac_key)

    logger.debug(
        "Issued %s challenge (max_number=%d, expires=%s)",
        algorithm.value,
        max_number,
        expires.isoformat() if expires else None,
    )
    return Challenge(
        algorithm=algorithm,
        challenge=challenge,
        max_number=max_number,
        salt=salt,
        signature=signature,
    )
