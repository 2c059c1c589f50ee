"""Challenge issuance and verification service.

`Altcha` binds the shared HMAC key and the hasher so callers only pass
per-request data. Every `verify_*` method treats its input as untrusted:
malformed, tampered or expired data yields a negative result, never an
exception.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
import secrets
import threading
import time
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from altcha.core import pow as core_pow
from altcha.core.algorithm import Algorithm
from altcha.core.errors import UnsupportedAlgorithmError
from altcha.core.settings import settings
from altcha.schemas.challenge import Challenge, ChallengeOptions, Payload, Solution
from altcha.schemas.server_signature import (
    ServerSignaturePayload,
    ServerSignatureVerification,
    ServerSignatureVerificationData,
)
from altcha.utils.hash import Hasher, default_hasher
from altcha.utils.pow_client import solve_challenge

logger = logging.getLogger(__name__)

FIELDS_SEPARATOR = "\n"


def _loads_json(text: str) -> Any:
    """Parse JSON; nesting deep enough to exhaust the stack is a ValueError."""
    try:
        return json.loads(text)
    except RecursionError as err:
        raise ValueError("Payload JSON is nested too deeply") from err


def _decode_base64_json(data: str) -> Any:
    """Decode base64(JSON); raises ValueError on any malformed stage."""
    try:
        decoded = base64.b64decode(data, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as err:
        raise ValueError(f"Invalid payload encoding: {err}") from err
    return _loads_json(decoded)


class Altcha:
    """Service issuing and verifying proof-of-work challenges."""

    def __init__(self, hmac_key: str | bytes | None = None, hasher: Hasher = default_hasher) -> None:
        key = hmac_key if hmac_key is not None else settings.hmac_key
        if key is None:
            raise ValueError("An HMAC key is required; pass one or set ALTCHA_HMAC_KEY")
        self._hmac_key = key
        self._hasher = hasher

    def create_challenge(self, options: ChallengeOptions | None = None) -> Challenge:
        """Issue a new signed challenge."""
        return core_pow.create_challenge(self._hmac_key, options, self._hasher)

    def solve_challenge(
        self,
        challenge: str,
        salt: str,
        algorithm: Algorithm | str,
        max_number: int,
        start_number: int = 0,
        stop_event: threading.Event | None = None,
    ) -> Solution | None:
        """Brute-force a challenge; None means no number in range matches."""
        return solve_challenge(
            challenge,
            salt,
            algorithm,
            max_number,
            start_number=start_number,
            hasher=self._hasher,
            stop_event=stop_event,
        )

    def verify_solution(
        self,
        payload: str | Mapping[str, Any] | Payload,
        check_expires: bool = True,
    ) -> bool:
        """Return True if `payload` solves a challenge this service signed.

        Args:
            payload: A `Payload`, a mapping, or base64(JSON) of a mapping.
            check_expires: Reject challenges whose embedded `expires` has passed.
        """
        try:
            parsed = self._load_payload(payload)
        except (ValueError, TypeError) as err:
            logger.debug("Rejected solution payload: %s", err)
            return False

        try:
            algorithm = Algorithm.parse(parsed.algorithm)
        except UnsupportedAlgorithmError:
            logger.debug("Rejected solution with unsupported algorithm %r", parsed.algorithm)
            return False

        if parsed.number < 0:
            logger.debug("Rejected solution with negative number")
            return False

        try:
            expected_challenge = core_pow.challenge_digest(
                algorithm, parsed.salt, parsed.number, self._hasher
            )
        except ValueError:
            # int-to-str conversion limit on absurdly large numbers
            logger.debug("Rejected solution with oversized number")
            return False
        expected_signature = self._hasher.hmac_hex(algorithm, parsed.challenge, self._hmac_key)

        # Evaluate both checks before branching so failures look the same
        challenge_ok = secrets.compare_digest(
            expected_challenge.encode("utf-8"), parsed.challenge.encode("utf-8")
        )
        signature_ok = secrets.compare_digest(
            expected_signature.encode("utf-8"), parsed.signature.encode("utf-8")
        )
        if not (challenge_ok and signature_ok):
            logger.debug("Rejected solution: challenge or signature mismatch")
            return False

        if check_expires and self._is_expired(parsed.salt):
            logger.debug("Rejected solution: challenge expired")
            return False
        return True

    def verify_fields_hash(
        self,
        form_data: Mapping[str, Any],
        fields: Sequence[str],
        fields_hash: str,
        algorithm: Algorithm | str = Algorithm.SHA256,
    ) -> bool:
        """Return True if the newline-joined field values hash to `fields_hash`.

        Fields missing from `form_data` contribute an empty line.
        """
        try:
            resolved = Algorithm.parse(algorithm)
            lines = [_field_value(form_data.get(field)) for field in fields]
            computed = self._hasher.hash_hex(resolved, FIELDS_SEPARATOR.join(lines))
            return secrets.compare_digest(computed.encode("utf-8"), str(fields_hash).encode("utf-8"))
        except (ValueError, AttributeError, TypeError) as err:
            logger.debug("Rejected fields hash: %s", err)
            return False

    def verify_server_signature(
        self,
        payload: str | Mapping[str, Any] | ServerSignaturePayload,
    ) -> ServerSignatureVerification:
        """Check an assertion signed by a trusted verification server.

        Args:
            payload: A `ServerSignaturePayload`, a mapping, a JSON string or
                base64(JSON).

        Returns:
            A result whose `verified` flag is False whenever any check fails.
        """
        try:
            parsed = self._load_server_payload(payload)
        except (ValueError, TypeError) as err:
            logger.debug("Rejected server signature payload: %s", err)
            return ServerSignatureVerification(verified=False)

        verification_data: ServerSignatureVerificationData | None
        try:
            verification_data = ServerSignatureVerificationData.from_query(parsed.verification_data)
        except ValidationError as err:
            logger.debug("Unparseable verification data: %s", err)
            verification_data = None

        try:
            algorithm = Algorithm.parse(parsed.algorithm)
        except UnsupportedAlgorithmError:
            logger.debug("Rejected server signature with unsupported algorithm %r", parsed.algorithm)
            return ServerSignatureVerification(verified=False, verification_data=verification_data)

        data_hash = self._hasher.hash(algorithm, parsed.verification_data)
        expected_signature = self._hasher.hmac_hex(algorithm, data_hash, self._hmac_key)
        if not secrets.compare_digest(
            expected_signature.encode("utf-8"), parsed.signature.encode("utf-8")
        ):
            logger.debug("Rejected server signature: signature mismatch")
            return ServerSignatureVerification(verified=False, verification_data=verification_data)

        if verification_data is None:
            return ServerSignatureVerification(verified=False)

        if verification_data.expire is not None and verification_data.expire < int(time.time()):
            logger.debug("Rejected server signature: assertion expired")
            return ServerSignatureVerification(verified=False, verification_data=verification_data)

        return ServerSignatureVerification(
            verified=parsed.verified,
            verification_data=verification_data,
        )

    @staticmethod
    def _load_payload(payload: str | Mapping[str, Any] | Payload) -> Payload:
        if isinstance(payload, Payload):
            parsed = payload
        else:
            data = _decode_base64_json(payload) if isinstance(payload, str) else payload
            if not isinstance(data, Mapping):
                raise ValueError("Payload must decode to an object")
            parsed = Payload.model_validate(dict(data))
        _ensure_encodable(parsed.challenge, parsed.salt, parsed.signature)
        return parsed

    @staticmethod
    def _load_server_payload(
        payload: str | Mapping[str, Any] | ServerSignaturePayload,
    ) -> ServerSignaturePayload:
        if isinstance(payload, ServerSignaturePayload):
            parsed = payload
        else:
            data: Any = payload
            if isinstance(payload, str):
                try:
                    data = _loads_json(payload)
                except json.JSONDecodeError:
                    data = _decode_base64_json(payload)
            if not isinstance(data, Mapping):
                raise ValueError("Payload must decode to an object")
            parsed = ServerSignaturePayload.model_validate(dict(data))
        _ensure_encodable(parsed.verification_data, parsed.signature)
        return parsed

    @staticmethod
    def _is_expired(salt: str) -> bool:
        expires = core_pow.extract_params(salt).get(core_pow.EXPIRES_PARAM)
        if expires is None:
            return False
        try:
            return int(expires) < int(time.time())
        except ValueError:
            # An unreadable expiry can not be honoured
            return True


def _ensure_encodable(*values: str) -> None:
    """Raise UnicodeEncodeError (a ValueError) for lone surrogates from JSON escapes."""
    for value in values:
        value.encode("utf-8")


def _field_value(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
