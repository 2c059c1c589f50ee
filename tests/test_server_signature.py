"""Tests for server signature verification."""

from __future__ import annotations

import base64
import json
import time

import pytest

from altcha.core.algorithm import Algorithm
from altcha.schemas.server_signature import ServerSignaturePayload, ServerSignatureVerificationData

from tests.conftest import TEST_HMAC_KEY


def _sign(hasher, verification_data: str, algorithm: Algorithm = Algorithm.SHA256, key: str = TEST_HMAC_KEY) -> str:
    return hasher.hmac_hex(algorithm, hasher.hash(algorithm, verification_data), key)


def _payload(hasher, verification_data: str, verified: bool = True, **overrides) -> dict:
    payload = {
        "algorithm": Algorithm.SHA256.value,
        "verificationData": verification_data,
        "signature": _sign(hasher, verification_data),
        "verified": verified,
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def future_data() -> str:
    return f"verified=1&expire={int(time.time()) + 10}"


class TestVerifyServerSignature:
    """Test Altcha.verify_server_signature."""

    def test_valid_signature(self, altcha, hasher, future_data) -> None:
        result = altcha.verify_server_signature(_payload(hasher, future_data))

        assert result.verified is True
        assert result.verification_data is not None
        assert result.verification_data.verified is True

    def test_json_string_payload(self, altcha, hasher, future_data) -> None:
        assert altcha.verify_server_signature(json.dumps(_payload(hasher, future_data))).verified

    def test_base64_json_payload(self, altcha, hasher, future_data) -> None:
        token = base64.b64encode(json.dumps(_payload(hasher, future_data)).encode()).decode()
        assert altcha.verify_server_signature(token).verified

    def test_model_payload(self, altcha, hasher, future_data) -> None:
        model = ServerSignaturePayload.model_validate(_payload(hasher, future_data))
        assert altcha.verify_server_signature(model).verified

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    def test_algorithms(self, altcha, hasher, future_data, algorithm: Algorithm) -> None:
        payload = _payload(
            hasher,
            future_data,
            algorithm=algorithm.value,
            signature=_sign(hasher, future_data, algorithm),
        )
        assert altcha.verify_server_signature(payload).verified

    def test_asserted_false_stays_false(self, altcha, hasher, future_data) -> None:
        """A correctly signed negative assertion is reported as such."""
        assert altcha.verify_server_signature(_payload(hasher, future_data, verified=False)).verified is False

    def test_wrong_key(self, altcha, hasher, future_data) -> None:
        payload = _payload(hasher, future_data, signature=_sign(hasher, future_data, key="other"))
        assert altcha.verify_server_signature(payload).verified is False

    def test_tampered_data(self, altcha, hasher, future_data) -> None:
        payload = _payload(hasher, future_data)
        payload["verificationData"] = future_data + "&score=1"
        assert altcha.verify_server_signature(payload).verified is False

    def test_expired(self, altcha, hasher) -> None:
        data = f"verified=1&expire={int(time.time()) - 10}"
        result = altcha.verify_server_signature(_payload(hasher, data))

        assert result.verified is False
        assert result.verification_data is not None

    def test_without_expire(self, altcha, hasher) -> None:
        assert altcha.verify_server_signature(_payload(hasher, "verified=1")).verified

    def test_unparseable_expire(self, altcha, hasher) -> None:
        assert altcha.verify_server_signature(_payload(hasher, "verified=1&expire=later")).verified is False


class TestMalformedServerPayloads:
    """Malformed input yields verified=False without raising."""

    def test_invalid_string(self, altcha) -> None:
        assert altcha.verify_server_signature("I am invalid").verified is False

    def test_unsupported_algorithm(self, altcha) -> None:
        result = altcha.verify_server_signature(
            {
                "algorithm": "md5",
                "verificationData": "asd",
                "signature": "signature",
                "verified": True,
            }
        )
        assert result.verified is False

    @pytest.mark.parametrize(
        "payload",
        [
            "[]",
            '"text"',
            "{}",
            '{"algorithm": "SHA-256"}',
            "[" * 100_000,
            base64.b64encode(b"[" * 100_000).decode(),
        ],
    )
    def test_incomplete_json(self, altcha, payload: str) -> None:
        assert altcha.verify_server_signature(payload).verified is False


class TestVerificationData:
    """Test parsing of the verificationData query string."""

    def test_typed_fields(self) -> None:
        data = ServerSignatureVerificationData.from_query(
            "classification=GOOD&country=GB&detectedLanguage=en&email=a%40b.c"
            "&expire=1700000000&fields=name,email&fieldsHash=abc&ipAddress=1.2.3.4"
            "&reasons=ok,fast&score=0.5&time=1699999000&verified=true&custom=x"
        )

        assert data.classification == "GOOD"
        assert data.country == "GB"
        assert data.detected_language == "en"
        assert data.email == "a@b.c"
        assert data.expire == 1700000000
        assert data.form_fields == ["name", "email"]
        assert data.fields_hash == "abc"
        assert data.ip_address == "1.2.3.4"
        assert data.reasons == ["ok", "fast"]
        assert data.score == 0.5
        assert data.time == 1699999000
        assert data.verified is True
        assert data.extra == {"custom": "x"}

    def test_verified_flag_values(self) -> None:
        assert ServerSignatureVerificationData.from_query("verified=1").verified is True
        assert ServerSignatureVerificationData.from_query("verified=0").verified is False
        assert ServerSignatureVerificationData.from_query("").verified is False


class TestUnencodablePayloads:
    """Lone surrogates in a payload model yield verified=False."""

    @pytest.mark.parametrize("field", ["verification_data", "signature"])
    def test_model_with_surrogate(self, altcha, field: str) -> None:
        values = {
            "algorithm": "SHA-256",
            "verification_data": "verified=1",
            "signature": "abc",
            "verified": True,
        }
        values[field] = "\ud800"
        assert altcha.verify_server_signature(ServerSignaturePayload(**values)).verified is False
