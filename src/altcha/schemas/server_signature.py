"""Schemas for assertions signed by a trusted verification server."""
from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl

from pydantic import BaseModel, ConfigDict, Field

TRUE_VALUES = frozenset({"1", "true"})
LIST_FIELDS = ("fields", "reasons")


class ServerSignaturePayload(BaseModel):
    """Signed assertion forwarded by the client after server-side verification."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    algorithm: str
    verification_data: str = Field(alias="verificationData")
    signature: str
    verified: bool


class ServerSignatureVerificationData(BaseModel):
    """Fields carried by the `verificationData` query string."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    classification: str | None = None
    country: str | None = None
    detected_language: str | None = Field(default=None, alias="detectedLanguage")
    email: str | None = None
    expire: int | None = None
    form_fields: list[str] | None = Field(default=None, alias="fields")
    fields_hash: str | None = Field(default=None, alias="fieldsHash")
    ip_address: str | None = Field(default=None, alias="ipAddress")
    reasons: list[str] | None = None
    score: float | None = None
    time: int | None = None
    verified: bool = False
    extra: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_query(cls, verification_data: str) -> ServerSignatureVerificationData:
        """Parse a `key=value&...` string.

        Raises:
            pydantic.ValidationError: If a typed field (e.g. `expire`) does not parse.
        """
        known = {field.alias or name for name, field in cls.model_fields.items()}
        values: dict[str, Any] = {}
        extra: dict[str, str] = {}
        for key, value in parse_qsl(verification_data, keep_blank_values=True):
            if key == "extra" or key not in known:
                extra[key] = value
            elif key in LIST_FIELDS:
                values[key] = [item for item in value.split(",") if item]
            elif key == "verified":
                values[key] = value.lower() in TRUE_VALUES
            elif value == "":
                continue
            else:
                values[key] = value
        return cls.model_validate({**values, "extra": extra})


class ServerSignatureVerification(BaseModel):
    """Outcome of checking a server signature; `verified` is authoritative."""

    model_config = ConfigDict(frozen=True)

    verified: bool
    verification_data: ServerSignatureVerificationData | None = None
