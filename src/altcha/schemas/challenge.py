"""Schemas for challenges, solutions and solution payloads."""
from __future__ import annotations

import base64
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from altcha.core.algorithm import Algorithm


class ChallengeOptions(BaseModel):
    """Per-call overrides for challenge issuance.

    Unset values fall back to the library settings. `salt` and `number` pin
    the puzzle to known values, which is mostly useful in tests.
    """

    algorithm: Algorithm | None = None
    max_number: int | None = Field(default=None, ge=0)
    salt_length: int | None = Field(default=None, gt=0)
    expires: datetime | None = None
    params: dict[str, str] = Field(default_factory=dict)
    salt: str | None = None
    number: int | None = Field(default=None, ge=0)

    @field_validator("algorithm", mode="before")
    @classmethod
    def parse_algorithm(cls, v: object) -> Algorithm | None:
        return None if v is None else Algorithm.parse(v)


class Challenge(BaseModel):
    """A signed puzzle handed to a client."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    algorithm: Algorithm
    challenge: str
    max_number: int = Field(alias="maxnumber", ge=0)
    salt: str
    signature: str

    @field_validator("algorithm", mode="before")
    @classmethod
    def parse_algorithm(cls, v: object) -> Algorithm:
        return Algorithm.parse(v)

    def to_wire(self) -> dict[str, object]:
        """Return the JSON-ready object sent to the client widget."""
        return self.model_dump(mode="json", by_alias=True)


class Solution(BaseModel):
    """Result of a successful search; `took` is wall-clock seconds."""

    model_config = ConfigDict(frozen=True)

    number: int
    took: float


class Payload(BaseModel):
    """Solved challenge as submitted back by the client."""

    model_config = ConfigDict(frozen=True)

    algorithm: str
    challenge: str
    number: int
    salt: str
    signature: str

    @classmethod
    def from_solution(cls, challenge: Challenge, solution: Solution | int) -> Payload:
        """Package a solved challenge for submission."""
        number = solution.number if isinstance(solution, Solution) else solution
        return cls(
            algorithm=challenge.algorithm.value,
            challenge=challenge.challenge,
            number=number,
            salt=challenge.salt,
            signature=challenge.signature,
        )

    def to_base64(self) -> str:
        """Encode as base64(JSON), the usual hidden-form-field token."""
        return base64.b64encode(self.model_dump_json().encode("utf-8")).decode("ascii")
