"""Library settings and configuration.

Defaults for challenge issuance and obfuscation. Values are loaded from
environment variables (or a `.env` file) so deployments can tune difficulty
without code changes.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from altcha.core.algorithm import Algorithm


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    The HMAC key is optional here so the library can be imported without
    configuration; `Altcha` refuses to run without one.
    """

    # Shared secret used to sign challenges and server assertions
    hmac_key: str | None = Field(default=None, alias="ALTCHA_HMAC_KEY")

    # Challenge issuance defaults
    algorithm: Algorithm = Field(default=Algorithm.SHA256, alias="ALTCHA_ALGORITHM")
    max_number: int = Field(default=1_000_000, ge=0, alias="ALTCHA_MAX_NUMBER")
    salt_length: int = Field(default=12, gt=0, alias="ALTCHA_SALT_LENGTH")
    challenge_ttl_seconds: int | None = Field(
        default=None,
        gt=0,
        alias="ALTCHA_CHALLENGE_TTL_SECONDS",
    )

    # Upper bound for random counters picked by the obfuscator
    obfuscation_max_number: int = Field(
        default=10_000,
        ge=0,
        alias="ALTCHA_OBFUSCATION_MAX_NUMBER",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("algorithm", mode="before")
    @classmethod
    def parse_algorithm(cls, v: object) -> Algorithm:
        """Reject unknown algorithm names instead of falling back."""
        return Algorithm.parse(v)


settings = Settings()
