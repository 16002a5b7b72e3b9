"""Authentication configuration settings.

Environment Variables:
    AUTH_JWT_SECRET: Shared secret used to verify HS256 access tokens
    AUTH_ALGORITHM: JWT algorithm (default: HS256)
    AUTH_ISSUER: Expected ``iss`` claim; empty disables the issuer check
    AUTH_AUDIENCE: Expected ``aud`` claim (default: authenticated)
    AUTH_DEV_BYPASS: Skip JWT validation in development
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ALLOWED_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})


class AuthSettings(BaseSettings):
    """Authentication configuration loaded from ``AUTH_*`` variables.

    Example:
        >>> settings = AuthSettings(jwt_secret="s3cret")
        >>> settings.algorithm, settings.audience
        ('HS256', 'authenticated')
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: str = Field(
        default="",
        repr=False,
        description="Shared HMAC secret for access tokens",
    )
    algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    issuer: str = Field(default="", description="Expected issuer; empty to skip")
    audience: str = Field(default="authenticated", description="Expected JWT audience claim")
    dev_bypass: bool = Field(default=False, description="Skip JWT validation in development")

    @field_validator("algorithm")
    @classmethod
    def _validate_algorithm(cls, v: str) -> str:
        v = v.upper()
        if v not in _ALLOWED_ALGORITHMS:
            msg = f"algorithm must be one of {sorted(_ALLOWED_ALGORITHMS)}"
            raise ValueError(msg)
        return v

    @property
    def is_configured(self) -> bool:
        return bool(self.jwt_secret)


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Get singleton AuthSettings instance.

    Clear with ``get_auth_settings.cache_clear()`` in tests.
    """
    return AuthSettings()
