"""Verifier settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LEEWAY_SECONDS = 0


class VerifierSettings(BaseSettings):
    """Claim checks and time tolerances applied by a verifier."""

    model_config = SettingsConfigDict(env_prefix="JWT_VERIFY_")

    leeway: int = DEFAULT_LEEWAY_SECONDS
    expires_at_leeway: int | None = None
    not_before_leeway: int | None = None
    issued_at_leeway: int | None = None
    issuer: str | None = None
    subject: str | None = None
    audience: list[str] = []
    type: str | None = None
