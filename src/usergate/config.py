"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with USERGATE_ prefix
(and an optional .env file in the working directory).

Learn: Settings are built explicitly by get_settings() and handed to
create_app(). There is no import-time singleton, so a missing signing
secret fails when the app is constructed, not when a module is imported.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via USERGATE_* env vars."""

    # Auth
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    logout_token_offset_seconds: int = -10
    bcrypt_rounds: int = 12

    # Storage
    store_path: str = "db.json"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5500",
        "http://127.0.0.1:5500",
    ]

    model_config = {"env_prefix": "USERGATE_", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def require_signing_secret(self):
        """Refuse to start without a signing secret."""
        if not self.jwt_secret.strip():
            raise ValueError(
                "USERGATE_JWT_SECRET must be set to a non-empty value. "
                "Generate one with: usergate secret"
            )
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("USERGATE_BCRYPT_ROUNDS must be between 4 and 31")
        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"USERGATE_LOG_LEVEL is not a log level: {self.log_level}")
        return self


@lru_cache
def get_settings() -> Settings:
    """Build the process-wide settings once."""
    return Settings()
