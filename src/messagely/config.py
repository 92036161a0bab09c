"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with MESSAGELY_ prefix.
No YAML files, no file-based config, just env vars (12-factor app style).

The settings object is frozen: the bcrypt cost and JWT secret are read
once at startup and handed to PasswordHasher / SessionIssuer when those
are constructed, never looked up mid-request.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """All app configuration. Set via MESSAGELY_* env vars."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./messagely.db"

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    # bcrypt cost: 2**rounds iterations. 12 is ~250ms; above 16 logins crawl.
    bcrypt_work_factor: int = Field(default=12, ge=4, le=16)

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    model_config = SettingsConfigDict(env_prefix="MESSAGELY_", frozen=True)

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure sensitive defaults are changed in non-development environments."""
        if (
            self.environment != "development"
            and self.jwt_secret == DEFAULT_JWT_SECRET
        ):
            raise ValueError(
                "MESSAGELY_JWT_SECRET must be set to a secure value in "
                "non-development environments. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        return self


# Singleton, import this everywhere
settings = Settings()
