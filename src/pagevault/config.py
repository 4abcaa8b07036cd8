"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with PAGEVAULT_ prefix.
No YAML files, no file-based config — just env vars (12-factor app style).

Learn: The settings object is built once at process start and handed to
create_app(). Nothing reads the JWT secret from a module constant, so
tests and deployments inject their own.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """All app configuration. Set via PAGEVAULT_* env vars."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./pagevault.db"

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    bcrypt_rounds: int = 10

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3001

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    model_config = {"env_prefix": "PAGEVAULT_"}

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure sensitive defaults are changed in non-development environments."""
        if (
            self.environment != "development"
            and self.jwt_secret == DEFAULT_JWT_SECRET
        ):
            raise ValueError(
                "PAGEVAULT_JWT_SECRET must be set to a secure value in "
                "non-development environments. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("PAGEVAULT_BCRYPT_ROUNDS must be between 4 and 31")
        return self


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    return Settings()
