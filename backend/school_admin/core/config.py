"""Application settings and configuration."""

from typing import Literal

from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field, model_validator  # type: ignore
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict  # type: ignore


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Constructed once by the caller of ``create_app`` and carried on
    ``app.state.settings``; nothing in the package reads a module-level instance.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    ENV: Literal["dev", "staging", "prod", "test"] = Field(default="dev")
    PROJECT_NAME: str = Field(default="School Admin Console API")

    # API
    API_PREFIX: str = Field(default="/v1")

    # Database (audit trail only)
    DATABASE_URL: str = Field(default="sqlite:///./school_admin.db")

    # CORS - Accept string or list, will be normalized to list
    CORS_ORIGINS: str | list[str] = Field(default="http://localhost:3000")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    # Per-logger levels, e.g. {"school_admin.clients": "DEBUG"}
    LOG_LEVEL_OVERRIDES: dict[str, str] = Field(
        default_factory=lambda: {"uvicorn.access": "WARNING", "uvicorn": "INFO", "httpx": "WARNING"}
    )

    # Remote school-management backend
    BACKEND_API_URL: str | None = Field(default=None)
    BACKEND_API_TIMEOUT_SECONDS: float = Field(default=30.0)

    # Import limits
    MAX_BODY_BYTES_IMPORT: int = Field(default=5 * 1024 * 1024)
    IMPORT_MAX_ROWS: int = Field(default=5000)
    IMPORT_PREVIEW_MAX_COLUMNS: int = Field(default=5)
    IMPORT_PREVIEW_MAX_ROWS: int = Field(default=10)
    IMPORT_SESSION_TTL_SECONDS: int = Field(default=1800)  # 30 minutes

    @model_validator(mode="before")
    @classmethod
    def parse_cors_origins(cls, data):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(data, dict) and "CORS_ORIGINS" in data:
            cors_origins = data["CORS_ORIGINS"]
            if isinstance(cors_origins, str):
                data["CORS_ORIGINS"] = [
                    origin.strip() for origin in cors_origins.split(",") if origin.strip()
                ]
        return data

    @model_validator(mode="after")
    def check_production(self) -> "Settings":
        """Fail fast in production if critical vars are missing."""
        if isinstance(self.CORS_ORIGINS, str):
            object.__setattr__(
                self,
                "CORS_ORIGINS",
                [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()],
            )
        if self.ENV == "prod" and not self.BACKEND_API_URL:
            raise ValueError("BACKEND_API_URL must be set in production")
        return self

    @property
    def backend_base_url(self) -> str:
        return (self.BACKEND_API_URL or "http://localhost:4000/api/v1").rstrip("/")


class AppConfig(BaseModel):
    """School-level configuration published by the remote backend.

    Fetched once during application start-up; defaults apply when the
    backend does not answer.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    terms_per_session: int = Field(default=3, ge=1)
    currency: str = Field(default="NGN")


def get_settings(request: Request) -> Settings:
    """Dependency returning the settings the application was created with."""
    return request.app.state.settings


def get_app_config(request: Request) -> AppConfig:
    """Dependency returning the remote configuration loaded at start-up."""
    return request.app.state.app_config
