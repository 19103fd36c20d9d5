from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    PROJECT_NAME: str = "HVAC Service Console"

    # Backend API Settings
    # API_BASE_URL may be given with or without the version prefix
    API_BASE_URL: str = "http://localhost:8080"
    API_V1_STR: str = "/api/v1"
    API_TIMEOUT_SECONDS: float = 10.0

    @property
    def api_root(self) -> str:
        base = self.API_BASE_URL.rstrip("/")
        prefix = "/" + self.API_V1_STR.strip("/")
        if base.endswith(prefix):
            return base
        return f"{base}{prefix}"

    @property
    def backend_root(self) -> str:
        """Backend host without the version prefix (used for /health)"""
        root = self.api_root
        return root[: -len("/" + self.API_V1_STR.strip("/"))]

    # Session Settings
    SECRET_KEY: str = "change-me-in-production"
    SESSION_COOKIE: str = "hvac_session"
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24
    SESSION_HTTPS_ONLY: bool = False

    # Auth Settings
    MIN_PASSWORD_LENGTH: int = 6

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lowercase level names from .env files"""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
