"""
Configuration management using Pydantic Settings
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from project root
# config.py is at: backend/virtual_doctor/core/config.py
_current_file = Path(__file__).resolve()
_backend_dir = _current_file.parent.parent.parent
_project_root = _backend_dir.parent
ENV_FILE = _project_root / ".env"
# Fallback: try in backend/ directory if not found in project root
if not ENV_FILE.exists():
    ENV_FILE = _backend_dir / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE)


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "Virtual Doctor"
    app_env: str = Field(default="development", description="Application environment")
    log_level: str = Field(default="INFO", description="Logging level")
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=5000, ge=1, le=65535, description="API port")
    allowed_origins: str = Field(
        default="http://localhost:5000",
        description="Allowed CORS origins (comma-separated)"
    )

    # Logging
    log_sqlalchemy: bool = Field(default=False, description="Enable SQLAlchemy query logging")
    log_uvicorn_access: bool = Field(default=False, description="Enable Uvicorn access logging")
    log_module_levels: Optional[str] = Field(
        default=None,
        description='Module-specific log levels (JSON string, e.g., {"virtual_doctor.api": "DEBUG"})'
    )
    log_format: str = Field(
        default="json",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_file_enabled: bool = Field(default=True, description="Enable file logging")
    log_file_path: str = Field(
        default="logs/virtual_doctor.log",
        description="Path to log file (relative to project root)"
    )
    log_file_retention: int = Field(
        default=30,
        ge=1,
        description="Number of days to keep log files"
    )
    log_sensitive_data: bool = Field(
        default=False,
        description="Enable logging of sensitive data (passwords, tokens) - NOT RECOMMENDED"
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./meddb.sqlite3",
        description="SQLAlchemy database URL"
    )
    database_pool_size: int = Field(default=5, ge=1, description="Database pool size")
    database_max_overflow: int = Field(default=10, ge=0, description="Database max overflow")

    # Login sessions
    session_duration_hours: int = Field(default=24, ge=1, description="Login session lifetime (hours)")
    session_cookie_secure: bool = Field(
        default=False,
        description="Send session cookies only over HTTPS"
    )

    # Chat conversations
    chat_session_ttl_minutes: int = Field(
        default=120,
        ge=0,
        description="Idle minutes before a chat conversation is forgotten (0 disables expiry)"
    )
    chat_max_sessions: int = Field(
        default=10000,
        ge=1,
        description="Conversations kept in memory; the least recently used is evicted beyond this"
    )

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v.lower()

    @property
    def is_sqlite(self) -> bool:
        """True when the configured database is SQLite"""
        return self.database_url.startswith("sqlite")

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
