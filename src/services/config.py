"""Configuration for the audit trail and its database.

Loads settings from .env file and environment variables with sensible defaults.
"""

import logging
from typing import Optional

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class AuditSettings(BaseSettings):
    """Settings loaded from environment variables.

    Pydantic automatically loads values from:
    1. OS environment variables (at instantiation time)
    2. .env file (if present)
    """

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    database_url: str = "sqlite:///./carehome.db"
    """SQLAlchemy database URL (default: local SQLite)"""

    log_file: str = "logs/audit.log"
    """Path to log file"""

    sql_echo: bool = False
    """Echo SQL statements (debugging only)"""

    failed_login_placeholder: str = "unknown"
    """Identifier recorded when a failed login carries no email"""

    def validate(self) -> None:
        """Validate required configuration is present."""
        if not self.database_url or not self.database_url.strip():
            raise ValueError("DATABASE_URL must not be empty")
        if not self.failed_login_placeholder:
            raise ValueError("FAILED_LOGIN_PLACEHOLDER must not be empty")


_settings_instance: Optional[AuditSettings] = None


def get_settings() -> AuditSettings:
    """Get or create the settings instance (lazy, validated once)."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = AuditSettings()
        _settings_instance.validate()
        logger.debug("Loaded settings for database %s", _settings_instance.database_url)
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings_instance
    _settings_instance = None


__all__ = ["AuditSettings", "get_settings", "reset_settings"]
