"""
Configuration management using Pydantic Settings
"""
import re
from pydantic_settings import BaseSettings
from typing import FrozenSet, List
from urllib.parse import urlparse


# Placeholder fragments that mark a Web App URL as not yet configured
PLACEHOLDER_HOST_MARKERS = ("localhost", "127.0.0.1", "0.0.0.0", "your-", "example")

BOT_TOKEN_PATTERN = re.compile(r"^\d+:[A-Za-z0-9_-]{35,}$")


class ConfigurationError(Exception):
    """Raised when the process cannot start with the given configuration"""


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Telegram
    TELEGRAM_BOT_TOKEN: str = ""
    ADMIN_IDS: str = ""  # comma-separated Telegram user ids
    WEB_APP_URL: str = ""

    # Database
    DATABASE_URL: str = "sqlite:///./quizbot.db"

    # HTTP server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    WEB_APP_DIST_DIR: str = "frontend/dist"

    # Application
    APP_NAME: str = "Quiz Bot"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 60

    # Quiz Settings
    RESULTS_LIMIT: int = 10

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def admin_ids(self) -> FrozenSet[str]:
        return frozenset(part.strip() for part in self.ADMIN_IDS.split(",") if part.strip())

    @property
    def has_valid_web_app_url(self) -> bool:
        return is_valid_web_app_url(self.WEB_APP_URL)

    @property
    def local_url(self) -> str:
        return f"http://localhost:{self.PORT}"


def is_valid_web_app_url(url: str) -> bool:
    """
    Check that a Web App URL points at a real, publicly reachable host

    Telegram only opens https Web Apps. Localhost addresses and template
    placeholders are rejected because a user's device cannot reach them.
    """
    if not url:
        return False

    parsed = urlparse(url.strip())
    if parsed.scheme != "https" or not parsed.hostname:
        return False

    host = parsed.hostname.lower()
    if any(marker in host for marker in PLACEHOLDER_HOST_MARKERS):
        return False

    # A bare word is not a resolvable public host
    return "." in host


def validate_bot_token(token: str) -> str:
    """
    Validate the shape of a Telegram bot token

    Raises:
        ConfigurationError: if the token is missing or malformed
    """
    token = (token or "").strip()
    if not token:
        raise ConfigurationError("TELEGRAM_BOT_TOKEN is not set")
    if not BOT_TOKEN_PATTERN.match(token):
        raise ConfigurationError(
            f"TELEGRAM_BOT_TOKEN looks malformed (length {len(token)}); "
            "expected '<bot id>:<secret>' as issued by @BotFather"
        )
    return token


# Global settings instance
settings = Settings()
