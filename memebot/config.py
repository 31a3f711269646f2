"""Environment-driven settings for the webhook service."""
import logging
import os
from dataclasses import dataclass

from memebot.constants import DEFAULT_BACKEND_TIMEOUT, DEFAULT_BACKEND_URL

logger = logging.getLogger(__name__)

_REQUIRED_ENV = ["TELEGRAM_TOKEN", "ADMIN_ID"]


@dataclass(frozen=True)
class Settings:
    telegram_token: str
    admin_id: str
    bot_username: str = ""
    backend_url: str = DEFAULT_BACKEND_URL
    backend_timeout: float = DEFAULT_BACKEND_TIMEOUT
    app_env: str = "production"

    @property
    def is_configured(self) -> bool:
        return bool(self.telegram_token and self.admin_id)


def load_settings(environ=None) -> Settings:
    """Read settings from the environment.

    Missing required variables are logged. In production they are fatal;
    elsewhere the service starts with the Telegram integration disabled.
    """
    env = os.environ if environ is None else environ
    app_env = env.get("APP_ENV", "production").lower()

    missing = [key for key in _REQUIRED_ENV if not env.get(key)]
    if missing:
        logger.error(f"Missing required environment variables: {missing}")
        if app_env == "production":
            raise RuntimeError("Missing required environment variables")

    raw_timeout = env.get("BACKEND_TIMEOUT_SECONDS", str(DEFAULT_BACKEND_TIMEOUT))
    try:
        backend_timeout = float(raw_timeout)
    except ValueError:
        logger.warning(f"Invalid BACKEND_TIMEOUT_SECONDS={raw_timeout!r}, using default")
        backend_timeout = DEFAULT_BACKEND_TIMEOUT

    return Settings(
        telegram_token=env.get("TELEGRAM_TOKEN", ""),
        admin_id=env.get("ADMIN_ID", ""),
        bot_username=env.get("BOT_USERNAME", ""),
        backend_url=env.get("MEMESTORAGE_URL", DEFAULT_BACKEND_URL).rstrip("/"),
        backend_timeout=backend_timeout,
        app_env=app_env,
    )
