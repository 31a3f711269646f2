import pytest

from memebot.config import load_settings
from memebot.constants import DEFAULT_BACKEND_TIMEOUT, DEFAULT_BACKEND_URL


def test_load_settings_reads_environment():
    settings = load_settings(
        {
            "TELEGRAM_TOKEN": "123:abc",
            "ADMIN_ID": "777",
            "BOT_USERNAME": "memestorage_bot",
            "MEMESTORAGE_URL": "https://staging.memestorage.tk/",
            "BACKEND_TIMEOUT_SECONDS": "2.5",
        }
    )

    assert settings.telegram_token == "123:abc"
    assert settings.admin_id == "777"
    assert settings.bot_username == "memestorage_bot"
    assert settings.backend_url == "https://staging.memestorage.tk"
    assert settings.backend_timeout == 2.5
    assert settings.is_configured


def test_defaults():
    settings = load_settings({"TELEGRAM_TOKEN": "t", "ADMIN_ID": "1"})

    assert settings.backend_url == DEFAULT_BACKEND_URL
    assert settings.backend_timeout == DEFAULT_BACKEND_TIMEOUT
    assert settings.app_env == "production"


def test_missing_variables_are_fatal_in_production():
    with pytest.raises(RuntimeError, match="Missing required environment variables"):
        load_settings({"TELEGRAM_TOKEN": "t"})


def test_missing_variables_outside_production():
    settings = load_settings({"APP_ENV": "development"})

    assert not settings.is_configured


def test_invalid_timeout_falls_back_to_default():
    settings = load_settings({"TELEGRAM_TOKEN": "t", "ADMIN_ID": "1", "BACKEND_TIMEOUT_SECONDS": "soon"})

    assert settings.backend_timeout == DEFAULT_BACKEND_TIMEOUT
