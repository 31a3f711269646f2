import pytest

from memebot.config import Settings

from fakes import ADMIN_ID, TOKEN, make_bot


@pytest.fixture
def bot():
    return make_bot()


@pytest.fixture
def settings():
    return Settings(telegram_token=TOKEN, admin_id=ADMIN_ID, bot_username="memestorage_bot")
