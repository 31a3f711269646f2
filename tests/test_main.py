from types import SimpleNamespace
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from memebot.main import create_app


def _client(handler=None, bot_context=None) -> TestClient:
    # No `with` block: the lifespan (and its Telegram setup) does not run.
    app = create_app()
    app.state.telegram_handler = handler
    app.state.bot_context = bot_context
    return TestClient(app)


def test_webhook_passes_update_to_handler():
    handler = AsyncMock()
    update = {"update_id": 1, "message": {"chat": {"id": 1}, "from": {"id": 2}, "text": "/start"}}

    response = _client(handler).post("/webhook/telegram", json=update)

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    handler.handle_webhook.assert_awaited_once_with(update)


def test_webhook_accepts_non_json_body():
    handler = AsyncMock()

    response = _client(handler).post("/webhook/telegram", content=b"not json")

    assert response.status_code == 200
    handler.handle_webhook.assert_not_awaited()


def test_webhook_without_handler_is_unavailable():
    response = _client().post("/webhook/telegram", json={})

    assert response.status_code == 503


def test_webhook_status_disabled():
    assert _client().get("/telegram/webhook-status").json()["status"] == "disabled"


def test_webhook_status_active(settings):
    bot = AsyncMock()
    bot.get_me.return_value = SimpleNamespace(username="memestorage_bot", first_name="Memes")
    context = SimpleNamespace(bot=bot, settings=settings)

    body = _client(bot_context=context).get("/telegram/webhook-status").json()

    assert body == {
        "status": "active",
        "bot_username": "memestorage_bot",
        "configured_username": "memestorage_bot",
        "bot_name": "Memes",
    }


def test_healthz_and_metrics():
    client = _client()

    assert client.get("/healthz").json() == {"status": "ok"}
    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "telegram_updates" in metrics.text
