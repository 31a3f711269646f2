"""Test doubles for the Telegram bot and the memestorage backend."""
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx

ADMIN_ID = "999"
TOKEN = "123:TEST"


def respond(status_code: int, **kwargs):
    """Route that builds a fresh httpx.Response for every request."""
    return lambda request: httpx.Response(status_code, **kwargs)


class FakeBackend:
    """In-memory memestorage backend served through httpx.MockTransport.

    ``routes`` maps a path to a callable taking the request and returning an
    ``httpx.Response`` (see ``respond``). Every request is recorded.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(500, text="no route")
        return route(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(self),
            base_url="https://backend.test",
        )

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


def make_bot():
    """AsyncMock standing in for telegram.Bot."""
    bot = AsyncMock()
    counter = {"next": 100}

    async def send_message(chat_id, text, **kwargs):
        counter["next"] += 1
        return SimpleNamespace(message_id=counter["next"], chat_id=chat_id, text=text)

    bot.send_message.side_effect = send_message
    bot.send_photo.return_value = SimpleNamespace(message_id=1)
    bot.send_document.return_value = SimpleNamespace(message_id=2)
    bot.send_media_group.return_value = (SimpleNamespace(message_id=3),)
    bot.get_file.return_value = SimpleNamespace(
        file_path=f"https://api.telegram.org/file/bot{TOKEN}/photos/file_1.jpg"
    )
    return bot


def texts_to(bot, chat_id) -> list[str]:
    """Texts passed to bot.send_message for ``chat_id``, in order."""
    return [
        call.kwargs["text"]
        for call in bot.send_message.await_args_list
        if str(call.kwargs["chat_id"]) == str(chat_id)
    ]
