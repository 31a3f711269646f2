"""Outbound Telegram replies with graceful degradation.

Each send primitive catches python-telegram-bot errors and falls back to a
simpler primitive where one exists:

    media group ──rejected──► one send_photo per photo / send_message per video
    photo       ──failed────► send_message with the raw URL

Telegram answering ``ok: false`` surfaces as ``BadRequest``/``Forbidden``
(a rejection). ``NetworkError``/``TimedOut`` mean the request never got a
verdict; those are reported but not degraded item by item.

Whatever still fails is reported to the admin chat.
"""
import logging
from dataclasses import dataclass, field
from typing import Sequence

from telegram import InlineQueryResultPhoto, InputMediaPhoto, InputMediaVideo
from telegram.error import BadRequest, NetworkError, TelegramError

from memebot.constants import MEDIA_PHOTO, MEDIA_VIDEO, TELEGRAM_FILE_URL
from memebot.metrics import SEND_FALLBACKS
from memebot.models import (
    DocumentReply,
    MediaGroupReply,
    MediaItem,
    PhotoReply,
    ReplyIntent,
    TextReply,
)
from memebot.services.admin_channel import AdminChannel

logger = logging.getLogger(__name__)


@dataclass
class SendResult:
    """Outcome of one send. ``ok`` means the chat received something."""

    ok: bool
    message_id: int | None = None
    error: TelegramError | None = None
    degraded: bool = False


@dataclass
class MediaGroupResult:
    """Aggregate outcome of a media group, one result per item."""

    ok: bool
    results: list[SendResult] = field(default_factory=list)
    degraded: bool = False

    @property
    def failed_indexes(self) -> list[int]:
        return [i for i, result in enumerate(self.results) if not result.ok]


def _is_rejection(exc: TelegramError) -> bool:
    """True when Telegram processed the request and answered ok=false."""
    if isinstance(exc, BadRequest):
        return True
    return not isinstance(exc, NetworkError)


def _to_input_media(item: MediaItem):
    if item.kind == MEDIA_VIDEO:
        return InputMediaVideo(media=item.url)
    return InputMediaPhoto(media=item.url)


class ReplyDispatcher:
    """Chooses and executes Telegram send primitives for a reply."""

    def __init__(self, bot, admin: AdminChannel):
        self.bot = bot
        self.admin = admin

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    async def send_text(self, chat_id, body: str) -> SendResult:
        try:
            message = await self.bot.send_message(chat_id=chat_id, text=body)
        except TelegramError as e:
            await self.admin.report_exception(e, f"send_message to {chat_id}")
            return SendResult(ok=False, error=e)
        return SendResult(ok=True, message_id=getattr(message, "message_id", None))

    async def send_photo(self, chat_id, url: str, caption: str | None = None) -> SendResult:
        """Send a photo by URL; on failure send the URL as text instead."""
        try:
            message = await self.bot.send_photo(
                chat_id=chat_id,
                photo=url,
                caption=caption,
                disable_notification=True,
            )
        except TelegramError as e:
            SEND_FALLBACKS.labels(primitive="photo").inc()
            fallback = await self.send_text(chat_id, url)
            await self.admin.report_exception(e, f"send_photo to {chat_id}")
            fallback.degraded = True
            if fallback.error is None:
                fallback.error = e
            return fallback
        return SendResult(ok=True, message_id=getattr(message, "message_id", None))

    async def send_document(self, chat_id, url: str) -> SendResult:
        try:
            message = await self.bot.send_document(
                chat_id=chat_id,
                document=url,
                disable_notification=True,
            )
        except TelegramError as e:
            await self.admin.report_exception(e, f"send_document to {chat_id}")
            return SendResult(ok=False, error=e)
        return SendResult(ok=True, message_id=getattr(message, "message_id", None))

    async def send_media_group(self, chat_id, items: Sequence[MediaItem]) -> MediaGroupResult:
        """Send ``items`` as one album, degrading item by item if rejected."""
        items = list(items)
        if not items:
            return MediaGroupResult(ok=True)

        try:
            messages = await self.bot.send_media_group(
                chat_id=chat_id,
                media=[_to_input_media(item) for item in items],
                disable_notification=True,
            )
        except TelegramError as e:
            if not _is_rejection(e):
                await self.admin.report_exception(e, f"send_media_group to {chat_id}")
                return MediaGroupResult(
                    ok=False,
                    results=[SendResult(ok=False, error=e) for _ in items],
                )
            logger.info(f"Media group rejected for {chat_id} ({e}), sending items one by one")
            SEND_FALLBACKS.labels(primitive="media_group").inc()
            return await self._send_items(chat_id, items)

        message_ids = [getattr(m, "message_id", None) for m in messages or ()]
        results = [
            SendResult(ok=True, message_id=message_ids[i] if i < len(message_ids) else None)
            for i in range(len(items))
        ]
        return MediaGroupResult(ok=True, results=results)

    async def _send_items(self, chat_id, items: list[MediaItem]) -> MediaGroupResult:
        results: list[SendResult] = []
        for item in items:
            if item.kind == MEDIA_PHOTO:
                results.append(await self.send_photo(chat_id, item.url))
            else:
                results.append(await self.send_text(chat_id, item.url))
        return MediaGroupResult(
            ok=all(result.ok for result in results),
            results=results,
            degraded=True,
        )

    async def delete_message(self, chat_id, message_id: int) -> SendResult:
        try:
            await self.bot.delete_message(chat_id=chat_id, message_id=message_id)
        except TelegramError as e:
            # Losing a stale placeholder is not worth an admin report.
            logger.warning(f"Could not delete message {message_id} in {chat_id}: {e}")
            return SendResult(ok=False, error=e)
        return SendResult(ok=True, message_id=message_id)

    async def answer_inline_query(self, query_id: str, results: list[InlineQueryResultPhoto]) -> SendResult:
        try:
            await self.bot.answer_inline_query(inline_query_id=str(query_id), results=results)
        except TelegramError as e:
            await self.admin.report_exception(e, f"answer_inline_query {query_id}")
            return SendResult(ok=False, error=e)
        return SendResult(ok=True)

    async def get_file_url(self, file_id: str, token: str) -> tuple[str, str]:
        """Resolve a file_id to ``(download URL, path relative to the bot)``.

        python-telegram-bot already expands ``file_path`` to a full URL;
        older responses carry only the relative path.
        """
        file = await self.bot.get_file(file_id)
        file_path = file.file_path or ""
        marker = f"/file/bot{token}/"
        if file_path.startswith(("http://", "https://")):
            name = file_path.split(marker, 1)[1] if marker in file_path else file_path.rsplit("/", 1)[-1]
            return file_path, name
        return TELEGRAM_FILE_URL.format(token=token, path=file_path), file_path

    # ------------------------------------------------------------------
    # Intent dispatch
    # ------------------------------------------------------------------

    async def dispatch(self, chat_id, intent: ReplyIntent) -> SendResult | MediaGroupResult:
        match intent:
            case TextReply(body=body):
                return await self.send_text(chat_id, body)
            case PhotoReply(url=url, caption=caption):
                return await self.send_photo(chat_id, url, caption)
            case DocumentReply(url=url):
                return await self.send_document(chat_id, url)
            case MediaGroupReply(items=items):
                return await self.send_media_group(chat_id, items)
        raise TypeError(f"Unsupported reply intent: {intent!r}")
