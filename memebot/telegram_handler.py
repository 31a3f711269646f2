"""Telegram webhook handler for the memestorage bot.

This module is the bridge between Telegram and the memestorage backend.  It
receives updates from Telegram (via webhooks), classifies them, talks to the
backend, and replies to the chat.

Architecture overview:
  Telegram Cloud  ──webhook POST──►  FastAPI (main.py)
                                        │
                                        ▼
                                  MemeBotHandler.handle_webhook()
                                        │
                                  parse_event()  (events.py)
                                        │
                          ┌─────────────┼──────────────┐
                          ▼             ▼              ▼
                    inline query    photo message    /command
                    (search)        (upload)         (add, search, ...)
                          │             │              │
                          └─────────────┼──────────────┘
                                        ▼
                              BackendGateway (httpx)
                                        │
                                        ▼
                              ReplyDispatcher (python-telegram-bot)
                                        │
                                        ▼
                              Admin audit entry (always)

Key design decisions:
  - The handler is stateless.  Everything it needs lives in the BotContext
    built once per process by main.py.
  - Only the first slash command in a message is acted on.
  - A user without a linked memestorage account still gets public search
    results; "not connected" is only shown for /add and photo uploads.
  - Every handled update ends with an audit line in the admin chat, even if
    the flow failed.  Errors go to the admin chat, never to the user.
"""
import json
import logging

from telegram import InlineQueryResultPhoto
from telegram.error import TelegramError

from memebot.constants import (
    COMMAND_ADD,
    COMMAND_LOGIN,
    COMMAND_PREFIX,
    COMMAND_REGISTER,
    COMMAND_SEARCH,
    COMMAND_START,
    INLINE_RESULTS_LIMIT,
    MEDIA_PHOTO,
    TEXT_LOGIN,
    TEXT_NO_MEMES,
    TEXT_NOT_CONNECTED,
    TEXT_REGISTER,
    TEXT_SEARCHING,
    TEXT_SEND_PHOTO,
    TEXT_TYPE_DESCRIPTION,
    TEXT_UPLOAD_FAILED,
    TEXT_UPLOADED,
)
from memebot.context import BotContext
from memebot.events import InboundEvent, InlineQueryEvent, MessageEvent, parse_event
from memebot.metrics import COMMAND_TOTAL, UPDATE_TOTAL
from memebot.models import MediaGroupReply, MediaItem, MemeRecord, UserNotConnected
from memebot.tools import extract_commands, extract_tags, merge_memes, strip_tags

logger = logging.getLogger(__name__)


class MemeBotHandler:
    """Routes Telegram updates to the memestorage flows."""

    # Commands the bot reacts to.  Anything else (including /start) is a no-op.
    KNOWN_COMMANDS = {COMMAND_ADD, COMMAND_SEARCH, COMMAND_REGISTER, COMMAND_LOGIN, COMMAND_START}

    def __init__(self, context: BotContext):
        self.context = context
        self.gateway = context.gateway
        self.dispatcher = context.dispatcher
        self.admin = context.admin

    # ------------------------------------------------------------------
    # Webhook entry point (called by main.py's FastAPI route)
    # ------------------------------------------------------------------

    async def handle_webhook(self, update_data) -> None:
        """Handle an incoming webhook POST from Telegram.

        Never raises: malformed updates are ignored and failures inside a
        flow are reported to the admin chat.

        Args:
            update_data: Raw JSON body of Telegram's webhook POST.
        """
        event = parse_event(update_data)
        if event is None:
            UPDATE_TOTAL.labels(type="ignored").inc()
            return
        await self.handle_event(event)

    async def handle_event(self, event: InboundEvent) -> None:
        """Classify an event, run its flow, then write the audit entry."""
        try:
            match event:
                case InlineQueryEvent():
                    UPDATE_TOTAL.labels(type="inline").inc()
                    await self.handle_inline(event)
                case MessageEvent() if event.has_photo:
                    UPDATE_TOTAL.labels(type="photo").inc()
                    await self.handle_photo(event)
                case MessageEvent():
                    UPDATE_TOTAL.labels(type="text").inc()
                    await self.handle_text(event)
        except Exception as e:
            await self.admin.report_exception(e, f"Error handling {type(event).__name__}")
        finally:
            await self._audit(event)

    async def _audit(self, event: InboundEvent) -> None:
        """Send the one-line audit entry for ``event`` to the admin chat."""
        if isinstance(event, InlineQueryEvent):
            entry = {"from": {"username": event.from_username, "query": event.query_text}}
        else:
            entry = {"from": {"username": event.from_username, "text": event.text_or_caption}}
        await self.admin.notify(json.dumps(entry, ensure_ascii=False))

    # ------------------------------------------------------------------
    # Search helpers
    # ------------------------------------------------------------------

    async def _search_memes(self, telegram_id: int, description: str) -> list[MemeRecord]:
        """Personal then public search, merged with personal results first.

        An account that is not linked simply has no personal results.
        """
        personal = await self.gateway.search_personal(telegram_id, description)
        if isinstance(personal, UserNotConnected):
            logger.info(f"User {telegram_id} not connected, using public results only")
            personal = []
        public = await self.gateway.search_public(telegram_id, description)
        return merge_memes(personal, public)

    # ------------------------------------------------------------------
    # Inline queries
    # ------------------------------------------------------------------

    async def handle_inline(self, event: InlineQueryEvent) -> None:
        description = event.query_text.strip()
        if not description:
            return

        memes = await self._search_memes(event.from_user_id, description)
        if not memes:
            return

        results = [
            InlineQueryResultPhoto(
                id=f"{index}_public",
                photo_url=meme.url,
                thumbnail_url=meme.url,
            )
            for index, meme in enumerate(memes[:INLINE_RESULTS_LIMIT])
        ]
        await self.dispatcher.answer_inline_query(event.query_id, results)

    # ------------------------------------------------------------------
    # Photo uploads
    # ------------------------------------------------------------------

    async def handle_photo(self, event: MessageEvent) -> None:
        """Upload the largest photo variant with tags and description
        taken from the caption."""
        tags = extract_tags(event.caption)
        description = strip_tags(event.caption, tags).strip()

        try:
            image_url, image_name = await self.dispatcher.get_file_url(
                event.largest_photo, self.context.settings.telegram_token
            )
        except TelegramError as e:
            await self.admin.report_exception(e, f"get_file {event.largest_photo}")
            await self.dispatcher.send_text(event.from_user_id, TEXT_UPLOAD_FAILED)
            return

        result = await self.gateway.add_meme(
            event.from_user_id,
            description=description,
            image_url=image_url,
            tags=tags,
            image_name=image_name,
        )
        match result:
            case UserNotConnected():
                await self.dispatcher.send_text(event.chat_id, TEXT_NOT_CONNECTED)
            case 200:
                await self.dispatcher.send_text(event.from_user_id, TEXT_UPLOADED)
            case _:
                await self.dispatcher.send_text(event.from_user_id, TEXT_UPLOAD_FAILED)

    # ------------------------------------------------------------------
    # Text commands
    # ------------------------------------------------------------------

    async def handle_text(self, event: MessageEvent) -> None:
        commands = extract_commands(event.text)
        if not commands:
            return

        command = commands[0]
        COMMAND_TOTAL.labels(command=command if command in self.KNOWN_COMMANDS else "unknown").inc()

        if command == COMMAND_ADD:
            await self.command_add(event)
        elif command == COMMAND_SEARCH:
            await self.command_search(event)
        elif command == COMMAND_REGISTER:
            await self.dispatcher.send_text(event.chat_id, TEXT_REGISTER)
        elif command == COMMAND_LOGIN:
            await self.dispatcher.send_text(event.chat_id, TEXT_LOGIN.format(chat_id=event.chat_id))
        else:
            # /start is reserved for onboarding; unknown commands are ignored.
            logger.debug(f"No action for command {command!r}")

    async def command_add(self, event: MessageEvent) -> None:
        """Handle /add - check the account link and ask for a photo."""
        result = await self.gateway.register_user_check(event.from_user_id)
        if isinstance(result, UserNotConnected):
            await self.dispatcher.send_text(event.chat_id, TEXT_NOT_CONNECTED)
        else:
            await self.dispatcher.send_text(event.chat_id, TEXT_SEND_PHOTO)

    async def command_search(self, event: MessageEvent) -> None:
        """Handle /search <description> - reply with matching memes as an album.

        Items the album could not deliver are retried as a document and then
        as a plain link.
        """
        chat_id = event.chat_id
        placeholder = await self.dispatcher.send_text(chat_id, TEXT_SEARCHING)
        try:
            await self._reply_with_search(event)
        finally:
            if placeholder.ok and placeholder.message_id is not None:
                await self.dispatcher.delete_message(chat_id, placeholder.message_id)

    async def _reply_with_search(self, event: MessageEvent) -> None:
        chat_id = event.chat_id
        description = (event.text or "").replace(f"{COMMAND_PREFIX}{COMMAND_SEARCH}", "").strip()
        if not description:
            await self.dispatcher.send_text(chat_id, TEXT_TYPE_DESCRIPTION)
            return

        memes = await self._search_memes(event.from_user_id, description)
        if not memes:
            await self.dispatcher.send_text(chat_id, TEXT_NO_MEMES)
            return

        reply = MediaGroupReply(items=tuple(MediaItem(MEDIA_PHOTO, meme.url) for meme in memes))
        outcome = await self.dispatcher.dispatch(chat_id, reply)
        for index in outcome.failed_indexes:
            url = reply.items[index].url
            document = await self.dispatcher.send_document(chat_id, url)
            if not document.ok:
                await self.dispatcher.send_text(chat_id, url)
