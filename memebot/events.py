"""Validation of raw Telegram webhook payloads.

The webhook body is checked against minimal pydantic wire models and turned
into one of two frozen event types. Anything that does not fit either shape
is rejected here, so the handler only ever sees a well-formed event.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Wire models (only the fields the bot reads)
# ---------------------------------------------------------------------------


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class WireUser(_WireModel):
    id: int
    username: Optional[str] = None


class WireChat(_WireModel):
    id: int


class WirePhotoSize(_WireModel):
    file_id: str


class WireInlineQuery(_WireModel):
    id: str
    from_user: WireUser = Field(alias="from")
    query: str = ""


class WireMessage(_WireModel):
    chat: WireChat
    from_user: WireUser = Field(alias="from")
    text: Optional[str] = None
    caption: Optional[str] = None
    photo: Optional[list[WirePhotoSize]] = None


class WireUpdate(_WireModel):
    inline_query: Optional[WireInlineQuery] = None
    message: Optional[WireMessage] = None


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InlineQueryEvent:
    query_id: str
    from_user_id: int
    from_username: str | None
    query_text: str


@dataclass(frozen=True)
class MessageEvent:
    chat_id: int
    from_user_id: int
    from_username: str | None
    text: str | None = None
    caption: str | None = None
    # file_ids of the same picture in increasing resolution.
    photo_variants: tuple[str, ...] = ()

    @property
    def has_photo(self) -> bool:
        return bool(self.photo_variants)

    @property
    def largest_photo(self) -> str | None:
        return self.photo_variants[-1] if self.photo_variants else None

    @property
    def text_or_caption(self) -> str | None:
        return self.text if self.text is not None else self.caption


InboundEvent = Union[InlineQueryEvent, MessageEvent]


def parse_event(update_data) -> InboundEvent | None:
    """Turn a raw webhook body into an event, or None for unsupported shapes.

    An inline query takes precedence over a message when both are present.
    """
    if not isinstance(update_data, dict):
        logger.debug(f"Ignoring non-object update: {type(update_data).__name__}")
        return None

    try:
        update = WireUpdate.model_validate(update_data)
    except ValidationError as e:
        logger.info(f"Ignoring malformed update: {e.error_count()} validation error(s)")
        return None

    if update.inline_query is not None:
        query = update.inline_query
        return InlineQueryEvent(
            query_id=query.id,
            from_user_id=query.from_user.id,
            from_username=query.from_user.username,
            query_text=query.query,
        )

    if update.message is not None:
        message = update.message
        return MessageEvent(
            chat_id=message.chat.id,
            from_user_id=message.from_user.id,
            from_username=message.from_user.username,
            text=message.text,
            caption=message.caption,
            photo_variants=tuple(size.file_id for size in message.photo or []),
        )

    logger.debug(f"Ignoring update without inline_query or message: {sorted(update_data)}")
    return None
