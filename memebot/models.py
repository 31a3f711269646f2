"""Value types shared by the gateway, the dispatcher and the router.

Everything here is built per webhook request and thrown away afterwards;
the memestorage backend owns all durable state.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from memebot.constants import MEDIA_PHOTO, MEDIA_VIDEO


@dataclass(frozen=True)
class MemeRecord:
    """A meme returned by the backend. Identity is ``id`` only."""

    id: Any
    url: str
    extra: dict = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: dict) -> "MemeRecord | None":
        """Build a record from a backend JSON object, or None if unusable."""
        if not isinstance(payload, dict):
            return None
        meme_id = payload.get("id")
        url = payload.get("url")
        if meme_id is None or not isinstance(url, str) or not url:
            return None
        extra = {k: v for k, v in payload.items() if k not in ("id", "url")}
        return cls(id=meme_id, url=url, extra=extra)


# ---------------------------------------------------------------------------
# Reply intents
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MediaItem:
    kind: str
    url: str

    def __post_init__(self):
        if self.kind not in (MEDIA_PHOTO, MEDIA_VIDEO):
            raise ValueError(f"Unsupported media kind: {self.kind}")


@dataclass(frozen=True)
class TextReply:
    body: str


@dataclass(frozen=True)
class PhotoReply:
    url: str
    caption: str | None = None


@dataclass(frozen=True)
class DocumentReply:
    url: str


@dataclass(frozen=True)
class MediaGroupReply:
    items: tuple[MediaItem, ...]


ReplyIntent = Union[TextReply, PhotoReply, DocumentReply, MediaGroupReply]


# ---------------------------------------------------------------------------
# Backend failures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UserNotConnected:
    """The Telegram account is not linked to a memestorage account (HTTP 404)."""

    message: str


@dataclass(frozen=True)
class TransportError:
    """The backend could not be reached (connection error, timeout)."""

    detail: str


@dataclass(frozen=True)
class UnexpectedStatus:
    """The backend answered with a status the caller cannot use."""

    code: int
    body: str


BackendFailure = Union[UserNotConnected, TransportError, UnexpectedStatus]
