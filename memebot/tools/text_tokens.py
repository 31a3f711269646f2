"""Slash-command and hashtag extraction for message text and captions."""
from memebot.constants import COMMAND_PREFIX, TAG_PREFIX


def _extract_prefixed(text: str | None, prefix: str) -> list[str]:
    """Return space-delimited words that start with ``prefix`` and contain it
    nowhere else, with the prefix removed, in order of appearance."""
    tokens: list[str] = []
    for word in (text or "").split(" "):
        if not word.startswith(prefix):
            continue
        if prefix in word[len(prefix):]:
            continue
        tokens.append(word[len(prefix):])
    return tokens


def extract_commands(text: str | None) -> list[str]:
    """Extract slash commands, e.g. ``"/add foo /search"`` -> ``["add", "search"]``."""
    return _extract_prefixed(text, COMMAND_PREFIX)


def extract_tags(text: str | None) -> list[str]:
    """Extract hashtags, e.g. ``"hello #cat #dog"`` -> ``["cat", "dog"]``."""
    return _extract_prefixed(text, TAG_PREFIX)


def strip_tags(text: str | None, tags: list[str]) -> str:
    """Remove the first ``#tag`` occurrence of each tag from ``text``.

    Only the tag token itself is removed; the whitespace around it stays, so
    callers usually ``strip()`` the result. Tags that no longer occur are
    skipped. A tag at the very start of the text is removed like any other.
    """
    description = text or ""
    for tag in tags:
        token = f"{TAG_PREFIX}{tag}"
        pos = description.find(token)
        if pos < 0:
            continue
        description = description[:pos] + description[pos + len(token):]
    return description
