"""Merging of meme lists coming from several backend searches."""
from typing import Iterable

from memebot.models import MemeRecord


def merge_memes(*sources: Iterable[MemeRecord]) -> list[MemeRecord]:
    """Concatenate ``sources`` and drop records whose id was already seen.

    The first occurrence of an id wins and the relative order is kept, so
    personal results passed first take precedence over public ones.
    """
    merged: list[MemeRecord] = []
    seen: set = set()
    for source in sources:
        for meme in source:
            if meme.id in seen:
                continue
            seen.add(meme.id)
            merged.append(meme)
    return merged
