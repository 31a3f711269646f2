"""Telegram webhook bot for memestorage."""
