"""Admin diagnostics channel.

A fixed Telegram chat (``ADMIN_ID``) receives an audit line for every handled
update and a report for every failure the bot could not recover from. It is
the only place errors are surfaced; users never see them.
"""
import logging
import traceback
from datetime import datetime, timezone

from telegram.error import TelegramError

from memebot.constants import TELEGRAM_MESSAGE_LIMIT

logger = logging.getLogger(__name__)


def format_exception_report(exc: BaseException, context: str = "") -> str:
    """Format an exception as ``[<timestamp>]: <message> in <traceback>``."""
    timestamp = datetime.now(timezone.utc).isoformat()
    message = str(exc) or type(exc).__name__
    if context:
        message = f"{context}: {message}"
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return f"[{timestamp}]: {message} in {trace}"


class AdminChannel:
    """Sends diagnostics to the admin chat.

    Failures here are logged and dropped: there is nowhere else to report them.
    """

    def __init__(self, bot, admin_id: str):
        self.bot = bot
        self.admin_id = admin_id

    async def notify(self, text: str) -> None:
        """Send ``text`` to the admin chat, split at Telegram's length limit."""
        if not self.admin_id:
            logger.warning(f"ADMIN_ID not set, dropping admin message: {text[:200]}")
            return
        if not text:
            return
        chunks = [
            text[i:i + TELEGRAM_MESSAGE_LIMIT]
            for i in range(0, len(text), TELEGRAM_MESSAGE_LIMIT)
        ]
        for chunk in chunks:
            try:
                await self.bot.send_message(chat_id=self.admin_id, text=chunk)
            except TelegramError as e:
                logger.error(f"Failed to deliver admin message: {e}")
                return

    async def report_exception(self, exc: BaseException, context: str = "") -> None:
        report = format_exception_report(exc, context)
        logger.error(report)
        await self.notify(report)
