"""Per-process wiring of the Telegram bot, the backend client and services."""
import logging
from dataclasses import dataclass

import httpx
from telegram import Bot

from memebot.config import Settings
from memebot.services.admin_channel import AdminChannel
from memebot.services.backend_gateway import BackendGateway
from memebot.services.reply_dispatcher import ReplyDispatcher

logger = logging.getLogger(__name__)


@dataclass
class BotContext:
    """Everything a webhook invocation needs, built once per process."""

    settings: Settings
    bot: Bot
    http_client: httpx.AsyncClient
    admin: AdminChannel
    gateway: BackendGateway
    dispatcher: ReplyDispatcher

    @classmethod
    def build(cls, settings: Settings, bot=None, http_client: httpx.AsyncClient | None = None) -> "BotContext":
        """Create the context. ``bot`` and ``http_client`` can be injected."""
        bot = bot if bot is not None else Bot(token=settings.telegram_token)
        http_client = http_client or httpx.AsyncClient(
            base_url=settings.backend_url,
            timeout=httpx.Timeout(settings.backend_timeout),
        )
        admin = AdminChannel(bot, settings.admin_id)
        return cls(
            settings=settings,
            bot=bot,
            http_client=http_client,
            admin=admin,
            gateway=BackendGateway(http_client, admin),
            dispatcher=ReplyDispatcher(bot, admin),
        )

    async def initialize(self) -> None:
        """Open the Telegram connection pool (also validates the token)."""
        await self.bot.initialize()
        logger.info(f"Telegram bot initialized as @{self.bot.username}")

    async def aclose(self) -> None:
        await self.http_client.aclose()
        await self.bot.shutdown()
