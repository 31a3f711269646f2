"""FastAPI entry point for the memestorage Telegram webhook."""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from memebot.config import Settings, load_settings
from memebot.context import BotContext
from memebot.logging_config import setup_logging
from memebot.telegram_handler import MemeBotHandler

setup_logging()
logger = logging.getLogger(__name__)


async def init_telegram(app: FastAPI, settings: Settings) -> None:
    """Build the bot context and handler and attach them to ``app.state``."""
    if not settings.is_configured:
        logger.warning("TELEGRAM_TOKEN or ADMIN_ID not set - Telegram integration disabled")
        return
    try:
        logger.info("Initializing Telegram bot...")
        context = BotContext.build(settings)
        await context.initialize()
        app.state.bot_context = context
        app.state.telegram_handler = MemeBotHandler(context)
        logger.info("Telegram bot initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize Telegram bot: {e}")
        import traceback
        logger.error(traceback.format_exc())


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the FastAPI app. Settings are read from the environment at
    startup unless given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup logic
        await init_telegram(app, settings or load_settings())
        yield
        # Shutdown logic
        context = getattr(app.state, "bot_context", None)
        if context:
            await context.aclose()

    app = FastAPI(lifespan=lifespan)
    app.state.bot_context = None
    app.state.telegram_handler = None

    @app.post("/webhook/telegram")
    async def telegram_webhook(request: Request):
        """Webhook endpoint for Telegram bot updates.

        Endpoint: POST /webhook/telegram

        Answers 200 whatever happened to the update, so Telegram does not
        redeliver it.
        """
        handler = request.app.state.telegram_handler
        if not handler:
            raise HTTPException(status_code=503, detail="Telegram bot not configured")

        try:
            update_data = await request.json()
        except ValueError:
            logger.warning("Ignoring webhook call with a non-JSON body")
            return {"ok": True}

        await handler.handle_webhook(update_data)
        return {"ok": True}

    @app.get("/telegram/webhook-status")
    async def telegram_webhook_status(request: Request):
        """Get Telegram bot status."""
        context = request.app.state.bot_context
        if not context:
            return {
                "status": "disabled",
                "message": "Telegram bot not configured",
            }

        try:
            bot_info = await context.bot.get_me()
            return {
                "status": "active",
                "bot_username": bot_info.username,
                "configured_username": context.settings.bot_username,
                "bot_name": bot_info.first_name,
            }
        except Exception as e:
            logger.error(f"Error getting bot info: {e}")
            return {"status": "error", "message": str(e)}

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/healthz")
    async def healthz():
        """Basic health check."""
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 8080)))
