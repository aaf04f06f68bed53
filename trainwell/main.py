"""Main entry point for Trainwell."""

import asyncio
import logging
import signal
import sys
import threading

import uvicorn
from fastapi import FastAPI

from trainwell.api.routes import router as api_router
from trainwell.config import get_settings
from trainwell.notifications.telegram import TelegramBot
from trainwell.services.scheduler import NotificationScheduler

logger = logging.getLogger("trainwell")


# FastAPI app for dashboards, widgets, and health sync
api_app = FastAPI(
    title="Trainwell API",
    description="Recovery score, streaks, suggestions, and charts from workout and meal logs",
    version="1.0.0"
)
api_app.include_router(api_router)


def configure_logging() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def run_api_server():
    """Run the FastAPI server in a separate thread."""
    settings = get_settings()
    uvicorn.run(api_app, host=settings.api_host, port=settings.api_port, log_level="warning")


async def main():
    """Run the API, the Telegram bot, and the scheduler."""
    settings = get_settings()
    logger.info("Starting Trainwell...")

    # Start API server in background thread
    api_thread = threading.Thread(target=run_api_server, daemon=True)
    api_thread.start()
    logger.info("API running at http://%s:%d (docs at /docs)", settings.api_host, settings.api_port)

    # Create bot
    bot = TelegramBot()
    app = bot.create_application()

    # Create and start scheduler
    scheduler = NotificationScheduler(bot)

    # Handle shutdown gracefully
    def signal_handler(sig, frame):
        logger.info("Shutting down...")
        scheduler.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    await app.initialize()
    await app.start()

    scheduler.start()

    logger.info("Trainwell bot is running! Press Ctrl+C to stop.")
    await app.updater.start_polling(allowed_updates=["message"])

    # Keep running
    try:
        while True:
            await asyncio.sleep(1)
    except asyncio.CancelledError:
        pass
    finally:
        logger.info("Stopping...")
        await app.updater.stop()
        await app.stop()
        await app.shutdown()
        scheduler.stop()


def run():
    """Entry point for running the service."""
    configure_logging()
    asyncio.run(main())


if __name__ == "__main__":
    run()
