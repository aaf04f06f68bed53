"""APScheduler jobs for daily briefings, streak reminders, and day rollover."""

import logging
from datetime import date
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from trainwell.config import get_settings
from trainwell.notifications.telegram import (
    format_milestone,
    format_recovery,
    format_streak_reminder,
    format_suggestions,
)
from trainwell.services.insights import InsightsEngine, get_engine

logger = logging.getLogger(__name__)


def _parse_time(value: str) -> tuple:
    hour, minute = map(int, value.split(":"))
    return hour, minute


class NotificationScheduler:
    """Scheduled notifications for Trainwell."""

    def __init__(self, telegram_bot, engine: Optional[InsightsEngine] = None):
        self.settings = get_settings()
        self.engine = engine or get_engine()
        self.bot = telegram_bot
        self.scheduler = AsyncIOScheduler(timezone=self.settings.timezone)

    def start(self) -> None:
        """Start the scheduler with default jobs."""
        morning_hour, morning_min = _parse_time(self.settings.morning_briefing_time)
        reminder_hour, reminder_min = _parse_time(self.settings.streak_reminder_time)
        check_hour, check_min = _parse_time(self.settings.streak_check_time)

        # Morning recovery briefing
        self.scheduler.add_job(
            self._send_morning_briefing,
            CronTrigger(hour=morning_hour, minute=morning_min),
            id="morning_briefing",
            replace_existing=True,
        )

        # Evening streak reminder
        if self.settings.enable_streak_reminders:
            self.scheduler.add_job(
                self._send_streak_reminder,
                CronTrigger(hour=reminder_hour, minute=reminder_min),
                id="streak_reminder",
                replace_existing=True,
            )

        # Nightly rollover; one run at a time keeps the streak check single-writer
        self.scheduler.add_job(
            self._run_streak_check,
            CronTrigger(hour=check_hour, minute=check_min),
            id="streak_check",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

        self.scheduler.start()
        logger.info("Notification scheduler started")

    def stop(self) -> None:
        """Stop the scheduler."""
        self.scheduler.shutdown()
        logger.info("Notification scheduler stopped")

    async def _send_morning_briefing(self) -> None:
        """Send today's recovery score and top suggestions."""
        logger.info("Sending morning briefing...")
        try:
            score = self.engine.recovery_score(date.today())
            if score is None:
                logger.info("No profile configured, skipping briefing")
                return

            suggestions = self.engine.suggestions(date.today())
            top = suggestions[: self.settings.max_briefing_suggestions]
            message = f"<b>Good morning!</b>\n\n{format_recovery(score)}\n\n{format_suggestions(top)}"
            await self.bot.send_message(self.settings.telegram_chat_id, message)
        except Exception as e:
            logger.exception("Error sending morning briefing: %s", e)

    async def _send_streak_reminder(self) -> None:
        """Remind the user to log something if today is still empty."""
        try:
            if self.engine.logged_today(date.today()):
                return
            streak = self.engine.get_streak()
            await self.bot.send_message(
                self.settings.telegram_chat_id,
                format_streak_reminder(streak.best_current_streak),
            )
        except Exception as e:
            logger.exception("Error sending streak reminder: %s", e)

    async def _run_streak_check(self) -> None:
        """Close out the day and celebrate any milestone crossed."""
        logger.info("Running nightly streak check...")
        try:
            result = self.engine.check_streaks(date.today(), close_day=True)
            if result.milestone:
                await self.bot.send_message(
                    self.settings.telegram_chat_id,
                    format_milestone(result.milestone),
                )
        except Exception as e:
            logger.exception("Error running streak check: %s", e)
