"""Telegram bot for Trainwell."""

import logging
from typing import List, Optional
from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes

from trainwell.config import get_settings
from trainwell.models.insights import SmartSuggestion
from trainwell.models.tracking import StreakData, StreakMilestone
from trainwell.services.insights import InsightsEngine, get_engine
from trainwell.services.recovery import get_recovery_status
from trainwell.services.streaks import days_to_next_milestone, next_milestone

logger = logging.getLogger(__name__)


def format_streak(streak: StreakData) -> str:
    """Format streak counts as a readable message."""
    lines = [
        "<b>Your Streaks</b>\n",
        f"Workout: {streak.current_workout_streak} days (best {streak.longest_workout_streak})",
        f"Nutrition: {streak.current_nutrition_streak} days (best {streak.longest_nutrition_streak})",
        f"Combined: {streak.current_combined_streak} days (best {streak.longest_combined_streak})",
    ]

    best = streak.best_current_streak
    upcoming = next_milestone(best)
    if upcoming:
        lines.append(f"\n{days_to_next_milestone(best)} days to {upcoming.name}")

    if streak.is_grace_period_active:
        lines.append("\nGrace day used - log today to keep it going!")

    return "\n".join(lines)


def format_recovery(score: float) -> str:
    """Format a recovery score with its status label."""
    status, _ = get_recovery_status(score)
    return f"<b>Recovery:</b> {round(score)}/100 ({status})"


def format_suggestions(suggestions: List[SmartSuggestion]) -> str:
    if not suggestions:
        return "No suggestions right now. Keep doing what you're doing!"
    return "\n\n".join(f"<b>{s.title}</b>\n{s.message}" for s in suggestions)


def format_milestone(milestone: StreakMilestone) -> str:
    """Format a milestone celebration."""
    return f"<b>{milestone.name}!</b>\n\n{milestone.days}-day streak. {milestone.description}"


def format_streak_reminder(current_streak: int) -> str:
    if current_streak > 0:
        return (
            "<b>Don't break your streak!</b>\n\n"
            f"You have a {current_streak}-day streak. Log your workout or meals to keep it going."
        )
    return (
        "<b>Start a new streak!</b>\n\n"
        "Log a workout or meal today to begin building your streak."
    )


class TelegramBot:
    """Telegram bot handler for Trainwell."""

    def __init__(self, engine: Optional[InsightsEngine] = None):
        self.settings = get_settings()
        self.engine = engine or get_engine()
        self.app: Optional[Application] = None

    def create_application(self) -> Application:
        """Create and configure the Telegram application."""
        self.app = (
            Application.builder()
            .token(self.settings.telegram_bot_token)
            .build()
        )

        self.app.add_handler(CommandHandler("start", self.help_command))
        self.app.add_handler(CommandHandler("help", self.help_command))
        self.app.add_handler(CommandHandler("streak", self.streak_command))
        self.app.add_handler(CommandHandler("recovery", self.recovery_command))
        self.app.add_handler(CommandHandler("suggest", self.suggest_command))

        return self.app

    async def help_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle /start and /help."""
        await update.message.reply_text(
            "<b>Trainwell</b>\n\n"
            "/streak - your workout and nutrition streaks\n"
            "/recovery - today's recovery score\n"
            "/suggest - suggestions for today",
            parse_mode="HTML",
        )

    async def streak_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle /streak - run a status check and show streaks."""
        result = self.engine.check_streaks()
        message = format_streak(result.streak)
        if result.milestone:
            message = f"{format_milestone(result.milestone)}\n\n{message}"
        await update.message.reply_text(message, parse_mode="HTML")

    async def recovery_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle /recovery."""
        score = self.engine.recovery_score()
        if score is None:
            return await self._ask_setup(update)
        await update.message.reply_text(format_recovery(score), parse_mode="HTML")

    async def suggest_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle /suggest."""
        if self.engine.get_profile() is None:
            return await self._ask_setup(update)
        suggestions = self.engine.suggestions()
        await update.message.reply_text(format_suggestions(suggestions), parse_mode="HTML")

    async def _ask_setup(self, update: Update) -> None:
        """Ask user to complete setup."""
        await update.message.reply_text(
            "Please set up your profile first (PUT /api/v1/profile)."
        )

    async def send_message(self, chat_id: int, message: str) -> bool:
        """Send a message to a chat (for scheduled notifications)."""
        if not self.app:
            return False

        try:
            await self.app.bot.send_message(
                chat_id=chat_id,
                text=message,
                parse_mode="HTML"
            )
            return True
        except Exception as e:
            logger.error("Failed to send message to %s: %s", chat_id, e)
            return False
