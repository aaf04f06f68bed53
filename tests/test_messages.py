"""Tests for Telegram message formatting."""
from trainwell.models import MILESTONES, SmartSuggestion, StreakData
from trainwell.notifications.telegram import (
    format_milestone,
    format_recovery,
    format_streak,
    format_streak_reminder,
    format_suggestions,
)


class TestMessageFormatting:

    def test_streak_message(self):
        streak = StreakData(
            current_workout_streak=5,
            longest_workout_streak=9,
            current_nutrition_streak=2,
            longest_nutrition_streak=2,
        )
        message = format_streak(streak)
        assert "Workout: 5 days (best 9)" in message
        assert "Nutrition: 2 days (best 2)" in message
        assert "2 days to One Week" in message
        assert "Grace day" not in message

    def test_streak_message_mentions_grace(self):
        message = format_streak(StreakData(is_grace_period_active=True))
        assert "Grace day used" in message

    def test_recovery_message(self):
        assert format_recovery(72.4) == "<b>Recovery:</b> 72/100 (Moderate)"

    def test_suggestions_message(self):
        suggestions = [
            SmartSuggestion(id="a", type="recovery", priority="high", title="Rest", message="Take it easy."),
            SmartSuggestion(id="b", type="nutrition", priority="low", title="Eat", message="More protein."),
        ]
        assert format_suggestions(suggestions) == "<b>Rest</b>\nTake it easy.\n\n<b>Eat</b>\nMore protein."
        assert "No suggestions" in format_suggestions([])

    def test_milestone_message(self):
        message = format_milestone(MILESTONES[0])
        assert message.startswith("<b>One Week!</b>")
        assert "7-day streak" in message

    def test_streak_reminder(self):
        assert "Don't break your streak!" in format_streak_reminder(4)
        assert "4-day streak" in format_streak_reminder(4)
        assert "Start a new streak!" in format_streak_reminder(0)
