"""Load snapshots from storage and run the scoring services over them."""

import logging
from functools import lru_cache
from datetime import date, timedelta
from typing import List, Optional

from trainwell.config import get_settings
from trainwell.db import get_repository
from trainwell.db.repository import Repository
from trainwell.models.insights import CorrelationData, MacroAdjustment, SmartSuggestion
from trainwell.models.tracking import StreakData, StreakUpdate
from trainwell.models.user import UserProfile
from trainwell.services.correlation import CorrelationBuilder
from trainwell.services.recovery import RecoveryScorer, calculate_recovery_buffer
from trainwell.services.streaks import StreakTracker, detect_milestone_crossing
from trainwell.services.suggestions import LOOKBACK_DAYS, SuggestionGenerator

logger = logging.getLogger(__name__)

# Cap on how many unchecked past days a status check replays
MAX_REPLAY_DAYS = 400


class InsightsEngine:
    """Derive recovery, streaks, suggestions, and charts for the user."""

    def __init__(
        self,
        repository: Repository,
        scorer: Optional[RecoveryScorer] = None,
        tracker: Optional[StreakTracker] = None,
        generator: Optional[SuggestionGenerator] = None,
        correlation: Optional[CorrelationBuilder] = None,
    ):
        self.repo = repository
        self.scorer = scorer or RecoveryScorer()
        self.tracker = tracker or StreakTracker()
        self.generator = generator or SuggestionGenerator()
        self.correlation = correlation or CorrelationBuilder(self.scorer)

    def get_profile(self) -> Optional[UserProfile]:
        return self.repo.get_profile()

    def recovery_score(self, as_of: Optional[date] = None) -> Optional[float]:
        """Recovery score for a day, or None without a profile."""
        as_of = as_of or date.today()
        profile = self.repo.get_profile()
        if profile is None:
            return None

        summaries = self.repo.get_summaries(as_of, as_of)
        summary = summaries[-1] if summaries else None

        workouts = self.repo.get_completed_workouts(end=as_of)
        last_workout_date = workouts[0].date if workouts else None

        return self.scorer.score(
            as_of,
            profile,
            sleep_hours=summary.sleep_hours if summary else None,
            protein_intake=summary.total_protein if summary and summary.has_nutrition else None,
            last_workout_date=last_workout_date,
        )

    def get_streak(self) -> StreakData:
        return self.repo.load()

    def check_streaks(self, as_of: Optional[date] = None, close_day: bool = False) -> StreakUpdate:
        """
        Bring the stored streaks up to ``as_of`` and persist them.

        Days between the last check and ``as_of`` are replayed as finished
        days (the whole recent history on the very first check). ``as_of``
        itself only counts as missed when ``close_day`` is set (the nightly
        rollover); otherwise it counts once something is logged. A crossed
        milestone advances the celebration watermark.
        """
        as_of = as_of or date.today()
        streak = self.repo.load()

        earliest = as_of - timedelta(days=MAX_REPLAY_DAYS)
        if streak.last_checked is None:
            # First check: rebuild streaks from logged history
            first_day = earliest
        elif streak.last_checked < as_of:
            first_day = max(streak.last_checked + timedelta(days=1), earliest)
        else:
            first_day = as_of

        workout_days = {w.date for w in self.repo.get_completed_workouts(first_day, as_of)}
        nutrition_days = {
            s.date for s in self.repo.get_summaries(first_day, as_of) if s.has_nutrition
        }

        grace_used = False
        day = first_day
        while day <= as_of:
            worked_out = day in workout_days
            ate = day in nutrition_days
            day_closed = day < as_of or close_day
            if day_closed or worked_out or ate:
                self.tracker.check_streak_status(streak, day, worked_out, ate, day_closed=day_closed)
                grace_used = grace_used or streak.is_grace_period_active
            day += timedelta(days=1)

        milestone_streak = streak.best_current_streak
        milestone = detect_milestone_crossing(milestone_streak, streak.last_celebrated_milestone)
        if milestone is not None:
            logger.info("Streak milestone reached: %s (%d days)", milestone.name, milestone.days)
            streak.last_celebrated_milestone = milestone.days

        self.repo.save(streak)
        return StreakUpdate(
            streak=streak,
            milestone=milestone,
            milestone_streak=milestone_streak,
            grace_period_used=grace_used,
        )

    def suggestions(self, as_of: Optional[date] = None) -> List[SmartSuggestion]:
        """Ranked suggestions for a day; empty without a profile."""
        as_of = as_of or date.today()
        profile = self.repo.get_profile()
        if profile is None:
            return []

        start = as_of - timedelta(days=LOOKBACK_DAYS - 1)
        summaries = self.repo.get_summaries(start, as_of)
        workouts = self.repo.get_completed_workouts(start, as_of)
        score = self.recovery_score(as_of)
        streak = self.repo.load()
        return self.generator.generate(
            profile, summaries, score, streak, as_of=as_of, recent_workouts=workouts
        )

    def recovery_buffer(self, as_of: Optional[date] = None) -> MacroAdjustment:
        """Extra macros earned by the day's biggest completed workout."""
        as_of = as_of or date.today()
        todays = self.repo.get_completed_workouts(as_of, as_of)
        if not todays:
            return MacroAdjustment()
        biggest = max(todays, key=lambda w: w.total_volume)
        return calculate_recovery_buffer(biggest, self.repo.get_completed_workouts(end=as_of))

    def correlation_data(self, days: int = 7, as_of: Optional[date] = None) -> CorrelationData:
        """Dense protein vs. volume series ending on ``as_of``, with daily recovery."""
        as_of = as_of or date.today()
        start = as_of - timedelta(days=max(days, 1) - 1)
        profile = self.repo.get_profile()
        # Recovery needs the last workout before the window too
        workouts = self.repo.get_completed_workouts(
            None if profile is not None else start, as_of
        )
        return self.correlation.build(
            days,
            as_of,
            self.repo.get_summaries(start, as_of),
            workouts,
            profile=profile,
        )

    def logged_today(self, as_of: Optional[date] = None) -> bool:
        """Whether any workout or nutrition is logged for the day."""
        as_of = as_of or date.today()
        if self.repo.get_completed_workouts(as_of, as_of):
            return True
        return any(s.has_nutrition for s in self.repo.get_summaries(as_of, as_of))


@lru_cache()
def get_engine() -> InsightsEngine:
    """Get the cached engine wired to the configured repository and policy."""
    settings = get_settings()
    return InsightsEngine(
        get_repository(),
        scorer=RecoveryScorer(settings.scoring_policy()),
    )
