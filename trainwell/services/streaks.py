"""Streak tracking with a one-day grace window and milestone detection."""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from trainwell.models.tracking import MILESTONES, StreakData, StreakMilestone

logger = logging.getLogger(__name__)


DIMENSIONS = ("workout", "nutrition", "combined")


def current_milestone(streak: int) -> Optional[StreakMilestone]:
    """Greatest milestone reached by a streak of this length."""
    reached = [m for m in MILESTONES if m.days <= streak]
    return reached[-1] if reached else None


def next_milestone(streak: int) -> Optional[StreakMilestone]:
    """Smallest milestone still ahead of a streak of this length."""
    for milestone in MILESTONES:
        if milestone.days > streak:
            return milestone
    return None


def days_to_next_milestone(streak: int) -> Optional[int]:
    milestone = next_milestone(streak)
    if milestone is None:
        return None
    return milestone.days - streak


def detect_milestone_crossing(streak: int, watermark: int) -> Optional[StreakMilestone]:
    """
    Report a milestone crossed above the last celebrated one.

    Returns the greatest milestone reached that is above ``watermark``, or
    None. Advancing and persisting the watermark is up to the caller.
    """
    reached = current_milestone(streak)
    if reached is None or reached.days <= watermark:
        return None
    return reached


class StreakTracker:
    """Maintain workout, nutrition, and combined streaks over calendar days."""

    def check_streak_status(
        self,
        streak: StreakData,
        as_of: date,
        workout_logged: bool,
        nutrition_logged: bool,
        day_closed: bool = True,
    ) -> StreakData:
        """
        Evaluate one calendar day and update ``streak`` in place.

        ``workout_logged`` and ``nutrition_logged`` say whether the day had
        activity. Repeated calls for the same day are no-ops once activity is
        recorded. A single missed day per streak is absorbed by that
        dimension's grace token; a second miss, or a longer gap, resets it.

        With ``day_closed=False`` the day is still in progress: only
        dimensions with activity advance, nothing counts as missed and
        ``last_checked`` stays put so the day is evaluated again later.
        """
        self._repair(streak)
        yesterday = as_of - timedelta(days=1)

        absorbed = []
        for dimension, active in (
            ("workout", workout_logged),
            ("nutrition", nutrition_logged),
            ("combined", workout_logged and nutrition_logged),
        ):
            if day_closed or active:
                grace_day = self._advance(streak, dimension, as_of, active)
            else:
                # Untouched today; report a token spent on the day before
                grace_day = getattr(streak, f"{dimension}_grace_date")
                if grace_day is not None and grace_day < yesterday:
                    grace_day = None
            if grace_day is not None:
                absorbed.append(grace_day)

        streak.is_grace_period_active = bool(absorbed)
        streak.grace_period_date = min(absorbed) if absorbed else None
        if day_closed and (streak.last_checked is None or streak.last_checked < as_of):
            streak.last_checked = as_of
        streak.updated_at = datetime.now()
        return streak

    def _advance(self, streak: StreakData, dimension: str, as_of: date, active: bool) -> Optional[date]:
        """Apply one day to a dimension. Returns the absorbed missed day, if any."""
        current = getattr(streak, f"current_{dimension}_streak")
        longest = getattr(streak, f"longest_{dimension}_streak")
        last = getattr(streak, f"last_{dimension}_date")
        grace_date = getattr(streak, f"{dimension}_grace_date")
        start = getattr(streak, f"{dimension}_streak_start_date")
        yesterday = as_of - timedelta(days=1)
        absorbed = None

        if last is not None and last >= as_of:
            # Already counted for this day
            return grace_date if grace_date is not None and grace_date >= yesterday else None

        gap = (as_of - last).days if last is not None else None

        if active:
            if gap == 1 and current > 0:
                current += 1
                if grace_date == as_of:
                    # Day was checked as missed before activity came in
                    grace_date = None
            elif gap == 2 and current > 0 and grace_date in (None, yesterday):
                # One missed day, token unspent or spent on that very day
                current += 1
                grace_date = yesterday
                absorbed = yesterday
            else:
                current = 1
                start = as_of
                grace_date = None
            last = as_of
            if dimension == "workout":
                streak.total_workout_days += 1
            elif dimension == "nutrition":
                streak.total_nutrition_days += 1
        elif gap == 1 and current > 0 and grace_date is None:
            grace_date = as_of
            absorbed = as_of
        elif grace_date == as_of:
            absorbed = as_of
        elif current > 0:
            logger.debug("%s streak of %d broken on %s", dimension, current, as_of)
            current = 0
            start = None
            grace_date = None

        setattr(streak, f"current_{dimension}_streak", current)
        setattr(streak, f"longest_{dimension}_streak", max(longest, current))
        setattr(streak, f"last_{dimension}_date", last)
        setattr(streak, f"{dimension}_grace_date", grace_date)
        setattr(streak, f"{dimension}_streak_start_date", start)
        return absorbed

    def _repair(self, streak: StreakData) -> None:
        """Clamp counters that violate the streak invariants."""
        for dimension in DIMENSIONS:
            current_attr = f"current_{dimension}_streak"
            longest_attr = f"longest_{dimension}_streak"
            current = getattr(streak, current_attr)
            longest = getattr(streak, longest_attr)

            if current < 0 or longest < 0 or current > longest:
                logger.warning(
                    "Repairing %s streak state (current=%d, longest=%d)",
                    dimension, current, longest,
                )
                current = max(current, 0)
                setattr(streak, current_attr, current)
                setattr(streak, longest_attr, max(longest, current))

        streak.total_workout_days = max(streak.total_workout_days, 0)
        streak.total_nutrition_days = max(streak.total_nutrition_days, 0)
        streak.last_celebrated_milestone = max(streak.last_celebrated_milestone, 0)
