"""Daily protein vs. training volume series for charting."""

from bisect import bisect_right
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, Optional

from trainwell.errors import InvalidInputError
from trainwell.models.insights import CorrelationData, CorrelationPoint
from trainwell.models.tracking import DailySummary, Workout
from trainwell.models.user import UserProfile
from trainwell.services.recovery import RecoveryScorer


class CorrelationBuilder:
    """Build a gap-free daily series over a fixed window."""

    def __init__(self, scorer: Optional[RecoveryScorer] = None):
        self.scorer = scorer or RecoveryScorer()

    def build(
        self,
        days: int,
        as_of: date,
        summaries: Iterable[DailySummary],
        workouts: Iterable[Workout],
        profile: Optional[UserProfile] = None,
    ) -> CorrelationData:
        """
        One point per day in ``[as_of - (days - 1), as_of]``, ascending.

        Days without a summary or a completed workout contribute 0, so the
        series always has exactly ``days`` points. With a profile each point
        also carries that day's recovery score; completed workouts before the
        window then still count as the last workout.
        """
        if days < 1:
            raise InvalidInputError(f"days must be at least 1, got {days}")

        start_date = as_of - timedelta(days=days - 1)

        by_date: Dict[date, DailySummary] = {}
        for summary in summaries:
            if start_date <= summary.date <= as_of:
                by_date[summary.date] = summary

        volume_by_date: Dict[date, float] = defaultdict(float)
        workout_dates = set()
        for workout in workouts:
            if not workout.is_completed or workout.date > as_of:
                continue
            workout_dates.add(workout.date)
            if workout.date >= start_date:
                volume_by_date[workout.date] += workout.total_volume
        workout_dates = sorted(workout_dates)

        points = []
        for i in range(days):
            day = start_date + timedelta(days=i)
            summary = by_date.get(day)
            points.append(CorrelationPoint(
                date=day,
                protein_intake=summary.total_protein if summary else 0,
                workout_volume=volume_by_date.get(day, 0),
                calorie_intake=summary.total_calories if summary else 0,
                recovery_score=self._day_score(day, profile, summary, workout_dates),
                sleep_hours=summary.sleep_hours if summary else None,
            ))

        return CorrelationData(start_date=start_date, end_date=as_of, points=points)

    def _day_score(self, day, profile, summary, workout_dates) -> Optional[float]:
        if profile is None:
            return None
        idx = bisect_right(workout_dates, day)
        return self.scorer.score(
            day,
            profile,
            sleep_hours=summary.sleep_hours if summary else None,
            protein_intake=summary.total_protein if summary and summary.has_nutrition else None,
            last_workout_date=workout_dates[idx - 1] if idx else None,
        )
