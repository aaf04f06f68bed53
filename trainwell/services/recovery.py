"""
Recovery score: readiness to train on a 0-100 scale.

Composite of three sub-scores, each 0-100:
- Sleep: hours slept vs. the profile's sleep goal
- Protein: protein eaten vs. the profile's protein target
- Recency: days since the last workout, peaking inside the rest window

Any missing input scores the policy's neutral value instead of a penalty.
Weights and curve constants live in ``ScoringPolicy``.
"""

from datetime import date
from typing import Iterable, Optional, Tuple

import numpy as np

from trainwell.config import ScoringPolicy
from trainwell.models.insights import MacroAdjustment
from trainwell.models.tracking import Workout
from trainwell.models.user import UserProfile

# Workouts above this volume percentile earn extra carbs and protein
HIGH_VOLUME_PERCENTILE = 0.8
MAX_CARB_BOOST = 40.0
MAX_PROTEIN_BOOST = 20.0


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def get_recovery_status(score: float) -> Tuple[str, str]:
    """Get status label and color for a recovery score."""
    if score >= 85:
        return "Optimal", "green"
    elif score >= 70:
        return "Moderate", "yellow"
    elif score >= 50:
        return "Compromised", "orange"
    else:
        return "Recovery Needed", "red"


class RecoveryScorer:
    """Combine sleep, protein, and training recency into one score."""

    def __init__(self, policy: Optional[ScoringPolicy] = None):
        self.policy = policy or ScoringPolicy()

    def sleep_score(self, sleep_hours: Optional[float], sleep_goal_hours: float) -> float:
        if sleep_hours is None or sleep_goal_hours <= 0:
            return self.policy.neutral_score
        return _clamp(sleep_hours / sleep_goal_hours) * 100

    def protein_score(self, protein_intake: Optional[float], target_protein: float) -> float:
        if protein_intake is None or target_protein <= 0:
            return self.policy.neutral_score
        return _clamp(protein_intake / target_protein) * 100

    def recency_score(self, as_of: date, last_workout_date: Optional[date]) -> float:
        """
        Score training recency.

        Same-day training scores below the optimal window, the window itself
        scores 100, and each day past it loses a fixed amount down to a floor.
        """
        policy = self.policy
        if last_workout_date is None:
            return policy.neutral_score

        days = max((as_of - last_workout_date).days, 0)

        if days < policy.recency_optimal_min_days:
            return policy.recency_same_day_score
        if days <= policy.recency_optimal_max_days:
            return 100.0

        overdue = days - policy.recency_optimal_max_days
        decayed = 100.0 - policy.recency_decay_per_day * overdue
        return _clamp(decayed, policy.recency_floor_score, 100.0)

    def score(
        self,
        as_of: date,
        profile: Optional[UserProfile],
        sleep_hours: Optional[float] = None,
        protein_intake: Optional[float] = None,
        last_workout_date: Optional[date] = None,
    ) -> Optional[float]:
        """
        Calculate the recovery score for ``as_of``.

        Returns None when no profile is configured yet, since targets are
        needed to judge sleep and protein.
        """
        if profile is None:
            return None

        policy = self.policy
        total = (
            self.sleep_score(sleep_hours, profile.sleep_goal_hours) * policy.sleep_weight
            + self.protein_score(protein_intake, profile.target_protein) * policy.protein_weight
            + self.recency_score(as_of, last_workout_date) * policy.recency_weight
        )
        return round(_clamp(total, 0.0, 100.0), 1)


def volume_percentile(workout: Workout, history: Iterable[Workout]) -> float:
    """Share of completed workouts in ``history`` with less volume than ``workout``."""
    volumes = np.array([w.total_volume for w in history if w.is_completed], dtype=float)
    if volumes.size == 0:
        return 0.5
    return float(np.mean(volumes < workout.total_volume))


def calculate_recovery_buffer(workout: Workout, history: Iterable[Workout]) -> MacroAdjustment:
    """
    Extra carbs and protein to eat after a high-volume session.

    Above the 80th volume percentile the boost scales linearly up to
    40g carbs and 20g protein at the very top of the user's history.
    """
    percentile = volume_percentile(workout, history)
    if percentile <= HIGH_VOLUME_PERCENTILE:
        return MacroAdjustment()

    scale = (percentile - HIGH_VOLUME_PERCENTILE) / (1 - HIGH_VOLUME_PERCENTILE)
    return MacroAdjustment(
        carbs_adjustment=round(MAX_CARB_BOOST * scale, 1),
        protein_adjustment=round(MAX_PROTEIN_BOOST * scale, 1),
        reason="high_volume_recovery",
    )
