"""Tracking models for daily summaries, workouts, and streaks."""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime


class DailySummary(BaseModel):
    """Aggregated nutrition and sleep totals for one calendar day."""

    date: date
    total_protein: float = Field(0, ge=0)
    total_carbs: float = Field(0, ge=0)
    total_fat: float = Field(0, ge=0)
    total_calories: float = Field(0, ge=0)
    sleep_hours: Optional[float] = Field(None, ge=0, le=24)

    class Config:
        from_attributes = True
        frozen = True

    @property
    def has_nutrition(self) -> bool:
        """Whether anything was logged for the day."""
        return (
            self.total_calories > 0
            or self.total_protein > 0
            or self.total_carbs > 0
            or self.total_fat > 0
        )


class WorkoutSet(BaseModel):
    """A single logged set."""

    weight: float = Field(0, ge=0)
    reps: int = Field(0, ge=0)
    rpe: Optional[float] = Field(None, ge=1, le=10)

    class Config:
        frozen = True

    @property
    def volume(self) -> float:
        return self.weight * self.reps


class Workout(BaseModel):
    """A training session."""

    date: date
    is_completed: bool = True
    name: Optional[str] = None
    sets: List[WorkoutSet] = []

    class Config:
        from_attributes = True
        frozen = True

    @property
    def total_volume(self) -> float:
        """Sum of weight x reps over all sets."""
        return sum(s.volume for s in self.sets)


class StreakData(BaseModel):
    """Streak counters for the user.

    Mutated only by ``StreakTracker.check_streak_status``; everything else
    reads it as a snapshot.
    """

    current_workout_streak: int = 0
    longest_workout_streak: int = 0
    current_nutrition_streak: int = 0
    longest_nutrition_streak: int = 0
    current_combined_streak: int = 0
    longest_combined_streak: int = 0

    last_workout_date: Optional[date] = None
    last_nutrition_date: Optional[date] = None
    last_combined_date: Optional[date] = None

    workout_streak_start_date: Optional[date] = None
    nutrition_streak_start_date: Optional[date] = None
    combined_streak_start_date: Optional[date] = None

    # Day a grace token was spent on; None means the token is available
    workout_grace_date: Optional[date] = None
    nutrition_grace_date: Optional[date] = None
    combined_grace_date: Optional[date] = None

    is_grace_period_active: bool = False
    grace_period_date: Optional[date] = None

    total_workout_days: int = 0
    total_nutrition_days: int = 0

    # Highest milestone already celebrated; never decreases
    last_celebrated_milestone: int = 0

    last_checked: Optional[date] = None
    created_at: date = Field(default_factory=date.today)
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def best_current_streak(self) -> int:
        """Streak length used for milestones: the better of workout and nutrition."""
        return max(self.current_workout_streak, self.current_nutrition_streak)

    def days_since_start(self, as_of: date) -> int:
        return max((as_of - self.created_at).days, 0)

    def workout_consistency(self, as_of: date) -> float:
        """Percentage of days since start with a workout."""
        days = self.days_since_start(as_of)
        if days <= 0:
            return 0.0
        return round(min(self.total_workout_days / days, 1.0) * 100, 1)

    def nutrition_consistency(self, as_of: date) -> float:
        """Percentage of days since start with nutrition logged."""
        days = self.days_since_start(as_of)
        if days <= 0:
            return 0.0
        return round(min(self.total_nutrition_days / days, 1.0) * 100, 1)


class StreakMilestone(BaseModel):
    """A celebrated streak length."""

    days: int
    name: str
    icon: str
    description: str

    class Config:
        frozen = True


MILESTONES: List[StreakMilestone] = [
    StreakMilestone(days=7, name="One Week", icon="flame", description="A full week of consistency!"),
    StreakMilestone(days=14, name="Two Weeks", icon="star", description="Two weeks strong!"),
    StreakMilestone(days=30, name="One Month", icon="crown", description="A whole month! Incredible!"),
    StreakMilestone(days=60, name="Two Months", icon="trophy", description="60 days of dedication!"),
    StreakMilestone(days=100, name="Century", icon="medal", description="100 days - you're unstoppable!"),
    StreakMilestone(days=365, name="Yearly Legend", icon="crown.fill", description="A full year! Legendary!"),
]


class StreakUpdate(BaseModel):
    """Facts produced by a streak status check, for notifiers and the API."""

    streak: StreakData
    milestone: Optional[StreakMilestone] = None
    milestone_streak: int = 0
    grace_period_used: bool = False
