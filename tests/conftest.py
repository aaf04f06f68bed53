"""Shared fixtures."""
from datetime import date, timedelta

import pytest

from trainwell.models import DailySummary, StreakData, UserProfile, Workout, WorkoutSet


@pytest.fixture
def today() -> date:
    return date(2026, 3, 10)


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(
        target_protein=150,
        target_carbs=200,
        target_fat=65,
        target_calories=2200,
        body_weight_kg=80,
        sleep_goal_hours=8,
        activity_level="moderate",
        primary_goal="muscle_gain",
    )


@pytest.fixture
def streak() -> StreakData:
    return StreakData(created_at=date(2026, 1, 1))


def make_workout(day: date, sets=((100, 5),), completed: bool = True) -> Workout:
    return Workout(
        date=day,
        is_completed=completed,
        sets=[WorkoutSet(weight=w, reps=r) for w, r in sets],
    )


def make_summary(day: date, protein: float = 150, calories: float = 2200, sleep=None, carbs: float = 200) -> DailySummary:
    return DailySummary(
        date=day,
        total_protein=protein,
        total_carbs=carbs,
        total_fat=60,
        total_calories=calories,
        sleep_hours=sleep,
    )


def days_before(day: date, n: int) -> date:
    return day - timedelta(days=n)
