"""Data models for Trainwell."""

from .user import UserProfile, ActivityLevel, FitnessGoal
from .tracking import (
    DailySummary,
    Workout,
    WorkoutSet,
    StreakData,
    StreakMilestone,
    StreakUpdate,
    MILESTONES,
)
from .insights import SmartSuggestion, MacroAdjustment, CorrelationPoint, CorrelationData

__all__ = [
    "UserProfile",
    "ActivityLevel",
    "FitnessGoal",
    "DailySummary",
    "Workout",
    "WorkoutSet",
    "StreakData",
    "StreakMilestone",
    "StreakUpdate",
    "MILESTONES",
    "SmartSuggestion",
    "MacroAdjustment",
    "CorrelationPoint",
    "CorrelationData",
]
