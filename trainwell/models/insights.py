"""Derived values: suggestions, macro adjustments, and correlation series."""

import numpy as np
from pydantic import BaseModel
from typing import Optional, List, Literal
from datetime import date


SuggestionType = Literal["recovery", "nutrition", "progression", "consistency", "workout", "general"]

SuggestionPriority = Literal["high", "medium", "low"]

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

AdjustmentReason = Literal["high_volume_recovery", "none"]


class SmartSuggestion(BaseModel):
    """A ranked behavioral suggestion. Never persisted."""

    id: str
    type: SuggestionType
    priority: SuggestionPriority
    title: str
    message: str
    actionable: bool = True

    class Config:
        frozen = True


class MacroAdjustment(BaseModel):
    """Extra grams to eat on top of the profile targets."""

    carbs_adjustment: float = 0
    protein_adjustment: float = 0
    fat_adjustment: float = 0
    reason: AdjustmentReason = "none"

    class Config:
        frozen = True

    @property
    def has_adjustment(self) -> bool:
        return any((self.carbs_adjustment, self.protein_adjustment, self.fat_adjustment))


class CorrelationPoint(BaseModel):
    """One day's paired protein intake and training volume."""

    date: date
    protein_intake: float = 0
    workout_volume: float = 0
    calorie_intake: float = 0
    recovery_score: Optional[float] = None
    sleep_hours: Optional[float] = None

    class Config:
        frozen = True


class CorrelationData(BaseModel):
    """Dense daily series for charting protein vs. training volume."""

    start_date: date
    end_date: date
    points: List[CorrelationPoint]

    class Config:
        frozen = True

    @property
    def average_protein(self) -> float:
        if not self.points:
            return 0.0
        return sum(p.protein_intake for p in self.points) / len(self.points)

    @property
    def average_volume(self) -> float:
        if not self.points:
            return 0.0
        return sum(p.workout_volume for p in self.points) / len(self.points)

    @property
    def average_recovery_score(self) -> Optional[float]:
        """Mean over days that have a score; None when no day does."""
        scores = [p.recovery_score for p in self.points if p.recovery_score is not None]
        if not scores:
            return None
        return sum(scores) / len(scores)

    @property
    def coefficient(self) -> Optional[float]:
        """Pearson correlation of protein vs. volume; None when either series is flat."""
        if len(self.points) < 2:
            return None

        protein = np.array([p.protein_intake for p in self.points], dtype=float)
        volume = np.array([p.workout_volume for p in self.points], dtype=float)
        if np.ptp(protein) == 0 or np.ptp(volume) == 0:
            return None
        return round(float(np.corrcoef(protein, volume)[0, 1]), 3)
