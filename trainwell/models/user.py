"""User profile models."""

from pydantic import BaseModel, Field
from typing import Optional, Literal


ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very_active"]

FitnessGoal = Literal[
    "muscle_gain", "fat_loss", "maintenance", "athletic_performance", "general_health"
]


class UserProfile(BaseModel):
    """Per-user targets and goals. Read-only to the scoring services."""

    # Macro targets (grams) and calories
    target_protein: float = Field(150.0, gt=0)
    target_carbs: float = Field(200.0, gt=0)
    target_fat: float = Field(65.0, gt=0)
    target_calories: float = Field(2200.0, gt=0)

    body_weight_kg: Optional[float] = Field(None, ge=20, le=500)

    sleep_goal_hours: float = Field(7.5, gt=0, le=24)
    activity_level: ActivityLevel = "moderate"
    primary_goal: FitnessGoal = "muscle_gain"

    class Config:
        from_attributes = True
        frozen = True

    def protein_target_from_weight(self, multiplier: float = 2.0) -> Optional[float]:
        """Protein target in grams from body weight (g per kg), if weight is known."""
        if self.body_weight_kg is None:
            return None
        return round(self.body_weight_kg * multiplier, 1)
