"""Configuration management for Trainwell."""

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings
from typing import Literal
from functools import lru_cache


class ScoringPolicy(BaseModel):
    """Fixed arithmetic policy for the recovery score.

    Weights must add up to 1 so the composite stays on the 0-100 scale.
    """

    sleep_weight: float = Field(0.4, ge=0, le=1)
    protein_weight: float = Field(0.3, ge=0, le=1)
    recency_weight: float = Field(0.3, ge=0, le=1)

    # Used for any sub-score whose input is missing
    neutral_score: float = Field(50.0, ge=0, le=100)

    # Training recency curve (days since last workout)
    recency_same_day_score: float = Field(60.0, ge=0, le=100)
    recency_optimal_min_days: int = Field(1, ge=0)
    recency_optimal_max_days: int = Field(2, ge=0)
    recency_decay_per_day: float = Field(15.0, ge=0)
    recency_floor_score: float = Field(30.0, ge=0, le=100)

    @model_validator(mode="after")
    def _check_policy(self) -> "ScoringPolicy":
        total = self.sleep_weight + self.protein_weight + self.recency_weight
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"recovery weights must sum to 1.0, got {total:.3f}")
        if self.recency_optimal_min_days > self.recency_optimal_max_days:
            raise ValueError("recency optimal window is empty")
        return self


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Storage
    storage_backend: Literal["supabase", "memory"] = "supabase"
    supabase_url: str = ""
    supabase_key: str = ""

    # Telegram
    telegram_bot_token: str = ""
    telegram_chat_id: int = 0

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Notification schedule
    morning_briefing_time: str = "07:00"
    streak_reminder_time: str = "20:00"
    streak_check_time: str = "23:55"
    enable_streak_reminders: bool = True

    # Recovery scoring policy
    sleep_weight: float = 0.4
    protein_weight: float = 0.3
    recency_weight: float = 0.3
    neutral_score: float = 50.0
    recency_same_day_score: float = 60.0
    recency_optimal_min_days: int = 1
    recency_optimal_max_days: int = 2
    recency_decay_per_day: float = 15.0
    recency_floor_score: float = 30.0

    # Suggestions
    max_briefing_suggestions: int = 3

    # Timezone
    timezone: str = "America/New_York"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def scoring_policy(self) -> ScoringPolicy:
        """Build the validated recovery scoring policy."""
        return ScoringPolicy(
            sleep_weight=self.sleep_weight,
            protein_weight=self.protein_weight,
            recency_weight=self.recency_weight,
            neutral_score=self.neutral_score,
            recency_same_day_score=self.recency_same_day_score,
            recency_optimal_min_days=self.recency_optimal_min_days,
            recency_optimal_max_days=self.recency_optimal_max_days,
            recency_decay_per_day=self.recency_decay_per_day,
            recency_floor_score=self.recency_floor_score,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
