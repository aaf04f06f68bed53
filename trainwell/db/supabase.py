"""Supabase client and database operations."""

import logging
from supabase import create_client, Client
from functools import lru_cache
from typing import Optional, List
from datetime import date

from trainwell.config import get_settings
from trainwell.db.repository import Repository
from trainwell.errors import RepositoryError
from trainwell.models.tracking import DailySummary, StreakData, Workout
from trainwell.models.user import UserProfile

logger = logging.getLogger(__name__)

# Single-user app: singleton rows share this key
SINGLETON_ID = 1


@lru_cache()
def get_supabase_client() -> Client:
    """Get cached Supabase client."""
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_key:
        raise RepositoryError("SUPABASE_URL and SUPABASE_KEY must be set for the supabase backend")
    return create_client(settings.supabase_url, settings.supabase_key)


class SupabaseRepository(Repository):
    """Repository backed by Supabase tables.

    Tables: ``profile`` and ``streak_data`` hold one row each (id = 1),
    ``daily_summaries`` is unique on ``date``, ``workouts`` stores sets as JSON.
    """

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase_client()

    def _execute(self, query, action: str):
        try:
            return query.execute()
        except Exception as e:
            logger.error("Supabase %s failed: %s", action, e)
            raise RepositoryError(f"Supabase {action} failed") from e

    # Profile operations
    def get_profile(self) -> Optional[UserProfile]:
        """Get the user profile."""
        result = self._execute(
            self.client.table("profile").select("*").eq("id", SINGLETON_ID),
            "profile read",
        )
        if result.data:
            return UserProfile(**result.data[0])
        return None

    def save_profile(self, profile: UserProfile) -> UserProfile:
        """Create or replace the user profile."""
        data = profile.model_dump()
        data["id"] = SINGLETON_ID
        result = self._execute(
            self.client.table("profile").upsert(data, on_conflict="id"),
            "profile write",
        )
        return UserProfile(**result.data[0])

    # Daily summary operations
    def get_summaries(self, start: date, end: date) -> List[DailySummary]:
        """Get daily summaries in a date range, oldest first."""
        result = self._execute(
            self.client.table("daily_summaries")
            .select("*")
            .gte("date", str(start))
            .lte("date", str(end))
            .order("date"),
            "summary read",
        )
        return [DailySummary(**row) for row in result.data]

    def upsert_summary(self, summary: DailySummary) -> DailySummary:
        """Create or update the summary for its date."""
        data = summary.model_dump(mode="json")
        result = self._execute(
            self.client.table("daily_summaries").upsert(data, on_conflict="date"),
            "summary write",
        )
        return DailySummary(**result.data[0])

    # Workout operations
    def get_completed_workouts(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[Workout]:
        """Get completed workouts, most recent first."""
        query = (
            self.client.table("workouts")
            .select("*")
            .eq("is_completed", True)
        )
        if start is not None:
            query = query.gte("date", str(start))
        if end is not None:
            query = query.lte("date", str(end))

        result = self._execute(query.order("date", desc=True), "workout read")
        return [Workout(**row) for row in result.data]

    def add_workout(self, workout: Workout) -> Workout:
        """Log a workout."""
        data = workout.model_dump(mode="json")
        result = self._execute(self.client.table("workouts").insert(data), "workout write")
        return Workout(**result.data[0])

    # Streak operations
    def load(self) -> StreakData:
        """Get the streak row, or a fresh one if none is stored yet."""
        result = self._execute(
            self.client.table("streak_data").select("*").eq("id", SINGLETON_ID),
            "streak read",
        )
        if result.data:
            row = dict(result.data[0])
            row.pop("id", None)
            return StreakData(**row)
        return StreakData()

    def save(self, streak: StreakData) -> None:
        """Persist the streak row."""
        data = streak.model_dump(mode="json")
        data["id"] = SINGLETON_ID
        self._execute(
            self.client.table("streak_data").upsert(data, on_conflict="id"),
            "streak write",
        )
