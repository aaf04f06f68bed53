"""Database module."""

from functools import lru_cache

from trainwell.config import get_settings
from .repository import (
    Repository,
    ProfileProvider,
    SummaryProvider,
    WorkoutProvider,
    StreakStore,
    InMemoryRepository,
)


@lru_cache()
def get_repository() -> Repository:
    """Get the cached repository for the configured storage backend."""
    settings = get_settings()
    if settings.storage_backend == "memory":
        return InMemoryRepository()

    from .supabase import SupabaseRepository
    return SupabaseRepository()


__all__ = [
    "Repository",
    "ProfileProvider",
    "SummaryProvider",
    "WorkoutProvider",
    "StreakStore",
    "InMemoryRepository",
    "get_repository",
]
