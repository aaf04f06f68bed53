"""Storage contracts the insights engine depends on, plus an in-memory store."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Optional

from trainwell.models.tracking import DailySummary, StreakData, Workout
from trainwell.models.user import UserProfile


class ProfileProvider(ABC):
    """Source of the user's profile."""

    @abstractmethod
    def get_profile(self) -> Optional[UserProfile]:
        """Return the profile, or None if onboarding hasn't finished."""
        pass

    @abstractmethod
    def save_profile(self, profile: UserProfile) -> UserProfile:
        pass


class SummaryProvider(ABC):
    """Source of daily nutrition/sleep summaries."""

    @abstractmethod
    def get_summaries(self, start: date, end: date) -> List[DailySummary]:
        """Summaries with ``start <= date <= end``, ascending by date."""
        pass

    @abstractmethod
    def upsert_summary(self, summary: DailySummary) -> DailySummary:
        """Insert or replace the summary for its date."""
        pass


class WorkoutProvider(ABC):
    """Source of logged workouts."""

    @abstractmethod
    def get_completed_workouts(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[Workout]:
        """Completed workouts in the range, most recent first."""
        pass

    @abstractmethod
    def add_workout(self, workout: Workout) -> Workout:
        pass


class StreakStore(ABC):
    """Persistence for the streak singleton."""

    @abstractmethod
    def load(self) -> StreakData:
        """Return stored streak data, or a fresh instance if none exists."""
        pass

    @abstractmethod
    def save(self, streak: StreakData) -> None:
        pass


class Repository(ProfileProvider, SummaryProvider, WorkoutProvider, StreakStore):
    """A backend implementing every storage contract."""
    pass


class InMemoryRepository(Repository):
    """Dictionary-backed repository for tests and local runs."""

    def __init__(
        self,
        profile: Optional[UserProfile] = None,
        summaries: Optional[List[DailySummary]] = None,
        workouts: Optional[List[Workout]] = None,
        streak: Optional[StreakData] = None,
    ):
        self.profile = profile
        self.summaries: Dict[date, DailySummary] = {s.date: s for s in summaries or []}
        self.workouts: List[Workout] = list(workouts or [])
        self.streak = streak.model_copy(deep=True) if streak else None

    def get_profile(self) -> Optional[UserProfile]:
        return self.profile

    def save_profile(self, profile: UserProfile) -> UserProfile:
        self.profile = profile
        return profile

    def get_summaries(self, start: date, end: date) -> List[DailySummary]:
        return [self.summaries[d] for d in sorted(self.summaries) if start <= d <= end]

    def upsert_summary(self, summary: DailySummary) -> DailySummary:
        self.summaries[summary.date] = summary
        return summary

    def get_completed_workouts(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[Workout]:
        workouts = [
            w for w in self.workouts
            if w.is_completed
            and (start is None or w.date >= start)
            and (end is None or w.date <= end)
        ]
        return sorted(workouts, key=lambda w: w.date, reverse=True)

    def add_workout(self, workout: Workout) -> Workout:
        self.workouts.append(workout)
        return workout

    def load(self) -> StreakData:
        if self.streak is None:
            return StreakData()
        return self.streak.model_copy(deep=True)

    def save(self, streak: StreakData) -> None:
        self.streak = streak.model_copy(deep=True)
