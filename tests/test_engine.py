"""Tests for the insights engine over an in-memory repository."""
from datetime import timedelta

import pytest

from trainwell.db.repository import InMemoryRepository
from trainwell.models import StreakData
from trainwell.services.insights import InsightsEngine

from conftest import days_before, make_summary, make_workout


@pytest.fixture
def repo(profile) -> InMemoryRepository:
    return InMemoryRepository(profile=profile)


@pytest.fixture
def engine(repo) -> InsightsEngine:
    return InsightsEngine(repo)


class TestRecovery:

    def test_unavailable_without_profile(self, today):
        engine = InsightsEngine(InMemoryRepository())
        assert engine.recovery_score(today) is None
        assert engine.suggestions(today) == []

    def test_uses_days_summary_and_last_workout(self, engine, repo, today):
        repo.upsert_summary(make_summary(today, protein=150, sleep=8))
        repo.add_workout(make_workout(days_before(today, 1)))
        assert engine.recovery_score(today) == 100.0

    def test_ignores_later_workouts(self, engine, repo, today):
        repo.upsert_summary(make_summary(today, protein=150, sleep=8))
        repo.add_workout(make_workout(days_before(today, 1)))
        repo.add_workout(make_workout(today + timedelta(days=1)))
        assert engine.recovery_score(today) == 100.0

    def test_neutral_without_logs(self, engine, today):
        assert engine.recovery_score(today) == 50.0


class TestCheckStreaks:

    def test_first_check_replays_history(self, engine, repo, today):
        for n in range(4):
            repo.add_workout(make_workout(days_before(today, n)))

        update = engine.check_streaks(today)

        assert update.streak.current_workout_streak == 4
        assert update.streak.total_workout_days == 4
        assert update.milestone is None
        assert repo.load().current_workout_streak == 4

    def test_open_day_does_not_count_as_missed(self, engine, repo, today):
        repo.add_workout(make_workout(days_before(today, 2)))
        repo.add_workout(make_workout(days_before(today, 1)))

        update = engine.check_streaks(today)
        assert update.streak.current_workout_streak == 2
        assert not update.grace_period_used

        closed = engine.check_streaks(today, close_day=True)
        assert closed.streak.current_workout_streak == 2
        assert closed.grace_period_used
        assert closed.streak.grace_period_date == today

    def test_logging_later_in_the_day_counts(self, engine, repo, today):
        repo.add_workout(make_workout(days_before(today, 1)))
        engine.check_streaks(today)

        repo.add_workout(make_workout(today))
        update = engine.check_streaks(today)
        assert update.streak.current_workout_streak == 2

    def test_open_day_leaves_unlogged_dimension_alone(self, engine, repo, today):
        # Nutrition on D-6, D-5, D-3, D-2, D-1: grace spent on D-4
        for n in (6, 5, 3, 2, 1):
            repo.upsert_summary(make_summary(days_before(today, n)))
        repo.add_workout(make_workout(today))

        update = engine.check_streaks(today)
        assert update.streak.current_workout_streak == 1
        assert update.streak.current_nutrition_streak == 5
        assert update.streak.nutrition_grace_date == days_before(today, 4)
        assert update.streak.current_combined_streak == 0

        repo.upsert_summary(make_summary(today))
        closed = engine.check_streaks(today, close_day=True)
        assert closed.streak.current_nutrition_streak == 6
        assert closed.streak.longest_nutrition_streak == 6
        assert closed.streak.total_nutrition_days == 6
        assert closed.streak.current_workout_streak == 1
        assert closed.streak.total_workout_days == 1

    def test_open_day_is_evaluated_again_later(self, engine, repo, today):
        for n in (3, 2, 1):
            repo.upsert_summary(make_summary(days_before(today, n)))
        repo.add_workout(make_workout(today))

        engine.check_streaks(today)
        engine.check_streaks(today)
        assert repo.load().last_checked == days_before(today, 1)

        # Nutrition arrives after the foreground checks
        repo.upsert_summary(make_summary(today))
        update = engine.check_streaks(today + timedelta(days=1))

        assert update.streak.current_nutrition_streak == 4
        assert update.streak.total_nutrition_days == 4
        assert update.streak.nutrition_grace_date is None
        assert update.streak.total_workout_days == 1
        assert update.streak.last_checked == today

    def test_missed_days_between_checks(self, engine, repo, today):
        repo.add_workout(make_workout(days_before(today, 5)))
        engine.check_streaks(days_before(today, 5))

        update = engine.check_streaks(today)
        assert update.streak.current_workout_streak == 0
        assert update.streak.longest_workout_streak == 1

    def test_milestone_reported_once(self, engine, repo, today):
        for n in range(7):
            repo.add_workout(make_workout(days_before(today, n)))

        update = engine.check_streaks(today)
        assert update.milestone is not None
        assert update.milestone.days == 7
        assert update.milestone_streak == 7
        assert repo.load().last_celebrated_milestone == 7

        again = engine.check_streaks(today)
        assert again.milestone is None

    def test_celebrated_milestone_not_repeated(self, profile, today):
        repo = InMemoryRepository(profile=profile, streak=StreakData(last_celebrated_milestone=7))
        for n in range(7):
            repo.add_workout(make_workout(days_before(today, n)))

        update = InsightsEngine(repo).check_streaks(today)
        assert update.streak.current_workout_streak == 7
        assert update.milestone is None

    def test_nutrition_counts_toward_milestone(self, engine, repo, today):
        for n in range(7):
            repo.upsert_summary(make_summary(days_before(today, n)))

        update = engine.check_streaks(today)
        assert update.streak.current_nutrition_streak == 7
        assert update.streak.current_workout_streak == 0
        assert update.milestone.days == 7


class TestDerivedViews:

    def test_suggestions_use_stored_streak(self, engine, repo, today):
        repo.save(StreakData(is_grace_period_active=True))
        result = engine.suggestions(today)
        assert [s.id for s in result] == ["grace-period"]

    def test_suggestions_include_recovery(self, engine, repo, today):
        repo.upsert_summary(make_summary(today, sleep=2))
        result = engine.suggestions(today)
        assert [s.id for s in result][:1] == ["low-sleep"]

    def test_correlation(self, engine, repo, today):
        repo.upsert_summary(make_summary(days_before(today, 1), protein=140))
        repo.add_workout(make_workout(days_before(today, 1), sets=[(100, 10)]))
        repo.add_workout(make_workout(days_before(today, 20)))

        data = engine.correlation_data(3, today)
        assert [p.protein_intake for p in data.points] == [0, 140, 0]
        assert [p.workout_volume for p in data.points] == [0, 1000, 0]

    def test_correlation_carries_daily_recovery(self, engine, repo, today):
        repo.upsert_summary(make_summary(today, sleep=8))
        repo.add_workout(make_workout(days_before(today, 10)))

        data = engine.correlation_data(3, today)
        assert all(p.recovery_score is not None for p in data.points)
        # Workout before the window still sets recency
        assert data.points[-1].recovery_score == pytest.approx(40 + 30 + 9, abs=0.1)
        assert data.average_recovery_score is not None

    def test_suggestions_see_workouts(self, engine, repo, today):
        repo.upsert_summary(make_summary(today, carbs=100))
        repo.add_workout(make_workout(today, sets=[(100, 60)]))
        assert "carb-timing" in [s.id for s in engine.suggestions(today)]

    def test_recovery_buffer(self, engine, repo, today):
        assert not engine.recovery_buffer(today).has_adjustment

        for n in range(1, 10):
            repo.add_workout(make_workout(days_before(today, n), sets=[(100, 5)]))
        repo.add_workout(make_workout(today, sets=[(100, 50)]))

        buffer = engine.recovery_buffer(today)
        assert buffer.reason == "high_volume_recovery"
        assert buffer.carbs_adjustment == 20.0
        assert buffer.protein_adjustment == 10.0

    def test_logged_today(self, engine, repo, today):
        assert not engine.logged_today(today)
        repo.upsert_summary(make_summary(today))
        assert engine.logged_today(today)

    def test_logged_today_from_workout(self, engine, repo, today):
        repo.add_workout(make_workout(today, completed=False))
        assert not engine.logged_today(today)
        repo.add_workout(make_workout(today))
        assert engine.logged_today(today)
