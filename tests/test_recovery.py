"""Tests for recovery score calculation."""
from datetime import timedelta

import pytest

from trainwell.config import ScoringPolicy
from trainwell.services.recovery import (
    RecoveryScorer,
    calculate_recovery_buffer,
    get_recovery_status,
    volume_percentile,
)

from conftest import days_before, make_workout


@pytest.fixture
def scorer() -> RecoveryScorer:
    return RecoveryScorer()


class TestRecoveryComponents:
    """Individual sub-score calculations."""

    def test_sleep_score(self, scorer):
        assert scorer.sleep_score(8, 8) == 100
        assert scorer.sleep_score(6, 8) == 75
        assert scorer.sleep_score(10, 8) == 100  # Capped
        assert scorer.sleep_score(0, 8) == 0
        assert scorer.sleep_score(None, 8) == 50

    def test_protein_score(self, scorer):
        assert scorer.protein_score(150, 150) == 100
        assert scorer.protein_score(75, 150) == 50
        assert scorer.protein_score(300, 150) == 100
        assert scorer.protein_score(None, 150) == 50

    def test_recency_curve(self, scorer, today):
        assert scorer.recency_score(today, today) == 60  # Trained today
        assert scorer.recency_score(today, today - timedelta(days=1)) == 100
        assert scorer.recency_score(today, today - timedelta(days=2)) == 100
        assert scorer.recency_score(today, today - timedelta(days=3)) == 85
        assert scorer.recency_score(today, today - timedelta(days=4)) == 70
        assert scorer.recency_score(today, today - timedelta(days=10)) == 30  # Floor
        assert scorer.recency_score(today, None) == 50

    def test_future_workout_counts_as_today(self, scorer, today):
        assert scorer.recency_score(today, today + timedelta(days=2)) == 60


class TestRecoveryScore:
    """Composite score behavior."""

    def test_maximum(self, scorer, profile, today):
        score = scorer.score(
            today, profile,
            sleep_hours=8,
            protein_intake=150,
            last_workout_date=today - timedelta(days=1),
        )
        assert score == 100.0

    def test_all_inputs_missing_is_neutral(self, scorer, profile, today):
        assert scorer.score(today, profile) == 50.0

    def test_missing_profile_is_unavailable(self, scorer, today):
        assert scorer.score(today, None, sleep_hours=8) is None

    def test_weighted_combination(self, scorer, profile, today):
        # 75 * 0.4 + 50 * 0.3 + 100 * 0.3
        score = scorer.score(
            today, profile,
            sleep_hours=6,
            protein_intake=75,
            last_workout_date=today - timedelta(days=2),
        )
        assert score == 75.0

    def test_missing_input_not_penalized(self, scorer, profile, today):
        without_sleep = scorer.score(today, profile, protein_intake=150)
        with_no_sleep = scorer.score(today, profile, sleep_hours=0, protein_intake=150)
        assert without_sleep > with_no_sleep

    def test_monotonic_in_sleep(self, scorer, profile, today):
        scores = [
            scorer.score(today, profile, sleep_hours=h, protein_intake=100)
            for h in (0, 2, 4, 6, 8, 10)
        ]
        assert scores == sorted(scores)

    def test_monotonic_in_protein(self, scorer, profile, today):
        scores = [
            scorer.score(today, profile, sleep_hours=7, protein_intake=p)
            for p in (0, 40, 80, 120, 160, 200)
        ]
        assert scores == sorted(scores)

    def test_always_in_range(self, scorer, profile, today):
        for sleep in (None, 0, 4, 8, 14):
            for protein in (None, 0, 100, 400):
                for days in (None, 0, 1, 5, 30):
                    last = today - timedelta(days=days) if days is not None else None
                    score = scorer.score(today, profile, sleep, protein, last)
                    assert 0 <= score <= 100

    def test_custom_policy(self, profile, today):
        scorer = RecoveryScorer(ScoringPolicy(sleep_weight=1.0, protein_weight=0.0, recency_weight=0.0))
        assert scorer.score(today, profile, sleep_hours=4, protein_intake=0) == 50.0

    def test_policy_weights_must_sum_to_one(self):
        with pytest.raises(ValueError):
            ScoringPolicy(sleep_weight=0.5, protein_weight=0.5, recency_weight=0.5)


class TestRecoveryStatus:

    def test_status_bands(self):
        assert get_recovery_status(90) == ("Optimal", "green")
        assert get_recovery_status(85) == ("Optimal", "green")
        assert get_recovery_status(70) == ("Moderate", "yellow")
        assert get_recovery_status(50) == ("Compromised", "orange")
        assert get_recovery_status(49.9) == ("Recovery Needed", "red")


class TestRecoveryBuffer:
    """Macro boost after high-volume sessions."""

    @pytest.fixture
    def history(self, today):
        # Volumes 100..1000
        return [make_workout(days_before(today, n), sets=[(100, n)]) for n in range(1, 11)]

    def test_percentile(self, history, today):
        assert volume_percentile(make_workout(today, sets=[(100, 5)]), history) == 0.4
        assert volume_percentile(make_workout(today, sets=[(100, 20)]), history) == 1.0

    def test_percentile_without_history(self, today):
        assert volume_percentile(make_workout(today), []) == 0.5

    def test_incomplete_workouts_ignored(self, today):
        skipped = [make_workout(days_before(today, 1), sets=[(10, 1)], completed=False)]
        assert volume_percentile(make_workout(today), skipped) == 0.5

    def test_top_of_history_gets_full_boost(self, history, today):
        buffer = calculate_recovery_buffer(make_workout(today, sets=[(100, 20)]), history)
        assert buffer.carbs_adjustment == 40.0
        assert buffer.protein_adjustment == 20.0
        assert buffer.fat_adjustment == 0
        assert buffer.reason == "high_volume_recovery"
        assert buffer.has_adjustment

    def test_typical_session_needs_nothing(self, history, today):
        buffer = calculate_recovery_buffer(make_workout(today, sets=[(100, 5)]), history)
        assert buffer.reason == "none"
        assert not buffer.has_adjustment

    def test_eightieth_percentile_is_not_enough(self, today):
        history = [make_workout(days_before(today, n), sets=[(100, 1)]) for n in range(1, 9)]
        history += [make_workout(days_before(today, n), sets=[(100, 10)]) for n in (9, 10)]
        assert not calculate_recovery_buffer(make_workout(today, sets=[(100, 5)]), history).has_adjustment
