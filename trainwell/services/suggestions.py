"""Rule-based suggestions from recent summaries, recovery, and streaks."""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Sequence

from trainwell.models.insights import PRIORITY_ORDER, SmartSuggestion
from trainwell.models.tracking import DailySummary, StreakData, Workout
from trainwell.models.user import UserProfile
from trainwell.services.streaks import days_to_next_milestone, next_milestone


# Longest break (days) before training consistency slips, by activity level
REST_WINDOWS = {
    "sedentary": 4,
    "light": 3,
    "moderate": 3,
    "active": 2,
    "very_active": 2,
}

LOW_SLEEP_RATIO = 0.7
LOW_RECOVERY_SCORE = 50
HIGH_RECOVERY_SCORE = 85
PROTEIN_DEFICIT_DAYS = 3
PROTEIN_PER_KG = 1.6
CALORIE_DEFICIT_THRESHOLD = 300
MILESTONE_LOOKAHEAD_DAYS = 2
PROGRESSION_MIN_STREAK = 3
LOOKBACK_DAYS = 7

# High-volume day (weight x reps) that needs carbs around training
CARB_TIMING_VOLUME = 5000
CARB_TIMING_RATIO = 0.8
PLATEAU_SESSIONS = 3


@dataclass(frozen=True)
class SuggestionContext:
    """Inputs shared by every rule."""

    profile: UserProfile
    summaries: Sequence[DailySummary]  # ascending by date, none after as_of
    recovery_score: Optional[float]
    streak: StreakData
    as_of: Optional[date]
    workouts: Sequence[Workout] = ()  # completed, none after as_of

    def summary_for(self, day: date) -> Optional[DailySummary]:
        for summary in reversed(self.summaries):
            if summary.date == day:
                return summary
        return None

    def _window_start(self) -> Optional[date]:
        if self.as_of is None:
            return None
        return self.as_of - timedelta(days=LOOKBACK_DAYS - 1)

    def recent_logged(self) -> List[DailySummary]:
        """Summaries with nutrition logged inside the lookback window."""
        start = self._window_start()
        return [
            s for s in self.summaries
            if s.has_nutrition and (start is None or s.date >= start)
        ]

    def daily_volumes(self) -> Dict[date, float]:
        """Training volume per day inside the lookback window."""
        start = self._window_start()
        volumes: Dict[date, float] = defaultdict(float)
        for workout in self.workouts:
            if start is None or workout.date >= start:
                volumes[workout.date] += workout.total_volume
        return dict(volumes)


Rule = Callable[[SuggestionContext], Optional[SmartSuggestion]]


def check_low_sleep(ctx: SuggestionContext) -> Optional[SmartSuggestion]:
    if ctx.as_of is None:
        return None
    today = ctx.summary_for(ctx.as_of)
    if today is None or today.sleep_hours is None:
        return None

    goal = ctx.profile.sleep_goal_hours
    if today.sleep_hours >= goal:
        return None

    ratio = today.sleep_hours / goal
    return SmartSuggestion(
        id="low-sleep",
        type="recovery",
        priority="high" if ratio < LOW_SLEEP_RATIO else "medium",
        title="Low Sleep Detected",
        message=(
            f"You slept {today.sleep_hours:.1f}hrs (goal: {goal:.1f}hrs). "
            "Consider a 10% volume reduction today."
        ),
    )


def check_low_recovery(ctx: SuggestionContext) -> Optional[SmartSuggestion]:
    if ctx.recovery_score is None or ctx.recovery_score >= LOW_RECOVERY_SCORE:
        return None
    return SmartSuggestion(
        id="low-recovery",
        type="recovery",
        priority="high",
        title="Recovery Needed",
        message=(
            f"Your recovery score is {round(ctx.recovery_score)}. "
            "Keep today light: mobility, a walk, or a rest day."
        ),
    )


def check_protein_deficit(ctx: SuggestionContext) -> Optional[SmartSuggestion]:
    logged = ctx.recent_logged()
    if ctx.as_of is None or len(logged) < PROTEIN_DEFICIT_DAYS:
        return None

    recent = logged[-PROTEIN_DEFICIT_DAYS:]
    # Consecutive logged days, the latest no older than yesterday
    if (ctx.as_of - recent[-1].date).days > 1:
        return None
    for earlier, later in zip(recent, recent[1:]):
        if (later.date - earlier.date).days != 1:
            return None

    target = ctx.profile.target_protein
    if not all(s.total_protein < target for s in recent):
        return None

    avg = sum(s.total_protein for s in recent) / len(recent)
    return SmartSuggestion(
        id="protein-deficit",
        type="nutrition",
        priority="medium",
        title="Protein Below Target",
        message=(
            f"Protein has been under your {round(target)}g target for "
            f"{PROTEIN_DEFICIT_DAYS} days (avg {round(avg)}g). "
            "Add lean meat, eggs, Greek yogurt, or a shake."
        ),
    )


def check_protein_for_bodyweight(ctx: SuggestionContext) -> Optional[SmartSuggestion]:
    minimum = ctx.profile.protein_target_from_weight(PROTEIN_PER_KG)
    logged = ctx.recent_logged()
    if minimum is None or not logged:
        return None

    avg = sum(s.total_protein for s in logged) / len(logged)
    if avg >= minimum:
        return None

    return SmartSuggestion(
        id="protein-bodyweight",
        type="nutrition",
        priority="medium",
        title="Low Protein Intake",
        message=(
            f"Protein intake is below optimal for muscle synthesis. "
            f"Target at least {round(minimum)}g daily."
        ),
    )


def check_calorie_deficit(ctx: SuggestionContext) -> Optional[SmartSuggestion]:
    if ctx.profile.primary_goal != "muscle_gain":
        return None
    logged = ctx.recent_logged()
    if not logged:
        return None

    avg = sum(s.total_calories for s in logged) / len(logged)
    deficit = ctx.profile.target_calories - avg
    if deficit <= CALORIE_DEFICIT_THRESHOLD:
        return None

    return SmartSuggestion(
        id="calorie-deficit-muscle-gain",
        type="nutrition",
        priority="medium",
        title="Eating Below Target",
        message=(
            f"You are averaging a {round(deficit)}-calorie deficit while aiming to build muscle. "
            "Consider adding 40g of carbs on training days."
        ),
    )


def check_strength_plateau(ctx: SuggestionContext) -> Optional[SmartSuggestion]:
    """Training volume flat or falling while eating under target."""
    volumes = [v for _, v in sorted(ctx.daily_volumes().items(), reverse=True) if v > 0]
    if len(volumes) < PLATEAU_SESSIONS:
        return None

    recent = volumes[:PLATEAU_SESSIONS]
    older = volumes[PLATEAU_SESSIONS:PLATEAU_SESSIONS * 2]
    recent_avg = sum(recent) / PLATEAU_SESSIONS
    older_avg = sum(older) / max(PLATEAU_SESSIONS, len(older))
    if recent_avg > older_avg:
        return None

    logged = ctx.recent_logged()
    if not logged:
        return None
    deficit = ctx.profile.target_calories - sum(s.total_calories for s in logged) / len(logged)
    if deficit <= CALORIE_DEFICIT_THRESHOLD:
        return None

    return SmartSuggestion(
        id="strength-plateau",
        type="nutrition",
        priority="high",
        title="Strength Plateau Detected",
        message=(
            f"Your training volume has stalled while you are in a {round(deficit)}-calorie deficit. "
            "Consider increasing carbs by 40g on training days."
        ),
    )


def check_carb_timing(ctx: SuggestionContext) -> Optional[SmartSuggestion]:
    if ctx.as_of is None:
        return None
    volume = ctx.daily_volumes().get(ctx.as_of, 0)
    today = ctx.summary_for(ctx.as_of)
    if volume <= CARB_TIMING_VOLUME or today is None or not today.has_nutrition:
        return None

    target = ctx.profile.target_carbs
    if today.total_carbs >= target * CARB_TIMING_RATIO:
        return None

    return SmartSuggestion(
        id="carb-timing",
        type="nutrition",
        priority="medium",
        title="Fuel Your Training",
        message=(
            "High volume workout today but carbs are low. Consider adding "
            f"{round((target - today.total_carbs) * 0.5)}g carbs pre/post workout."
        ),
    )


def check_training_gap(ctx: SuggestionContext) -> Optional[SmartSuggestion]:
    last = ctx.streak.last_workout_date
    if ctx.as_of is None or last is None:
        return None

    window = REST_WINDOWS.get(ctx.profile.activity_level, 3)
    days = (ctx.as_of - last).days
    if days <= window:
        return None

    return SmartSuggestion(
        id="training-gap",
        type="consistency",
        priority="medium",
        title="Time to Train",
        message=f"It's been {days} days since your last workout. Even a short session keeps momentum.",
    )


def check_grace_period(ctx: SuggestionContext) -> Optional[SmartSuggestion]:
    if not ctx.streak.is_grace_period_active:
        return None
    return SmartSuggestion(
        id="grace-period",
        type="consistency",
        priority="high",
        title="Streak on Grace",
        message="You used your grace day. Log today to keep your streak alive.",
    )


def check_milestone_near(ctx: SuggestionContext) -> Optional[SmartSuggestion]:
    best = ctx.streak.best_current_streak
    remaining = days_to_next_milestone(best)
    if best == 0 or remaining is None or remaining > MILESTONE_LOOKAHEAD_DAYS:
        return None

    milestone = next_milestone(best)
    days_word = "day" if remaining == 1 else "days"
    return SmartSuggestion(
        id="milestone-near",
        type="consistency",
        priority="low",
        title=f"{milestone.name} Is Close",
        message=f"{remaining} more {days_word} to reach a {milestone.days}-day streak.",
        actionable=False,
    )


def check_ready_to_progress(ctx: SuggestionContext) -> Optional[SmartSuggestion]:
    if ctx.recovery_score is None or ctx.recovery_score < HIGH_RECOVERY_SCORE:
        return None
    if ctx.streak.current_workout_streak < PROGRESSION_MIN_STREAK:
        return None
    return SmartSuggestion(
        id="ready-to-progress",
        type="progression",
        priority="low",
        title="Ready to Progress",
        message="You're well recovered and consistent. Try adding weight or a rep to your main lift.",
    )


RULES: List[Rule] = [
    check_low_sleep,
    check_low_recovery,
    check_protein_deficit,
    check_protein_for_bodyweight,
    check_calorie_deficit,
    check_strength_plateau,
    check_carb_timing,
    check_training_gap,
    check_grace_period,
    check_milestone_near,
    check_ready_to_progress,
]


class SuggestionGenerator:
    """Evaluate the ordered rule set and rank what fires."""

    def __init__(self, rules: Optional[List[Rule]] = None):
        self.rules = list(rules) if rules is not None else list(RULES)

    def generate(
        self,
        profile: Optional[UserProfile],
        recent_summaries: Sequence[DailySummary],
        recovery_score: Optional[float],
        streak: StreakData,
        as_of: Optional[date] = None,
        recent_workouts: Sequence[Workout] = (),
    ) -> List[SmartSuggestion]:
        """
        Run every rule and return matches sorted by priority.

        Ties keep rule order. ``as_of`` defaults to the latest summary date,
        or the latest workout date when there are no summaries. Returns an
        empty list when no profile is configured.
        """
        if profile is None:
            return []

        summaries = sorted(recent_summaries, key=lambda s: s.date)
        workouts = sorted(
            (w for w in recent_workouts if w.is_completed), key=lambda w: w.date
        )
        if as_of is None and summaries:
            as_of = summaries[-1].date
        elif as_of is None and workouts:
            as_of = workouts[-1].date
        if as_of is not None:
            summaries = [s for s in summaries if s.date <= as_of]
            workouts = [w for w in workouts if w.date <= as_of]

        ctx = SuggestionContext(
            profile=profile,
            summaries=summaries,
            recovery_score=recovery_score,
            streak=streak,
            as_of=as_of,
            workouts=workouts,
        )

        fired = []
        for rule in self.rules:
            suggestion = rule(ctx)
            if suggestion is not None:
                fired.append(suggestion)

        # sorted() is stable, so rule order breaks ties
        return sorted(fired, key=lambda s: PRIORITY_ORDER[s.priority])
