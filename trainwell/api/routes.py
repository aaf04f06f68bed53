"""API routes for dashboards, widgets, and health-data sync."""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from typing import List, Optional
from datetime import date

from trainwell.errors import InvalidInputError
from trainwell.models.insights import CorrelationData, MacroAdjustment, SmartSuggestion
from trainwell.models.tracking import DailySummary, StreakData, StreakMilestone, StreakUpdate, Workout
from trainwell.models.user import UserProfile
from trainwell.services.insights import InsightsEngine, get_engine
from trainwell.services.recovery import get_recovery_status
from trainwell.services.streaks import current_milestone, days_to_next_milestone, next_milestone


router = APIRouter(prefix="/api/v1", tags=["Insights"])


class RecoveryResponse(BaseModel):
    """Recovery score for a day."""
    date: date
    score: float
    status: str
    color: str


class StreakResponse(BaseModel):
    """Stored streak snapshot with milestone progress."""
    streak: StreakData
    current_milestone: Optional[StreakMilestone] = None
    next_milestone: Optional[StreakMilestone] = None
    days_to_next: Optional[int] = None


class SyncResponse(BaseModel):
    """Response for sync requests."""
    success: bool
    message: str


def _require_profile(engine: InsightsEngine) -> UserProfile:
    profile = engine.get_profile()
    if profile is None:
        raise HTTPException(status_code=404, detail="No profile configured. Finish onboarding first.")
    return profile


@router.get("/recovery", response_model=RecoveryResponse)
async def get_recovery(
    as_of: Optional[date] = None,
    engine: InsightsEngine = Depends(get_engine),
):
    """Recovery score (0-100) from sleep, protein, and training recency."""
    as_of = as_of or date.today()
    _require_profile(engine)

    score = engine.recovery_score(as_of)
    status, color = get_recovery_status(score)
    return RecoveryResponse(date=as_of, score=score, status=status, color=color)


@router.get("/recovery/buffer", response_model=MacroAdjustment)
async def get_recovery_buffer(
    as_of: Optional[date] = None,
    engine: InsightsEngine = Depends(get_engine),
):
    """Extra carbs and protein after a high-volume workout, relative to past sessions."""
    return engine.recovery_buffer(as_of)


@router.get("/streaks", response_model=StreakResponse)
async def get_streaks(engine: InsightsEngine = Depends(get_engine)):
    """Current streaks for widgets. Does not run a status check."""
    streak = engine.get_streak()
    best = streak.best_current_streak
    return StreakResponse(
        streak=streak,
        current_milestone=current_milestone(best),
        next_milestone=next_milestone(best),
        days_to_next=days_to_next_milestone(best),
    )


@router.post("/streaks/check", response_model=StreakUpdate)
async def check_streaks(
    as_of: Optional[date] = None,
    close_day: bool = False,
    engine: InsightsEngine = Depends(get_engine),
):
    """
    Run the streak status check, e.g. when the app comes to the foreground.

    The response carries any newly crossed milestone so the client can
    celebrate it.
    """
    return engine.check_streaks(as_of, close_day=close_day)


@router.get("/suggestions", response_model=List[SmartSuggestion])
async def get_suggestions(
    as_of: Optional[date] = None,
    engine: InsightsEngine = Depends(get_engine),
):
    """Ranked suggestions, highest priority first."""
    _require_profile(engine)
    return engine.suggestions(as_of)


@router.get("/correlation", response_model=CorrelationData)
async def get_correlation(
    days: int = Query(7, ge=1, le=365),
    as_of: Optional[date] = None,
    engine: InsightsEngine = Depends(get_engine),
):
    """Daily protein intake vs. workout volume, one point per day."""
    try:
        return engine.correlation_data(days, as_of)
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.put("/profile", response_model=UserProfile)
async def put_profile(profile: UserProfile, engine: InsightsEngine = Depends(get_engine)):
    """Create or replace the user profile."""
    return engine.repo.save_profile(profile)


@router.post("/sync/summary", response_model=SyncResponse)
async def sync_summary(summary: DailySummary, engine: InsightsEngine = Depends(get_engine)):
    """
    Sync a day's nutrition and sleep totals from Apple Health, Google Fit, or other apps.

    Posting the same date again replaces that day's totals.
    """
    engine.repo.upsert_summary(summary)
    return SyncResponse(
        success=True,
        message=f"Synced summary for {summary.date}: {round(summary.total_protein)}g protein",
    )


@router.post("/sync/workout", response_model=SyncResponse)
async def sync_workout(workout: Workout, engine: InsightsEngine = Depends(get_engine)):
    """Sync a logged workout."""
    engine.repo.add_workout(workout)
    return SyncResponse(
        success=True,
        message=f"Logged workout on {workout.date}: {round(workout.total_volume)} volume",
    )
