from fastapi import APIRouter, Depends, Query

from observation_tracker.api.deps import get_observation_aggregator, get_teacher_directory
from observation_tracker.api.observations import visible_observations
from observation_tracker.core.config import settings
from observation_tracker.core.rbac import require_roles
from observation_tracker.core.security import get_current_user
from observation_tracker.models.user import User
from observation_tracker.schemas.observation import Observation
from observation_tracker.schemas.stats import (
    DashboardSummary,
    GoalProgress,
    ObservationStats,
    TeacherAnalytics,
)
from observation_tracker.services.observation_aggregator import ObservationAggregator
from observation_tracker.services.teacher_directory import TeacherDirectory

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

ANALYSTS = ("admin", "coordinator")


@router.get("/stats", response_model=ObservationStats)
def dashboard_stats(
    aggregator: ObservationAggregator = Depends(get_observation_aggregator),
    teachers: TeacherDirectory = Depends(get_teacher_directory),
    current_user: User = Depends(get_current_user),
):
    """Over the observations the caller can see"""
    return aggregator.get_stats(observations=visible_observations(current_user, aggregator, teachers))


@router.get("/progress", response_model=GoalProgress)
def dashboard_progress(
    goal: int | None = Query(default=None, ge=1, description="Defaults to OBSERVATION_GOAL"),
    aggregator: ObservationAggregator = Depends(get_observation_aggregator),
    _: User = Depends(get_current_user),
):
    return aggregator.get_progress(goal=goal)


@router.get("/recent", response_model=list[Observation])
def dashboard_recent(
    limit: int | None = Query(default=None, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    aggregator: ObservationAggregator = Depends(get_observation_aggregator),
    _: User = Depends(require_roles(*ANALYSTS)),
):
    return aggregator.get_recent(limit or settings.RECENT_OBSERVATIONS_LIMIT, offset)


@router.get("/analytics", response_model=list[TeacherAnalytics])
def dashboard_analytics(
    aggregator: ObservationAggregator = Depends(get_observation_aggregator),
    _: User = Depends(require_roles(*ANALYSTS)),
):
    """Per-teacher totals and averages"""
    return aggregator.teacher_analytics()


@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(
    aggregator: ObservationAggregator = Depends(get_observation_aggregator),
    teachers: TeacherDirectory = Depends(get_teacher_directory),
    current_user: User = Depends(get_current_user),
):
    """
    Stats and weekly activity are scoped like GET /observations; goal
    progress is organisation-wide.
    """
    return aggregator.dashboard(observations=visible_observations(current_user, aggregator, teachers))
