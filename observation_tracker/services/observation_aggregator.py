"""
Read-side statistics over stored observations.

Everything here is computed from a fresh scan of the "observations"
collection; nothing is cached between calls.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from fractions import Fraction
from typing import Iterable

from observation_tracker.core.scoring import round_half_up
from observation_tracker.schemas.observation import Observation
from observation_tracker.schemas.stats import (
    DashboardSummary,
    GoalProgress,
    ObservationStats,
    TeacherAnalytics,
)
from observation_tracker.store.document_store import DocumentStore

logger = logging.getLogger(__name__)

COLLECTION = "observations"

DEFAULT_GOAL = 5000
ACTIVE_WINDOW_DAYS = 7
FINISHED_STATUSES = ("completed", "submitted")


def _defined_scores(observations: Iterable[Observation]) -> list[int]:
    return [o.crp_evidence_count for o in observations if o.crp_evidence_count is not None]


def compute_stats(observations: list[Observation], today: date | None = None) -> ObservationStats:
    today = today or date.today()
    month_start = today.replace(day=1)

    this_month = sum(1 for o in observations if o.date is not None and o.date >= month_start)

    scores = _defined_scores(observations)
    average = round_half_up(Fraction(sum(scores), len(scores))) if scores else 0

    return ObservationStats(total=len(observations), this_month=this_month, crp_evidence_average=average)


def get_progress(total: int, goal: int = DEFAULT_GOAL) -> GoalProgress:
    """get_progress(247, 5000) -> 4.9%; capped at 100."""
    if goal <= 0:
        return GoalProgress(current=total, goal=goal, percentage=100.0 if total else 0.0)
    percentage = min(100.0, round_half_up(Fraction(total * 100, goal), 1))
    return GoalProgress(current=total, goal=goal, percentage=percentage)


def matches_query(observation: Observation, query: str) -> bool:
    needle = (query or "").strip().lower()
    if not needle:
        return True
    haystack = (observation.teacher_name, observation.observer_name, observation.overall_comment)
    return any(needle in (text or "").lower() for text in haystack)


def in_date_range(observation: Observation, start: date | None, end: date | None) -> bool:
    if observation.date is None:
        return start is None and end is None
    if start is not None and observation.date < start:
        return False
    if end is not None and observation.date > end:
        return False
    return True


def build_teacher_analytics(observations: list[Observation]) -> list[TeacherAnalytics]:
    grouped: dict[str, list[Observation]] = {}
    for o in observations:
        grouped.setdefault(o.teacher_id, []).append(o)

    out = []
    for teacher_id, items in grouped.items():
        scores = _defined_scores(items)
        durations = [o.duration for o in items]
        out.append(
            TeacherAnalytics(
                teacher_id=teacher_id,
                teacher_name=items[0].teacher_name,
                total_observations=len(items),
                completed_observations=sum(1 for o in items if o.status in FINISHED_STATUSES),
                average_crp_evidence=round_half_up(Fraction(sum(scores), len(scores)), 1) if scores else 0.0,
                average_duration=round_half_up(Fraction(sum(durations), len(durations))) if durations else 0,
            )
        )
    return sorted(out, key=lambda a: (a.teacher_name.lower(), a.teacher_id))


class ObservationAggregator:
    def __init__(self, store: DocumentStore, goal: int = DEFAULT_GOAL, query_limit: int = 50):
        self.store = store
        self.goal = goal
        self.query_limit = query_limit

    def _load(self, where: dict | None = None, limit: int | None = None, offset: int = 0) -> list[Observation]:
        docs = self.store.list(COLLECTION, where=where, limit=limit, offset=offset)
        logger.debug("Loaded %d observation(s) where=%s", len(docs), where)
        return [Observation.model_validate(d) for d in docs]

    def all(self, where: dict | None = None) -> list[Observation]:
        """Every observation (optionally field-equal to where), newest first."""
        return self._load(where)

    def get_by_observer(self, observer_id: str, limit: int | None = None) -> list[Observation]:
        return self._load({"observer_id": observer_id}, limit=limit or self.query_limit)

    def get_by_teacher(self, teacher_id: str, limit: int | None = None) -> list[Observation]:
        return self._load({"teacher_id": teacher_id}, limit=limit or self.query_limit)

    def get_recent(self, limit: int = 20, offset: int = 0) -> list[Observation]:
        return self._load(limit=limit, offset=offset)

    def get_stats(self, today: date | None = None, observations: list[Observation] | None = None) -> ObservationStats:
        source = self.all() if observations is None else observations
        return compute_stats(source, today=today)

    def get_progress(self, total: int | None = None, goal: int | None = None) -> GoalProgress:
        if total is None:
            total = self.store.count(COLLECTION)
        return get_progress(total, self.goal if goal is None else goal)

    def search_observations(
        self,
        query: str = "",
        statuses: list[str] | None = None,
        observations: list[Observation] | None = None,
    ) -> list[Observation]:
        """Case-insensitive match on teacher, observer and overall comment, AND status allow-list."""
        source = self.all() if observations is None else observations
        return [
            o for o in source
            if matches_query(o, query) and (not statuses or o.status in statuses)
        ]

    def filter_observations(
        self,
        statuses: list[str] | None = None,
        start: date | None = None,
        end: date | None = None,
        observations: list[Observation] | None = None,
    ) -> list[Observation]:
        """Status allow-list AND inclusive date range; None means unbounded."""
        source = self.all() if observations is None else observations
        return [
            o for o in source
            if (not statuses or o.status in statuses) and in_date_range(o, start, end)
        ]

    def teacher_analytics(self) -> list[TeacherAnalytics]:
        return build_teacher_analytics(self.all())

    def dashboard(self, today: date | None = None, observations: list[Observation] | None = None) -> DashboardSummary:
        """
        Stats and weekly activity over observations (default: all of them);
        goal progress always counts the whole collection.
        """
        today = today or date.today()
        if observations is None:
            observations = self.all()

        week_start = today - timedelta(days=ACTIVE_WINDOW_DAYS)
        recent = [o for o in observations if o.date is not None and week_start <= o.date <= today]

        stats = compute_stats(observations, today=today)
        return DashboardSummary(
            stats=stats,
            goal_progress=self.get_progress(),
            active_observers=len({o.observer_id for o in recent}),
            weekly_observations=len(recent),
        )
