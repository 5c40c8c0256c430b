from pydantic import BaseModel


class ObservationStats(BaseModel):
    """Totals over all stored observations"""
    total: int = 0
    this_month: int = 0
    crp_evidence_average: int = 0  # mean crp_evidence_count, rounded


class GoalProgress(BaseModel):
    current: int
    goal: int
    percentage: float  # capped at 100, one decimal


class TeacherAnalytics(BaseModel):
    teacher_id: str
    teacher_name: str
    total_observations: int = 0
    completed_observations: int = 0
    average_crp_evidence: float = 0.0
    average_duration: int = 0


class DashboardSummary(BaseModel):
    stats: ObservationStats
    goal_progress: GoalProgress
    active_observers: int = 0  # distinct observers in the last 7 days
    weekly_observations: int = 0
