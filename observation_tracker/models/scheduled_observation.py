import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from observation_tracker.db.base import Base


class ScheduledObservation(Base):
    """
    A planned visit. Kept apart from observations: its own table, ids and
    status values (scheduled/confirmed/cancelled/completed).
    """
    __tablename__ = "scheduled_observations"
    __table_args__ = (
        CheckConstraint(
            "status IN ('scheduled','confirmed','cancelled','completed')",
            name="ck_scheduled_observations_status",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    teacher_id: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    observer_id: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    framework_id: Mapped[str] = mapped_column(String(120), nullable=False)

    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    scheduled_time: Mapped[str] = mapped_column(String(20), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=45)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="scheduled")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    reminders_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # set when the visit is completed and an observation was recorded for it
    observation_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
