import uuid
from datetime import date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from observation_tracker.db.base import Base


class Observation(Base):
    __tablename__ = "observations"
    __table_args__ = (
        CheckConstraint(
            "status IN ('draft','in-progress','completed','submitted')",
            name="ck_observations_status",
        ),
    )
    # document key -> attribute, where the document name is reserved by SQLAlchemy
    __document_aliases__ = {"metadata": "observation_metadata"}

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    teacher_id: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    teacher_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    observer_id: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    observer_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    # weak reference; the framework may have been edited since
    framework_id: Mapped[str] = mapped_column(String(120), nullable=False)

    date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    end_time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")

    # question id -> {"question_id", "value", "timestamp"}
    responses: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    # question id -> free text
    comments: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    overall_comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    class_info: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    # derived at save time from responses
    crp_evidence_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_look_fors: Mapped[int | None] = mapped_column(Integer, nullable=True)

    observation_metadata: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
