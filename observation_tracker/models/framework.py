from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from observation_tracker.db.base import Base


class Framework(Base):
    __tablename__ = "frameworks"
    __table_args__ = (
        CheckConstraint(
            "status IN ('active','inactive','draft')",
            name="ck_frameworks_status",
        ),
    )

    # human-readable slug, e.g. "crp-in-action"
    id: Mapped[str] = mapped_column(String(120), primary_key=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    version: Mapped[str] = mapped_column(String(40), nullable=False, default="1.0")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")

    # ISO date (YYYY-MM-DD) of the last content edit
    last_modified: Mapped[str] = mapped_column(String(10), nullable=False)

    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Section -> Question tree, stored as one document:
    # [{"id", "title", "description", "weight", "questions": [{...}]}]
    sections: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
