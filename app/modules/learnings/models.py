from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    String,
    Integer,
    Text,
    JSON,
    DateTime,
    ForeignKey,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin
from app.modules.mentors.models import Mentor


class LearningStatus:
    ACTIVE = "active"
    COMPLETED = "completed"


STATUS_CHOICES = (LearningStatus.ACTIVE, LearningStatus.COMPLETED)

MAX_PLAN_ITEMS = 255


class LearningProcess(Base, TimestampMixin):
    """
    One mentoring engagement, spawned when a training request is approved.
    Never deleted; ``completed`` rows are kept as history.
    """
    __tablename__ = "learning_processes"
    __table_args__ = (
        CheckConstraint(f"status in {STATUS_CHOICES}", name="ck_learning_processes_status"),
        Index("ix_learning_processes_user_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    # one engagement per approved request
    request_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("training_requests.id", ondelete="RESTRICT"), unique=True, nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    mentor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("mentors.id", ondelete="RESTRICT"), index=True, nullable=False
    )

    topic: Mapped[str] = mapped_column(String(300), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=LearningStatus.ACTIVE, index=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # [{"id": str, "text": str, "completed": bool}, ...] in insertion order
    plan: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # {"rating": int, "comment": str}; set once, on completion
    feedback: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    mentor: Mapped[Mentor] = relationship(Mentor, lazy="selectin")

    @property
    def is_active(self) -> bool:
        return self.status == LearningStatus.ACTIVE

    @property
    def mentor_name(self) -> str:
        return self.mentor.name

    @property
    def mentor_email(self) -> str:
        return self.mentor.email

    @property
    def mentor_telegram(self) -> str | None:
        return self.mentor.telegram

    @property
    def mentor_job_title(self) -> str:
        return self.mentor.job_title

    @property
    def progress(self) -> float:
        """Percentage of completed plan items."""
        if not self.plan:
            return 0.0
        done = sum(1 for item in self.plan if item.get("completed"))
        return done / len(self.plan) * 100
