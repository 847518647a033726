from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Text, ForeignKey, CheckConstraint, Index
from app.db.base import Base, TimestampMixin


class RequestStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


STATUS_CHOICES = (RequestStatus.PENDING, RequestStatus.APPROVED, RequestStatus.REJECTED)


class TrainingRequest(Base, TimestampMixin):
    __tablename__ = "training_requests"
    __table_args__ = (
        CheckConstraint(f"status in {STATUS_CHOICES}", name="ck_training_requests_status"),
        Index("ix_training_requests_user_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    topic: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # pending -> approved | rejected, never back
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=RequestStatus.PENDING, index=True)

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING
