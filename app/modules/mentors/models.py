from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Text, CheckConstraint
from app.db.base import Base, TimestampMixin

# concurrent active mentees a mentor can carry
MAX_WORKLOAD = 5


class Mentor(Base, TimestampMixin):
    __tablename__ = "mentors"
    __table_args__ = (
        CheckConstraint(f"workload >= 0 AND workload <= {MAX_WORKLOAD}", name="ck_mentors_workload_range"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    job_title: Mapped[str] = mapped_column(String(200), nullable=False)
    experience: Mapped[str] = mapped_column(Text, nullable=False, default="")
    workload: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    email: Mapped[str] = mapped_column(String(200), nullable=False, unique=True, index=True)
    telegram: Mapped[str | None] = mapped_column(String(100), nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)

    @property
    def is_available(self) -> bool:
        return self.workload < MAX_WORKLOAD
