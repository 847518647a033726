from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, CheckConstraint
from app.db.base import Base, TimestampMixin


class UserRole:
    EMPLOYEE = "employee"
    ADMIN = "admin"


ROLE_CHOICES = (UserRole.EMPLOYEE, UserRole.ADMIN)


class User(Base, TimestampMixin):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(f"role in {ROLE_CHOICES}", name="ck_users_role"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(200), nullable=False, unique=True, index=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.EMPLOYEE)

    # optional profile fields
    department: Mapped[str | None] = mapped_column(String(200), nullable=True)
    job_title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    telegram: Mapped[str | None] = mapped_column(String(100), nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
