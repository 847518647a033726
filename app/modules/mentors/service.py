"""
Mentor directory: a registry consulted by the assignment coordinator and
the learning process manager. Workload is never written here.
"""
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import errors
from app.core.logger import log_user_action
from app.modules.users.models import User
from .models import Mentor, MAX_WORKLOAD
from .schemas import MentorCreate


async def list_mentors(db: AsyncSession, available_only: bool = False) -> list[Mentor]:
    stmt = select(Mentor)
    if available_only:
        stmt = stmt.where(Mentor.workload < MAX_WORKLOAD)
    res = await db.execute(stmt.order_by(Mentor.name.asc(), Mentor.id.asc()))
    return list(res.scalars().all())


async def get_mentor(db: AsyncSession, mentor_id: int) -> Mentor:
    mentor = await db.scalar(
        select(Mentor).where(Mentor.id == mentor_id).execution_options(populate_existing=True)
    )
    if not mentor:
        raise errors.NotFound(f"Mentor {mentor_id} not found")
    return mentor


async def onboard_mentor(db: AsyncSession, data: MentorCreate, admin: User) -> Mentor:
    exists = await db.scalar(select(Mentor.id).where(Mentor.email == data.email))
    if exists:
        raise errors.Conflict(f"Mentor with email {data.email} already exists")

    mentor = Mentor(**data.model_dump(), workload=0)
    db.add(mentor)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise errors.Conflict(f"Mentor with email {data.email} already exists")
    await db.refresh(mentor)

    log_user_action(admin.id, "onboarded mentor", {"mentor_id": mentor.id, "email": mentor.email})
    return mentor
