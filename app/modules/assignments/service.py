"""
Assignment coordinator: turns a pending training request and a chosen mentor
into an active learning process.

The three writes (request -> approved, mentor workload + 1, new learning
process) share one transaction. Each write is guarded by a condition on the
state it depends on, so of two racing assignments exactly one commits and the
other is rolled back and reported against the now-current state.
"""
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import errors, metrics
from app.core.logger import log_user_action, log_guard_failure
from app.db.base import utcnow
from app.modules.learnings.models import LearningProcess, LearningStatus
from app.modules.learnings import service as learning_service
from app.modules.mentors.models import Mentor, MAX_WORKLOAD
from app.modules.mentors import service as mentor_service
from app.modules.requests.models import TrainingRequest, RequestStatus
from app.modules.requests import service as request_service
from app.modules.users.models import User


def _capacity_error(mentor_id: int) -> errors.CapacityExceeded:
    return errors.CapacityExceeded(f"Mentor {mentor_id} already has {MAX_WORKLOAD} active mentees")


async def _raise_for_current_state(db: AsyncSession, request_id: int, mentor_id: int, admin_id: int):
    """Re-read after a failed guard and raise the error matching the state that won."""
    req = await request_service.get_request_or_404(db, request_id)
    if not req.is_pending:
        log_guard_failure(admin_id, f"assign request {request_id}", f"lost race, status is {req.status}")
        raise errors.InvalidTransition(f"Request {request_id} is already {req.status}")
    mentor = await mentor_service.get_mentor(db, mentor_id)
    log_guard_failure(admin_id, f"assign request {request_id}", f"mentor {mentor_id} workload {mentor.workload}")
    raise _capacity_error(mentor_id)


async def assign(db: AsyncSession, request_id: int, mentor_id: int, admin: User) -> LearningProcess:
    admin_id = admin.id
    req = await request_service.get_request_or_404(db, request_id)
    if not req.is_pending:
        log_guard_failure(admin_id, f"assign request {request_id}", f"status is {req.status}")
        raise errors.InvalidTransition(f"Request {request_id} is already {req.status}")

    mentor = await mentor_service.get_mentor(db, mentor_id)
    if mentor.workload >= MAX_WORKLOAD:
        log_guard_failure(admin_id, f"assign request {request_id}", f"mentor {mentor_id} is full")
        raise _capacity_error(mentor_id)
    mentor_name = mentor.name

    now = utcnow()
    try:
        res = await db.execute(
            update(TrainingRequest)
            .where(TrainingRequest.id == request_id, TrainingRequest.status == RequestStatus.PENDING)
            .values(status=RequestStatus.APPROVED, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if res.rowcount != 1:
            await db.rollback()
            await _raise_for_current_state(db, request_id, mentor_id, admin_id)

        res = await db.execute(
            update(Mentor)
            .where(Mentor.id == mentor_id, Mentor.workload < MAX_WORKLOAD)
            .values(workload=Mentor.workload + 1, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if res.rowcount != 1:
            await db.rollback()
            await _raise_for_current_state(db, request_id, mentor_id, admin_id)

        learning = LearningProcess(
            request_id=req.id,
            user_id=req.user_id,
            mentor_id=mentor.id,
            topic=req.topic,
            status=LearningStatus.ACTIVE,
            start_date=now,
            plan=[],
            created_at=now,
            updated_at=now,
        )
        db.add(learning)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        log_guard_failure(admin_id, f"assign request {request_id}", "learning process already exists")
        raise errors.Conflict(f"Request {request_id} already has a learning process")

    metrics.record_request_status(RequestStatus.APPROVED)
    metrics.record_assignment()
    metrics.set_mentor_workload(
        mentor_id, mentor_name, await db.scalar(select(Mentor.workload).where(Mentor.id == mentor_id))
    )

    log_user_action(
        admin_id,
        "assigned mentor",
        {"request_id": request_id, "mentor_id": mentor_id, "learning_id": learning.id},
    )
    return await learning_service.get_learning_or_404(db, learning.id)
