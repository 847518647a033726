"""
Training request lifecycle.

A request starts ``pending`` and moves exactly once, either to ``approved``
(only through the assignment coordinator, which also spawns the learning
process) or to ``rejected`` (here). Both are terminal.
"""
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import errors, metrics
from app.core.logger import log_user_action, log_guard_failure
from app.db.base import utcnow
from app.modules.users.models import User
from .models import TrainingRequest, RequestStatus, STATUS_CHOICES


def _require_text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise errors.ValidationError(f"{field} is required")
    return text


async def get_request_or_404(db: AsyncSession, request_id: int) -> TrainingRequest:
    req = await db.scalar(
        select(TrainingRequest)
        .where(TrainingRequest.id == request_id)
        .execution_options(populate_existing=True)
    )
    if not req:
        raise errors.NotFound(f"Training request {request_id} not found")
    return req


async def create_request(db: AsyncSession, user: User, topic: str, description: str) -> TrainingRequest:
    topic = _require_text(topic, "topic")
    description = _require_text(description, "description")

    now = utcnow()
    req = TrainingRequest(
        user_id=user.id,
        topic=topic,
        description=description,
        status=RequestStatus.PENDING,
        created_at=now,
        updated_at=now,
    )
    db.add(req)
    await db.commit()
    await db.refresh(req)

    metrics.record_request_status(RequestStatus.PENDING)
    log_user_action(user.id, "created training request", {"request_id": req.id, "topic": req.topic})
    return req


async def list_requests_for_user(db: AsyncSession, user_id: int) -> list[TrainingRequest]:
    res = await db.execute(
        select(TrainingRequest)
        .where(TrainingRequest.user_id == user_id)
        .order_by(TrainingRequest.created_at.desc(), TrainingRequest.id.desc())
    )
    return list(res.scalars().all())


async def list_all_requests(db: AsyncSession, status: Optional[str] = None) -> list[TrainingRequest]:
    stmt = select(TrainingRequest)
    if status:
        if status not in STATUS_CHOICES:
            raise errors.ValidationError(f"Unknown status '{status}'")
        stmt = stmt.where(TrainingRequest.status == status)
    res = await db.execute(stmt.order_by(TrainingRequest.created_at.desc(), TrainingRequest.id.desc()))
    return list(res.scalars().all())


async def get_request(db: AsyncSession, request_id: int, caller: User) -> TrainingRequest:
    req = await get_request_or_404(db, request_id)
    if req.user_id != caller.id and not caller.is_admin:
        raise errors.Forbidden("Only the owner or an admin can view this request")
    return req


async def update_request(
    db: AsyncSession, request_id: int, caller: User, topic: str, description: str
) -> TrainingRequest:
    req = await get_request_or_404(db, request_id)
    if req.user_id != caller.id:
        raise errors.Forbidden("Only the owner can edit this request")
    if not req.is_pending:
        raise errors.InvalidTransition(f"Request {request_id} is already {req.status}")

    req.topic = _require_text(topic, "topic")
    req.description = _require_text(description, "description")
    req.updated_at = utcnow()
    await db.commit()
    await db.refresh(req)
    return req


async def reject(db: AsyncSession, request_id: int, admin: User) -> TrainingRequest:
    admin_id = admin.id
    req = await get_request_or_404(db, request_id)
    if not req.is_pending:
        log_guard_failure(admin_id, f"reject request {request_id}", f"status is {req.status}")
        raise errors.InvalidTransition(f"Request {request_id} is already {req.status}")

    # keyed on the current status so a concurrent assign is never overwritten
    res = await db.execute(
        update(TrainingRequest)
        .where(TrainingRequest.id == request_id, TrainingRequest.status == RequestStatus.PENDING)
        .values(status=RequestStatus.REJECTED, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if res.rowcount != 1:
        await db.rollback()
        current = await get_request_or_404(db, request_id)
        log_guard_failure(admin_id, f"reject request {request_id}", f"lost race, status is {current.status}")
        raise errors.InvalidTransition(f"Request {request_id} is already {current.status}")
    await db.commit()
    await db.refresh(req)

    metrics.record_request_status(RequestStatus.REJECTED)
    log_user_action(admin_id, "rejected training request", {"request_id": request_id})
    return req
