"""
Learning process manager.

The plan is frozen once the engagement is completed; notes stay editable.
Plan writes and completion are conditional on ``status = 'active'`` so a
write racing a completion can never land on a completed engagement.
"""
from __future__ import annotations

import uuid
from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import errors, metrics
from app.core.logger import log_user_action, log_guard_failure
from app.db.base import utcnow
from app.modules.mentors.models import Mentor
from app.modules.users.models import User
from .models import LearningProcess, LearningStatus, MAX_PLAN_ITEMS
from .schemas import PlanItemIn

MIN_RATING = 1
MAX_RATING = 5


# =============== Helpers ===============

def _new_item_id() -> str:
    return uuid.uuid4().hex


def _require_text(text: Optional[str]) -> str:
    value = (text or "").strip()
    if not value:
        raise errors.ValidationError("Plan item text cannot be empty")
    return value


def _find_item(plan: list[dict], item_id: str) -> int:
    for idx, item in enumerate(plan):
        if item["id"] == item_id:
            return idx
    raise errors.NotFound(f"Plan item {item_id} not found")


def _check_viewer(learning: LearningProcess, caller: User) -> None:
    if learning.user_id != caller.id and not caller.is_admin:
        raise errors.Forbidden("Only the owner or an admin can view this learning process")


def _check_owner(learning: LearningProcess, caller: User) -> None:
    if learning.user_id != caller.id:
        raise errors.Forbidden("Only the owner can change this learning process")


def _check_active(learning: LearningProcess) -> None:
    if not learning.is_active:
        raise errors.InvalidTransition(f"Learning process {learning.id} is {learning.status}")


async def get_learning_or_404(db: AsyncSession, learning_id: int) -> LearningProcess:
    learning = await db.scalar(
        select(LearningProcess)
        .where(LearningProcess.id == learning_id)
        .execution_options(populate_existing=True)
    )
    if not learning:
        raise errors.NotFound(f"Learning process {learning_id} not found")
    return learning


async def _load_for_owner(db: AsyncSession, learning_id: int, caller: User) -> LearningProcess:
    learning = await get_learning_or_404(db, learning_id)
    _check_owner(learning, caller)
    return learning


async def _write_plan(db: AsyncSession, learning: LearningProcess, plan: list[dict], caller: User) -> LearningProcess:
    learning_id, caller_id = learning.id, caller.id
    if len(plan) > MAX_PLAN_ITEMS:
        raise errors.ValidationError(f"A plan holds at most {MAX_PLAN_ITEMS} items")

    res = await db.execute(
        update(LearningProcess)
        .where(LearningProcess.id == learning_id, LearningProcess.status == LearningStatus.ACTIVE)
        .values(plan=plan, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if res.rowcount != 1:
        await db.rollback()
        log_guard_failure(caller_id, f"edit plan of learning {learning_id}", "engagement completed")
        raise errors.InvalidTransition(f"Learning process {learning_id} is {LearningStatus.COMPLETED}")
    await db.commit()
    return await get_learning_or_404(db, learning_id)


# =============== Reads ===============

async def get(db: AsyncSession, learning_id: int, caller: User) -> LearningProcess:
    learning = await get_learning_or_404(db, learning_id)
    _check_viewer(learning, caller)
    return learning


async def list_for_user(db: AsyncSession, user_id: int) -> list[LearningProcess]:
    res = await db.execute(
        select(LearningProcess)
        .where(LearningProcess.user_id == user_id)
        .order_by(LearningProcess.created_at.desc(), LearningProcess.id.desc())
    )
    return list(res.scalars().all())


async def list_for_mentor(db: AsyncSession, mentor_id: int) -> list[LearningProcess]:
    res = await db.execute(
        select(LearningProcess)
        .where(LearningProcess.mentor_id == mentor_id)
        .order_by(LearningProcess.created_at.desc(), LearningProcess.id.desc())
    )
    return list(res.scalars().all())


# =============== Plan ===============

async def add_plan_item(db: AsyncSession, learning_id: int, caller: User, text: str) -> LearningProcess:
    learning = await _load_for_owner(db, learning_id, caller)
    _check_active(learning)

    item = {"id": _new_item_id(), "text": _require_text(text), "completed": False}
    return await _write_plan(db, learning, [*learning.plan, item], caller)


async def update_plan_item(
    db: AsyncSession,
    learning_id: int,
    caller: User,
    item_id: str,
    text: Optional[str] = None,
    completed: Optional[bool] = None,
) -> LearningProcess:
    learning = await _load_for_owner(db, learning_id, caller)
    _check_active(learning)

    plan = [dict(item) for item in learning.plan]
    idx = _find_item(plan, item_id)
    if text is not None:
        plan[idx]["text"] = _require_text(text)
    if completed is not None:
        plan[idx]["completed"] = completed
    return await _write_plan(db, learning, plan, caller)


async def toggle_plan_item(db: AsyncSession, learning_id: int, caller: User, item_id: str) -> LearningProcess:
    learning = await _load_for_owner(db, learning_id, caller)
    _check_active(learning)

    plan = [dict(item) for item in learning.plan]
    idx = _find_item(plan, item_id)
    plan[idx]["completed"] = not plan[idx]["completed"]
    return await _write_plan(db, learning, plan, caller)


async def remove_plan_item(db: AsyncSession, learning_id: int, caller: User, item_id: str) -> LearningProcess:
    learning = await _load_for_owner(db, learning_id, caller)
    _check_active(learning)

    plan = [dict(item) for item in learning.plan]
    del plan[_find_item(plan, item_id)]
    return await _write_plan(db, learning, plan, caller)


async def replace_plan(
    db: AsyncSession, learning_id: int, caller: User, items: Sequence[PlanItemIn]
) -> LearningProcess:
    learning = await _load_for_owner(db, learning_id, caller)
    _check_active(learning)

    known = {item["id"] for item in learning.plan}
    seen: set[str] = set()
    plan = []
    for item in items:
        item_id = item.id if item.id in known and item.id not in seen else _new_item_id()
        seen.add(item_id)
        plan.append({"id": item_id, "text": _require_text(item.text), "completed": bool(item.completed)})
    return await _write_plan(db, learning, plan, caller)


# =============== Notes ===============

async def update_notes(db: AsyncSession, learning_id: int, caller: User, notes: str) -> LearningProcess:
    # allowed in any status, last write wins
    learning = await _load_for_owner(db, learning_id, caller)
    await db.execute(
        update(LearningProcess)
        .where(LearningProcess.id == learning.id)
        .values(notes=notes, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return await get_learning_or_404(db, learning.id)


# =============== Completion ===============

def _validate_rating(rating) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise errors.ValidationError(f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}")
    return rating


async def complete(
    db: AsyncSession, learning_id: int, caller: User, rating: int, comment: str = ""
) -> LearningProcess:
    caller_id = caller.id
    learning = await _load_for_owner(db, learning_id, caller)
    mentor_id = learning.mentor_id
    mentor_name = learning.mentor_name
    if not learning.is_active:
        log_guard_failure(caller_id, f"complete learning {learning_id}", "already completed")
        raise errors.InvalidTransition(f"Learning process {learning_id} is already completed")
    rating = _validate_rating(rating)

    now = utcnow()
    res = await db.execute(
        update(LearningProcess)
        .where(LearningProcess.id == learning_id, LearningProcess.status == LearningStatus.ACTIVE)
        .values(
            status=LearningStatus.COMPLETED,
            end_date=now,
            feedback={"rating": rating, "comment": comment or ""},
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    if res.rowcount != 1:
        await db.rollback()
        log_guard_failure(caller_id, f"complete learning {learning_id}", "lost race, already completed")
        raise errors.InvalidTransition(f"Learning process {learning_id} is already completed")

    # mirror of the increment done on assignment, floored at zero
    await db.execute(
        update(Mentor)
        .where(Mentor.id == mentor_id, Mentor.workload > 0)
        .values(workload=Mentor.workload - 1, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    metrics.record_completion(rating)
    metrics.set_mentor_workload(
        mentor_id, mentor_name, await db.scalar(select(Mentor.workload).where(Mentor.id == mentor_id))
    )

    log_user_action(
        caller_id,
        "completed learning",
        {"learning_id": learning_id, "mentor_id": mentor_id, "rating": rating},
    )
    return await get_learning_or_404(db, learning_id)


async def get_progress(db: AsyncSession, learning_id: int, caller: User) -> dict:
    learning = await get(db, learning_id, caller)
    done = sum(1 for item in learning.plan if item.get("completed"))
    return {"progress": learning.progress, "completed_items": done, "total_items": len(learning.plan)}
