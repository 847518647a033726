from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core import errors
from app.core.dependencies import get_db, get_current_user, get_current_admin
from app.db.base import utcnow
from app.modules.requests import service as request_service
from app.modules.requests.schemas import RequestOut
from app.modules.learnings import service as learning_service
from app.modules.learnings.schemas import LearningOut
from .models import User
from .schemas import UserOut, UserProfileUpdate

router = APIRouter()


async def _get_user_or_404(db: AsyncSession, user_id: int) -> User:
    u = await db.scalar(select(User).where(User.id == user_id))
    if not u:
        raise errors.NotFound(f"User {user_id} not found")
    return u


@router.get("/me", response_model=UserOut)
async def users_me(user: User = Depends(get_current_user)):
    return user


@router.patch("/me", response_model=UserOut)
async def update_me(
    payload: UserProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    # editable profile fields only
    if payload.name is not None:
        user.name = payload.name.strip() or user.name
    if payload.department is not None:
        user.department = payload.department or None
    if payload.job_title is not None:
        user.job_title = payload.job_title or None
    if payload.telegram is not None:
        user.telegram = payload.telegram or None
    user.updated_at = utcnow()

    await db.commit()
    await db.refresh(user)
    return user


@router.get("", response_model=List[UserOut])
async def list_users(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    res = await db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
    return res.scalars().all()


@router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    return await _get_user_or_404(db, user_id)


@router.get("/{user_id}/requests", response_model=List[RequestOut])
async def get_user_requests(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    await _get_user_or_404(db, user_id)
    return await request_service.list_requests_for_user(db, user_id)


@router.get("/{user_id}/learnings", response_model=List[LearningOut])
async def get_user_learnings(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    await _get_user_or_404(db, user_id)
    return await learning_service.list_for_user(db, user_id)
