from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, get_current_user, get_current_admin
from app.modules.users.models import User
from app.modules.learnings import service as learning_service
from app.modules.learnings.schemas import LearningOut
from . import service
from .schemas import MentorCreate, MentorOut

router = APIRouter()


@router.get("", response_model=List[MentorOut])
async def list_mentors(
    available: bool = Query(False, description="only mentors below the workload ceiling"),
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await service.list_mentors(db, available_only=available)


@router.post("", response_model=MentorOut, status_code=status.HTTP_201_CREATED)
async def onboard_mentor(
    payload: MentorCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return await service.onboard_mentor(db, payload, admin)


@router.get("/{mentor_id}", response_model=MentorOut)
async def get_mentor(
    mentor_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await service.get_mentor(db, mentor_id)


@router.get("/{mentor_id}/learnings", response_model=List[LearningOut])
async def get_mentor_learnings(
    mentor_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    await service.get_mentor(db, mentor_id)
    return await learning_service.list_for_mentor(db, mentor_id)
