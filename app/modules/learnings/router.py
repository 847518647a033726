from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user, get_db
from app.modules.users.models import User
from app.modules.learnings import schemas as s
from app.modules.learnings import service

router = APIRouter()


@router.get("", response_model=List[s.LearningOut])
async def list_my_learnings(
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.list_for_user(db, me.id)


@router.get("/{learning_id}", response_model=s.LearningOut)
async def get_learning(
    learning_id: int,
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.get(db, learning_id, me)


@router.get("/{learning_id}/progress", response_model=s.ProgressOut)
async def get_progress(
    learning_id: int,
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.get_progress(db, learning_id, me)


# =============== PLAN ===============
@router.post("/{learning_id}/plan", response_model=s.LearningOut, status_code=status.HTTP_201_CREATED)
async def add_plan_item(
    learning_id: int,
    payload: s.PlanItemCreate,
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.add_plan_item(db, learning_id, me, payload.text)


@router.put("/{learning_id}/plan", response_model=s.LearningOut)
async def replace_plan(
    learning_id: int,
    payload: s.PlanReplace,
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.replace_plan(db, learning_id, me, payload.plan)


@router.put("/{learning_id}/plan/{item_id}", response_model=s.LearningOut)
async def update_plan_item(
    learning_id: int,
    item_id: str,
    payload: s.PlanItemUpdate,
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.update_plan_item(
        db, learning_id, me, item_id, text=payload.text, completed=payload.completed
    )


@router.patch("/{learning_id}/plan/{item_id}/toggle", response_model=s.LearningOut)
async def toggle_plan_item(
    learning_id: int,
    item_id: str,
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.toggle_plan_item(db, learning_id, me, item_id)


@router.delete("/{learning_id}/plan/{item_id}", response_model=s.LearningOut)
async def remove_plan_item(
    learning_id: int,
    item_id: str,
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.remove_plan_item(db, learning_id, me, item_id)


# =============== NOTES / COMPLETION ===============
@router.put("/{learning_id}/notes", response_model=s.LearningOut)
async def update_notes(
    learning_id: int,
    payload: s.NotesUpdate,
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.update_notes(db, learning_id, me, payload.notes)


@router.post("/{learning_id}/complete", response_model=s.LearningOut)
async def complete_learning(
    learning_id: int,
    payload: s.CompleteIn,
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.complete(db, learning_id, me, payload.rating, payload.comment)
