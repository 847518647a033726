from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, get_current_user, get_current_admin
from app.modules.users.models import User
from app.modules.assignments import service as assignment_service
from app.modules.learnings.schemas import LearningOut
from . import service
from .schemas import RequestCreate, RequestUpdate, RequestOut, AssignMentorIn

router = APIRouter()


# IMPORTANT: no "/" on the root path to avoid 307 -> 404
@router.post("", response_model=RequestOut, status_code=status.HTTP_201_CREATED)
async def create_request(
    payload: RequestCreate,
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.create_request(db, me, payload.topic, payload.description)


@router.get("/my", response_model=List[RequestOut])
async def list_my_requests(
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.list_requests_for_user(db, me.id)


@router.get("", response_model=List[RequestOut])
async def list_all_requests(
    status_filter: Optional[str] = Query(None, alias="status", description="pending | approved | rejected"),
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    return await service.list_all_requests(db, status_filter)


@router.get("/{request_id}", response_model=RequestOut)
async def get_request(
    request_id: int,
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.get_request(db, request_id, me)


@router.put("/{request_id}", response_model=RequestOut)
async def update_request(
    request_id: int,
    payload: RequestUpdate,
    db: AsyncSession = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return await service.update_request(db, request_id, me, payload.topic, payload.description)


@router.post("/{request_id}/assign", response_model=LearningOut, status_code=status.HTTP_201_CREATED)
async def assign_mentor(
    request_id: int,
    payload: AssignMentorIn,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return await assignment_service.assign(db, request_id, payload.mentor_id, admin)


@router.post("/{request_id}/reject", response_model=RequestOut)
async def reject_request(
    request_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return await service.reject(db, request_id, admin)
