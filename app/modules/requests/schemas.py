from __future__ import annotations
from datetime import datetime
from pydantic import Field

from app.core.schemas import APIModel


class RequestCreate(APIModel):
    topic: str = Field(..., max_length=300)
    description: str


class RequestUpdate(APIModel):
    topic: str = Field(..., max_length=300)
    description: str


class RequestOut(APIModel):
    id: int
    user_id: int
    topic: str
    description: str
    status: str
    created_at: datetime
    updated_at: datetime


class AssignMentorIn(APIModel):
    mentor_id: int
