from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field

from app.core.schemas import APIModel


class MentorCreate(APIModel):
    name: str = Field(..., min_length=1, max_length=200)
    job_title: str = Field(..., min_length=1, max_length=200)
    experience: str = ""
    email: EmailStr
    telegram: Optional[str] = Field(None, max_length=100)
    avatar: Optional[str] = Field(None, max_length=500)


class MentorOut(APIModel):
    id: int
    name: str
    job_title: str
    experience: str
    workload: int
    email: EmailStr
    telegram: Optional[str] = None
    avatar: Optional[str] = None
    is_available: bool
    created_at: datetime
