from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field

from app.core.schemas import APIModel


class UserOut(APIModel):
    id: int
    name: str
    email: EmailStr
    role: str
    department: Optional[str] = None
    job_title: Optional[str] = None
    telegram: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserProfileUpdate(APIModel):
    # email and role are owned by the identity provider
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    department: Optional[str] = Field(None, max_length=200)
    job_title: Optional[str] = Field(None, max_length=200)
    telegram: Optional[str] = Field(None, max_length=100)
