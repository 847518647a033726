from __future__ import annotations
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from app.core.schemas import APIModel


# ====================== PLAN ======================

class PlanItemOut(APIModel):
    id: str
    text: str
    completed: bool = False


class PlanItemCreate(APIModel):
    text: str = Field(..., max_length=500)


class PlanItemIn(APIModel):
    # ids that are not already in the plan are replaced by server-minted ones
    id: Optional[str] = None
    text: str = Field(..., max_length=500)
    completed: bool = False


class PlanItemUpdate(APIModel):
    text: Optional[str] = Field(None, max_length=500)
    completed: Optional[bool] = None


class PlanReplace(APIModel):
    plan: List[PlanItemIn]


# ====================== NOTES / FEEDBACK ======================

class NotesUpdate(APIModel):
    notes: str


class FeedbackOut(APIModel):
    rating: int
    comment: str


class CompleteIn(APIModel):
    # range is checked by the service so the caller gets a validation_error code
    rating: int
    comment: str = ""


# ====================== LEARNING PROCESS ======================

class LearningOut(APIModel):
    id: int
    request_id: int
    user_id: int
    mentor_id: int
    mentor_name: str
    mentor_email: str
    mentor_telegram: Optional[str] = None
    mentor_job_title: str
    topic: str
    status: str
    start_date: datetime
    end_date: Optional[datetime] = None
    plan: List[PlanItemOut] = []
    notes: Optional[str] = None
    feedback: Optional[FeedbackOut] = None
    progress: float
    created_at: datetime
    updated_at: datetime


class ProgressOut(APIModel):
    progress: float
    completed_items: int
    total_items: int
