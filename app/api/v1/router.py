# app/api/v1/router.py
from fastapi import APIRouter
from app.modules.users.router import router as users_router
from app.modules.mentors.router import router as mentors_router
from app.modules.requests.router import router as requests_router
from app.modules.learnings.router import router as learnings_router

api_router = APIRouter()

api_router.include_router(users_router,     prefix="/users",     tags=["users"])
api_router.include_router(mentors_router,   prefix="/mentors",   tags=["mentors"])
api_router.include_router(requests_router,  prefix="/requests",  tags=["requests"])
api_router.include_router(learnings_router, prefix="/learnings", tags=["learnings"])
