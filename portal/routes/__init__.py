"""APIRouter registration for the modification questionnaire portal."""

from __future__ import annotations

from fastapi import APIRouter

from portal.routes.journeys import router as journeys_router
from portal.routes.questions import router as questions_router

api_router = APIRouter()
api_router.include_router(questions_router, tags=["Rules"])
api_router.include_router(journeys_router, tags=["Navigation"])

__all__ = ["api_router"]
