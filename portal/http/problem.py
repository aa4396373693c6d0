"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and handler callables that turn engine and
framework errors into application/problem+json responses.
"""

from __future__ import annotations

import logging
from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from portal.logic.journey_store import JourneyNotFoundError
from portal.logic.navigation import SectionNotFoundError
from portal.logic.problem_factory import (
    problem_http,
    problem_internal_error,
    problem_journey_not_found,
    problem_request_validation,
    problem_section_not_found,
)

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def _problem_response(problem: dict) -> JSONResponse:
    return JSONResponse(problem, status_code=int(problem["status"]), media_type=PROBLEM_MEDIA_TYPE)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    if isinstance(exc.detail, dict):
        problem = dict(exc.detail)
        problem.setdefault("status", exc.status_code)
    else:
        problem = problem_http(exc.status_code, str(exc.detail))
    return JSONResponse(
        problem,
        status_code=exc.status_code,
        media_type=PROBLEM_MEDIA_TYPE,
        headers=getattr(exc, "headers", None),
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    return _problem_response(problem_request_validation(jsonable_encoder(exc.errors())))


async def handle_journey_not_found(request: Request, exc: JourneyNotFoundError) -> JSONResponse:  # noqa: D401
    return _problem_response(problem_journey_not_found(exc.journey_id))


async def handle_section_not_found(request: Request, exc: SectionNotFoundError) -> JSONResponse:  # noqa: D401
    return _problem_response(problem_section_not_found(exc.section_id))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return _problem_response(problem_internal_error())


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_journey_not_found",
    "handle_section_not_found",
    "handle_unexpected_error",
]
