"""Centralised construction of problem+json payloads.

Route modules and exception handlers build error bodies through these
helpers so codes and titles are not scattered as string literals.
"""

from __future__ import annotations

from typing import Any, Dict, List
import logging


logger = logging.getLogger(__name__)


def _problem(title: str, status: int, detail: str, code: str, **extra: Any) -> Dict[str, Any]:
    problem: Dict[str, Any] = {
        "title": title,
        "status": status,
        "detail": detail,
        "code": code,
    }
    problem.update(extra)
    logger.info("error_handler.handle code=%s status=%s", code, status)
    return problem


def problem_journey_not_found(journey_id: str) -> Dict[str, Any]:
    """Return a 404 problem for a journey id that is not registered."""
    return _problem("Not Found", 404, f"journey not found: {journey_id}", "JOURNEY_NOT_FOUND")


def problem_section_not_found(section_id: str) -> Dict[str, Any]:
    """Return a 404 problem for a section id outside the active journey."""
    return _problem("Not Found", 404, f"section not found: {section_id}", "SECTION_NOT_FOUND")


def problem_journey_invalid(detail: str) -> Dict[str, Any]:
    """Return a 409 problem when a journey cannot be navigated (e.g. no sections)."""
    return _problem("Conflict", 409, detail, "JOURNEY_INVALID")


def problem_request_validation(errors: List[Any]) -> Dict[str, Any]:
    return _problem(
        "Invalid Request",
        422,
        "Request validation failed",
        "REQUEST_VALIDATION_FAILED",
        errors=errors,
    )


def problem_http(status: int, detail: str) -> Dict[str, Any]:
    return _problem("Error", status, detail, "HTTP_ERROR")


def problem_internal_error() -> Dict[str, Any]:
    return _problem("Internal Server Error", 500, "An unexpected error occurred", "INTERNAL_ERROR")


__all__ = [
    "problem_journey_not_found",
    "problem_section_not_found",
    "problem_journey_invalid",
    "problem_request_validation",
    "problem_http",
    "problem_internal_error",
]
