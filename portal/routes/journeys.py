"""Journey navigation endpoints.

Implements:
- GET /api/v1/journeys/{journey_id}
  - Returns the journey's sections in navigation order
- POST /api/v1/journeys/{journey_id}/navigation
  - Hydrates the journey with respondent answers, clears answers that no
    longer apply, then resolves the navigation state and the next step
- POST /api/v1/journeys/{journey_id}/back-link
  - Resolves where the "Back" link points, including back from review
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from portal.config import NavigationConfig
from portal.logic.answer_state import (
    has_answers_predicate,
    reset_inapplicable_answers,
    update_with_respondent_answers,
)
from portal.logic.journey_store import fresh_questions, get_journey
from portal.logic.navigation import (
    ordered_sections,
    resolve_back_target,
    resolve_forward_navigation,
    resolve_next_step,
)
from portal.logic.problem_factory import problem_journey_invalid
from portal.models.api import BackLinkRequest, JourneyView, NavigationRequest, NavigationResult
from portal.models.navigation import RouteTarget

router = APIRouter()
logger = logging.getLogger(__name__)


def _routes(request: Request) -> NavigationConfig:
    config = getattr(request.app.state, "config", None)
    return config.navigation if config is not None else NavigationConfig()


@router.get(
    "/api/v1/journeys/{journey_id}",
    summary="Get the ordered sections of a journey",
    operation_id="getJourney",
    response_model=JourneyView,
)
def get_journey_view(journey_id: str) -> JourneyView:
    journey = get_journey(journey_id)
    return JourneyView(
        journey_id=journey.journey_id,
        version=journey.version,
        sections=ordered_sections(journey.sections),
    )


@router.post(
    "/api/v1/journeys/{journey_id}/navigation",
    summary="Resolve navigation after saving a section",
    operation_id="resolveNavigation",
    response_model=NavigationResult,
)
def resolve_navigation(journey_id: str, body: NavigationRequest, request: Request) -> NavigationResult:
    journey = get_journey(journey_id)
    questions = fresh_questions(journey)
    update_with_respondent_answers(questions, body.answers)
    cleared = reset_inapplicable_answers(questions)

    navigation = resolve_forward_navigation(
        journey.sections,
        body.current_section_id,
        has_answers_predicate(questions),
    )
    next_step = resolve_next_step(
        navigation,
        body.context,
        review_in_progress=body.review_in_progress,
        routes=_routes(request),
    )
    logger.info(
        "navigation_request journey_id=%s current=%s next=%s route=%s",
        journey_id,
        navigation.current_stage,
        navigation.next_stage,
        next_step.route_name,
    )
    return NavigationResult(navigation=navigation, next_step=next_step, reset_question_ids=cleared)


@router.post(
    "/api/v1/journeys/{journey_id}/back-link",
    summary="Resolve the Back link target",
    operation_id="resolveBackLink",
    response_model=RouteTarget,
)
def resolve_back_link(journey_id: str, body: BackLinkRequest, request: Request) -> RouteTarget:
    journey = get_journey(journey_id)
    questions = fresh_questions(journey)
    update_with_respondent_answers(questions, body.answers)
    reset_inapplicable_answers(questions)
    try:
        return resolve_back_target(
            body.navigation,
            journey.sections,
            questions,
            body.context,
            back_from_review=body.back_from_review,
            review_in_progress=body.review_in_progress,
            routes=_routes(request),
        )
    except ValueError as e:
        logger.warning("back_link_unresolvable journey_id=%s reason=%s", journey_id, e)
        raise HTTPException(status_code=409, detail=problem_journey_invalid(str(e))) from e


__all__ = ["router"]
