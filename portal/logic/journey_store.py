"""Central in-memory journey registry.

Holds parsed journeys keyed by journey id. Populated once at start-up from
the configured journeys file (or directly by tests) and only read while
serving requests. Question templates are copied per request so answer state
is never shared between requests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List
import logging

from portal.logic.question_set_builder import load_journey_file
from portal.models.journey import Journey
from portal.models.questionnaire import Question

logger = logging.getLogger(__name__)

# journey_id -> Journey
JOURNEYS: Dict[str, Journey] = {}


class JourneyNotFoundError(LookupError):
    def __init__(self, journey_id: str) -> None:
        super().__init__(f"journey not found: {journey_id}")
        self.journey_id = journey_id


def register_journey(journey: Journey) -> None:
    if journey.journey_id in JOURNEYS:
        logger.info("journey_replaced journey_id=%s", journey.journey_id)
    JOURNEYS[journey.journey_id] = journey


def get_journey(journey_id: str) -> Journey:
    try:
        return JOURNEYS[journey_id]
    except KeyError:
        raise JourneyNotFoundError(journey_id) from None


def load_journeys_from_file(path: str | Path) -> List[str]:
    """Register every journey in the file and return their ids."""
    journeys = load_journey_file(path)
    for journey in journeys:
        register_journey(journey)
    ids = [j.journey_id for j in journeys]
    logger.info("journeys_loaded path=%s ids=%s", path, ids)
    return ids


def clear_journeys() -> None:
    JOURNEYS.clear()


def fresh_questions(journey: Journey) -> List[Question]:
    """Deep copy of the journey's question template for one request."""
    return [q.model_copy(deep=True) for q in journey.questions]


__all__ = [
    "JOURNEYS",
    "JourneyNotFoundError",
    "register_journey",
    "get_journey",
    "load_journeys_from_file",
    "clear_journeys",
    "fresh_questions",
]
