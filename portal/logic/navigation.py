"""Section navigation for the modification wizard.

Resolves where the wizard goes next, where "Back" points, and where
"Back" from the review screen lands. A journey is an externally supplied
list of sections; it is ordered by category (first appearance) and then by
sequence number within the category.

Forward movement is conditional: a mandatory section with no answers holds
the user in place so the caller funnels them to review. Back from review is a
non-local jump to the first mandatory section still missing answers, or to
the last section when every mandatory section has been answered.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence
import logging

from portal.config import NavigationConfig
from portal.logic.answer_state import section_has_answers
from portal.models.navigation import NavigationState, RouteTarget, Section, WizardContext
from portal.models.questionnaire import Question

logger = logging.getLogger(__name__)


class SectionNotFoundError(LookupError):
    """Raised when the current section id is not part of the journey."""

    def __init__(self, section_id: str) -> None:
        super().__init__(f"section not found: {section_id}")
        self.section_id = section_id


def ordered_sections(sections: Optional[Iterable[Section]]) -> list[Section]:
    if sections is None:
        raise ValueError("sections_required")
    items = list(sections)
    category_rank: dict[str, int] = {}
    for s in items:
        category_rank.setdefault(s.category_id, len(category_rank))
    return sorted(items, key=lambda s: (category_rank[s.category_id], s.sequence))


def _index_of(ordered: Sequence[Section], section_id: str) -> int:
    for i, s in enumerate(ordered):
        if s.section_id == section_id:
            return i
    raise SectionNotFoundError(section_id)


def _section_parameters(section: Section, context: WizardContext) -> dict:
    return {
        "projectRecordId": context.project_record_id,
        "categoryId": section.category_id,
        "sectionId": section.section_id,
    }


def resolve_forward_navigation(
    sections: Optional[Iterable[Section]],
    current_section_id: str,
    has_answers: Callable[[str], bool],
) -> NavigationState:
    """Compute previous/current/next stages around the current section.

    `has_answers(section_id)` must report whether the section has at least
    one non-missing answer; it is only consulted for mandatory sections.
    """
    ordered = ordered_sections(sections)
    index = _index_of(ordered, current_section_id)
    current = ordered[index]
    previous = ordered[index - 1] if index > 0 else None
    following = ordered[index + 1] if index + 1 < len(ordered) else None

    if current.is_mandatory and not has_answers(current.section_id):
        logger.info(
            "navigation_hold_mandatory section_id=%s category_id=%s",
            current.section_id,
            current.category_id,
        )
        return NavigationState(
            previous_stage=current.section_id,
            previous_category=current.category_id,
            previous_section=current,
            current_stage=current.section_id,
            current_category=current.category_id,
            current_section=current,
        )

    state = NavigationState(
        previous_stage=previous.section_id if previous else "",
        previous_category=previous.category_id if previous else "",
        previous_section=previous,
        current_stage=current.section_id,
        current_category=current.category_id,
        current_section=current,
        next_stage=following.section_id if following else "",
        next_category=following.category_id if following else "",
        next_section=following,
    )
    logger.debug(
        "navigation_resolved previous=%s current=%s next=%s",
        state.previous_stage,
        state.current_stage,
        state.next_stage,
    )
    return state


def resolve_backward_from_review(
    sections: Optional[Iterable[Section]],
    questions: Sequence[Question],
    context: Optional[WizardContext] = None,
    routes: Optional[NavigationConfig] = None,
) -> RouteTarget:
    """Find where "Back" from the review screen should land.

    Walks the journey in order and stops at the first mandatory section
    without any answer, or at the last (highest sequence) section.
    """
    context = context or WizardContext()
    routes = routes or NavigationConfig()
    candidates = [s for s in ordered_sections(sections) if not s.is_review]
    if not candidates:
        raise ValueError("sections_required")

    # highest sequence across all categories; when sequences restart per
    # category the scan ends at that section, not at the end of the journey
    last = max(candidates, key=lambda s: s.sequence)
    target = candidates[0]
    for section in candidates:
        target = section
        if section.section_id == last.section_id:
            break
        if section.is_mandatory and not section_has_answers(questions, section.section_id):
            logger.info("back_from_review_incomplete section_id=%s", section.section_id)
            break

    return RouteTarget(
        route_name=routes.section_route(target.static_view_name),
        parameters=_section_parameters(target, context),
        text=routes.back_text,
    )


def resolve_back_navigation(
    navigation: Optional[NavigationState],
    context: Optional[WizardContext] = None,
    routes: Optional[NavigationConfig] = None,
) -> RouteTarget:
    """Back link to the previous section, or to the area-of-change page."""
    context = context or WizardContext()
    routes = routes or NavigationConfig()
    previous = navigation.previous_section if navigation else None
    if previous is None:
        return RouteTarget(route_name=routes.area_of_change_route, text=routes.back_text)
    return RouteTarget(
        route_name=routes.section_route(previous.static_view_name),
        parameters=_section_parameters(previous, context),
        text=routes.back_text,
    )


def resolve_back_navigation_for_review(
    context: Optional[WizardContext] = None,
    routes: Optional[NavigationConfig] = None,
) -> RouteTarget:
    """Back link while a change is being made from the review page."""
    context = context or WizardContext()
    routes = routes or NavigationConfig()
    return RouteTarget(
        route_name=routes.review_route,
        parameters={"projectRecordId": context.project_record_id},
        text=routes.back_text,
    )


def resolve_back_target(
    navigation: Optional[NavigationState],
    sections: Optional[Iterable[Section]],
    questions: Sequence[Question],
    context: Optional[WizardContext] = None,
    back_from_review: bool = False,
    review_in_progress: bool = False,
    routes: Optional[NavigationConfig] = None,
) -> RouteTarget:
    if review_in_progress and not back_from_review:
        return resolve_back_navigation_for_review(context, routes)
    if back_from_review and not review_in_progress:
        return resolve_backward_from_review(sections, questions, context, routes)
    return resolve_back_navigation(navigation, context, routes)


def resolve_next_step(
    navigation: NavigationState,
    context: Optional[WizardContext] = None,
    review_in_progress: bool = False,
    routes: Optional[NavigationConfig] = None,
) -> RouteTarget:
    """Decide between the review page and the next section after saving."""
    context = context or WizardContext()
    routes = routes or NavigationConfig()
    review = RouteTarget(
        route_name=routes.review_route,
        parameters={
            "projectRecordId": context.project_record_id,
            "specificAreaOfChangeId": context.specific_area_of_change_id,
            "modificationChangeId": context.modification_change_id,
        },
    )
    following = navigation.next_section
    if (
        not navigation.has_next
        or following is None
        or following.is_review
        or following.is_last_section_before_review
    ):
        return review

    current = navigation.current_section
    if current is not None and current.is_mandatory:
        # leaving a completed mandatory section keeps the review flag on the link
        parameters = {**_section_parameters(following, context), "reviewAnswers": review_in_progress}
        return RouteTarget(route_name=routes.section_route(following.static_view_name), parameters=parameters)

    if review_in_progress:
        return review
    return RouteTarget(
        route_name=routes.section_route(following.static_view_name),
        parameters=_section_parameters(following, context),
    )


__all__ = [
    "SectionNotFoundError",
    "ordered_sections",
    "resolve_forward_navigation",
    "resolve_backward_from_review",
    "resolve_back_navigation",
    "resolve_back_navigation_for_review",
    "resolve_back_target",
    "resolve_next_step",
]
