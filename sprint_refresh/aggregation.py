"""
Per-developer aggregation and progress scoring for a sprint.
"""
import math
import re
from fractions import Fraction
from typing import Dict, Iterable, List, Optional

from .constants import (
    FOCUS_AREA_MAX_LENGTH,
    FOCUS_AREA_MIN_LENGTH,
    FOCUS_AREAS_SHOWN,
    PARTIAL_CREDIT_WEIGHT,
    WorkItemStates,
)
from .models import (
    DeveloperAggregate,
    DeveloperSummary,
    ItemSummary,
    SprintReport,
    WorkItem,
)

# Leading run of the title up to the first colon or hyphen
_FOCUS_PATTERN = re.compile(r'^([^:-]+)')


def filter_developer_items(items: Iterable[WorkItem], developers: Iterable[str]) -> List[WorkItem]:
    """
    Keep items whose assignee display name contains one of `developers`.

    Matching is a case-sensitive substring test. Unassigned items are dropped.
    """
    developers = list(developers)
    return [
        item for item in items
        if item.assigned_to and any(name in item.assigned_to for name in developers)
    ]


def extract_focus_area(title: Optional[str]) -> Optional[str]:
    """
    Derive a short focus area label from a work item title.

    "Billing: fix invoice total" -> "Billing". Titles without a delimiter
    use the whole title. The label is truncated to 20 characters and
    discarded unless it is longer than 3.
    """
    match = _FOCUS_PATTERN.match(title or '')
    if not match:
        return None

    focus = match.group(1).strip()[:FOCUS_AREA_MAX_LENGTH]
    if len(focus) < FOCUS_AREA_MIN_LENGTH:
        return None
    return focus


def summarize_item(item: WorkItem) -> ItemSummary:
    return ItemSummary(
        id=item.id,
        title=item.title,
        points=item.story_points or 0,
        state=item.state,
        type=item.work_item_type,
    )


def group_by_developer(items: Iterable[WorkItem]) -> Dict[str, DeveloperAggregate]:
    """
    Group work items by exact assignee display name.

    Returns:
        Aggregates keyed by name, in order of first appearance
    """
    developers: Dict[str, DeveloperAggregate] = {}

    for item in items:
        if not item.assigned_to:
            continue

        developer = developers.get(item.assigned_to)
        if developer is None:
            developer = developers[item.assigned_to] = DeveloperAggregate(name=item.assigned_to)

        developer.add(summarize_item(item), extract_focus_area(item.title))

    return developers


def round_half_up(value: Fraction) -> int:
    """Round to the nearest integer, halves going up (12.5 -> 13)."""
    return math.floor(value + Fraction(1, 2))


def calculate_progress(items: Iterable[ItemSummary]) -> int:
    """
    Calculate a developer's completion percentage.

    Closed items count fully, items in QA or review count at 75% of their
    points, anything else counts 0. Returns 0 when there are no points.
    """
    weight = Fraction(PARTIAL_CREDIT_WEIGHT)
    total_points = Fraction(0)
    completed_points = Fraction(0)

    for item in items:
        points = Fraction(item.points or 0)
        total_points += points

        if item.state in WorkItemStates.CLOSED_STATES:
            completed_points += points
        elif item.state in WorkItemStates.PARTIAL_CREDIT_STATES:
            completed_points += points * weight

    if total_points <= 0:
        return 0
    return round_half_up(completed_points / total_points * 100)


def build_sprint_points(developers: Dict[str, DeveloperAggregate]) -> List[DeveloperSummary]:
    """One summary row per developer, most points first (ties keep grouping order)."""
    summaries = [
        DeveloperSummary(
            name=developer.name,
            points=developer.points,
            stories=developer.stories,
            focus=', '.join(list(developer.focus_areas)[:FOCUS_AREAS_SHOWN]),
            progress=calculate_progress(developer.items),
        )
        for developer in developers.values()
    ]
    return sorted(summaries, key=lambda summary: summary.points, reverse=True)


def build_dev_stories(developers: Dict[str, DeveloperAggregate]) -> Dict[str, List[ItemSummary]]:
    return {name: list(developer.items) for name, developer in developers.items()}


def build_sprint_report(
    sprint_name: str,
    iteration_path: str,
    items: Iterable[WorkItem]
) -> SprintReport:
    """
    Aggregate a sprint's developer work items into report data.

    Args:
        sprint_name: Iteration name, used as the report block key
        iteration_path: Full iteration path
        items: Developer work items (already filtered)

    Returns:
        SprintReport with the points table and per-developer story lists
    """
    developers = group_by_developer(items)
    return SprintReport(
        sprint_name=sprint_name,
        iteration_path=iteration_path,
        sprint_points=build_sprint_points(developers),
        dev_stories=build_dev_stories(developers),
    )
