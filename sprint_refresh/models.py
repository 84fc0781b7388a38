"""
Data models for the sprint report refresh
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from .constants import FieldNames


def parse_api_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp from the API; naive values are taken as UTC."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Iteration:
    """Represents a sprint/iteration"""
    name: str
    path: str
    start_date: Optional[datetime] = None
    finish_date: Optional[datetime] = None

    @classmethod
    def from_api(cls, record: Dict[str, Any]) -> 'Iteration':
        """Build from a teamsettings/iterations record."""
        attributes = record.get('attributes') or {}
        return cls(
            name=record.get('name', ''),
            path=record.get('path', ''),
            start_date=parse_api_datetime(attributes.get('startDate')),
            finish_date=parse_api_datetime(attributes.get('finishDate')),
        )


@dataclass(frozen=True)
class WorkItem:
    """Represents an Azure DevOps work item"""
    id: int
    title: str
    state: Optional[str] = None
    assigned_to: Optional[str] = None
    story_points: Optional[float] = None
    work_item_type: Optional[str] = None

    @classmethod
    def from_api(cls, record: Dict[str, Any]) -> 'WorkItem':
        """Build from a wit/workitems record ({id, fields: {...}})."""
        fields = record.get('fields') or {}

        assigned_to = fields.get(FieldNames.ASSIGNED_TO)
        if isinstance(assigned_to, dict):
            assigned_to = assigned_to.get('displayName')

        return cls(
            id=record.get('id'),
            title=fields.get(FieldNames.TITLE) or '',
            state=fields.get(FieldNames.STATE),
            assigned_to=assigned_to or None,
            story_points=fields.get(FieldNames.STORY_POINTS),
            work_item_type=fields.get(FieldNames.WORK_ITEM_TYPE),
        )


@dataclass
class ItemSummary:
    """One work item as shown in a developer's story list"""
    id: int
    title: str
    points: float
    state: Optional[str]
    type: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'points': self.points,
            'state': self.state,
            'type': self.type,
        }


@dataclass
class DeveloperAggregate:
    """Work items attributed to one developer during a run"""
    name: str
    items: List[ItemSummary] = field(default_factory=list)
    points: float = 0
    stories: int = 0
    # dict keys keep insertion order, values unused
    focus_areas: Dict[str, None] = field(default_factory=dict)

    def add(self, item: ItemSummary, focus_area: Optional[str] = None):
        self.items.append(item)
        self.points += item.points
        self.stories += 1
        if focus_area:
            self.focus_areas.setdefault(focus_area, None)


@dataclass
class DeveloperSummary:
    """Represents one row of the sprint points table"""
    name: str
    points: float
    stories: int
    focus: str
    progress: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'points': self.points,
            'stories': self.stories,
            'focus': self.focus,
            'progress': self.progress,
        }


@dataclass
class SprintReport:
    """Represents the data written into the report for one sprint"""
    sprint_name: str
    iteration_path: str
    sprint_points: List[DeveloperSummary]
    dev_stories: Dict[str, List[ItemSummary]]
