"""
Constants and field definitions for the sprint report refresh.

Defines the fields, states, limits and defaults shared by the API client,
the aggregator and the report writer.
"""

from typing import List


# ============================================================================
# Field Reference Names
# ============================================================================

class FieldNames:
    """Azure DevOps field reference names."""

    ID = "System.Id"
    TITLE = "System.Title"
    STATE = "System.State"
    ASSIGNED_TO = "System.AssignedTo"
    WORK_ITEM_TYPE = "System.WorkItemType"
    ITERATION_PATH = "System.IterationPath"
    STORY_POINTS = "Microsoft.VSTS.Scheduling.StoryPoints"


# Fields requested for every work item in the report
REPORT_FIELDS: List[str] = [
    FieldNames.ID,
    FieldNames.TITLE,
    FieldNames.STATE,
    FieldNames.ASSIGNED_TO,
    FieldNames.STORY_POINTS,
    FieldNames.WORK_ITEM_TYPE,
]


# ============================================================================
# API
# ============================================================================

class ApiSettings:
    """REST API settings."""

    VERSION = "7.0"
    DEFAULT_BASE_URL = "https://dev.azure.com"


class QueryLimits:
    """Limits imposed by the work items endpoint."""

    # Maximum ids per GET _apis/wit/workitems call
    BATCH_SIZE = 200


# ============================================================================
# Work Item Types and States
# ============================================================================

class WorkItemTypes:
    """Work item types included in the sprint report."""

    USER_STORY = "User Story"
    BUG = "Bug"

    REPORTED_TYPES = (USER_STORY, BUG)


class WorkItemStates:
    """States used to score sprint progress."""

    CLOSED = "Closed"
    DONE = "Done"
    RESOLVED = "Resolved"
    READY_FOR_QA = "Ready for QA"
    IN_QA = "In QA"
    READY_FOR_REVIEW = "Ready for Review"

    # Full credit
    CLOSED_STATES = frozenset({CLOSED, DONE, RESOLVED})

    # Partial credit: in QA or review
    PARTIAL_CREDIT_STATES = frozenset({READY_FOR_QA, IN_QA, READY_FOR_REVIEW})


# Share of a partial-credit item's points counted as completed
PARTIAL_CREDIT_WEIGHT = 0.75


# ============================================================================
# Report Defaults
# ============================================================================

# Sprint specifier selecting the sprint that contains today
CURRENT_SPRINT = "current"

# Focus area extraction
FOCUS_AREA_MAX_LENGTH = 20
FOCUS_AREA_MIN_LENGTH = 4
FOCUS_AREAS_SHOWN = 3

# Developers tracked by default (QA and PMs are left out)
DEFAULT_DEVELOPERS: List[str] = [
    'Dan Morris',
    'Aparna Gupta',
    'Vinay Patel',
    'Sandip Pandya',
    'Rajini Matharasi',
    'Nosa Odaro',
    'Nosa',
]

DEFAULT_ORGANIZATION = "mi-devops"
DEFAULT_PROJECT = "Mi-Case_eLicensing"
DEFAULT_TEAM = "Licensing"
DEFAULT_REPORT_PATH = "index.html"


# ============================================================================
# Helper Functions
# ============================================================================

def fields_to_string(fields: List[str]) -> str:
    """
    Convert field list to comma-separated string for Azure DevOps API.

    Args:
        fields: List of field names

    Returns:
        Comma-separated field names
    """
    return ','.join(fields)


def format_wiql_fields(fields: List[str]) -> str:
    """
    Format field list for WIQL SELECT clause.

    Args:
        fields: List of field names

    Returns:
        Formatted field list for WIQL (e.g., "[System.Id], [System.Title]")
    """
    return ', '.join(f'[{field}]' for field in fields)
