"""
Sprint/Iteration service for the sprint report refresh
Resolves which iteration the report is built for
"""
import logging
from datetime import datetime
from typing import List, Optional

from ..constants import CURRENT_SPRINT
from ..errors import SprintNotFound
from ..models import Iteration

logger = logging.getLogger(__name__)


def find_current_iteration(iterations: List[Iteration], now: datetime) -> Optional[Iteration]:
    """
    Find the iteration running at `now`, or else the next one to start.

    Iterations without dates are ignored. Both ends of the date range are
    inclusive. Among upcoming iterations the earliest start wins; on a tie
    the first one listed is used.
    """
    for iteration in iterations:
        if iteration.start_date is None or iteration.finish_date is None:
            continue
        if iteration.start_date <= now <= iteration.finish_date:
            return iteration

    upcoming = None
    for iteration in iterations:
        if iteration.start_date is None or iteration.start_date <= now:
            continue
        if upcoming is None or iteration.start_date < upcoming.start_date:
            upcoming = iteration
    return upcoming


def find_named_iteration(iterations: List[Iteration], name: str) -> Optional[Iteration]:
    """Find an iteration by exact name, falling back to a substring of its path."""
    for iteration in iterations:
        if iteration.name == name:
            return iteration

    for iteration in iterations:
        if name in iteration.path:
            return iteration
    return None


def resolve_iteration(
    iterations: List[Iteration],
    specifier: str,
    now: datetime
) -> Iteration:
    """
    Select the iteration the report is built for.

    Args:
        iterations: Team iterations, in any order
        specifier: "current", or a sprint name / path fragment
        now: Timezone-aware reference time

    Returns:
        The selected iteration

    Raises:
        SprintNotFound: If nothing matches
    """
    if specifier == CURRENT_SPRINT:
        iteration = find_current_iteration(iterations, now)
    else:
        iteration = find_named_iteration(iterations, specifier)

    if iteration is None:
        raise SprintNotFound(specifier, available=[i.name for i in iterations])

    return iteration


class SprintService:
    """Service for iteration lookups"""

    def __init__(self, client):
        """
        Initialize sprint service

        Args:
            client: AzureDevOpsClient instance
        """
        self.client = client

    async def find_sprint(self, specifier: str, now: datetime) -> Iteration:
        """
        Fetch the team's iterations and pick the target sprint

        Args:
            specifier: "current", or a sprint name / path fragment
            now: Timezone-aware reference time

        Returns:
            The selected iteration
        """
        logger.info("Fetching iterations from Azure DevOps...")
        iterations = await self.client.get_iterations()
        logger.debug(f"Team {self.client.team} has {len(iterations)} iterations")

        iteration = resolve_iteration(iterations, specifier, now)

        logger.info(f"Refreshing data for: {iteration.name}")
        logger.info(f"Path: {iteration.path}")
        return iteration
