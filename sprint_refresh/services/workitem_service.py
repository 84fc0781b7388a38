"""
Work Item service for the sprint report refresh
Fetches a sprint's stories and bugs and keeps the developers' share
"""
import logging
from typing import List

from ..aggregation import filter_developer_items
from ..models import WorkItem

logger = logging.getLogger(__name__)


class WorkItemService:
    """Service for sprint work item retrieval"""

    def __init__(self, client, developers: List[str]):
        """
        Initialize work item service

        Args:
            client: AzureDevOpsClient instance
            developers: Allow-list of developer names (substring match)
        """
        self.client = client
        self.developers = list(developers)

    async def get_sprint_work_items(self, iteration_path: str) -> List[WorkItem]:
        """
        Get every story and bug in a sprint

        Args:
            iteration_path: Full iteration path of the sprint

        Returns:
            List of work items, empty when the sprint has none
        """
        logger.info("Fetching work items...")
        ids = await self.client.query_work_item_ids(iteration_path)
        logger.info(f"Found {len(ids)} work items")

        if not ids:
            return []

        logger.info("Fetching work item details...")
        return await self.client.get_work_items(ids)

    def get_developer_work_items(self, items: List[WorkItem]) -> List[WorkItem]:
        """Keep only items assigned to a tracked developer (QA, PMs etc. are dropped)."""
        developer_items = filter_developer_items(items, self.developers)
        logger.info(f"Found {len(developer_items)} developer work items")
        return developer_items
