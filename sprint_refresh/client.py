"""
Azure DevOps REST client for the sprint report refresh
Reads iterations, runs the sprint WIQL query and fetches work item details
"""
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from azure.devops.v7_1.work_item_tracking.models import Wiql

from .auth import AzureDevOpsAuth
from .constants import (
    ApiSettings,
    FieldNames,
    QueryLimits,
    REPORT_FIELDS,
    WorkItemTypes,
    fields_to_string,
    format_wiql_fields,
)
from .decorators import api_operation
from .errors import ParseFailure, map_status_code_to_error
from .models import Iteration, WorkItem
from .validation import sanitize_wiql_string, validate_iteration_path, validate_wiql

logger = logging.getLogger(__name__)


def chunk_ids(ids: List[int], size: int = QueryLimits.BATCH_SIZE) -> List[List[int]]:
    """Split ids into ordered chunks of at most `size`."""
    return [ids[i:i + size] for i in range(0, len(ids), size)]


def build_iteration_query(iteration_path: str) -> str:
    """
    Build the WIQL query selecting the sprint's stories and bugs.

    Args:
        iteration_path: Full iteration path of the sprint

    Returns:
        Validated WIQL query
    """
    iteration_path = validate_iteration_path(iteration_path)
    iteration_path_safe = sanitize_wiql_string(iteration_path)
    types = ', '.join(f"'{t}'" for t in WorkItemTypes.REPORTED_TYPES)

    wiql_query = f"""SELECT {format_wiql_fields(REPORT_FIELDS)}
FROM WorkItems
WHERE [{FieldNames.ITERATION_PATH}] = '{iteration_path_safe}'
AND [{FieldNames.WORK_ITEM_TYPE}] IN ({types})
ORDER BY [{FieldNames.ASSIGNED_TO}]"""

    return validate_wiql(wiql_query)


class AzureDevOpsClient:
    """Read-only client for the three endpoints the report needs"""

    def __init__(
        self,
        auth: AzureDevOpsAuth,
        organization: str,
        project: str,
        team: str,
        base_url: str = ApiSettings.DEFAULT_BASE_URL,
        timeout: Optional[float] = None
    ):
        """
        Initialize the client

        Args:
            auth: AzureDevOpsAuth instance
            organization: Azure DevOps organization name
            project: Azure DevOps project name
            team: Team whose sprint schedule is used
            base_url: Service root URL
            timeout: Per-request timeout in seconds, or None to wait indefinitely
        """
        self.auth = auth
        self.organization = organization
        self.project = project
        self.team = team
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._session = None

    @property
    def session(self):
        """Lazy load signed HTTP session"""
        if not self._session:
            self._session = self.auth.create_session()
        return self._session

    def _url(self, *segments: str) -> str:
        path = '/'.join(quote(segment, safe='') for segment in segments)
        return f"{self.base_url}/{path}"

    def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, str]] = None,
        payload: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Send one request and return the parsed JSON body.

        Raises:
            RequestFailure: On any non-2xx status
            ParseFailure: If the body is not valid JSON
        """
        query = {'api-version': ApiSettings.VERSION}
        query.update(params or {})

        logger.debug(f"{method} {url}")
        response = self.session.request(
            method,
            url,
            params=query,
            json=payload,
            timeout=self.timeout
        )

        body = response.text
        if not 200 <= response.status_code < 300:
            raise map_status_code_to_error(response.status_code, body=body)

        try:
            return json.loads(body)
        except ValueError as e:
            raise ParseFailure(body=body, original_error=e)

    @api_operation()
    async def get_iterations(self) -> List[Iteration]:
        """
        Get the team's iterations

        Returns:
            List of iterations, in the order the service returns them
        """
        url = self._url(
            self.organization, self.project, self.team,
            '_apis', 'work', 'teamsettings', 'iterations'
        )
        result = await asyncio.to_thread(self._request, 'GET', url)

        try:
            return [Iteration.from_api(record) for record in result.get('value') or []]
        except (AttributeError, TypeError, ValueError) as e:
            raise ParseFailure(body=json.dumps(result), original_error=e)

    @api_operation(log_args=True)
    async def query_work_item_ids(self, iteration_path: str) -> List[int]:
        """
        Run the sprint WIQL query

        Args:
            iteration_path: Full iteration path of the sprint

        Returns:
            Work item ids ordered by assignee
        """
        wiql = Wiql(query=build_iteration_query(iteration_path))
        url = self._url(self.organization, self.project, '_apis', 'wit', 'wiql')
        result = await asyncio.to_thread(self._request, 'POST', url, None, wiql.serialize())

        try:
            return [ref['id'] for ref in result.get('workItems') or []]
        except (AttributeError, KeyError, TypeError) as e:
            raise ParseFailure(body=json.dumps(result), original_error=e)

    @api_operation()
    async def get_work_items(self, ids: List[int]) -> List[WorkItem]:
        """
        Fetch work item details in batches of at most QueryLimits.BATCH_SIZE ids.

        Batches are requested one after another and concatenated in order.

        Args:
            ids: Work item ids

        Returns:
            List of work items
        """
        if not ids:
            return []

        url = self._url(self.organization, self.project, '_apis', 'wit', 'workitems')
        items = []
        for batch in chunk_ids(list(ids)):
            params = {
                'ids': ','.join(str(i) for i in batch),
                'fields': fields_to_string(REPORT_FIELDS),
            }
            result = await asyncio.to_thread(self._request, 'GET', url, params)
            try:
                items.extend(WorkItem.from_api(record) for record in result.get('value') or [])
            except (AttributeError, TypeError) as e:
                raise ParseFailure(body=json.dumps(result), original_error=e)

        return items
