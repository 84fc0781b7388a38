"""
Sprint report refresh command
Pulls the sprint's work items from Azure DevOps and rewrites index.html
"""
import asyncio
import logging
import os
import sys
from datetime import datetime
from typing import Callable, Optional

from dotenv import load_dotenv

from .aggregation import build_sprint_report
from .auth import AzureDevOpsAuth
from .client import AzureDevOpsClient
from .config import RefreshConfig
from .errors import ReportRefreshError
from .log_sanitizer import safe_log_error
from .models import SprintReport
from .report_writer import ReportWriter, local_now
from .services.sprint_service import SprintService
from .services.workitem_service import WorkItemService

logger = logging.getLogger(__name__)


def build_client(config: RefreshConfig) -> AzureDevOpsClient:
    auth = AzureDevOpsAuth(config.pat)
    return AzureDevOpsClient(
        auth,
        organization=config.organization,
        project=config.project,
        team=config.team,
        base_url=config.base_url,
        timeout=config.timeout
    )


def log_sprint_summary(report: SprintReport):
    logger.info("Sprint Summary:")
    logger.info("===============")
    for developer in report.sprint_points:
        logger.info(
            f"{developer.name}: {developer.points} pts, {developer.stories} stories, "
            f"{developer.progress}% complete"
        )


async def refresh(
    config: RefreshConfig,
    client: Optional[AzureDevOpsClient] = None,
    writer: Optional[ReportWriter] = None,
    clock: Callable[[], datetime] = local_now
) -> Optional[SprintReport]:
    """
    Run the refresh pipeline once.

    Args:
        config: Run configuration
        client: API client (default: built from config)
        writer: Report writer (default: writes config.report_path)
        clock: Timezone-aware "now", used for sprint selection and the timestamp

    Returns:
        The report written, or None when the sprint has no work items
    """
    client = client or build_client(config)
    writer = writer or ReportWriter(config.report_path, clock=clock)

    sprint_service = SprintService(client)
    workitem_service = WorkItemService(client, config.developers)

    iteration = await sprint_service.find_sprint(config.sprint, clock())

    work_items = await workitem_service.get_sprint_work_items(iteration.path)
    if not work_items:
        logger.info("No work items found for this sprint")
        return None

    developer_items = workitem_service.get_developer_work_items(work_items)
    report = build_sprint_report(iteration.name, iteration.path, developer_items)
    log_sprint_summary(report)

    writer.update(report)
    logger.info("Refresh complete!")
    return report


def configure_logging(level: Optional[str] = None):
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr
    )


def main() -> int:
    """Entry point: exit status 0 on success, 1 on any fatal error."""
    load_dotenv()
    configure_logging(os.getenv("LOG_LEVEL"))

    secrets = [os.getenv("AZURE_DEVOPS_PAT", "")]
    try:
        config = RefreshConfig.from_env()
        asyncio.run(refresh(config))
    except ReportRefreshError as e:
        logger.error(safe_log_error(e, "Error", secrets=secrets))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
