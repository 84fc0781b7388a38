"""
Process configuration for the sprint report refresh
Read from environment variables (and an optional .env file)
"""
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from .constants import (
    ApiSettings,
    CURRENT_SPRINT,
    DEFAULT_DEVELOPERS,
    DEFAULT_ORGANIZATION,
    DEFAULT_PROJECT,
    DEFAULT_REPORT_PATH,
    DEFAULT_TEAM,
)
from .errors import ConfigurationError


def parse_developers(value: Optional[str]) -> List[str]:
    """Split a comma-separated allow-list; None or blank gives the default team."""
    if not value or not value.strip():
        return list(DEFAULT_DEVELOPERS)
    return [name.strip() for name in value.split(',') if name.strip()]


def parse_timeout(value: Optional[str]) -> Optional[float]:
    if not value or not value.strip():
        return None
    try:
        timeout = float(value)
    except ValueError:
        raise ConfigurationError(
            f"AZURE_DEVOPS_TIMEOUT must be a number of seconds, got {value!r}"
        )
    if timeout <= 0:
        raise ConfigurationError(
            f"AZURE_DEVOPS_TIMEOUT must be positive, got {value!r}"
        )
    return timeout


@dataclass
class RefreshConfig:
    """Settings for one refresh run"""
    pat: str = field(repr=False)
    organization: str = DEFAULT_ORGANIZATION
    project: str = DEFAULT_PROJECT
    team: str = DEFAULT_TEAM
    sprint: str = CURRENT_SPRINT
    developers: List[str] = field(default_factory=lambda: list(DEFAULT_DEVELOPERS))
    report_path: str = DEFAULT_REPORT_PATH
    base_url: str = ApiSettings.DEFAULT_BASE_URL
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'RefreshConfig':
        """
        Build configuration from environment variables

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            RefreshConfig

        Raises:
            ConfigurationError: If AZURE_DEVOPS_PAT is missing or a value is malformed
        """
        env = os.environ if environ is None else environ

        pat = env.get("AZURE_DEVOPS_PAT")
        if not pat or not pat.strip():
            raise ConfigurationError(
                "AZURE_DEVOPS_PAT environment variable is required"
            )

        return cls(
            pat=pat.strip(),
            organization=env.get("AZURE_DEVOPS_ORG") or DEFAULT_ORGANIZATION,
            project=env.get("AZURE_DEVOPS_PROJECT") or DEFAULT_PROJECT,
            team=env.get("AZURE_DEVOPS_TEAM") or DEFAULT_TEAM,
            sprint=env.get("SPRINT_NAME") or CURRENT_SPRINT,
            developers=parse_developers(env.get("SPRINT_DEVELOPERS")),
            report_path=env.get("REPORT_PATH") or DEFAULT_REPORT_PATH,
            base_url=env.get("AZURE_DEVOPS_BASE_URL") or ApiSettings.DEFAULT_BASE_URL,
            timeout=parse_timeout(env.get("AZURE_DEVOPS_TIMEOUT")),
        )
