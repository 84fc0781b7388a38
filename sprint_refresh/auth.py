"""
Authentication handling for Azure DevOps
Signs requests with a Personal Access Token
"""
import logging
from typing import Optional

import requests
from msrest.authentication import BasicAuthentication

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class AzureDevOpsAuth:
    """
    Holds the Personal Access Token and hands out signed HTTP sessions.

    Azure DevOps accepts a PAT as the password of HTTP basic auth with an
    empty user name, i.e. "Authorization: Basic base64(':' + pat)".
    """

    def __init__(self, pat: Optional[str]):
        """
        Initialize authentication handler

        Args:
            pat: Personal Access Token

        Raises:
            ConfigurationError: If the token is missing or blank
        """
        if not pat or not pat.strip():
            raise ConfigurationError(
                "AZURE_DEVOPS_PAT environment variable is required"
            )

        self._credentials = BasicAuthentication('', pat)
        self._auth_method = "Personal Access Token"

    @property
    def token(self) -> str:
        """The raw token, needed only to redact it from log output."""
        return self._credentials.password

    def create_session(self, session: Optional[requests.Session] = None) -> requests.Session:
        """
        Get a requests session that sends the basic auth header.

        Args:
            session: Existing session to sign, or None for a new one

        Returns:
            Signed session
        """
        session = self._credentials.signed_session(session)
        session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })
        logger.debug(f"Created session using: {self._auth_method}")
        return session

    def get_auth_info(self) -> dict:
        """Get information about current authentication"""
        return {
            "method": self._auth_method,
            "scheme": self._credentials.scheme,
        }
