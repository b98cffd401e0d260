"""
GitHub authentication module.

Supports two ways of authenticating the publisher:
- a personal access / OAuth token
- a GitHub App installation (JWT exchanged for an installation token)
"""

import time
import logging
from typing import Dict, Optional
from datetime import datetime, timedelta

import jwt
import requests

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when no usable token can be obtained."""
    pass


class TokenAuth:
    """Static token authentication."""

    def __init__(self, token: str):
        self.token = token

    def get_token(self) -> str:
        return self.token


class GitHubAppAuth:
    """
    GitHub App authentication handler.

    Manages:
    - JWT generation for GitHub App authentication
    - Installation access token retrieval and caching
    """

    def __init__(
        self,
        app_id: str,
        private_key: str,
        installation_id: int,
        api_url: str = "https://api.github.com",
        timeout: int = 30,
    ):
        """
        Initialize GitHub App authentication.

        Args:
            app_id: GitHub App ID
            private_key: GitHub App private key (PEM format)
            installation_id: Installation of the app on the reviewed repository
            api_url: GitHub API base URL
            timeout: Request timeout in seconds
        """
        self.app_id = app_id
        self.private_key = private_key
        self.installation_id = installation_id
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._cached: Optional[Dict[str, str]] = None

    def generate_jwt(self, expiration_seconds: int = 600) -> str:
        """
        Generate JWT for GitHub App authentication.

        Args:
            expiration_seconds: JWT expiration time (max 600 seconds)

        Returns:
            str: Encoded JWT token
        """
        now = int(time.time())

        payload = {
            "iat": now - 60,  # clock drift
            "exp": now + expiration_seconds,
            "iss": self.app_id,
        }

        return jwt.encode(payload, self.private_key, algorithm="RS256")

    def get_token(self) -> str:
        """
        Get an installation access token.

        The token is cached and reused until five minutes before it expires.

        Returns:
            str: Installation access token

        Raises:
            AuthenticationError: If token retrieval fails
        """
        if self._cached is not None:
            expires_at = datetime.fromisoformat(
                self._cached["expires_at"].replace("Z", "+00:00")
            )
            if expires_at > datetime.now(expires_at.tzinfo) + timedelta(minutes=5):
                return self._cached["token"]

        logger.info(
            "Requesting new installation token",
            extra={"installation_id": self.installation_id}
        )

        headers = {
            "Authorization": f"Bearer {self.generate_jwt()}",
            "Accept": "application/vnd.github.v3+json",
        }
        url = f"{self.api_url}/app/installations/{self.installation_id}/access_tokens"

        response = requests.post(url, headers=headers, timeout=self.timeout)

        if response.status_code != 201:
            logger.error(
                "Failed to get installation token",
                extra={
                    "installation_id": self.installation_id,
                    "status_code": response.status_code,
                }
            )
            raise AuthenticationError(
                f"Failed to get installation token: {response.status_code} {response.text}"
            )

        data = response.json()
        self._cached = {"token": data["token"], "expires_at": data["expires_at"]}
        return data["token"]

    def get_app_slug(self) -> str:
        """
        Get the app slug, used to derive the login of the app's bot user.

        Returns:
            str: App slug
        """
        headers = {
            "Authorization": f"Bearer {self.generate_jwt()}",
            "Accept": "application/vnd.github.v3+json",
        }
        response = requests.get(f"{self.api_url}/app", headers=headers, timeout=self.timeout)
        response.raise_for_status()
        return response.json()["slug"]
