"""
GitHub API client wrapper.

Provides a clean interface for the pull request endpoints the publisher
needs: files, review comments, issue comments and commit statuses.
"""

import logging
from typing import Any, Dict, List, Optional, Union

import requests

from issue_publisher.github.auth import GitHubAppAuth, TokenAuth

logger = logging.getLogger(__name__)


class GitHubClient:
    """
    GitHub API client.

    Handles:
    - Token authentication
    - Pagination of list endpoints
    - Error handling and logging

    Requests are not retried: every failure is raised to the caller.
    """

    def __init__(
        self,
        auth: Union[TokenAuth, GitHubAppAuth],
        api_url: str = "https://api.github.com",
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize GitHub API client.

        Args:
            auth: Token or GitHub App authentication
            api_url: GitHub API base URL
            timeout: Request timeout in seconds
            session: Optional pre-configured session
        """
        self.auth = auth
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.auth.get_token()}",
            "Accept": "application/vnd.github.v3+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.api_url}{path}"
        response = self.session.request(
            method,
            url,
            headers=self._get_headers(),
            timeout=self.timeout,
            **kwargs,
        )
        response.raise_for_status()
        return response

    def _get_paginated(self, path: str) -> List[Dict[str, Any]]:
        """
        Fetch every page of a list endpoint.

        Stops only at the first empty or short page, so the result is never
        truncated.

        Args:
            path: Endpoint path below the API URL

        Returns:
            List[Dict]: Concatenated items of all pages
        """
        items = []
        page = 1
        per_page = 100

        while True:
            response = self._request(
                "GET", path, params={"page": page, "per_page": per_page}
            )
            batch = response.json()
            if not batch:
                break

            items.extend(batch)
            if len(batch) < per_page:
                break

            page += 1

        logger.debug(
            "Fetched paginated list",
            extra={"path": path, "pages": page, "items": len(items)}
        )
        return items

    def get_authenticated_user(self) -> Dict[str, Any]:
        """Get the user owning the token."""
        return self._request("GET", "/user").json()

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> Dict[str, Any]:
        """
        Get pull request details.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            Dict: Pull request data
        """
        return self._request("GET", f"/repos/{owner}/{repo}/pulls/{pr_number}").json()

    def get_pull_request_files(self, owner: str, repo: str, pr_number: int) -> List[Dict[str, Any]]:
        """
        Get list of files changed in a pull request, with their patches.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            List[Dict]: Changed files
        """
        return self._get_paginated(f"/repos/{owner}/{repo}/pulls/{pr_number}/files")

    def list_review_comments(self, owner: str, repo: str, pr_number: int) -> List[Dict[str, Any]]:
        """List inline review comments of a pull request."""
        return self._get_paginated(f"/repos/{owner}/{repo}/pulls/{pr_number}/comments")

    def create_review_comment(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        commit_id: str,
        body: str,
        path: str,
        position: int,
    ) -> Dict[str, Any]:
        """
        Create an inline review comment on a PR.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            commit_id: Commit SHA
            body: Comment body
            path: File path
            position: Position of the line in the file's diff

        Returns:
            Dict: Created comment data
        """
        payload = {
            "body": body,
            "commit_id": commit_id,
            "path": path,
            "position": position,
        }
        return self._request(
            "POST", f"/repos/{owner}/{repo}/pulls/{pr_number}/comments", json=payload
        ).json()

    def update_review_comment(self, owner: str, repo: str, comment_id: int, body: str) -> Dict[str, Any]:
        return self._request(
            "PATCH", f"/repos/{owner}/{repo}/pulls/comments/{comment_id}", json={"body": body}
        ).json()

    def delete_review_comment(self, owner: str, repo: str, comment_id: int) -> None:
        self._request("DELETE", f"/repos/{owner}/{repo}/pulls/comments/{comment_id}")

    def list_issue_comments(self, owner: str, repo: str, issue_number: int) -> List[Dict[str, Any]]:
        """List conversation comments of an issue or PR."""
        return self._get_paginated(f"/repos/{owner}/{repo}/issues/{issue_number}/comments")

    def post_issue_comment(self, owner: str, repo: str, issue_number: int, body: str) -> Dict[str, Any]:
        """
        Post a comment on an issue or PR.

        Args:
            owner: Repository owner
            repo: Repository name
            issue_number: Issue or PR number
            body: Comment body

        Returns:
            Dict: Created comment data
        """
        return self._request(
            "POST", f"/repos/{owner}/{repo}/issues/{issue_number}/comments", json={"body": body}
        ).json()

    def update_issue_comment(self, owner: str, repo: str, comment_id: int, body: str) -> Dict[str, Any]:
        return self._request(
            "PATCH", f"/repos/{owner}/{repo}/issues/comments/{comment_id}", json={"body": body}
        ).json()

    def delete_issue_comment(self, owner: str, repo: str, comment_id: int) -> None:
        self._request("DELETE", f"/repos/{owner}/{repo}/issues/comments/{comment_id}")

    def create_commit_status(
        self,
        owner: str,
        repo: str,
        sha: str,
        state: str,
        context: str,
        description: str,
        target_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a commit status.

        Args:
            owner: Repository owner
            repo: Repository name
            sha: Commit SHA
            state: One of error, failure, pending, success
            context: Label distinguishing this status from others
            description: Short description
            target_url: Optional link attached to the status

        Returns:
            Dict: Created status data
        """
        payload = {
            "state": state,
            "context": context,
            "description": description,
        }
        if target_url:
            payload["target_url"] = target_url

        return self._request(
            "POST", f"/repos/{owner}/{repo}/statuses/{sha}", json=payload
        ).json()
