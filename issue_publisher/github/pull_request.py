"""
Pull request facade.

Implements the change-set oracle and the review-comment sink used by the
publisher on top of the GitHub REST API. State loaded from GitHub is kept
for one publish cycle only.
"""

import logging
from typing import Dict, List, Optional, Tuple

import requests

from issue_publisher.analysis.diff_parser import DiffParser
from issue_publisher.config import Settings
from issue_publisher.findings.models import Component, FileComponent
from issue_publisher.github.client import GitHubClient
from issue_publisher.review.report import CommitState

logger = logging.getLogger(__name__)

MAX_STATUS_DESCRIPTION_LENGTH = 140


class PublishError(Exception):
    """Exception raised when reading from or writing to GitHub fails."""
    pass


class PullRequestFacade:
    """
    Facade over a single GitHub pull request.

    Call ``load()`` once before any other method.
    """

    def __init__(
        self,
        client: GitHubClient,
        settings: Settings,
        diff_parser: Optional[DiffParser] = None,
    ):
        """
        Initialize the facade.

        Args:
            client: GitHub API client
            settings: Settings naming the repository and pull request
            diff_parser: Patch parser (creates one if not provided)
        """
        self.client = client
        self.settings = settings
        self.diff_parser = diff_parser or DiffParser()

        self.owner = settings.repository_owner
        self.repo = settings.repository_name
        self.pr_number = settings.GITHUB_PULL_REQUEST

        self.login: Optional[str] = None
        self.head_sha: Optional[str] = None
        self.html_url: Optional[str] = None

        # path -> new line number -> diff position
        self._positions_by_file: Dict[str, Dict[int, int]] = {}
        # (path, position) -> our existing review comment
        self._existing_review_comments: Dict[Tuple[str, int], Dict] = {}
        self._review_comments_to_delete: Dict[int, Dict] = {}
        self._global_comments: List[Dict] = []

    def load(self) -> "PullRequestFacade":
        """
        Load the pull request, its patches and our previous comments.

        Returns:
            The loaded facade

        Raises:
            PublishError: If the pull request cannot be loaded
        """
        logger.info(
            "Loading pull request",
            extra={"repository": self.settings.GITHUB_REPOSITORY, "pr_number": self.pr_number}
        )

        try:
            self.login = self._resolve_login()

            pr_data = self.client.get_pull_request(self.owner, self.repo, self.pr_number)
            self.head_sha = pr_data["head"]["sha"]
            self.html_url = pr_data["base"]["repo"]["html_url"]

            for file_data in self.client.get_pull_request_files(self.owner, self.repo, self.pr_number):
                file_patch = self.diff_parser.parse_patch(file_data["filename"], file_data.get("patch"))
                self._positions_by_file[file_data["filename"]] = file_patch.position_by_line()

            self._load_review_comments()
            self._global_comments = [
                comment
                for comment in self.client.list_issue_comments(self.owner, self.repo, self.pr_number)
                if self._is_own(comment)
            ]
        except requests.RequestException as e:
            raise PublishError(
                f"Unable to load pull request {self.settings.GITHUB_REPOSITORY}#{self.pr_number}: {e}"
            ) from e

        logger.info(
            "Pull request loaded",
            extra={
                "head_sha": self.head_sha,
                "files_changed": len(self._positions_by_file),
                "existing_review_comments": len(self._existing_review_comments),
                "existing_global_comments": len(self._global_comments),
            }
        )
        return self

    def _resolve_login(self) -> str:
        if self.settings.GITHUB_LOGIN:
            return self.settings.GITHUB_LOGIN
        if self.settings.uses_app_auth:
            return f"{self.client.auth.get_app_slug()}[bot]"
        return self.client.get_authenticated_user()["login"]

    def _is_own(self, comment: Dict) -> bool:
        user = comment.get("user") or {}
        return user.get("login") == self.login

    def _load_review_comments(self) -> None:
        for comment in self.client.list_review_comments(self.owner, self.repo, self.pr_number):
            if not self._is_own(comment):
                continue
            self._review_comments_to_delete[comment["id"]] = comment
            # Outdated comments have no position anymore
            if comment.get("position") is not None:
                self._existing_review_comments[(comment["path"], comment["position"])] = comment

    # Change-set oracle

    def has_file(self, file: FileComponent) -> bool:
        return file.path in self._positions_by_file

    def has_file_line(self, file: FileComponent, line: int) -> bool:
        return line in self._positions_by_file.get(file.path, {})

    def get_external_url(self, component: Optional[Component], line: Optional[int]) -> Optional[str]:
        """
        Link to a file line on the pull request head commit.

        Args:
            component: Component of the finding
            line: Line of the finding, if any

        Returns:
            URL, or None when the component is not a changed file
        """
        if not isinstance(component, FileComponent) or not self.has_file(component):
            return None
        url = f"{self.html_url}/blob/{self.head_sha}/{component.path}"
        if line is not None:
            url += f"#L{line}"
        return url

    # Review-comment sink

    def create_or_update_review_comment(self, file: FileComponent, line: int, body: str) -> None:
        """
        Publish an inline comment, reusing ours if one sits at the same place.

        Args:
            file: Changed file
            line: Line of the file, part of the diff
            body: Comment body

        Raises:
            PublishError: If the comment cannot be written
        """
        position = self._positions_by_file[file.path][line]
        existing = self._existing_review_comments.get((file.path, position))
        try:
            if existing is not None:
                if existing.get("body") != body:
                    self.client.update_review_comment(self.owner, self.repo, existing["id"], body)
                self._review_comments_to_delete.pop(existing["id"], None)
            else:
                self.client.create_review_comment(
                    self.owner,
                    self.repo,
                    self.pr_number,
                    commit_id=self.head_sha,
                    body=body,
                    path=file.path,
                    position=position,
                )
        except requests.RequestException as e:
            raise PublishError(
                f"Unable to create or update review comment in file {file.path} at line {line}: {e}"
            ) from e

    def delete_outdated_comments(self) -> None:
        """Delete our review comments that were not reused in this cycle."""
        for comment_id in list(self._review_comments_to_delete):
            try:
                self.client.delete_review_comment(self.owner, self.repo, comment_id)
            except requests.RequestException as e:
                raise PublishError(f"Unable to delete review comment with id {comment_id}: {e}") from e
            del self._review_comments_to_delete[comment_id]
        logger.debug("Outdated review comments deleted")

    def create_or_update_global_comment(self, body: Optional[str]) -> None:
        """
        Publish the summary comment.

        Our first conversation comment is edited in place (or deleted when
        ``body`` is None); any other comment of ours is deleted.

        Args:
            body: Summary markdown, or None when no summary is needed
        """
        try:
            found = False
            for comment in self._global_comments:
                if not found and body is not None:
                    if comment.get("body") != body:
                        self.client.update_issue_comment(self.owner, self.repo, comment["id"], body)
                    found = True
                else:
                    self.client.delete_issue_comment(self.owner, self.repo, comment["id"])
            if not found and body is not None:
                self.client.post_issue_comment(self.owner, self.repo, self.pr_number, body)
        except requests.RequestException as e:
            raise PublishError(f"Unable to comment the pull request: {e}") from e

    def create_or_update_status(self, state: CommitState, description: str) -> None:
        """
        Set the commit status of the pull request head.

        Args:
            state: Status state
            description: Description, truncated to GitHub's limit
        """
        if len(description) > MAX_STATUS_DESCRIPTION_LENGTH:
            description = description[:MAX_STATUS_DESCRIPTION_LENGTH - 3] + "..."
        try:
            self.client.create_commit_status(
                self.owner,
                self.repo,
                sha=self.head_sha,
                state=state.value,
                context=self.settings.STATUS_CONTEXT,
                description=description,
            )
        except requests.RequestException as e:
            raise PublishError(f"Unable to set pull request status: {e}") from e
        logger.info("Commit status set", extra={"state": state.value, "description": description})
