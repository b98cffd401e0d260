"""
Collaborators of the publisher.

``PullRequestFacade`` implements both protocols against GitHub; tests use
in-memory fakes.
"""

from typing import Optional, Protocol

from issue_publisher.findings.models import Component, FileComponent
from issue_publisher.review.report import CommitState


class ChangeSet(Protocol):
    """Answers questions about the files and lines touched by the change."""

    def has_file(self, file: FileComponent) -> bool:
        ...

    def has_file_line(self, file: FileComponent, line: int) -> bool:
        ...

    def get_external_url(self, component: Optional[Component], line: Optional[int]) -> Optional[str]:
        ...


class ReviewSink(Protocol):
    """Receives the comments and status produced by a publish cycle."""

    def create_or_update_review_comment(self, file: FileComponent, line: int, body: str) -> None:
        ...

    def delete_outdated_comments(self) -> None:
        ...

    def create_or_update_global_comment(self, body: Optional[str]) -> None:
        ...

    def create_or_update_status(self, state: CommitState, description: str) -> None:
        ...
