"""Shared fakes for publisher tests."""
from typing import Dict, List, Optional, Set, Tuple

import pytest

from issue_publisher.findings.models import FileComponent, Finding, OtherComponent, Severity
from issue_publisher.review.formatter import MarkdownFormatter
from issue_publisher.review.publisher import IssuePublisher
from issue_publisher.review.report import CommitState


class FakePullRequest:
    """In-memory change set and review sink recording every call."""

    def __init__(self, lines_by_file: Optional[Dict[str, Set[int]]] = None):
        self.lines_by_file = lines_by_file or {}
        self.calls: List[Tuple] = []
        self.fail_on: Optional[str] = None

    def has_file(self, file: FileComponent) -> bool:
        return file.path in self.lines_by_file

    def has_file_line(self, file: FileComponent, line: int) -> bool:
        return line in self.lines_by_file.get(file.path, set())

    def get_external_url(self, component, line):
        if not isinstance(component, FileComponent) or not self.has_file(component):
            return None
        url = f"https://github.com/o/r/blob/abc/{component.path}"
        return url + f"#L{line}" if line is not None else url

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if self.fail_on == name:
            raise RuntimeError(f"{name} exploded")

    def create_or_update_review_comment(self, file, line, body):
        self._record("review_comment", file.path, line, body)

    def delete_outdated_comments(self):
        self._record("delete_outdated")

    def create_or_update_global_comment(self, body):
        self._record("global_comment", body)

    def create_or_update_status(self, state: CommitState, description: str):
        self._record("status", state, description)

    def named(self, name):
        return [call for call in self.calls if call[0] == name]


_counter = {"n": 0}


def make_finding(
    path: Optional[str] = "src/A.java",
    line: Optional[int] = 10,
    severity: Severity = Severity.MAJOR,
    message: str = "Remove this",
    rule_key: str = "java:S100",
    is_new: bool = True,
    component: Optional[str] = None,
    key: Optional[str] = None,
) -> Finding:
    if key is None:
        _counter["n"] += 1
        key = f"issue-{_counter['n']}"
    if path is not None:
        comp = FileComponent(path=path)
    elif component is not None:
        comp = OtherComponent(key=component)
    else:
        comp = None
    return Finding(
        key=key,
        severity=severity,
        message=message,
        rule_key=rule_key,
        component=comp,
        line=line,
        is_new=is_new,
    )


@pytest.fixture
def formatter() -> MarkdownFormatter:
    return MarkdownFormatter(server_base_url="https://sonar.example.com/", badge_base_url="https://img")


@pytest.fixture
def pull_request() -> FakePullRequest:
    return FakePullRequest({"src/A.java": {9, 10, 11}, "src/B.java": {1}})


@pytest.fixture
def make_publisher(pull_request, formatter):
    def _make(**kwargs) -> IssuePublisher:
        return IssuePublisher(pull_request, pull_request, formatter=formatter, **kwargs)
    return _make
