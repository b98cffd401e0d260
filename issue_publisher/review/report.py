"""
Global report of a publish cycle.

Counts every finding that survives filtering, and lists those that could
not be placed inline. Produces the summary comment and the commit status.
"""

from enum import Enum
from typing import Dict, List, Optional

from issue_publisher.findings.models import Finding, Severity
from issue_publisher.review.formatter import MarkdownFormatter


class CommitState(str, Enum):
    """GitHub commit status states."""
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"


class GlobalReport:
    """
    Summary builder for one publish cycle.

    ``process`` is called exactly once per non-dropped finding.
    """

    def __init__(
        self,
        formatter: MarkdownFormatter,
        try_report_issues_inline: bool,
        max_global_issues: int = 10,
        analyzer_name: str = "SonarQube",
    ):
        self.formatter = formatter
        self.try_report_issues_inline = try_report_issues_inline
        self.max_global_issues = max_global_issues
        self.analyzer_name = analyzer_name

        self._issues_by_severity: Dict[Severity, int] = {severity: 0 for severity in Severity}
        self._not_reported_entries: List[str] = []
        self._not_reported_count = 0

    def process(self, finding: Finding, external_url: Optional[str], reported_inline: bool) -> None:
        """
        Account for a finding.

        Args:
            finding: New finding on an in-scope component
            external_url: Link to the finding location, if known
            reported_inline: Whether it was placed in an inline comment
        """
        self._issues_by_severity[finding.severity] += 1
        if reported_inline:
            return

        self._not_reported_count += 1
        if len(self._not_reported_entries) < self.max_global_issues:
            self._not_reported_entries.append(
                self.formatter.global_issue(
                    finding.severity,
                    finding.message,
                    finding.rule_key,
                    external_url,
                    finding.component_key,
                )
            )

    @property
    def new_issue_count(self) -> int:
        return sum(self._issues_by_severity.values())

    @property
    def not_reported_count(self) -> int:
        return self._not_reported_count

    def has_new_issue(self) -> bool:
        return self.new_issue_count > 0

    def get_status(self) -> CommitState:
        blocking = sum(count for severity, count in self._issues_by_severity.items() if severity.is_blocking)
        return CommitState.FAILURE if blocking > 0 else CommitState.SUCCESS

    def get_status_description(self) -> str:
        """
        One-line description for the commit status.

        Returns:
            e.g. "SonarQube reported 3 issues, with 1 critical and 2 blocker"
        """
        total = self.new_issue_count
        if total == 0:
            return f"{self.analyzer_name} reported no issues"

        description = f"{self.analyzer_name} reported {total} issue{'s' if total > 1 else ''},"
        blocking = [
            f"{self._issues_by_severity[severity]} {severity.value.lower()}"
            for severity in (Severity.CRITICAL, Severity.BLOCKER)
            if self._issues_by_severity[severity] > 0
        ]
        if blocking:
            return description + " with " + " and ".join(blocking)
        return description + " no critical nor blocker"

    def format_for_markdown(self) -> str:
        """
        Body of the global summary comment.

        Returns:
            Markdown text
        """
        parts = [f"{self.analyzer_name} analysis reported "]

        total = self.new_issue_count
        if total > 0:
            parts.append(f"{total} issue{'s' if total > 1 else ''}\n\n")
            for severity in sorted(Severity, key=lambda s: s.rank, reverse=True):
                count = self._issues_by_severity[severity]
                if count > 0:
                    parts.append(
                        f"* {self.formatter.severity_image(severity)} {count} {severity.value.lower()}\n"
                    )
            parts.append("\nWatch the comments in this conversation to review them.\n")
        else:
            parts.append("no issues.")

        if self._not_reported_count > 0:
            truncated = self._not_reported_count > self.max_global_issues
            if self.try_report_issues_inline:
                count = self._not_reported_count
                parts.append(
                    f"\n#### {count} extra issue{'s' if count > 1 else ''}\n\n"
                    "Note: The following issues were found on lines that were not modified "
                    "in the pull request. Because these issues can't be reported as line "
                    "comments, they are summarized here:\n\n"
                )
            elif truncated:
                parts.append(
                    f"\n\nNote: the following are the top {self.max_global_issues} issues "
                    "of this pull request:\n\n"
                )
            else:
                parts.append("\n")

            for entry in self._not_reported_entries:
                parts.append(f"1. {entry}\n")
            if truncated:
                parts.append(f"* ... {self._not_reported_count - self.max_global_issues} more\n")

        return "".join(parts)
