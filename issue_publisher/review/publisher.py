"""
Publisher for posting findings back to a pull request.

Runs one publish cycle: filter and sort the findings, place them inline or
in the summary, flush the comments, then set the commit status. A failure
anywhere in the cycle is turned into a single ERROR status.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from issue_publisher.findings.models import Finding
from issue_publisher.findings.ordering import sort_findings
from issue_publisher.observability.errors import ErrorTracker, get_error_tracker
from issue_publisher.review.aggregator import LineCommentBuffer, can_report_inline, is_in_scope
from issue_publisher.review.formatter import MarkdownFormatter
from issue_publisher.review.protocols import ChangeSet, ReviewSink
from issue_publisher.review.report import CommitState, GlobalReport

logger = logging.getLogger(__name__)


@dataclass
class CycleSucceeded:
    """Every comment and the status were published."""
    report: GlobalReport
    comments_posted: int


@dataclass
class CycleFailed:
    """The cycle stopped on ``error``; an ERROR status is still due."""
    error: Exception


CycleOutcome = Union[CycleSucceeded, CycleFailed]


class IssuePublisher:
    """
    Publisher of static-analysis findings on a pull request.

    Each call to ``publish`` is one independent cycle: the comment buffer
    and the report are created for it and discarded afterwards.
    """

    def __init__(
        self,
        change_set: ChangeSet,
        sink: ReviewSink,
        formatter: Optional[MarkdownFormatter] = None,
        try_report_issues_inline: bool = True,
        delete_old_comments: bool = False,
        max_global_issues: int = 10,
        analyzer_name: str = "SonarQube",
        error_tracker: Optional[ErrorTracker] = None,
    ):
        """
        Initialize issue publisher.

        Args:
            change_set: Files and lines of the change
            sink: Destination of comments and statuses
            formatter: Markdown formatter (creates one if not provided)
            try_report_issues_inline: Place findings on diff lines as inline comments
            delete_old_comments: Delete our review comments not reused by this cycle
            max_global_issues: Cap on the findings listed in the summary
            analyzer_name: Name used in the summary and status texts
            error_tracker: Where failed cycles are recorded
        """
        self.change_set = change_set
        self.sink = sink
        self.formatter = formatter or MarkdownFormatter()
        self.try_report_issues_inline = try_report_issues_inline
        self.delete_old_comments = delete_old_comments
        self.max_global_issues = max_global_issues
        self.analyzer_name = analyzer_name
        self.error_tracker = error_tracker or get_error_tracker()

    def publish(self, findings: Iterable[Finding]) -> CycleOutcome:
        """
        Publish findings on the pull request.

        Args:
            findings: Findings of the analysis, consumed once

        Returns:
            CycleOutcome: What happened during the cycle

        Raises:
            Exception: Only when publishing the ERROR status itself fails
        """
        outcome = self._run_cycle(findings)

        if isinstance(outcome, CycleSucceeded):
            logger.info(
                "Findings published",
                extra={
                    "new_issues": outcome.report.new_issue_count,
                    "inline_comments": outcome.comments_posted,
                    "summary_only": outcome.report.not_reported_count,
                    "status": outcome.report.get_status().value,
                }
            )
            return outcome

        msg = f"{self.analyzer_name} failed to complete the review of this pull request"
        self.error_tracker.capture_exception(outcome.error, msg)
        self.sink.create_or_update_status(CommitState.ERROR, f"{msg}: {outcome.error}")
        return outcome

    def _run_cycle(self, findings: Iterable[Finding]) -> CycleOutcome:
        report = GlobalReport(
            self.formatter,
            self.try_report_issues_inline,
            max_global_issues=self.max_global_issues,
            analyzer_name=self.analyzer_name,
        )
        buffer = LineCommentBuffer(self.formatter)

        try:
            self._process_findings(findings, report, buffer)
            comments_posted = self._flush(report, buffer)
        except Exception as e:
            return CycleFailed(error=e)

        return CycleSucceeded(report=report, comments_posted=comments_posted)

    def _process_findings(
        self,
        findings: Iterable[Finding],
        report: GlobalReport,
        buffer: LineCommentBuffer,
    ) -> None:
        in_scope = [finding for finding in findings if is_in_scope(finding, self.change_set)]
        logger.debug("Findings in scope", extra={"count": len(in_scope)})

        for finding in sort_findings(in_scope):
            inline = can_report_inline(finding, self.change_set, self.try_report_issues_inline)
            if inline:
                buffer.add(finding.file, finding)
            report.process(
                finding,
                self.change_set.get_external_url(finding.component, finding.line),
                inline,
            )

    def _flush(self, report: GlobalReport, buffer: LineCommentBuffer) -> int:
        posted = 0
        for file, by_line in buffer.bodies().items():
            for line, body in by_line.items():
                self.sink.create_or_update_review_comment(file, line, body)
                posted += 1

        if self.delete_old_comments:
            self.sink.delete_outdated_comments()

        self.sink.create_or_update_global_comment(
            report.format_for_markdown() if report.has_new_issue() else None
        )
        self.sink.create_or_update_status(report.get_status(), report.get_status_description())
        return posted
