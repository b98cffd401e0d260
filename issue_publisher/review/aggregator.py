"""
Inline placement of findings.

Decides, for each finding, whether it is dropped, placed in an inline
comment or only listed in the summary, and groups inline findings into
one comment body per (file, line).
"""

from enum import Enum
from typing import Dict, List

from issue_publisher.findings.models import FileComponent, Finding
from issue_publisher.review.formatter import MarkdownFormatter
from issue_publisher.review.protocols import ChangeSet


class Placement(str, Enum):
    """Where a finding ends up."""
    DROPPED = "dropped"
    INLINE = "inline"
    SUMMARY = "summary"


def is_in_scope(finding: Finding, change_set: ChangeSet) -> bool:
    """
    Whether a finding is reported at all.

    Only new findings count. File findings are kept only when the file is
    part of the change; project and module findings are always kept.
    """
    if not finding.is_new:
        return False
    file = finding.file
    return file is None or change_set.has_file(file)


def can_report_inline(finding: Finding, change_set: ChangeSet, inline_enabled: bool) -> bool:
    """Whether an in-scope finding sits on a line of the diff and may go inline."""
    file = finding.file
    return (
        inline_enabled
        and file is not None
        and finding.line is not None
        and change_set.has_file_line(file, finding.line)
    )


def classify(finding: Finding, change_set: ChangeSet, inline_enabled: bool) -> Placement:
    """
    Decide the placement of a finding.

    Args:
        finding: Finding to place
        change_set: Files and lines of the change
        inline_enabled: Whether inline reporting is configured

    Returns:
        Placement: DROPPED, INLINE or SUMMARY
    """
    if not is_in_scope(finding, change_set):
        return Placement.DROPPED
    if can_report_inline(finding, change_set, inline_enabled):
        return Placement.INLINE
    return Placement.SUMMARY


class LineCommentBuffer:
    """
    Inline comment bodies of one publish cycle, keyed by file then line.

    Buckets are created on first use. Lines are appended in the order
    findings are added.
    """

    def __init__(self, formatter: MarkdownFormatter):
        self.formatter = formatter
        self._lines: Dict[FileComponent, Dict[int, List[str]]] = {}

    def add(self, file: FileComponent, finding: Finding) -> None:
        by_line = self._lines.setdefault(file, {})
        by_line.setdefault(finding.line, []).append(
            self.formatter.inline_issue(finding.severity, finding.message, finding.rule_key) + "\n"
        )

    def bodies(self) -> Dict[FileComponent, Dict[int, str]]:
        """
        Concatenated comment body of every bucket.

        Returns:
            Dict: file -> line -> body
        """
        return {
            file: {line: "".join(chunks) for line, chunks in by_line.items()}
            for file, by_line in self._lines.items()
        }

    def __len__(self) -> int:
        return sum(len(by_line) for by_line in self._lines.values())
