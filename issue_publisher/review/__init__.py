"""
Review output module for placing and publishing findings.

This module provides:
- Markdown formatting of inline comments and summary entries
- Inline placement and per-line aggregation of findings
- The global report (summary comment and commit status)
- The publisher running one publish cycle
"""

from issue_publisher.review.aggregator import (
    LineCommentBuffer,
    Placement,
    can_report_inline,
    classify,
    is_in_scope,
)
from issue_publisher.review.formatter import MarkdownFormatter
from issue_publisher.review.publisher import CycleFailed, CycleOutcome, CycleSucceeded, IssuePublisher
from issue_publisher.review.report import CommitState, GlobalReport

__all__ = [
    "LineCommentBuffer",
    "Placement",
    "can_report_inline",
    "classify",
    "is_in_scope",
    "MarkdownFormatter",
    "CycleFailed",
    "CycleOutcome",
    "CycleSucceeded",
    "IssuePublisher",
    "CommitState",
    "GlobalReport",
]
