"""
Findings package.

This package contains the model of the static-analysis findings handed
over by the analysis engine, and their deterministic ordering.
"""

from issue_publisher.findings.models import (
    Component,
    FileComponent,
    Finding,
    OtherComponent,
    Severity,
)
from issue_publisher.findings.ordering import issue_sort_key, sort_findings

__all__ = [
    "Component",
    "FileComponent",
    "Finding",
    "OtherComponent",
    "Severity",
    "issue_sort_key",
    "sort_findings",
]
