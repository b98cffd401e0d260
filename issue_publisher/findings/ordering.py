"""
Deterministic ordering of findings.

Comments are rendered in this order, so two runs over the same findings
produce byte-identical comment bodies and summaries.
"""

from typing import Iterable, List, Tuple

from issue_publisher.findings.models import Finding


def issue_sort_key(finding: Finding) -> Tuple:
    """
    Sort key for a finding.

    Findings without a file come first, then files by path. Within a file,
    findings without a line come first, then by line. Ties are broken by
    severity (most severe first), rule key, message and finding key.

    Args:
        finding: Finding to order

    Returns:
        Tuple usable as a ``sorted`` key
    """
    file = finding.file
    return (
        file is not None,
        file.path if file is not None else (finding.component_key or ""),
        finding.line is not None,
        finding.line or 0,
        -finding.severity.rank,
        finding.rule_key,
        finding.message,
        finding.key,
    )


def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
    """Return findings sorted with ``issue_sort_key``."""
    return sorted(findings, key=issue_sort_key)
