from conftest import make_finding

from issue_publisher.findings.models import FileComponent, Severity
from issue_publisher.review.aggregator import (
    LineCommentBuffer,
    Placement,
    can_report_inline,
    classify,
    is_in_scope,
)


def test_not_new_finding_is_dropped(pull_request) -> None:
    finding = make_finding(is_new=False)
    assert not is_in_scope(finding, pull_request)
    assert classify(finding, pull_request, inline_enabled=True) is Placement.DROPPED


def test_finding_on_untouched_file_is_dropped(pull_request) -> None:
    finding = make_finding(path="src/Untouched.java")
    assert classify(finding, pull_request, inline_enabled=True) is Placement.DROPPED


def test_project_level_finding_goes_to_summary(pull_request) -> None:
    finding = make_finding(path=None, line=None, component="my-project")
    assert classify(finding, pull_request, inline_enabled=True) is Placement.SUMMARY


def test_finding_on_diff_line_goes_inline(pull_request) -> None:
    assert classify(make_finding(line=10), pull_request, inline_enabled=True) is Placement.INLINE


def test_finding_outside_diff_lines_goes_to_summary(pull_request) -> None:
    assert classify(make_finding(line=42), pull_request, inline_enabled=True) is Placement.SUMMARY


def test_finding_without_line_goes_to_summary(pull_request) -> None:
    assert classify(make_finding(line=None), pull_request, inline_enabled=True) is Placement.SUMMARY


def test_inline_disabled_routes_to_summary(pull_request) -> None:
    assert classify(make_finding(line=10), pull_request, inline_enabled=False) is Placement.SUMMARY


def test_inline_check_does_not_query_files(pull_request) -> None:
    pull_request.has_file = None

    assert can_report_inline(make_finding(line=10), pull_request, inline_enabled=True)
    assert not can_report_inline(make_finding(line=42), pull_request, inline_enabled=True)
    assert not can_report_inline(make_finding(line=10), pull_request, inline_enabled=False)


def test_buffer_concatenates_same_line_in_insertion_order(formatter) -> None:
    buffer = LineCommentBuffer(formatter)
    file = FileComponent(path="src/A.java")
    first = make_finding(severity=Severity.BLOCKER, message="X")
    second = make_finding(severity=Severity.MINOR, message="Y")
    buffer.add(file, first)
    buffer.add(file, second)

    bodies = buffer.bodies()

    expected = (
        formatter.inline_issue(Severity.BLOCKER, "X", first.rule_key) + "\n"
        + formatter.inline_issue(Severity.MINOR, "Y", second.rule_key) + "\n"
    )
    assert bodies == {file: {10: expected}}
    assert len(buffer) == 1


def test_buffer_keeps_identical_messages(formatter) -> None:
    buffer = LineCommentBuffer(formatter)
    file = FileComponent(path="src/A.java")
    buffer.add(file, make_finding(message="dup", line=3))
    buffer.add(file, make_finding(message="dup", line=3))
    buffer.add(file, make_finding(message="other", line=4))

    bodies = buffer.bodies()[file]
    assert bodies[3].count("dup") == 2
    assert len(buffer) == 2
