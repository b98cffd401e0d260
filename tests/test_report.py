from conftest import make_finding

from issue_publisher.findings.models import Severity
from issue_publisher.review.report import CommitState, GlobalReport


def _report(formatter, inline=True, max_global_issues=10) -> GlobalReport:
    return GlobalReport(formatter, inline, max_global_issues=max_global_issues, analyzer_name="SonarQube")


def test_empty_report(formatter) -> None:
    report = _report(formatter)

    assert not report.has_new_issue()
    assert report.get_status() is CommitState.SUCCESS
    assert report.get_status_description() == "SonarQube reported no issues"
    assert report.format_for_markdown() == "SonarQube analysis reported no issues."


def test_blocker_fails_the_status(formatter) -> None:
    report = _report(formatter)
    report.process(make_finding(severity=Severity.BLOCKER), None, True)
    report.process(make_finding(severity=Severity.MINOR), None, True)

    assert report.has_new_issue()
    assert report.get_status() is CommitState.FAILURE
    assert report.get_status_description() == "SonarQube reported 2 issues, with 1 blocker"


def test_critical_and_blocker_description(formatter) -> None:
    report = _report(formatter)
    report.process(make_finding(severity=Severity.CRITICAL), None, True)
    report.process(make_finding(severity=Severity.BLOCKER), None, True)
    report.process(make_finding(severity=Severity.BLOCKER), None, True)

    assert report.get_status() is CommitState.FAILURE
    assert report.get_status_description() == "SonarQube reported 3 issues, with 1 critical and 2 blocker"


def test_non_blocking_issues_succeed(formatter) -> None:
    report = _report(formatter)
    report.process(make_finding(severity=Severity.MAJOR), None, False)

    assert report.get_status() is CommitState.SUCCESS
    assert report.get_status_description() == "SonarQube reported 1 issue, no critical nor blocker"


def test_inline_findings_are_counted_but_not_listed(formatter) -> None:
    report = _report(formatter)
    report.process(make_finding(severity=Severity.MAJOR, message="inline one"), None, True)

    markdown = report.format_for_markdown()

    assert markdown == (
        "SonarQube analysis reported 1 issue\n\n"
        f"* {formatter.severity_image(Severity.MAJOR)} 1 major\n"
        "\nWatch the comments in this conversation to review them.\n"
    )
    assert "inline one" not in markdown


def test_summary_lists_findings_not_reported_inline(formatter) -> None:
    report = _report(formatter)
    finding = make_finding(severity=Severity.MINOR, message="outside diff", line=99)
    report.process(finding, "https://gh/A.java#L99", False)

    markdown = report.format_for_markdown()

    assert "#### 1 extra issue\n\n" in markdown
    assert "were not modified in the pull request" in markdown
    entry = formatter.global_issue(Severity.MINOR, "outside diff", finding.rule_key, "https://gh/A.java#L99", "src/A.java")
    assert markdown.endswith(f"1. {entry}\n")
    assert markdown.count("outside diff") == 1


def test_severity_breakdown_is_most_severe_first(formatter) -> None:
    report = _report(formatter)
    for severity in (Severity.INFO, Severity.BLOCKER, Severity.MAJOR):
        report.process(make_finding(severity=severity), None, True)

    markdown = report.format_for_markdown()

    assert markdown.index("1 blocker") < markdown.index("1 major") < markdown.index("1 info")


def test_summary_is_capped(formatter) -> None:
    report = _report(formatter, inline=True, max_global_issues=2)
    for i in range(5):
        report.process(make_finding(message=f"m{i}"), None, False)

    markdown = report.format_for_markdown()

    assert "#### 5 extra issues" in markdown
    assert markdown.count("\n1. ") == 2
    assert "m2" not in markdown
    assert markdown.endswith("* ... 3 more\n")
    assert report.new_issue_count == 5


def test_summary_without_inline_reporting(formatter) -> None:
    report = _report(formatter, inline=False, max_global_issues=1)
    report.process(make_finding(message="first"), None, False)
    report.process(make_finding(message="second"), None, False)

    markdown = report.format_for_markdown()

    assert "extra issue" not in markdown
    assert "Note: the following are the top 1 issues" in markdown
    assert "first" in markdown and "second" not in markdown
    assert markdown.endswith("* ... 1 more\n")
