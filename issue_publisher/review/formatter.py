"""
Formatters for pull request comments.

Converts findings into GitHub-compatible markdown for inline comments and
for the entries of the global summary comment.
"""

from typing import Optional
from urllib.parse import quote

from issue_publisher.findings.models import Severity


class MarkdownFormatter:
    """Renders findings as markdown."""

    def __init__(
        self,
        server_base_url: str = "http://localhost:9000/",
        badge_base_url: str = "https://sonarsource.github.io/sonar-github",
    ):
        """
        Initialize formatter.

        Args:
            server_base_url: Analysis server URL, used for rule links
            badge_base_url: Location of the severity and rule images
        """
        self.rule_url_prefix = server_base_url if server_base_url.endswith("/") else server_base_url + "/"
        self.badge_base_url = badge_base_url.rstrip("/")

    def severity_image(self, severity: Severity) -> str:
        """
        Severity badge.

        Args:
            severity: Finding severity

        Returns:
            Markdown image
        """
        return (
            f"![{severity.value}]({self.badge_base_url}/severity-{severity.value.lower()}.png "
            f"'Severity: {severity.value}')"
        )

    def rule_link(self, rule_key: str) -> str:
        url = f"{self.rule_url_prefix}coding_rules#rule_key={quote(rule_key, safe='')}"
        return f"[![rule]({self.badge_base_url}/rule.png)]({url})"

    def inline_issue(self, severity: Severity, message: str, rule_key: str) -> str:
        """
        One line of an inline review comment.

        Args:
            severity: Finding severity
            message: Finding message
            rule_key: Rule identifier

        Returns:
            Markdown line (without terminator)
        """
        return f"{self.severity_image(severity)} {message} {self.rule_link(rule_key)}"

    def global_issue(
        self,
        severity: Severity,
        message: str,
        rule_key: str,
        url: Optional[str],
        component_key: Optional[str],
    ) -> str:
        """
        One entry of the global summary comment.

        The message links to ``url`` when it is known. Otherwise the
        component is named after it.

        Args:
            severity: Finding severity
            message: Finding message
            rule_key: Rule identifier
            url: Link to the finding location, if any
            component_key: Component of the finding, if any

        Returns:
            Markdown entry (without list marker or terminator)
        """
        parts = [self.severity_image(severity), " "]
        if url is not None:
            parts.append(f"[{message}]({url})")
        else:
            parts.append(message)
            if component_key:
                parts.append(f" ({component_key})")
        parts.append(" ")
        parts.append(self.rule_link(rule_key))
        return "".join(parts)
