"""
Entrypoint for the host analysis pipeline.

The pipeline calls ``publish_findings`` once per analysis, after the
findings are known. There is no command line interface.
"""

import logging
from typing import Iterable, Optional

from issue_publisher.config import Settings, settings as default_settings
from issue_publisher.findings.models import Finding
from issue_publisher.github.auth import GitHubAppAuth, TokenAuth
from issue_publisher.github.client import GitHubClient
from issue_publisher.github.pull_request import PullRequestFacade
from issue_publisher.observability.logging import LogContext, setup_logging
from issue_publisher.review.formatter import MarkdownFormatter
from issue_publisher.review.publisher import CycleOutcome, IssuePublisher

logger = logging.getLogger(__name__)


def build_client(settings: Settings) -> GitHubClient:
    """
    Build a GitHub client from the configured credentials.

    Args:
        settings: Publisher settings

    Returns:
        GitHubClient: Client authenticated as a GitHub App or with a token
    """
    if settings.uses_app_auth:
        auth = GitHubAppAuth(
            app_id=settings.GITHUB_APP_ID,
            private_key=settings.GITHUB_PRIVATE_KEY,
            installation_id=settings.GITHUB_INSTALLATION_ID,
            api_url=settings.GITHUB_API_URL,
            timeout=settings.GITHUB_TIMEOUT_SECONDS,
        )
    else:
        auth = TokenAuth(settings.GITHUB_OAUTH_TOKEN)

    return GitHubClient(
        auth=auth,
        api_url=settings.GITHUB_API_URL,
        timeout=settings.GITHUB_TIMEOUT_SECONDS,
    )


def build_publisher(settings: Settings, facade: PullRequestFacade) -> IssuePublisher:
    return IssuePublisher(
        change_set=facade,
        sink=facade,
        formatter=MarkdownFormatter(
            server_base_url=settings.SERVER_BASE_URL,
            badge_base_url=settings.BADGE_BASE_URL,
        ),
        try_report_issues_inline=settings.TRY_REPORT_ISSUES_INLINE,
        delete_old_comments=settings.DELETE_OLD_COMMENTS,
        max_global_issues=settings.MAX_GLOBAL_ISSUES,
        analyzer_name=settings.ANALYZER_NAME,
    )


def publish_findings(
    findings: Iterable[Finding],
    settings: Optional[Settings] = None,
    client: Optional[GitHubClient] = None,
) -> CycleOutcome:
    """
    Publish the findings of an analysis on the configured pull request.

    Args:
        findings: Findings of the analysis, consumed once
        settings: Settings to use (defaults to the environment)
        client: GitHub client (built from settings if not provided)

    Returns:
        CycleOutcome: Outcome of the publish cycle

    Raises:
        ConfigurationError: If the pull request or credentials are not configured
        PublishError: If the pull request cannot be loaded
    """
    settings = settings or default_settings
    setup_logging(settings)
    settings.check_publish_ready()

    with LogContext(repository=settings.GITHUB_REPOSITORY, pr_number=settings.GITHUB_PULL_REQUEST):
        facade = PullRequestFacade(client or build_client(settings), settings).load()
        return build_publisher(settings, facade).publish(findings)
