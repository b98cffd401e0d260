"""
GitHub integration package.

This package handles all GitHub API interactions including:
- Token and GitHub App authentication
- API client wrapper
- The pull request facade used by the publisher
"""

from issue_publisher.github.auth import GitHubAppAuth, TokenAuth
from issue_publisher.github.client import GitHubClient
from issue_publisher.github.pull_request import PublishError, PullRequestFacade

__all__ = ["GitHubAppAuth", "TokenAuth", "GitHubClient", "PublishError", "PullRequestFacade"]
