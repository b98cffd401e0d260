"""
Pull request issue publisher.

Publishes static-analysis findings on a GitHub pull request as inline
review comments, a summary comment and a commit status.
"""

__version__ = "1.0.0"
