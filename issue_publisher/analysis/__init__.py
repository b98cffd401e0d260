"""
Analysis package for the issue publisher.

Parses pull request patches to find out which lines are part of the
change and where they sit in the diff.
"""

from issue_publisher.analysis.diff_parser import DiffParser, FilePatch

__all__ = ["DiffParser", "FilePatch"]
