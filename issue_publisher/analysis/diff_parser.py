"""
Diff parser module.

Parses the per-file patches GitHub returns for a pull request to extract:
- Hunks and their line changes
- New-file line numbers visible in the diff
- The diff position of each of those lines (used to place review comments)
"""

import re
import logging
from typing import Dict, List, Optional
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class ChangeType(Enum):
    """Type of change in a diff."""
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


@dataclass
class LineChange:
    """Represents a single line of a hunk."""
    position: int
    change_type: ChangeType
    content: str
    old_line_number: Optional[int] = None
    new_line_number: Optional[int] = None


@dataclass
class HunkChange:
    """Represents a hunk (continuous block of changes) in a patch."""
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    header: str
    lines: List[LineChange] = field(default_factory=list)


@dataclass
class FilePatch:
    """Parsed patch of a single file."""
    filename: str
    hunks: List[HunkChange]
    additions: int = 0
    deletions: int = 0

    def position_by_line(self) -> Dict[int, int]:
        """
        Map new-file line numbers to diff positions.

        Only lines visible in the patch (context or additions) are mapped.

        Returns:
            Dict[int, int]: new line number -> 1-indexed diff position
        """
        mapping = {}
        for hunk in self.hunks:
            for line in hunk.lines:
                if line.new_line_number is not None:
                    mapping[line.new_line_number] = line.position
        return mapping


class DiffParser:
    """
    Parses GitHub file patches.

    A patch is the ``patch`` field of a pull request file: the hunks of a
    unified diff without the ``diff --git``/``---``/``+++`` headers. Diff
    positions count lines from the first hunk header (position 0), as the
    review comments API expects.
    """

    HUNK_HEADER_PATTERN = re.compile(r'^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$')

    def parse_patch(self, filename: str, patch: Optional[str]) -> FilePatch:
        """
        Parse a single file patch.

        Args:
            filename: Path of the file the patch belongs to
            patch: Patch text, or None for binary/too large files

        Returns:
            FilePatch: Parsed patch (no hunks when there is no patch)
        """
        file_patch = FilePatch(filename=filename, hunks=[])
        if not patch:
            logger.debug("No patch for file", extra={"filename": filename})
            return file_patch

        current_hunk = None
        old_line = 0
        new_line = 0

        for position, line in enumerate(patch.split('\n')):
            match = self.HUNK_HEADER_PATTERN.match(line)
            if match:
                old_line = int(match.group(1))
                new_line = int(match.group(3))
                current_hunk = HunkChange(
                    old_start=old_line,
                    old_count=int(match.group(2)) if match.group(2) else 1,
                    new_start=new_line,
                    new_count=int(match.group(4)) if match.group(4) else 1,
                    header=match.group(5).strip(),
                )
                file_patch.hunks.append(current_hunk)
                continue

            if current_hunk is None or not line:
                continue

            prefix = line[0]
            if prefix == '+':
                current_hunk.lines.append(LineChange(
                    position=position,
                    change_type=ChangeType.ADDED,
                    content=line[1:],
                    new_line_number=new_line,
                ))
                new_line += 1
                file_patch.additions += 1
            elif prefix == '-':
                current_hunk.lines.append(LineChange(
                    position=position,
                    change_type=ChangeType.REMOVED,
                    content=line[1:],
                    old_line_number=old_line,
                ))
                old_line += 1
                file_patch.deletions += 1
            elif prefix == ' ':
                current_hunk.lines.append(LineChange(
                    position=position,
                    change_type=ChangeType.CONTEXT,
                    content=line[1:],
                    old_line_number=old_line,
                    new_line_number=new_line,
                ))
                old_line += 1
                new_line += 1
            # "\ No newline at end of file" takes a position but no line

        return file_patch
