"""Patch parser for GitHub diff positions of PR review comments."""

import re

HUNK_HEADER = re.compile(r"^@@ -\d+(?:,\d+)? \+\d+(?:,\d+)? @@")


def count_patch_positions(patch: str) -> int:
    """Count the diff positions available in a file's patch.

    GitHub anchors review comments by position: the line just below the first
    ``@@`` hunk header is position 1, and counting continues through later hunk
    headers until the end of the file's patch.

    Args:
        patch: Unified diff patch string for one file

    Returns:
        Highest valid position, 0 when the patch has no hunk
    """
    if not patch:
        return 0

    lines = patch.split("\n")
    if lines and lines[-1] == "":
        lines = lines[:-1]

    for index, line in enumerate(lines):
        if HUNK_HEADER.match(line):
            return len(lines) - index - 1
    return 0


def is_valid_position(position: int, patch: str) -> bool:
    """Check that ``position`` anchors to a line of ``patch``."""
    return (
        isinstance(position, int)
        and not isinstance(position, bool)
        and 1 <= position <= count_patch_positions(patch)
    )
