"""Diff index parser.

Contains:
- split_diff_lines: Split diff text into lines with stable indices
- parse_diff: Locate hunk headers and stageable lines in a single-file diff
"""

from hunkstage.staging.errors import MalformedPatch


def split_diff_lines(diff: str) -> list[str]:
    """Split diff text into lines.

    A trailing newline does not produce an extra empty line, so indices
    line up with what git prints.
    """
    lines = diff.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_diff(diff: str) -> tuple[list[int], list[int]]:
    """Parse a single-file unified diff into its index tables.

    Args:
        diff: Raw output of git diff for one file.

    Returns:
        Tuple of (hunk start line indices, stageable line indices).

    Raises:
        MalformedPatch: If the diff contains no hunk header.
    """
    hunk_starts: list[int] = []
    stageable_lines: list[int] = []

    for index, line in enumerate(split_diff_lines(diff)):
        if line.startswith("@@"):
            hunk_starts.append(index)
        elif hunk_starts and line.startswith(("+", "-")):
            stageable_lines.append(index)

    if not hunk_starts:
        raise MalformedPatch("Could not find any hunks in this patch")

    return hunk_starts, stageable_lines
