"""Patch mutation for partial staging.

Contains functions that carve a single-hunk sub-patch out of a file diff:
- get_header_length: Number of file header lines before the first hunk
- extract_hunk: The hunk containing a line, unmodified
- extract_line: The hunk reduced to a single staged change
- extract_hunk_without_line: The hunk with one change taken out
- update_hunk_header: Rewrite a hunk header's post-image line count
- is_empty: Whether a sub-patch still carries any change

Every sub-patch is the file header followed by exactly one hunk and a
trailing newline, ready to be fed to git apply.
"""

import re
from typing import Sequence

from hunkstage.staging.errors import MalformedHeader, MalformedPatch
from hunkstage.staging.parser import split_diff_lines
from hunkstage.staging.search import next_index, prev_index


# Format: @@ -old_start[,old_len] +new_start[,new_len] @@ optional context
_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def get_header_length(lines: Sequence[str]) -> int:
    """Return the number of file header lines before the first hunk.

    Raises:
        MalformedPatch: If no line starts with @@.
    """
    for index, line in enumerate(lines):
        if line.startswith("@@"):
            return index
    raise MalformedPatch("Could not find any hunks in this patch")


def _find_hunk_start(lines: Sequence[str], line_index: int) -> int:
    """Search backward from line_index for the header of its hunk."""
    if not 0 <= line_index < len(lines):
        raise MalformedPatch(f"Line {line_index} is outside the patch")
    for index in range(line_index, -1, -1):
        if lines[index].startswith("@@"):
            return index
    raise MalformedPatch(f"Could not find the hunk containing line {line_index}")


def _join_patch(header: Sequence[str], hunk: Sequence[str]) -> str:
    # git apply requires the patch to end with a newline
    return "\n".join(list(header) + list(hunk)) + "\n"


def extract_hunk(diff: str, hunk_starts: Sequence[int], line_index: int) -> str:
    """Isolate the hunk containing line_index, prefixed with the file header.

    Args:
        diff: Full single-file diff.
        hunk_starts: Ascending line indices of the hunk headers.
        line_index: Any line inside the wanted hunk.

    Returns:
        The sub-patch. Header counts are untouched since the hunk is whole.

    Raises:
        MalformedPatch: If there are no hunks or line_index precedes them.
    """
    lines = split_diff_lines(diff)
    header_length = get_header_length(lines)

    if not hunk_starts or line_index < hunk_starts[0]:
        raise MalformedPatch(f"Could not find the hunk containing line {line_index}")

    hunk_start = hunk_starts[prev_index(hunk_starts, line_index, inclusive=True)]
    next_hunk = next_index(hunk_starts, line_index)
    # wrapping to the first hunk means this is the last one
    hunk_end = len(lines) if next_hunk == 0 else hunk_starts[next_hunk]

    return _join_patch(lines[:header_length], lines[hunk_start:hunk_end])


def extract_line(diff: str, line_index: int) -> str:
    """Build a patch that stages only the change at line_index.

    Other removals in the hunk become context, other additions are dropped,
    and the post-image count in the hunk header is adjusted to match.

    Raises:
        MalformedPatch: If no hunk encloses line_index.
        MalformedHeader: If the hunk header cannot be rewritten.
    """
    lines = split_diff_lines(diff)
    header_length = get_header_length(lines)
    hunk_start = _find_hunk_start(lines, line_index)

    line_changes = 0
    new_hunk = [lines[hunk_start]]
    for index in range(hunk_start + 1, len(lines)):
        line = lines[index]
        if line.startswith("@@"):
            break
        if index != line_index:
            # unstaged removals stay in the new file, so keep them as context
            if line.startswith("-"):
                new_hunk.append(" " + line[1:])
                line_changes += 1
                continue
            # unstaged additions must not appear in the new file
            if line.startswith("+"):
                line_changes -= 1
                continue
        new_hunk.append(line)

    new_hunk[0] = update_hunk_header(new_hunk[0], line_changes)
    return _join_patch(lines[:header_length], new_hunk)


def extract_hunk_without_line(diff: str, line_index: int) -> str:
    """Build the enclosing hunk with the change at line_index taken out.

    Every other change in the hunk is kept exactly as it was.

    Raises:
        MalformedPatch: If no hunk encloses line_index.
        MalformedHeader: If the hunk header cannot be rewritten.
    """
    lines = split_diff_lines(diff)
    header_length = get_header_length(lines)
    hunk_start = _find_hunk_start(lines, line_index)

    line_changes = 0
    new_hunk = [lines[hunk_start]]
    for index in range(hunk_start + 1, len(lines)):
        line = lines[index]
        if line.startswith("@@"):
            break
        if index == line_index:
            if line.startswith("-"):
                new_hunk.append(" " + line[1:])
                line_changes += 1
                continue
            if line.startswith("+"):
                line_changes -= 1
                continue
        new_hunk.append(line)

    new_hunk[0] = update_hunk_header(new_hunk[0], line_changes)
    return _join_patch(lines[:header_length], new_hunk)


def update_hunk_header(header: str, line_changes: int) -> str:
    """Return the hunk header with its post-image line count adjusted.

    If the hunk has three additions but only one is being staged, then
        @@ -14,8 +14,11 @@ import (
    becomes
        @@ -14,8 +14,9 @@ import (

    Args:
        header: The @@ line of the hunk.
        line_changes: Delta to add to the post-image count.

    Returns:
        The header with every other character preserved.

    Raises:
        MalformedHeader: If the header is not a valid hunk header.
    """
    match = _HUNK_HEADER_RE.match(header)
    if not match:
        raise MalformedHeader(f"Invalid hunk header: {header}")

    if match.group(4) is not None:
        new_length = int(match.group(4)) + line_changes
        start, end = match.span(4)
        return f"{header[:start]}{new_length}{header[end:]}"

    # "+c" is shorthand for "+c,1"
    new_length = 1 + line_changes
    end = match.end(3)
    return f"{header[:end]},{new_length}{header[end:]}"


def is_empty(patch: str) -> bool:
    """Check whether a single-hunk patch carries no additions or removals."""
    past_header = False
    for line in patch.split("\n"):
        if line.startswith("@@"):
            past_header = True
            continue
        if past_header and line.startswith(("-", "+")):
            return False
    return True
