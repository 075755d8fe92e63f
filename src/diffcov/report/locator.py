"""Locate the instrumented block that owns a source line.

Diff line ranges are coarser than instrumentation: several blocks can open
on one line (``f(func() int { return 1 })``), so ownership is decided by
line range first and by column on the block's first line.
"""

from __future__ import annotations

import bisect
from collections.abc import Sequence

from diffcov.profile.models import ExecutionBlock


def find_block(
    blocks: Sequence[ExecutionBlock], line_number: int, line: str
) -> ExecutionBlock | None:
    """Return the block owning ``line_number``, or None.

    Args:
        blocks: The file's blocks, sorted by ``(start_line, start_col)``.
        line_number: 1-based line to attribute.
        line: Text of that line, used to reject blocks that start past the
            end of the visible text on their first line.

    Returns:
        The owning block; None for lines no statement covers (comments,
        blank lines, declarations).
    """
    if not blocks:
        return None

    idx = bisect.bisect_left(blocks, line_number, key=lambda b: b.start_line)

    # past the end: only the last block can still span the line
    if idx == len(blocks):
        last = blocks[-1]
        return last if _owns(last, line_number, line) else None

    for i in range(idx, -1, -1):
        if _owns(blocks[i], line_number, line):
            return blocks[i]
    return None


def _owns(block: ExecutionBlock, line_number: int, line: str) -> bool:
    if not block.start_line <= line_number <= block.end_line:
        return False
    # start_col is a 1-based byte column
    return block.start_line != line_number or len(line.encode("utf-8")) > block.start_col
