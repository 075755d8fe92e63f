"""Coverage profile data model.

Block-centric: a profile keeps every instrumented block with its column
positions, statement count and execution count, because diff coverage
attributes changed lines to blocks rather than to lines.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ExecutionBlock:
    """A contiguous instrumented code unit.

    Several blocks may start on the same line (e.g. a closure passed inline
    as an argument). Frozen and hashable so blocks can be members of ignore
    sets.
    """

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    num_stmt: int
    count: int

    @property
    def lines(self) -> range:
        """Line numbers spanned by the block, inclusive."""
        return range(self.start_line, self.end_line + 1)


@dataclass(slots=True)
class CoverProfile:
    """Coverage blocks recorded for a single source file."""

    file_name: str
    mode: str = "set"
    blocks: list[ExecutionBlock] = field(default_factory=list)

    def sort_blocks(self) -> None:
        """Order blocks by ``(start_line, start_col)`` in place."""
        self.blocks = sort_blocks(self.blocks)


def sort_blocks(blocks: Iterable[ExecutionBlock]) -> list[ExecutionBlock]:
    """Return blocks ordered by start position (stable for equal starts)."""
    return sorted(blocks, key=lambda b: (b.start_line, b.start_col))
