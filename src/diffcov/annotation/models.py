"""Ignore profiles produced from in-source annotations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from diffcov.profile.models import ExecutionBlock


class IgnoreType(Enum):
    """Scope of an ignore annotation."""

    FILE_IGNORE = "file"
    BLOCK_IGNORE = "block"


@dataclass(frozen=True, slots=True)
class IgnoreProfile:
    """Blocks of one file excluded from diff coverage.

    FILE_IGNORE drops the file entirely. BLOCK_IGNORE keeps counting the
    listed blocks toward a file's total but never as effective, covered or
    violation lines.
    """

    type: IgnoreType
    ignore_blocks: frozenset[ExecutionBlock] = field(default_factory=frozenset)

    def ignores(self, block: ExecutionBlock) -> bool:
        return block in self.ignore_blocks
