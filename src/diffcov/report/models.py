"""Diff coverage result models.

All models are frozen dataclasses: a CoverageProfile is built once per file
and then only read (by the tree, the summary builder and the renderers).
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ViolationSection:
    """A changed section of a file that contains uncovered lines."""

    start_line: int
    end_line: int
    contents: tuple[str, ...]
    violation_lines: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class CoverageProfile:
    """Diff coverage of one changed file.

    ``total_lines`` counts every changed line (or statement, for new files)
    attributable to an instrumented block; ``ignored_lines`` those excluded by
    annotations. ``violation_lines`` is sorted and duplicate-free.
    """

    file_name: str
    total_lines: int
    effective_lines: int
    ignored_lines: int
    covered_lines: int
    violation_lines: tuple[int, ...] = ()
    violation_sections: tuple[ViolationSection, ...] = ()

    @property
    def coverage_percent(self) -> float:
        return self.covered_lines / self.effective_lines * 100


@dataclass(frozen=True, slots=True)
class NodeInfo:
    """Flattened view of one coverage tree node, for hierarchical rendering."""

    path: str
    total_lines: int
    effective_lines: int
    ignored_lines: int
    covered_lines: int
    violation_lines: int
    coverage_profile: CoverageProfile | None = None

    @property
    def coverage_percent(self) -> float:
        """Covered over effective, ``nan`` when nothing is effective."""
        if self.effective_lines == 0:
            return float("nan")
        return self.covered_lines / self.effective_lines * 100


@dataclass(frozen=True, slots=True)
class Statistics:
    """Run-level diff coverage totals."""

    compared_branch: str
    total_lines: int
    effective_lines: int
    ignored_lines: int
    covered_lines: int
    coverage_percent: float  # nan when effective_lines == 0
    violation_lines: int
    coverage_profiles: tuple[CoverageProfile, ...] = field(default_factory=tuple)
