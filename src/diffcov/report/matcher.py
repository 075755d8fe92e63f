"""Per-file diff coverage matching.

Two strategies:
- new files: every block of the file counts, weighted by its statement count
- modified files: every changed line counts once, through the block owning it

Both take the file's blocks already sorted by start position and never sort
them again.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from diffcov.annotation.models import IgnoreProfile
from diffcov.git.models import Change, DiffSection
from diffcov.profile.models import ExecutionBlock
from diffcov.report.locator import find_block
from diffcov.report.models import CoverageProfile, ViolationSection


def match_new_file(
    blocks: Sequence[ExecutionBlock],
    change: Change,
    ignore_profile: IgnoreProfile | None = None,
    ignored_lines: set[int] | None = None,
) -> CoverageProfile | None:
    """Diff coverage of a newly added file.

    Counts statements rather than lines: a block contributes its statement
    count to the totals, and its whole line range to the violations when it
    never executed.

    Returns:
        None when no statement is effective (fully ignored or uninstrumented).
    """
    ignored_lines = set() if ignored_lines is None else ignored_lines
    total = effective = covered = 0
    violations: set[int] = set()

    for block in blocks:
        total += block.num_stmt

        if ignore_profile is not None and ignore_profile.ignores(block):
            ignored_lines.update(block.lines)
            continue

        effective += block.num_stmt
        if block.count > 0:
            covered += block.num_stmt
        else:
            violations.update(n for n in block.lines if n not in ignored_lines)

    if effective == 0:
        return None

    violation_lines = sort_lines(violations)
    section = change.sections[0] if change.sections else DiffSection(1, 0)
    return CoverageProfile(
        file_name=change.file_name,
        total_lines=total,
        effective_lines=effective,
        ignored_lines=total - effective,
        covered_lines=covered,
        violation_lines=violation_lines,
        violation_sections=(
            ViolationSection(
                start_line=section.start_line,
                end_line=section.end_line,
                contents=section.contents,
                violation_lines=violation_lines,
            ),
        ),
    )


def match_modified_file(
    blocks: Sequence[ExecutionBlock],
    change: Change,
    ignore_profile: IgnoreProfile | None = None,
    ignored_lines: set[int] | None = None,
) -> CoverageProfile | None:
    """Diff coverage of the changed lines of a modified file.

    ``ignored_lines`` carries the lines of ignored blocks seen so far in this
    file, so a line shared by an ignored block and a later block
    (``f(func() int { return 1 })``) is not counted twice.

    Returns:
        None when no changed line is effective.
    """
    ignored_lines = set() if ignored_lines is None else ignored_lines
    total = effective = covered = 0
    all_violations: list[int] = []
    violation_sections: list[ViolationSection] = []

    for section in change.sections:
        violations: list[int] = []
        for line_number in range(section.start_line, section.end_line + 1):
            block = find_block(blocks, line_number, section.line_text(line_number))
            if block is None:
                continue

            total += 1
            if ignore_profile is not None and ignore_profile.ignores(block):
                ignored_lines.update(block.lines)
                continue

            if line_number in ignored_lines:
                continue

            effective += 1
            if block.count > 0:
                covered += 1
            else:
                violations.append(line_number)

        if violations:
            violation_sections.append(
                ViolationSection(
                    start_line=section.start_line,
                    end_line=section.end_line,
                    contents=section.contents,
                    violation_lines=tuple(violations),
                )
            )
            all_violations.extend(violations)

    if effective == 0:
        return None

    return CoverageProfile(
        file_name=change.file_name,
        total_lines=total,
        effective_lines=effective,
        ignored_lines=total - effective,
        covered_lines=covered,
        violation_lines=sort_lines(all_violations),
        violation_sections=tuple(violation_sections),
    )


def sort_lines(lines: Iterable[int]) -> tuple[int, ...]:
    """Line numbers in increasing order, without duplicates."""
    return tuple(sorted(set(lines)))
