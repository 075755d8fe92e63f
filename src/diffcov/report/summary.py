"""Structured diff coverage report generation.

Turns Statistics and the flattened coverage tree into a JSON-ready dict.

Output schema for build_summary:
{
    "summary": {
        "compared_branch": str,
        "total_files": int,
        "total_lines": int,
        "effective_lines": int,
        "ignored_lines": int,
        "covered_lines": int,
        "violation_lines": int,
        "coverage_percent": float | null   # null when nothing is effective
    },
    "files": [
        {
            "path": str,
            "total_lines": int,
            "effective_lines": int,
            "ignored_lines": int,
            "covered_lines": int,
            "coverage_percent": float,
            "violation_lines": [int, ...],
            "violation_sections": [
                {"start_line": int, "end_line": int, "violation_lines": [int, ...]},
                ...
            ]
        },
        ...
    ],
    "tree": [
        {"path": str, "effective_lines": int, "covered_lines": int,
         "violation_lines": int, "coverage_percent": float | null, "is_file": bool},
        ...
    ]
}
"""

import math
from collections.abc import Sequence
from typing import Any

from diffcov.report.models import CoverageProfile, NodeInfo, Statistics


def _percent_or_none(value: float) -> float | None:
    return None if math.isnan(value) else round(value, 2)


def compute_file_stats(profiles: Sequence[CoverageProfile]) -> list[dict[str, Any]]:
    """Per-file diff coverage, lowest coverage first."""
    file_stats = [
        {
            "path": p.file_name,
            "total_lines": p.total_lines,
            "effective_lines": p.effective_lines,
            "ignored_lines": p.ignored_lines,
            "covered_lines": p.covered_lines,
            "coverage_percent": round(p.coverage_percent, 2),
            "violation_lines": list(p.violation_lines),
            "violation_sections": [
                {
                    "start_line": s.start_line,
                    "end_line": s.end_line,
                    "violation_lines": list(s.violation_lines),
                }
                for s in p.violation_sections
            ],
        }
        for p in profiles
    ]
    file_stats.sort(key=lambda f: (f["coverage_percent"], f["path"]))
    return file_stats


def build_summary(
    statistics: Statistics,
    nodes: Sequence[NodeInfo] = (),
    *,
    include_files: bool = True,
) -> dict[str, Any]:
    """Build a structured diff coverage summary.

    Args:
        statistics: Run totals from DiffCoverage.generate().
        nodes: Flattened coverage tree; omitted from the output when empty.
        include_files: Whether to include per-file details.

    Returns:
        Structured dict suitable for JSON serialization.
    """
    result: dict[str, Any] = {
        "summary": {
            "compared_branch": statistics.compared_branch,
            "total_files": len(statistics.coverage_profiles),
            "total_lines": statistics.total_lines,
            "effective_lines": statistics.effective_lines,
            "ignored_lines": statistics.ignored_lines,
            "covered_lines": statistics.covered_lines,
            "violation_lines": statistics.violation_lines,
            "coverage_percent": _percent_or_none(statistics.coverage_percent),
        },
    }

    if include_files:
        result["files"] = compute_file_stats(statistics.coverage_profiles)

    if nodes:
        result["tree"] = [
            {
                "path": n.path,
                "effective_lines": n.effective_lines,
                "covered_lines": n.covered_lines,
                "violation_lines": n.violation_lines,
                "coverage_percent": _percent_or_none(n.coverage_percent),
                "is_file": n.coverage_profile is not None,
            }
            for n in nodes
        ]

    return result


def build_text_summary(statistics: Statistics) -> str:
    """One-line summary for log and status output."""
    if statistics.effective_lines == 0:
        return f"No changed code to cover (compared to {statistics.compared_branch})"

    return (
        f"Diff coverage: {statistics.coverage_percent:.1f}% "
        f"({statistics.covered_lines}/{statistics.effective_lines} lines, "
        f"compared to {statistics.compared_branch})"
    )
