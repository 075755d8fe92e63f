"""Tests for report/summary.py and report/console.py output."""

from __future__ import annotations

import io
import json

from rich.console import Console

from diffcov.report.console import render_console
from diffcov.report.models import CoverageProfile, NodeInfo, Statistics, ViolationSection
from diffcov.report.summary import build_summary, build_text_summary


def _statistics(*profiles: CoverageProfile) -> Statistics:
    effective = sum(p.effective_lines for p in profiles)
    covered = sum(p.covered_lines for p in profiles)
    return Statistics(
        compared_branch="origin/main",
        total_lines=sum(p.total_lines for p in profiles),
        effective_lines=effective,
        ignored_lines=sum(p.ignored_lines for p in profiles),
        covered_lines=covered,
        coverage_percent=covered / effective * 100 if effective else float("nan"),
        violation_lines=sum(len(p.violation_lines) for p in profiles),
        coverage_profiles=profiles,
    )


UNCOVERED = CoverageProfile(
    file_name="pkg/a.go",
    total_lines=3,
    effective_lines=3,
    ignored_lines=0,
    covered_lines=1,
    violation_lines=(11, 12),
    violation_sections=(
        ViolationSection(10, 12, ("\tx := 1", "\ty := 2", "\treturn x + y"), (11, 12)),
    ),
)

COVERED = CoverageProfile(
    file_name="pkg/b.go",
    total_lines=2,
    effective_lines=1,
    ignored_lines=1,
    covered_lines=1,
)


class TestBuildSummary:
    """Tests for build_summary."""

    def test_summary_totals(self) -> None:
        result = build_summary(_statistics(UNCOVERED, COVERED))

        assert result["summary"] == {
            "compared_branch": "origin/main",
            "total_files": 2,
            "total_lines": 5,
            "effective_lines": 4,
            "ignored_lines": 1,
            "covered_lines": 2,
            "violation_lines": 2,
            "coverage_percent": 50.0,
        }

    def test_files_sorted_lowest_coverage_first(self) -> None:
        result = build_summary(_statistics(COVERED, UNCOVERED))

        assert [f["path"] for f in result["files"]] == ["pkg/a.go", "pkg/b.go"]
        first = result["files"][0]
        assert first["coverage_percent"] == 33.33
        assert first["violation_lines"] == [11, 12]
        assert first["violation_sections"] == [
            {"start_line": 10, "end_line": 12, "violation_lines": [11, 12]}
        ]

    def test_undefined_percent_is_null(self) -> None:
        result = build_summary(_statistics())

        assert result["summary"]["coverage_percent"] is None
        assert result["files"] == []
        json.dumps(result)

    def test_tree_included_when_nodes_given(self) -> None:
        nodes = [
            NodeInfo("mod", 3, 3, 0, 1, 2),
            NodeInfo("mod/pkg/a.go", 3, 3, 0, 1, 2, coverage_profile=UNCOVERED),
            NodeInfo("mod/empty", 0, 0, 0, 0, 0),
        ]

        result = build_summary(_statistics(UNCOVERED), nodes)

        assert [n["path"] for n in result["tree"]] == ["mod", "mod/pkg/a.go", "mod/empty"]
        assert result["tree"][1]["is_file"] is True
        assert result["tree"][2]["coverage_percent"] is None

    def test_files_can_be_omitted(self) -> None:
        result = build_summary(_statistics(UNCOVERED), include_files=False)

        assert "files" not in result
        assert "tree" not in result


class TestBuildTextSummary:
    """Tests for build_text_summary."""

    def test_with_coverage(self) -> None:
        text = build_text_summary(_statistics(UNCOVERED, COVERED))

        assert text == "Diff coverage: 50.0% (2/4 lines, compared to origin/main)"

    def test_nothing_to_cover(self) -> None:
        assert "No changed code" in build_text_summary(_statistics())


class TestRenderConsole:
    """Tests for render_console."""

    def _render(self, statistics: Statistics, nodes: list[NodeInfo]) -> str:
        buffer = io.StringIO()
        console = Console(file=buffer, width=120, color_system=None)
        render_console(statistics, nodes, console)
        return buffer.getvalue()

    def test_renders_tree_totals_and_violations(self) -> None:
        nodes = [
            NodeInfo("mod", 3, 3, 0, 1, 2),
            NodeInfo("mod/pkg", 3, 3, 0, 1, 2),
            NodeInfo("mod/pkg/a.go", 3, 3, 0, 1, 2, coverage_profile=UNCOVERED),
        ]

        output = self._render(_statistics(UNCOVERED), nodes)

        assert "a.go" in output
        assert "33.3%" in output
        assert "compared to origin/main" in output
        assert "return x + y" in output
        assert "✗    12" in output

    def test_undefined_percent_renders_na(self) -> None:
        output = self._render(_statistics(), [NodeInfo("mod", 0, 0, 0, 0, 0)])

        assert "n/a" in output
