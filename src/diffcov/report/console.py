"""Rich rendering of a diff coverage run."""

import math
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from diffcov.report.models import CoverageProfile, NodeInfo, Statistics


def _format_percent(value: float) -> str:
    return "n/a" if math.isnan(value) else f"{value:.1f}%"


def _percent_style(value: float) -> str:
    if math.isnan(value):
        return "dim"
    if value >= 80:
        return "green"
    if value >= 50:
        return "yellow"
    return "red"


def make_tree_table(nodes: Sequence[NodeInfo]) -> Table:
    """Table of every tree node, indented by depth."""
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 1), pad_edge=False)
    table.add_column("path")
    table.add_column("effective", justify="right")
    table.add_column("covered", justify="right")
    table.add_column("violations", justify="right")
    table.add_column("coverage", justify="right")

    if not nodes:
        return table

    root_depth = nodes[0].path.count("/")
    for node in nodes:
        depth = node.path.count("/") - root_depth
        name = node.path.rsplit("/", 1)[-1] if depth else node.path
        percent = node.coverage_percent
        table.add_row(
            Text("  " * depth + name, style="cyan" if node.coverage_profile else "bold"),
            str(node.effective_lines),
            str(node.covered_lines),
            str(node.violation_lines),
            Text(_format_percent(percent), style=_percent_style(percent)),
        )
    return table


def render_violations(profile: CoverageProfile, console: Console) -> None:
    """Print the changed sections of ``profile`` with uncovered lines marked."""
    console.print(Text(profile.file_name, style="bold"))
    for section in profile.violation_sections:
        uncovered = set(section.violation_lines)
        for offset, content in enumerate(section.contents):
            line_number = section.start_line + offset
            marker = "✗" if line_number in uncovered else " "
            style = "red" if line_number in uncovered else "dim"
            console.print(Text(f"  {marker} {line_number:>5} | {content}", style=style))
        if not section.contents:
            lines = ", ".join(str(n) for n in section.violation_lines)
            console.print(Text(f"  ✗ uncovered lines: {lines}", style="red"))
        console.print()


def render_console(
    statistics: Statistics, nodes: Sequence[NodeInfo], console: Console
) -> None:
    """Print the coverage tree, the totals and every file's violations."""
    console.print(make_tree_table(nodes))
    console.print()

    percent = statistics.coverage_percent
    console.print(
        Text.assemble(
            ("Diff coverage ", "bold"),
            (_format_percent(percent), _percent_style(percent)),
            f"  {statistics.covered_lines}/{statistics.effective_lines} lines covered, "
            f"{statistics.ignored_lines} ignored, "
            f"compared to {statistics.compared_branch}",
        )
    )

    violating = [p for p in statistics.coverage_profiles if p.violation_lines]
    if not violating:
        return
    console.print()
    for profile in violating:
        render_violations(profile, console)
