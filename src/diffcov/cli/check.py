"""diffcov check command - diff coverage of the current branch."""

import json
import math
from pathlib import Path

import click
from rich.console import Console

from diffcov.annotation.parser import CommentAnnotationParser
from diffcov.config.loader import load_config
from diffcov.config.models import DiffCovConfig
from diffcov.core.errors import DiffCovError
from diffcov.core.logging import configure_logging, get_logger, set_run_id
from diffcov.git.changes import changes_from_patch, load_changes
from diffcov.git.errors import GitError
from diffcov.git.models import Change
from diffcov.profile.gocov import parse_profiles
from diffcov.report.console import render_console
from diffcov.report.diffcoverage import DiffCoverage
from diffcov.report.models import NodeInfo, Statistics
from diffcov.report.summary import build_summary, build_text_summary

log = get_logger(__name__)


def _read_changes(repo_root: Path, compared_branch: str, diff_file: Path | None) -> list[Change]:
    if diff_file is None:
        return load_changes(repo_root, compared_branch)
    try:
        patch_text = diff_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Cannot read diff file {diff_file}: {e}") from e
    return changes_from_patch(patch_text, source=str(diff_file))


def run_check(
    repo_root: Path,
    coverprofile: Path,
    config: DiffCovConfig,
    *,
    diff_file: Path | None = None,
    extra_excludes: tuple[str, ...] = (),
) -> tuple[Statistics, list[NodeInfo]]:
    """Compute diff coverage of ``repo_root`` with the given configuration.

    Raises:
        DiffCovError: Invalid pattern, missing test files, malformed input.
        GitError: The repository or the compared branch cannot be read.
    """
    coverage = config.coverage
    profiles = parse_profiles(coverprofile)
    changes = _read_changes(repo_root, coverage.compared_branch, diff_file)
    log.info("inputs_loaded", profiles=len(profiles), changes=len(changes))

    engine = DiffCoverage(
        profiles,
        changes,
        [*coverage.excludes, *extra_excludes],
        coverage.compared_branch,
        repo_root,
        coverage.module_path or repo_root.name,
        annotation_parser=CommentAnnotationParser(coverage.annotation_prefix),
        test_file_suffix=coverage.test_file_suffix,
    )
    return engine.generate()


def below_baseline(statistics: Statistics, baseline: float | None) -> bool:
    """Whether the run fails the baseline; runs with nothing to cover pass."""
    if baseline is None or math.isnan(statistics.coverage_percent):
        return False
    return statistics.coverage_percent < baseline


@click.command()
@click.option(
    "--repo",
    "repo",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Repository root (default: current directory)",
)
@click.option(
    "--coverprofile",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Go cover profile (go test -coverprofile=...)",
)
@click.option("--compare-branch", default=None, help="Ref to diff against (default: origin/main)")
@click.option(
    "--diff-file",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read changes from a saved unified diff instead of git",
)
@click.option("--module", "module_path", default=None, help="Root label of the coverage tree")
@click.option(
    "--exclude",
    "excludes",
    multiple=True,
    help="Regex of profile file names to leave out (repeatable)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Output format",
)
@click.option(
    "--coverage-baseline",
    type=click.FloatRange(0, 100),
    default=None,
    help="Exit with status 1 when diff coverage is below this percentage",
)
@click.pass_context
def check_command(
    ctx: click.Context,
    repo: Path,
    coverprofile: Path,
    compare_branch: str | None,
    diff_file: Path | None,
    module_path: str | None,
    excludes: tuple[str, ...],
    output_format: str | None,
    coverage_baseline: float | None,
) -> None:
    """Report test coverage of the lines changed since a base branch.

    Every changed Go file must have a *_test.go file in its directory.
    """
    repo_root = repo.resolve()
    set_run_id()

    coverage_overrides: dict[str, object] = {}
    if compare_branch is not None:
        coverage_overrides["compared_branch"] = compare_branch
    if module_path is not None:
        coverage_overrides["module_path"] = module_path
    report_overrides: dict[str, object] = {}
    if output_format is not None:
        report_overrides["format"] = output_format
    if coverage_baseline is not None:
        report_overrides["coverage_baseline"] = coverage_baseline

    overrides: dict[str, object] = {}
    if coverage_overrides:
        overrides["coverage"] = coverage_overrides
    if report_overrides:
        overrides["report"] = report_overrides

    try:
        config = load_config(repo_root, **overrides)
        if not (ctx.obj or {}).get("verbose"):
            configure_logging(config=config.logging)
        statistics, nodes = run_check(
            repo_root,
            coverprofile,
            config,
            diff_file=diff_file,
            extra_excludes=excludes,
        )
    except (DiffCovError, GitError) as e:
        raise click.ClickException(str(e)) from e

    log.info("check_done", summary=build_text_summary(statistics))

    if config.report.format == "json":
        click.echo(json.dumps(build_summary(statistics, nodes), indent=2))
    else:
        render_console(statistics, nodes, Console())

    baseline = config.report.coverage_baseline
    if below_baseline(statistics, baseline):
        raise click.ClickException(
            f"Diff coverage {statistics.coverage_percent:.1f}% is below the baseline {baseline}%"
        )
