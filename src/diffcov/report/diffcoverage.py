"""Diff coverage: how much of the changed code the tests execute.

Pipeline, per run:
1. construction: compile exclusion patterns, require a test file next to
   every changed file
2. drop coverage profiles matching an exclusion pattern
3. drop coverage profiles no change belongs to
4. parse ignore annotations of every changed file that has a profile
5. match each remaining profile against its change (new or modified mode)
   and insert the result into the coverage tree
6. aggregate the tree once and assemble the run statistics

Path matching is by suffix: a profile belongs to a change when the change's
repository-relative path is a suffix of the profile's file name (profiles use
import paths such as ``github.com/org/repo/pkg/file.go``). The first change
that matches wins, so an unrelated file whose path ends with another changed
file's path can be misattributed.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

import structlog

from diffcov.annotation.models import IgnoreProfile, IgnoreType
from diffcov.annotation.parser import AnnotationParser, CommentAnnotationParser
from diffcov.core.errors import AnnotationParseError, ConfigError, PreconditionError
from diffcov.git.models import Change, ChangeMode
from diffcov.profile.models import CoverProfile, sort_blocks
from diffcov.report.matcher import match_modified_file, match_new_file
from diffcov.report.models import CoverageProfile, NodeInfo, Statistics
from diffcov.report.tree import CoverageTree

log = structlog.get_logger(__name__)

DEFAULT_TEST_FILE_SUFFIX = "_test.go"


class DiffCoverage:
    """Computes diff coverage statistics for one run.

    Construction validates the inputs and fails fast; ``generate`` does the
    work. Each instance owns its tree and intermediate maps, so separate
    instances can run independently.
    """

    def __init__(
        self,
        profiles: Sequence[CoverProfile],
        changes: Sequence[Change],
        excludes: Sequence[str],
        compared_branch: str,
        repository_path: Path | str,
        module_path: str,
        *,
        annotation_parser: AnnotationParser | None = None,
        test_file_suffix: str = DEFAULT_TEST_FILE_SUFFIX,
    ) -> None:
        """
        Raises:
            ConfigError: An exclusion pattern does not compile.
            PreconditionError: A changed file's directory holds no test file.
        """
        self._excludes = _compile_excludes(excludes)
        self._repository_path = Path(repository_path)

        for change in changes:
            folder = (self._repository_path / change.file_name).parent
            if not has_test_file(folder, test_file_suffix):
                raise PreconditionError.no_test_files(str(folder))

        self._profiles = list(profiles)
        self._changes = list(changes)
        self._compared_branch = compared_branch
        self._annotation_parser = annotation_parser or CommentAnnotationParser()
        self._tree = CoverageTree(module_path)
        self._generated = False

    def generate(self) -> tuple[Statistics, list[NodeInfo]]:
        """Run the computation.

        Returns:
            The run statistics and every coverage tree node, flattened.

        Raises:
            AnnotationParseError: Ignore annotations of a changed file are malformed.
        """
        if self._generated:
            raise RuntimeError("DiffCoverage.generate() can only run once")
        self._generated = True

        matched = self._pair_with_changes(self._filter_excluded(self._profiles))
        ignore_profiles = self._parse_ignore_profiles(matched)

        coverage_profiles: list[CoverageProfile] = []
        for profile, change in matched:
            ignore_profile = ignore_profiles.get(change.file_name)
            if ignore_profile is not None and ignore_profile.type is IgnoreType.FILE_IGNORE:
                log.debug("file_ignored", file=change.file_name)
                continue

            if change.mode is ChangeMode.NEW:
                result = match_new_file(profile.blocks, change, ignore_profile, set())
            elif change.mode is ChangeMode.MODIFY:
                result = match_modified_file(profile.blocks, change, ignore_profile, set())
            else:
                # renamed and deleted files carry no diff coverage
                continue

            if result is None:
                log.debug("no_effective_lines", file=change.file_name)
                continue

            coverage_profiles.append(result)
            self._tree.insert(result)
            log.debug(
                "profile_emitted",
                file=result.file_name,
                effective=result.effective_lines,
                covered=result.covered_lines,
            )

        self._tree.collect()
        root = self._tree.statistics()
        statistics = Statistics(
            compared_branch=self._compared_branch,
            total_lines=root.total_lines,
            effective_lines=root.effective_lines,
            ignored_lines=root.ignored_lines,
            covered_lines=root.covered_lines,
            coverage_percent=_percent(root.covered_lines, root.effective_lines),
            violation_lines=root.violation_lines,
            coverage_profiles=tuple(coverage_profiles),
        )
        log.info(
            "diff_coverage_done",
            files=len(coverage_profiles),
            effective=statistics.effective_lines,
            covered=statistics.covered_lines,
            violations=statistics.violation_lines,
        )
        return statistics, self._tree.all()

    def _filter_excluded(self, profiles: Sequence[CoverProfile]) -> list[CoverProfile]:
        kept = []
        for profile in profiles:
            if any(reg.search(profile.file_name) for reg in self._excludes):
                log.debug("profile_excluded", file=profile.file_name)
                continue
            kept.append(profile)
        return kept

    def _pair_with_changes(
        self, profiles: Sequence[CoverProfile]
    ) -> list[tuple[CoverProfile, Change]]:
        """Pair each profile with its change; blocks are sorted here, once per file."""
        pairs: list[tuple[CoverProfile, Change]] = []
        for profile in profiles:
            change = find_change(profile, self._changes)
            if change is None:
                log.debug("profile_unchanged", file=profile.file_name)
                continue
            sorted_profile = CoverProfile(
                file_name=profile.file_name,
                mode=profile.mode,
                blocks=sort_blocks(profile.blocks),
            )
            pairs.append((sorted_profile, change))
        return pairs

    def _parse_ignore_profiles(
        self, pairs: Sequence[tuple[CoverProfile, Change]]
    ) -> dict[str, IgnoreProfile]:
        ignore_profiles: dict[str, IgnoreProfile] = {}
        for profile, change in pairs:
            if change.mode not in (ChangeMode.NEW, ChangeMode.MODIFY):
                continue
            if change.file_name in ignore_profiles:
                continue
            source = self._repository_path / change.file_name
            try:
                ignore_profile = self._annotation_parser.parse(source, profile)
            except AnnotationParseError:
                raise
            except (OSError, ValueError) as e:
                raise AnnotationParseError.for_file(str(source), str(e)) from e
            if ignore_profile is not None:
                ignore_profiles[change.file_name] = ignore_profile
        return ignore_profiles


def _compile_excludes(excludes: Sequence[str]) -> list[re.Pattern[str]]:
    compiled = []
    for pattern in excludes:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ConfigError.invalid_pattern(pattern, str(e)) from e
    return compiled


def _percent(covered: int, effective: int) -> float:
    if effective == 0:
        return float("nan")
    return covered / effective * 100


def has_test_file(folder: Path, suffix: str = DEFAULT_TEST_FILE_SUFFIX) -> bool:
    """Whether ``folder`` directly holds a file named ``*<suffix>`` (case-insensitive).

    Raises:
        PreconditionError: The folder cannot be listed.
    """
    suffix = suffix.lower()
    try:
        entries = list(folder.iterdir())
    except OSError as e:
        raise PreconditionError.unreadable_directory(str(folder), str(e)) from e
    return any(entry.is_file() and entry.name.lower().endswith(suffix) for entry in entries)


def belongs_to(profile_file_name: str, change_file_name: str) -> bool:
    """Whether a change's path is a suffix of a coverage profile's file name."""
    return profile_file_name.endswith(change_file_name)


def find_change(profile: CoverProfile, changes: Sequence[Change]) -> Change | None:
    """First change the profile belongs to, in change order."""
    for change in changes:
        if belongs_to(profile.file_name, change.file_name):
            return change
    return None
