"""Turn a git diff into Change records.

Two sources:
- load_changes: diff a compared branch against a target commit (HEAD)
- changes_from_patch: parse a saved unified diff (``git diff > changes.patch``)

Both walk pygit2 patches the same way: NEW files become one section holding
every line, MODIFY/RENAME files become one section per contiguous run of
added lines on the new side, DELETE files carry no sections.
"""

from __future__ import annotations

from pathlib import Path

import pygit2
import structlog

from diffcov.git.access import RepoAccess
from diffcov.git.errors import PatchParseError
from diffcov.git.models import Change, ChangeMode, DiffSection

log = structlog.get_logger(__name__)

_DELTA_MODE_MAP: dict[int, ChangeMode] = {
    pygit2.GIT_DELTA_ADDED: ChangeMode.NEW,
    pygit2.GIT_DELTA_MODIFIED: ChangeMode.MODIFY,
    pygit2.GIT_DELTA_RENAMED: ChangeMode.RENAME,
    pygit2.GIT_DELTA_DELETED: ChangeMode.DELETE,
}


def load_changes(
    repo_path: Path | str,
    compared_branch: str,
    target: str = "HEAD",
) -> list[Change]:
    """Changes between ``compared_branch`` and ``target`` in a repository.

    Raises:
        NotARepositoryError: repo_path is not a git repository.
        RefNotFoundError: either ref cannot be resolved to a commit.
    """
    access = RepoAccess(repo_path)
    base = access.resolve_commit(compared_branch)
    head = access.resolve_commit(target)
    log.debug(
        "diff_resolved",
        compared_branch=compared_branch,
        base_sha=str(base.id),
        target_sha=str(head.id),
    )
    return changes_from_diff(access.diff_commits(base, head))


def changes_from_patch(patch_text: str, *, source: str = "<patch>") -> list[Change]:
    """Changes described by a unified diff."""
    if not patch_text.strip():
        return []
    try:
        diff = pygit2.Diff.parse_diff(patch_text)
    except (pygit2.GitError, ValueError) as e:
        raise PatchParseError(source, str(e)) from e
    return changes_from_diff(diff)


def changes_from_diff(diff: pygit2.Diff) -> list[Change]:
    """Convert every textual file delta of a pygit2 diff into a Change."""
    changes: list[Change] = []
    for patch in diff:
        if patch is None:
            continue
        delta = patch.delta
        mode = _DELTA_MODE_MAP.get(delta.status)
        if mode is None:
            log.debug("delta_skipped", path=delta.new_file.path, status=delta.status)
            continue
        if delta.is_binary:
            log.debug("binary_skipped", path=delta.new_file.path)
            continue

        if mode is ChangeMode.DELETE:
            changes.append(Change(delta.old_file.path, mode))
        elif mode is ChangeMode.NEW:
            changes.append(Change(delta.new_file.path, mode, (_whole_file_section(patch),)))
        else:
            changes.append(Change(delta.new_file.path, mode, _added_sections(patch)))
    return changes


def _line_text(line: pygit2.DiffLine) -> str:
    return line.content.rstrip("\r\n")


def _whole_file_section(patch: pygit2.Patch) -> DiffSection:
    contents = tuple(
        _line_text(line) for hunk in patch.hunks for line in hunk.lines if line.origin == "+"
    )
    return DiffSection(start_line=1, end_line=len(contents), contents=contents)


def _added_sections(patch: pygit2.Patch) -> tuple[DiffSection, ...]:
    """Group added lines into sections of consecutive new-side line numbers.

    Removed lines occupy no new-side line, so they do not split a run; context
    lines do.
    """
    sections: list[DiffSection] = []
    for hunk in patch.hunks:
        run: list[pygit2.DiffLine] = []
        for line in hunk.lines:
            if line.origin == "+":
                if run and line.new_lineno != run[-1].new_lineno + 1:
                    sections.append(_section(run))
                    run = []
                run.append(line)
            elif line.origin == " " and run:
                sections.append(_section(run))
                run = []
        if run:
            sections.append(_section(run))
    return tuple(sections)


def _section(run: list[pygit2.DiffLine]) -> DiffSection:
    return DiffSection(
        start_line=run[0].new_lineno,
        end_line=run[-1].new_lineno,
        contents=tuple(_line_text(line) for line in run),
    )
