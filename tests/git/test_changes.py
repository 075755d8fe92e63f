"""Tests for git/changes.py - Change records from diffs and patches."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pygit2
import pytest

from diffcov.git.changes import changes_from_patch, load_changes
from diffcov.git.errors import NotARepositoryError, RefNotFoundError
from diffcov.git.models import Change, ChangeMode, DiffSection

CommitFiles = Callable[[dict[str, str | None]], pygit2.Oid]

MODIFIED_ADD = (
    "package pkg\n"
    "\n"
    "func Add(a, b int) int {\n"
    "\treturn b + a\n"
    "}\n"
    "\n"
    "func Sub(a, b int) int { return a - b }\n"
)

NEW_FILE_PATCH = """diff --git a/pkg/sub.go b/pkg/sub.go
new file mode 100644
index 0000000..3333333
--- /dev/null
+++ b/pkg/sub.go
@@ -0,0 +1,3 @@
+package pkg
+
+func Sub() {}
"""

MODIFY_PATCH = (
    "diff --git a/pkg/add.go b/pkg/add.go\n"
    "index 1111111..2222222 100644\n"
    "--- a/pkg/add.go\n"
    "+++ b/pkg/add.go\n"
    "@@ -2,4 +2,5 @@\n"
    " \n"
    " func Add(a, b int) int {\n"
    "-\treturn a + b\n"
    "+\tsum := a + b\n"
    "+\treturn sum\n"
    " }\n"
)


def _workdir(repo: pygit2.Repository) -> Path:
    return Path(repo.workdir)


class TestLoadChanges:
    """Tests for load_changes against a real repository."""

    def test_no_changes(self, temp_repo: pygit2.Repository) -> None:
        assert load_changes(_workdir(temp_repo), "base") == []

    def test_new_file_spans_whole_file(
        self, temp_repo: pygit2.Repository, commit_files: CommitFiles
    ) -> None:
        commit_files({"pkg/sub.go": "package pkg\n\nfunc Sub() {}\n"})

        changes = load_changes(_workdir(temp_repo), "base")

        assert changes == [
            Change(
                "pkg/sub.go",
                ChangeMode.NEW,
                (DiffSection(1, 3, ("package pkg", "", "func Sub() {}")),),
            )
        ]

    def test_modified_file_sections_split_on_context(
        self, temp_repo: pygit2.Repository, commit_files: CommitFiles
    ) -> None:
        commit_files({"pkg/add.go": MODIFIED_ADD})

        changes = load_changes(_workdir(temp_repo), "base")

        assert len(changes) == 1
        change = changes[0]
        assert change.file_name == "pkg/add.go"
        assert change.mode is ChangeMode.MODIFY
        assert [(s.start_line, s.end_line) for s in change.sections] == [(4, 4), (6, 7)]
        assert change.sections[0].contents == ("\treturn b + a",)
        assert change.sections[1].line_text(7) == "func Sub(a, b int) int { return a - b }"

    def test_deleted_file_has_no_sections(
        self, temp_repo: pygit2.Repository, commit_files: CommitFiles
    ) -> None:
        commit_files({"pkg/add.go": None})

        changes = load_changes(_workdir(temp_repo), "base")

        assert changes == [Change("pkg/add.go", ChangeMode.DELETE)]

    def test_renamed_file_uses_new_path(
        self, temp_repo: pygit2.Repository, commit_files: CommitFiles
    ) -> None:
        content = (_workdir(temp_repo) / "pkg" / "add.go").read_text()
        commit_files({"pkg/add.go": None, "pkg/sum.go": content})

        changes = load_changes(_workdir(temp_repo), "base")

        assert len(changes) == 1
        assert changes[0].file_name == "pkg/sum.go"
        assert changes[0].mode is ChangeMode.RENAME
        assert changes[0].sections == ()

    def test_explicit_target(
        self, temp_repo: pygit2.Repository, commit_files: CommitFiles
    ) -> None:
        first = commit_files({"pkg/sub.go": "package pkg\n"})
        commit_files({"pkg/mul.go": "package pkg\n"})

        changes = load_changes(_workdir(temp_repo), "base", target=str(first))

        assert [c.file_name for c in changes] == ["pkg/sub.go"]

    def test_unknown_branch(self, temp_repo: pygit2.Repository) -> None:
        with pytest.raises(RefNotFoundError) as exc_info:
            load_changes(_workdir(temp_repo), "origin/does-not-exist")

        assert exc_info.value.ref == "origin/does-not-exist"

    def test_not_a_repository(self, tmp_path: Path) -> None:
        plain = tmp_path / "plain"
        plain.mkdir()

        with pytest.raises(NotARepositoryError):
            load_changes(plain, "main")


class TestChangesFromPatch:
    """Tests for changes_from_patch."""

    def test_empty_patch(self) -> None:
        assert changes_from_patch("") == []
        assert changes_from_patch("\n  \n") == []

    def test_new_file_patch(self) -> None:
        changes = changes_from_patch(NEW_FILE_PATCH)

        assert changes == [
            Change(
                "pkg/sub.go",
                ChangeMode.NEW,
                (DiffSection(1, 3, ("package pkg", "", "func Sub() {}")),),
            )
        ]

    def test_modify_patch(self) -> None:
        changes = changes_from_patch(MODIFY_PATCH)

        assert changes == [
            Change(
                "pkg/add.go",
                ChangeMode.MODIFY,
                (DiffSection(4, 5, ("\tsum := a + b", "\treturn sum")),),
            )
        ]

    def test_multiple_files(self) -> None:
        changes = changes_from_patch(MODIFY_PATCH + NEW_FILE_PATCH)

        assert [(c.file_name, c.mode) for c in changes] == [
            ("pkg/add.go", ChangeMode.MODIFY),
            ("pkg/sub.go", ChangeMode.NEW),
        ]
