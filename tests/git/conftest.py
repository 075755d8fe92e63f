"""Test fixtures for git module."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pygit2
import pytest

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

ADD_SOURCE = "package pkg\n\nfunc Add(a, b int) int {\n\treturn a + b\n}\n"


@pytest.fixture
def temp_repo(tmp_path: Path) -> Generator[pygit2.Repository, None, None]:
    """Create a temporary git repository with initial commit on main and a base branch."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()

    repo = pygit2.init_repository(str(repo_path), initial_head="main")

    # Configure user
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"

    # Create initial commit
    (repo_path / "pkg").mkdir()
    (repo_path / "pkg" / "add.go").write_text(ADD_SOURCE)
    (repo_path / "pkg" / "add_test.go").write_text("package pkg\n")
    repo.index.add("pkg/add.go")
    repo.index.add("pkg/add_test.go")
    repo.index.write()
    tree = repo.index.write_tree()
    sig = pygit2.Signature("Test User", "test@example.com")
    commit = repo.create_commit("refs/heads/main", sig, sig, "Initial commit", tree, [])

    # Set HEAD to main; base stays at the initial commit
    repo.set_head("refs/heads/main")
    repo.branches.local.create("base", repo.get(commit))

    yield repo


@pytest.fixture
def commit_files(
    temp_repo: pygit2.Repository,
) -> Callable[[dict[str, str | None]], pygit2.Oid]:
    """Commit writes (str) and deletions (None) on top of HEAD."""
    workdir = Path(temp_repo.workdir)

    def _commit(files: dict[str, str | None]) -> pygit2.Oid:
        for name, content in files.items():
            path = workdir / name
            if content is None:
                path.unlink()
                temp_repo.index.remove(name)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content)
                temp_repo.index.add(name)
        temp_repo.index.write()
        tree = temp_repo.index.write_tree()
        sig = temp_repo.default_signature
        return temp_repo.create_commit(
            "HEAD", sig, sig, "Change files", tree, [temp_repo.head.target]
        )

    return _commit
