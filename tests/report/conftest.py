"""Test fixtures for diff coverage computation."""

from __future__ import annotations

from pathlib import Path

import pytest

ADD_SOURCE = """package pkg

func Add(a, b int) int {
\treturn a + b
}
"""


@pytest.fixture
def go_repo(tmp_path: Path) -> Path:
    """Working tree with one tested Go package."""
    pkg = tmp_path / "repo" / "pkg"
    pkg.mkdir(parents=True)
    (pkg / "add.go").write_text(ADD_SOURCE)
    (pkg / "add_test.go").write_text("package pkg\n")
    return tmp_path / "repo"
