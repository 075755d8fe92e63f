"""Tests for report/tree.py - hierarchical aggregation."""

from __future__ import annotations

import math

import pytest

from diffcov.report.models import CoverageProfile
from diffcov.report.tree import CoverageTree


def _profile(file_name: str, effective: int, covered: int, ignored: int = 0) -> CoverageProfile:
    violations = tuple(range(1, effective - covered + 1))
    return CoverageProfile(
        file_name=file_name,
        total_lines=effective + ignored,
        effective_lines=effective,
        ignored_lines=ignored,
        covered_lines=covered,
        violation_lines=violations,
    )


class TestCoverageTree:
    """Tests for CoverageTree."""

    def test_find_or_create_builds_path_segments(self) -> None:
        tree = CoverageTree("example.com/mod")

        node = tree.find_or_create("pkg/sub/a.go")

        assert node.name == "a.go"
        assert tree.find_or_create("pkg/sub/a.go") is node

    def test_collect_sums_children(self) -> None:
        tree = CoverageTree("mod")
        tree.insert(_profile("pkg/a.go", effective=4, covered=3, ignored=1))
        tree.insert(_profile("pkg/b.go", effective=2, covered=0))
        tree.insert(_profile("cmd/main.go", effective=5, covered=5))

        tree.collect()
        root = tree.statistics()

        assert root.total_lines == 12
        assert root.effective_lines == 11
        assert root.ignored_lines == 1
        assert root.covered_lines == 8
        assert root.violation_lines == 3

    def test_profiles_on_the_same_leaf_add_up(self) -> None:
        tree = CoverageTree("mod")
        tree.insert(_profile("pkg/a.go", effective=1, covered=1))
        tree.insert(_profile("pkg/a.go", effective=2, covered=0, ignored=1))

        tree.collect()
        root = tree.statistics()

        assert root.total_lines == 4
        assert root.effective_lines == 3
        assert root.ignored_lines == 1
        assert root.covered_lines == 1
        assert root.violation_lines == 2

    def test_every_internal_node_equals_sum_of_children(self) -> None:
        tree = CoverageTree("mod")
        tree.insert(_profile("pkg/a.go", effective=4, covered=3))
        tree.insert(_profile("pkg/inner/b.go", effective=2, covered=1))
        tree.insert(_profile("c.go", effective=1, covered=0))
        tree.collect()

        nodes = {n.path: n for n in tree.all()}

        assert nodes["mod/pkg"].effective_lines == 6
        assert nodes["mod/pkg"].covered_lines == 4
        assert nodes["mod/pkg/inner"].effective_lines == 2
        assert nodes["mod"].effective_lines == 7
        assert nodes["mod"].violation_lines == 3

    def test_all_is_preorder_sorted_by_name(self) -> None:
        tree = CoverageTree("mod")
        tree.insert(_profile("z/b.go", effective=1, covered=1))
        tree.insert(_profile("a.go", effective=1, covered=1))
        tree.insert(_profile("z/a.go", effective=1, covered=0))
        tree.collect()

        paths = [n.path for n in tree.all()]

        assert paths == ["mod", "mod/a.go", "mod/z", "mod/z/a.go", "mod/z/b.go"]

    def test_leaf_nodes_carry_their_profile(self) -> None:
        tree = CoverageTree("mod")
        profile = _profile("pkg/a.go", effective=2, covered=1)
        tree.insert(profile)
        tree.collect()

        nodes = {n.path: n for n in tree.all()}

        assert nodes["mod/pkg/a.go"].coverage_profile is profile
        assert nodes["mod/pkg"].coverage_profile is None

    def test_empty_module_path_yields_relative_paths(self) -> None:
        tree = CoverageTree("")
        tree.insert(_profile("pkg/a.go", effective=1, covered=1))
        tree.collect()

        assert [n.path for n in tree.all()] == ["", "pkg", "pkg/a.go"]

    def test_empty_tree_has_zero_totals(self) -> None:
        tree = CoverageTree("mod")
        tree.collect()

        nodes = tree.all()

        assert len(nodes) == 1
        assert nodes[0].effective_lines == 0
        assert math.isnan(nodes[0].coverage_percent)

    def test_collect_twice_raises(self) -> None:
        tree = CoverageTree("mod")
        tree.collect()

        with pytest.raises(RuntimeError):
            tree.collect()

    def test_insert_after_collect_raises(self) -> None:
        tree = CoverageTree("mod")
        tree.collect()

        with pytest.raises(RuntimeError):
            tree.insert(_profile("pkg/a.go", effective=1, covered=1))
