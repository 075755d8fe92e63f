"""Hierarchical accumulator of per-file diff coverage.

The root node stands for the module; every path segment of a changed file
is a child node, and the file itself is a leaf carrying its CoverageProfile.
Leaves are attached first, then ``collect`` sums totals bottom-up exactly
once. Parents own their children; nodes hold no back-references.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from diffcov.report.models import CoverageProfile, NodeInfo


@dataclass(slots=True)
class CoverageTreeNode:
    """One path segment with running totals."""

    name: str
    children: dict[str, CoverageTreeNode] = field(default_factory=dict)
    coverage_profile: CoverageProfile | None = None
    total_lines: int = 0
    effective_lines: int = 0
    ignored_lines: int = 0
    covered_lines: int = 0
    violation_lines: int = 0

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def attach(self, profile: CoverageProfile) -> None:
        """Make this node the leaf of ``profile`` and add its totals.

        Profiles whose paths share the changed file's suffix land on the
        same leaf, which then carries their sum.
        """
        self.coverage_profile = profile
        self.total_lines += profile.total_lines
        self.effective_lines += profile.effective_lines
        self.ignored_lines += profile.ignored_lines
        self.covered_lines += profile.covered_lines
        self.violation_lines += len(profile.violation_lines)


class CoverageTree:
    """Coverage tree rooted at a module path."""

    def __init__(self, module_path: str) -> None:
        self._root = CoverageTreeNode(name=module_path)
        self._collected = False

    def find_or_create(self, file_name: str) -> CoverageTreeNode:
        """Node for ``file_name`` ("/"-separated), creating missing segments."""
        if self._collected:
            raise RuntimeError("coverage tree is read-only after collect()")
        node = self._root
        for segment in file_name.split("/"):
            if not segment:
                continue
            child = node.children.get(segment)
            if child is None:
                child = node.children[segment] = CoverageTreeNode(name=segment)
            node = child
        return node

    def insert(self, profile: CoverageProfile) -> CoverageTreeNode:
        node = self.find_or_create(profile.file_name)
        node.attach(profile)
        return node

    def collect(self) -> None:
        """Sum every internal node's totals from its children (post-order, once)."""
        if self._collected:
            raise RuntimeError("coverage tree already collected")
        _collect(self._root)
        self._collected = True

    def statistics(self) -> CoverageTreeNode:
        """Root node, whose totals are the run's totals after collect()."""
        return self._root

    def all(self) -> list[NodeInfo]:
        """Every node in pre-order, children by name, with its full path."""
        return list(_walk(self._root, self._root.name))


def _collect(node: CoverageTreeNode) -> None:
    # Recursion depth is bounded by path depth.
    if node.is_leaf:
        return
    node.total_lines = node.effective_lines = node.ignored_lines = 0
    node.covered_lines = node.violation_lines = 0
    for child in node.children.values():
        _collect(child)
        node.total_lines += child.total_lines
        node.effective_lines += child.effective_lines
        node.ignored_lines += child.ignored_lines
        node.covered_lines += child.covered_lines
        node.violation_lines += child.violation_lines


def _walk(node: CoverageTreeNode, path: str) -> Iterator[NodeInfo]:
    yield NodeInfo(
        path=path,
        total_lines=node.total_lines,
        effective_lines=node.effective_lines,
        ignored_lines=node.ignored_lines,
        covered_lines=node.covered_lines,
        violation_lines=node.violation_lines,
        coverage_profile=node.coverage_profile,
    )
    for name in sorted(node.children):
        child_path = f"{path}/{name}" if path else name
        yield from _walk(node.children[name], child_path)
