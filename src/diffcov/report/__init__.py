"""Diff coverage computation and reporting."""

from diffcov.report.console import render_console
from diffcov.report.diffcoverage import DiffCoverage, belongs_to, find_change, has_test_file
from diffcov.report.locator import find_block
from diffcov.report.matcher import match_modified_file, match_new_file
from diffcov.report.models import CoverageProfile, NodeInfo, Statistics, ViolationSection
from diffcov.report.summary import build_summary, build_text_summary
from diffcov.report.tree import CoverageTree, CoverageTreeNode

__all__ = [
    # Engine
    "DiffCoverage",
    "belongs_to",
    "find_block",
    "find_change",
    "has_test_file",
    "match_modified_file",
    "match_new_file",
    # Tree
    "CoverageTree",
    "CoverageTreeNode",
    # Models
    "CoverageProfile",
    "NodeInfo",
    "Statistics",
    "ViolationSection",
    # Output
    "build_summary",
    "build_text_summary",
    "render_console",
]
