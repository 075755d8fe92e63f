"""Coverage profile model and Go cover-profile reader."""

from diffcov.profile.gocov import GocovParser, parse_profiles
from diffcov.profile.models import CoverProfile, ExecutionBlock, sort_blocks

__all__ = [
    "CoverProfile",
    "ExecutionBlock",
    "GocovParser",
    "parse_profiles",
    "sort_blocks",
]
