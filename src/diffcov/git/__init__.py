"""Git change reader - pygit2 diffs turned into Change records."""

from diffcov.git.changes import changes_from_diff, changes_from_patch, load_changes
from diffcov.git.errors import GitError, NotARepositoryError, PatchParseError, RefNotFoundError
from diffcov.git.models import Change, ChangeMode, DiffSection

__all__ = [
    # Reader
    "changes_from_diff",
    "changes_from_patch",
    "load_changes",
    # Models
    "Change",
    "ChangeMode",
    "DiffSection",
    # Errors
    "GitError",
    "NotARepositoryError",
    "PatchParseError",
    "RefNotFoundError",
]
