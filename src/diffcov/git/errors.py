"""Git module error types."""


class GitError(Exception):
    """Base error for git operations."""

    pass


class NotARepositoryError(GitError):
    """Path is not a git repository."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git repository: {path}")
        self.path = path


class RefNotFoundError(GitError):
    """Reference (branch, tag, commit) not found."""

    def __init__(self, ref: str) -> None:
        super().__init__(f"Reference not found: {ref}")
        self.ref = ref


class PatchParseError(GitError):
    """A saved patch could not be parsed as a unified diff."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Invalid patch {source}: {reason}")
        self.source = source
        self.reason = reason
