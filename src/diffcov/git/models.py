"""Change records produced from a git diff."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ChangeMode(Enum):
    """How a file changed between the compared branch and the target."""

    NEW = "new"
    MODIFY = "modify"
    RENAME = "rename"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class DiffSection:
    """One contiguous run of added or modified lines in a file.

    Line numbers are 1-based on the new side of the diff. ``contents`` holds
    the text of each line in ``[start_line, end_line]`` without line endings;
    when given, it must cover the whole range.
    """

    start_line: int
    end_line: int
    contents: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        expected = self.end_line - self.start_line + 1
        if self.contents and len(self.contents) != expected:
            raise ValueError(
                f"section {self.start_line}-{self.end_line} spans {expected} lines "
                f"but carries {len(self.contents)}"
            )

    def line_text(self, line_number: int) -> str:
        """Text of ``line_number``, or "" when the section carries no text for it."""
        offset = line_number - self.start_line
        if 0 <= offset < len(self.contents):
            return self.contents[offset]
        return ""


@dataclass(frozen=True, slots=True)
class Change:
    """A changed file and the sections of it that were added or modified.

    A NEW file has exactly one section spanning the whole file. DELETE
    changes carry no sections.
    """

    file_name: str  # repository-relative, "/"-separated
    mode: ChangeMode
    sections: tuple[DiffSection, ...] = field(default_factory=tuple)
