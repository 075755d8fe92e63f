"""Ignore annotation parsing.

Annotations are line comments carrying a configurable prefix:

    //+diffcov:ignore:file     anywhere in the file: the whole file is ignored
    //+diffcov:ignore:block    the next ``{ ... }`` region is ignored

A block annotation applies to the first opening brace that follows it in
code (string/rune literals and comments are skipped). Every coverage block
lying entirely inside that brace pair is ignored.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import structlog

from diffcov.annotation.models import IgnoreProfile, IgnoreType
from diffcov.core.errors import AnnotationParseError
from diffcov.profile.models import CoverProfile, ExecutionBlock

log = structlog.get_logger(__name__)

DEFAULT_PREFIX = "//+diffcov:"

_IGNORE_FILE = "ignore:file"
_IGNORE_BLOCK = "ignore:block"

# (line, column) with 1-based byte columns, the same units coverage blocks use
_Position = tuple[int, int]


class AnnotationParser(Protocol):
    """Produces the ignore profile of one source file.

    Implementations raise AnnotationParseError for malformed annotations or
    unreadable sources.
    """

    def parse(self, source_path: Path, profile: CoverProfile) -> IgnoreProfile | None:
        """Return the file's ignore profile, or None when it has no annotations."""
        ...


@dataclass(frozen=True, slots=True)
class _Token:
    kind: str  # "comment", "open", "close"
    line: int
    col: int
    text: str = ""


class CommentAnnotationParser:
    """Reads ``//+diffcov:`` comment annotations from Go-style sources."""

    def __init__(self, prefix: str = DEFAULT_PREFIX) -> None:
        self._prefix = prefix

    def parse(self, source_path: Path, profile: CoverProfile) -> IgnoreProfile | None:
        try:
            source = source_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise AnnotationParseError.for_file(str(source_path), f"cannot read source: {e}") from e
        return self.parse_source(source, profile, path=str(source_path))

    def parse_source(
        self, source: str, profile: CoverProfile, *, path: str = "<source>"
    ) -> IgnoreProfile | None:
        """Parse annotations from source text already in memory."""
        file_ignored = False
        pending: list[int] = []  # lines of block annotations awaiting a brace
        stack: list[tuple[_Position, bool]] = []  # (brace position, annotated)
        regions: list[tuple[_Position, _Position]] = []

        for token in _scan(source, path):
            if token.kind == "comment":
                directive = self._directive(token, path)
                if directive == _IGNORE_FILE:
                    file_ignored = True
                elif directive == _IGNORE_BLOCK:
                    pending.append(token.line)
            elif token.kind == "open":
                stack.append(((token.line, token.col), bool(pending)))
                pending.clear()
            else:
                if not stack:
                    raise AnnotationParseError.for_file(path, "unexpected '}'", token.line)
                opened, annotated = stack.pop()
                if annotated:
                    # the region ends just past the closing brace
                    regions.append((opened, (token.line, token.col + 1)))

        if pending:
            raise AnnotationParseError.for_file(
                path, "no block follows ignore annotation", pending[0]
            )
        if stack:
            line, _ = stack[-1][0]
            raise AnnotationParseError.for_file(path, "unclosed '{'", line)

        if file_ignored:
            log.debug("file_ignore_annotation", path=path)
            return IgnoreProfile(IgnoreType.FILE_IGNORE, frozenset(profile.blocks))
        if not regions:
            return None

        ignored = frozenset(b for b in profile.blocks if _inside_any(b, regions))
        log.debug("block_ignore_annotation", path=path, regions=len(regions), blocks=len(ignored))
        return IgnoreProfile(IgnoreType.BLOCK_IGNORE, ignored)

    def _directive(self, token: _Token, path: str) -> str | None:
        if not token.text.startswith(self._prefix):
            return None
        directive = token.text[len(self._prefix) :].strip()
        if directive not in (_IGNORE_FILE, _IGNORE_BLOCK):
            raise AnnotationParseError.for_file(
                path, f"unknown annotation {directive!r}", token.line
            )
        return directive


def _inside_any(block: ExecutionBlock, regions: list[tuple[_Position, _Position]]) -> bool:
    start = (block.start_line, block.start_col)
    end = (block.end_line, block.end_col)
    return any(opened <= start and end <= closed for opened, closed in regions)


def _width(text: str) -> int:
    return len(text.encode("utf-8"))


def _advance(text: str, line: int, col: int) -> _Position:
    for ch in text:
        if ch == "\n":
            line, col = line + 1, 1
        else:
            col += _width(ch)
    return line, col


def _literal_end(source: str, start: int, quote: str) -> int | None:
    """Index just past the literal opened at ``start``, or None if unterminated."""
    if quote == "`":
        end = source.find("`", start + 1)
        return None if end == -1 else end + 1
    i = start + 1
    while i < len(source):
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n":
            return None
        i += 1
    return None


def _scan(source: str, path: str) -> Iterator[_Token]:
    """Yield line comments and braces outside literals and block comments."""
    line, col = 1, 1
    i, n = 0, len(source)
    while i < n:
        ch = source[i]
        if ch == "\n":
            line, col = line + 1, 1
            i += 1
        elif source.startswith("//", i):
            end = source.find("\n", i)
            end = n if end == -1 else end
            text = source[i:end].rstrip("\r")
            yield _Token("comment", line, col, text)
            col += _width(source[i:end])
            i = end
        elif source.startswith("/*", i):
            end = source.find("*/", i + 2)
            if end == -1:
                raise AnnotationParseError.for_file(path, "unterminated comment", line)
            line, col = _advance(source[i : end + 2], line, col)
            i = end + 2
        elif ch in "\"'`":
            end = _literal_end(source, i, ch)
            if end is None:
                raise AnnotationParseError.for_file(path, "unterminated literal", line)
            line, col = _advance(source[i:end], line, col)
            i = end
        else:
            if ch == "{":
                yield _Token("open", line, col)
            elif ch == "}":
                yield _Token("close", line, col)
            col += _width(ch)
            i += 1
