"""Go coverage profile parser.

Go test produces coverage profiles with format:
mode: set|count|atomic
<package>/<file>:<startline>.<startcol>,<endline>.<endcol> <numstmt> <count>

Example:
mode: set
github.com/user/pkg/main.go:10.2,12.16 3 1
github.com/user/pkg/main.go:15.2,20.16 5 0

- mode: set (0/1), count (hit count), atomic (thread-safe count)
- numstmt: number of statements in block
- count: execution count (0 = not covered)

Profiles concatenated from several `go test` runs repeat the mode line and
may repeat blocks; repeated blocks are merged.
"""

import re
from pathlib import Path

from diffcov.core.errors import CoverageParseError
from diffcov.profile.models import CoverProfile, ExecutionBlock

_BLOCK_RE = re.compile(r"^(.+):(\d+)\.(\d+),(\d+)\.(\d+) (\d+) (\d+)$")
_MODE_PREFIX = "mode:"


class GocovParser:
    """Parser for Go coverage profiles."""

    def parse(self, path: Path) -> list[CoverProfile]:
        """Parse a Go coverage profile file."""
        if not path.exists():
            raise CoverageParseError.malformed(str(path), "file not found")

        try:
            content = path.read_text()
        except (OSError, UnicodeDecodeError) as e:
            raise CoverageParseError.malformed(str(path), f"failed to read: {e}") from e

        return self.parse_text(content, source=str(path))

    def parse_text(self, content: str, *, source: str = "<text>") -> list[CoverProfile]:
        """Parse Go coverage profile text.

        Returns:
            One CoverProfile per file, sorted by file name, with blocks sorted
            by start position and duplicate blocks merged.

        Raises:
            CoverageParseError: On a missing/conflicting mode line or a
                malformed block line.
        """
        mode: str | None = None
        files: dict[str, CoverProfile] = {}

        for lineno, raw in enumerate(content.splitlines(), start=1):
            line = raw.strip()
            if not line:
                continue

            if line.startswith(_MODE_PREFIX):
                line_mode = line[len(_MODE_PREFIX) :].strip()
                if mode is None:
                    mode = line_mode
                elif line_mode != mode:
                    raise CoverageParseError.malformed(
                        source, f"mode {line_mode!r} conflicts with {mode!r}", lineno
                    )
                continue

            if mode is None:
                raise CoverageParseError.malformed(source, "missing mode line", lineno)

            match = _BLOCK_RE.match(line)
            if match is None:
                raise CoverageParseError.malformed(source, f"bad block line {line!r}", lineno)

            file_name = match.group(1)
            start_line, start_col, end_line, end_col, num_stmt, count = (
                int(g) for g in match.groups()[1:]
            )

            profile = files.get(file_name)
            if profile is None:
                profile = files[file_name] = CoverProfile(file_name=file_name, mode=mode)
            profile.blocks.append(
                ExecutionBlock(start_line, start_col, end_line, end_col, num_stmt, count)
            )

        profiles = [files[name] for name in sorted(files)]
        for profile in profiles:
            profile.sort_blocks()
            profile.blocks = _merge_duplicates(profile, source)
        return profiles


def _merge_duplicates(profile: CoverProfile, source: str) -> list[ExecutionBlock]:
    """Fold blocks recorded more than once at the same position.

    Expects blocks already sorted by start position.
    """
    merged: list[ExecutionBlock] = []
    for block in profile.blocks:
        if merged and _same_position(merged[-1], block):
            last = merged[-1]
            if last.num_stmt != block.num_stmt:
                raise CoverageParseError.malformed(
                    source,
                    f"inconsistent statement count for {profile.file_name}:"
                    f"{block.start_line}.{block.start_col}",
                )
            if profile.mode == "set":
                count = 1 if (last.count or block.count) else 0
            else:
                count = last.count + block.count
            merged[-1] = ExecutionBlock(
                last.start_line, last.start_col, last.end_line, last.end_col, last.num_stmt, count
            )
        else:
            merged.append(block)
    return merged


def _same_position(a: ExecutionBlock, b: ExecutionBlock) -> bool:
    return (a.start_line, a.start_col, a.end_line, a.end_col) == (
        b.start_line,
        b.start_col,
        b.end_line,
        b.end_col,
    )


def parse_profiles(path: Path) -> list[CoverProfile]:
    """Convenience wrapper: parse a Go coverage profile file."""
    return GocovParser().parse(path)
