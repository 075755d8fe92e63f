"""diffcov error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Precondition
- 4xxx: Annotation
- 5xxx: Coverage profile

Every error here is fatal to a run. Lookup misses inside the engine (a line
with no owning block, a profile with no change) are not errors.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_INVALID_PATTERN = 2003

    # Precondition (3xxx)
    PRECONDITION_NO_TEST_FILES = 3001
    PRECONDITION_UNREADABLE_DIRECTORY = 3002

    # Annotation (4xxx)
    ANNOTATION_PARSE_ERROR = 4001

    # Coverage profile (5xxx)
    COVERAGE_PARSE_ERROR = 5001


@dataclass(frozen=True, slots=True)
class DiffCovError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(DiffCovError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def invalid_pattern(cls, pattern: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_PATTERN,
            message=f"compile pattern {pattern}: {reason}",
            details={"pattern": pattern, "reason": reason},
        )


class PreconditionError(DiffCovError):
    """A changed file's directory does not satisfy the run's preconditions."""

    @classmethod
    def no_test_files(cls, directory: str) -> "PreconditionError":
        return cls(
            code=ErrorCode.PRECONDITION_NO_TEST_FILES,
            message=f"no test files in {directory}",
            details={"directory": directory},
        )

    @classmethod
    def unreadable_directory(cls, directory: str, reason: str) -> "PreconditionError":
        return cls(
            code=ErrorCode.PRECONDITION_UNREADABLE_DIRECTORY,
            message=f"cannot list {directory}: {reason}",
            details={"directory": directory, "reason": reason},
        )


class AnnotationParseError(DiffCovError):
    """Ignore annotations in a source file could not be parsed."""

    @classmethod
    def for_file(cls, path: str, reason: str, line: int | None = None) -> "AnnotationParseError":
        location = f"{path}:{line}" if line is not None else path
        details: dict[str, Any] = {"path": path, "reason": reason}
        if line is not None:
            details["line"] = line
        return cls(
            code=ErrorCode.ANNOTATION_PARSE_ERROR,
            message=f"parse ignore annotations in {location}: {reason}",
            details=details,
        )


class CoverageParseError(DiffCovError):
    """Error parsing coverage profile data."""

    @classmethod
    def malformed(cls, source: str, reason: str, line: int | None = None) -> "CoverageParseError":
        location = f"{source}:{line}" if line is not None else source
        details: dict[str, Any] = {"source": source, "reason": reason}
        if line is not None:
            details["line"] = line
        return cls(
            code=ErrorCode.COVERAGE_PARSE_ERROR,
            message=f"Invalid coverage profile at {location}: {reason}",
            details=details,
        )

