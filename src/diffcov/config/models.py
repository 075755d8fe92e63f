"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DIFFCOV__SECTION__KEY)
3. Repo YAML (.diffcov.yaml)
4. Global YAML (~/.config/diffcov/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    DIFFCOV__<SECTION>__<KEY>=<VALUE>

Examples:
    DIFFCOV__LOGGING__LEVEL=DEBUG
    DIFFCOV__COVERAGE__COMPARED_BRANCH=origin/release
    DIFFCOV__REPORT__COVERAGE_BASELINE=80
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DIFFCOV__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO reports per-run totals, DEBUG every skipped file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class CoverageConfig(BaseModel):
    """Diff coverage computation settings.

    Env vars:
        DIFFCOV__COVERAGE__COMPARED_BRANCH: Base ref the changes are diffed against
        DIFFCOV__COVERAGE__TEST_FILE_SUFFIX: Test file naming convention
        DIFFCOV__COVERAGE__MODULE_PATH: Root label of the coverage tree
    """

    excludes: list[str] = Field(
        default_factory=list,
        description="Regular expressions; coverage profiles whose file name matches any "
        "of them are left out of diff coverage.",
    )
    test_file_suffix: str = Field(
        default="_test.go",
        description="Every changed file's directory must contain a file ending with this "
        "suffix (case-insensitive).",
    )
    compared_branch: str = Field(
        default="origin/main",
        description="Ref the current HEAD is compared against.",
    )
    module_path: str | None = Field(
        default=None,
        description="Root label of the coverage tree. Defaults to the repository directory name.",
    )
    annotation_prefix: str = Field(
        default="//+diffcov:",
        description="Comment prefix of ignore annotations (e.g. //+diffcov:ignore:block).",
    )

    @field_validator("test_file_suffix")
    @classmethod
    def validate_test_file_suffix(cls, v: str) -> str:
        if not v:
            raise ValueError("test_file_suffix must not be empty")
        return v


class ReportConfig(BaseModel):
    """Report output settings.

    Env vars:
        DIFFCOV__REPORT__FORMAT: console or json
        DIFFCOV__REPORT__COVERAGE_BASELINE: Minimum diff coverage percent
    """

    format: Literal["console", "json"] = "console"
    coverage_baseline: float | None = Field(
        default=None,
        description="Exit non-zero when diff coverage falls below this percentage.",
    )

    @field_validator("coverage_baseline")
    @classmethod
    def validate_coverage_baseline(cls, v: float | None) -> float | None:
        if v is not None and not (0.0 <= v <= 100.0):
            raise ValueError(f"coverage_baseline must be 0-100, got {v}")
        return v


class DiffCovConfig(BaseModel):
    """Root configuration for diffcov.

    All settings can be configured via:
    1. Environment variables: DIFFCOV__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
