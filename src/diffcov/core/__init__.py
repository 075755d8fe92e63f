"""Core module exports."""

from diffcov.core.errors import (
    AnnotationParseError,
    ConfigError,
    CoverageParseError,
    DiffCovError,
    ErrorCode,
    PreconditionError,
)
from diffcov.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "AnnotationParseError",
    "ConfigError",
    "CoverageParseError",
    "DiffCovError",
    "ErrorCode",
    "PreconditionError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
