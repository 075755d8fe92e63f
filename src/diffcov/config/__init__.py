"""Config module exports."""

from diffcov.config.loader import load_config
from diffcov.config.models import (
    CoverageConfig,
    DiffCovConfig,
    LoggingConfig,
    LogOutputConfig,
    ReportConfig,
)

__all__ = [
    "load_config",
    "CoverageConfig",
    "DiffCovConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ReportConfig",
]
