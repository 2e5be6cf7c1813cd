"""
PostgreSQL Dumper
=================
A configurable tool to dump PostgreSQL databases with support for:
- Single database (pg_dump) or all databases (pg_dumpall)
- Table include / exclude filters
- Password, host/port or socket connectivity, sudo
- Compression support
- Restore-and-check validation in a scratch database
"""

from .commands import CommandBuilder
from .compressor import Bzip2, Compressor, Custom, Gzip, compressor_from_config
from .config import ConfigLoader
from .database_dumper import DatabaseDumper
from .errors import (
    ConfigError,
    DumperError,
    DumpFailed,
    PipelineError,
    UtilityNotFound,
    ValidationFailed,
)
from .main import main
from .models import (
    CleanupStage,
    ConnectionSpec,
    DatabaseStats,
    DumpArtifact,
    DumpStats,
    DumpTarget,
    PipelineStage,
    PostgreSQLSettings,
    StageRole,
    TableFilter,
    ValidationSpec,
    ValidationState,
)
from .pipeline import Pipeline, StageResult
from .postgresql import PostgreSQL
from .utilities import Utilities
from .utils import format_settings_display, print_dry_run_info, setup_logging
from .validation import ScratchDatabase, ValidationWorkflow

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "CommandBuilder",
    "ConfigLoader",
    "DatabaseDumper",
    "Pipeline",
    "PostgreSQL",
    "ScratchDatabase",
    "Utilities",
    "ValidationWorkflow",
    # Compressors
    "Bzip2",
    "Compressor",
    "Custom",
    "Gzip",
    "compressor_from_config",
    # Errors
    "ConfigError",
    "DumperError",
    "DumpFailed",
    "PipelineError",
    "UtilityNotFound",
    "ValidationFailed",
    # Models
    "CleanupStage",
    "ConnectionSpec",
    "DatabaseStats",
    "DumpArtifact",
    "DumpStats",
    "DumpTarget",
    "PipelineStage",
    "PostgreSQLSettings",
    "StageResult",
    "StageRole",
    "TableFilter",
    "ValidationSpec",
    "ValidationState",
    # Utilities
    "format_settings_display",
    "print_dry_run_info",
    "setup_logging",
]
