"""
Exceptions raised by PostgreSQL Dumper.
"""


class DumperError(Exception):
    """Base class for all dumper errors."""


class ConfigError(DumperError):
    """Configuration is structurally invalid."""


class UtilityNotFound(DumperError):
    """A required command line utility could not be located."""


class PipelineError(DumperError):
    """A pipeline stage could not be started."""


class DumpFailed(DumperError):
    """One or more stages of a dump run failed."""


class ValidationFailed(DumpFailed):
    """The check query failed against the restored dump.

    The scratch database has already been dropped when this is raised.
    """

    MARKER = "DUMP IS INVALID"
