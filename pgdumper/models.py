"""
Data models and enums for PostgreSQL Dumper.
"""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Any

from .errors import ConfigError


ALL_DATABASES = ":all"


class StageRole(Enum):
    """Position of a stage within a dump run."""
    DUMP = "dump"
    COMPRESS = "compress"
    REDIRECT = "redirect"
    CREATE_TEMP = "create_temp"
    RESTORE_TEMP = "restore_temp"
    CHECK_QUERY = "check_query"
    DROP_TEMP = "drop_temp"

    @property
    def is_validation(self) -> bool:
        return self in VALIDATION_ROLES


VALIDATION_ROLES = frozenset({
    StageRole.CREATE_TEMP,
    StageRole.RESTORE_TEMP,
    StageRole.CHECK_QUERY,
    StageRole.DROP_TEMP,
})


class ValidationState(Enum):
    """States of the restore-and-check workflow."""
    DUMPED = "dumped"
    TEMP_CREATED = "temp_created"
    RESTORED = "restored"
    CHECKED = "checked"
    CLEANED = "cleaned"
    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class DumpTarget:
    """A single database, or every database when ``name`` is None."""
    name: Optional[str] = None

    @classmethod
    def from_name(cls, name: Optional[str]) -> "DumpTarget":
        """Missing, empty and ':all' names all select every database."""
        if not name or name == ALL_DATABASES:
            return cls(None)
        return cls(str(name))

    @property
    def dump_all(self) -> bool:
        return self.name is None

    def __str__(self) -> str:
        return ALL_DATABASES if self.dump_all else self.name


@dataclass(frozen=True)
class ConnectionSpec:
    """Credentials and connectivity. A socket takes precedence over host/port."""
    username: Optional[str] = None
    password: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    socket: Optional[str] = None


@dataclass(frozen=True)
class TableFilter:
    """Tables to include or exclude; only used for single database dumps."""
    only_tables: frozenset[str] = frozenset()
    skip_tables: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ValidationSpec:
    """Query run against the restored dump. It must succeed for the dump to be valid."""
    check_dump_query: str


@dataclass(frozen=True)
class DumpArtifact:
    """Location of the dump file. The extension grows as compressors are applied."""
    dump_path: str
    dump_filename: str
    extension: str = "sql"

    def with_suffix(self, suffix: str) -> "DumpArtifact":
        return replace(self, extension=self.extension + suffix)

    @property
    def path(self) -> str:
        return f"{os.path.join(self.dump_path, self.dump_filename)}.{self.extension}"


@dataclass(frozen=True)
class PipelineStage:
    """An external shell command and its role in the run."""
    role: StageRole
    command: str


@dataclass(frozen=True)
class CleanupStage(PipelineStage):
    """Drops the scratch database on either branch of the check.

    ``command`` holds the shell rendering ``<success> || <failure>``.
    """
    success_command: str = ""
    failure_command: str = ""


def parse_port(port: Any) -> Optional[int]:
    """Port number from config, or None. Raises ConfigError for anything else."""
    if port is None or port == "":
        return None
    try:
        value = int(port)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid port {port!r}")
    if isinstance(port, bool) or not 0 < value < 65536:
        raise ConfigError(f"Invalid port {port!r}")
    return value


@dataclass
class PostgreSQLSettings:
    """Everything needed to dump one PostgreSQL target."""
    target: DumpTarget = field(default_factory=DumpTarget)
    connection: ConnectionSpec = field(default_factory=ConnectionSpec)
    sudo_user: Optional[str] = None
    tables: TableFilter = field(default_factory=TableFilter)
    additional_options: tuple[str, ...] = ()
    validation: Optional[ValidationSpec] = None

    @classmethod
    def from_config(cls, db_config: dict[str, Any]) -> "PostgreSQLSettings":
        """Build settings from one entry of the ``databases`` config list."""
        query = db_config.get('check_dump_query')
        return cls(
            target=DumpTarget.from_name(db_config.get('name')),
            connection=ConnectionSpec(
                username=db_config.get('username'),
                password=db_config.get('password'),
                host=db_config.get('host'),
                port=parse_port(db_config.get('port')),
                socket=db_config.get('socket'),
            ),
            sudo_user=db_config.get('sudo_user'),
            tables=TableFilter(
                only_tables=frozenset(db_config.get('only_tables') or ()),
                skip_tables=frozenset(db_config.get('skip_tables') or ()),
            ),
            additional_options=tuple(db_config.get('additional_options') or ()),
            validation=ValidationSpec(query) if query else None,
        )


@dataclass
class DatabaseStats:
    """Outcome of dumping a single configured database."""
    database_id: Optional[str]
    target: str
    file_path: str = ""
    success: bool = False
    validated: bool = False
    error: Optional[str] = None


@dataclass
class DumpStats:
    """Overall dump statistics."""
    databases: list[DatabaseStats] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for db in self.databases if db.success)
