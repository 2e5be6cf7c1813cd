"""
Main database dumping orchestration for PostgreSQL Dumper.
"""

import logging
from typing import Any, Callable, Optional

from .compressor import compressor_from_config
from .config import ConfigLoader
from .errors import DumperError, ValidationFailed
from .models import DatabaseStats, DumpStats, DumpTarget, PostgreSQLSettings
from .pipeline import Pipeline
from .postgresql import PostgreSQL
from .utilities import Utilities


class DatabaseDumper:
    """Main class for database dumping operations."""

    def __init__(self, config: ConfigLoader, pipeline_factory: Callable[..., Pipeline] = Pipeline):
        self.config = config
        self.output_settings = config.get_output_settings()
        self.utilities = Utilities(config.get_utilities())
        self.pipeline_factory = pipeline_factory
        self.stats = DumpStats()

    def run(self, database_filter: Optional[str] = None) -> DumpStats:
        """Run the dump process for all configured databases.

        Args:
            database_filter: If specified, only dump the database with this id
        """
        databases = self.filter_databases(database_filter)

        logging.info(f"Starting dump of {len(databases)} database(s)")

        for db_config in databases:
            self._dump_database(db_config)

        return self.stats

    def filter_databases(self, database_filter: Optional[str]) -> list[dict[str, Any]]:
        """Filter databases based on provided filters."""
        databases = self.config.get_databases()

        if database_filter:
            databases = [db for db in databases if self._database_id(db) == database_filter]
            if not databases:
                logging.warning(f"No database with id '{database_filter}' found in configuration")

        return databases

    @staticmethod
    def _database_id(db_config: dict[str, Any]) -> Optional[str]:
        db_id = db_config.get('id')
        return str(db_id) if db_id is not None else None

    def build(self, db_config: dict[str, Any]) -> PostgreSQL:
        """Create the PostgreSQL dumper for one database entry."""
        return PostgreSQL(
            settings=PostgreSQLSettings.from_config(db_config),
            utilities=self.utilities,
            output_directory=self.output_settings.get('directory', './dumps'),
            trigger=self.config.get_trigger(),
            database_id=self._database_id(db_config),
            compressor=compressor_from_config(self.config.get_compressor_settings(), self.utilities),
            pipeline_factory=self.pipeline_factory,
        )

    def _dump_database(self, db_config: dict[str, Any]) -> None:
        """Dump a single database."""
        db_id = self._database_id(db_config)
        db_stats = DatabaseStats(database_id=db_id, target=str(DumpTarget.from_name(db_config.get('name'))))

        try:
            postgresql = self.build(db_config)
            artifact = postgresql.perform()
            db_stats.file_path = artifact.path
            db_stats.success = True
            db_stats.validated = postgresql.settings.validation is not None
            logging.info(f"  ✓ {db_stats.target}: {artifact.path}")
        except DumperError as e:
            db_stats.error = str(e)
            if isinstance(e, ValidationFailed):
                logging.error(f"  ✗ {db_stats.target}: dump is invalid")
            logging.error(f"Error dumping database '{db_stats.target}': {e}")
            self.stats.errors.append({
                'database': db_id or db_stats.target,
                'error': str(e),
            })

        self.stats.databases.append(db_stats)
