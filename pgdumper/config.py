"""
Configuration loading and validation for PostgreSQL Dumper.
"""

import logging
import os
import re
from typing import Any

import yaml

from .errors import ConfigError
from .models import DumpTarget, parse_port


class ConfigLoader:
    """Loads and validates configuration from YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')
    ARCHIVE_FORMATS = ('--format=c', '--format=custom', '--format=t', '--format=tar', '-Fc', '-Ft')
    DEFAULT_TRIGGER = 'backup'

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.config = self._load_config()
        self._validate()

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file '{self.config_path}' must contain a mapping")

        return self._resolve_env_vars(config)

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            matches = self.ENV_VAR_PATTERN.findall(obj)
            for match in matches:
                env_value = os.environ.get(match, '')
                obj = obj.replace(f'${{{match}}}', env_value)
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def _validate(self) -> None:
        """Reject database entries that cannot be dumped as configured."""
        databases = self.config.get('databases', [])
        if not isinstance(databases, list):
            raise ConfigError("'databases' must be a list")

        seen_ids = set()
        for db in databases:
            if not isinstance(db, dict):
                raise ConfigError(f"Database entry must be a mapping, got: {db!r}")

            db_id = db.get('id')
            if db_id is not None:
                if db_id in seen_ids:
                    raise ConfigError(f"Duplicate database id '{db_id}'")
                seen_ids.add(db_id)

            for key in ('only_tables', 'skip_tables', 'additional_options'):
                if key in db and db[key] is not None and not isinstance(db[key], list):
                    raise ConfigError(f"'{key}' must be a list for database '{db_id or db.get('name')}'")

            try:
                parse_port(db.get('port'))
            except ConfigError as e:
                raise ConfigError(f"{e} for database '{db_id or db.get('name')}'") from e

            if db.get('check_dump_query'):
                if DumpTarget.from_name(db.get('name')).dump_all:
                    raise ConfigError("'check_dump_query' requires a single database 'name'")
                self._warn_unrestorable(db)

    def _warn_unrestorable(self, db: dict[str, Any]) -> None:
        """pg_restore only reads uncompressed custom or tar archives."""
        label = db.get('id') or db.get('name')
        if not any(opt in self.ARCHIVE_FORMATS for opt in db.get('additional_options') or ()):
            logging.warning(
                f"Database '{label}' sets check_dump_query without --format=custom or --format=tar; "
                "pg_restore cannot read a plain SQL dump"
            )
        if self.get_compressor_settings():
            logging.warning(
                f"Database '{label}' sets check_dump_query with a compressor configured; "
                "pg_restore cannot read a compressed dump"
            )

    def get_trigger(self) -> str:
        """Get the trigger name used in dump paths."""
        return str(self.config.get('trigger') or self.DEFAULT_TRIGGER)

    def get_databases(self) -> list[dict[str, Any]]:
        """Get list of databases to dump."""
        return self.config.get('databases', [])

    def get_output_settings(self) -> dict[str, Any]:
        """Get output settings."""
        return self.config.get('output', {})

    def get_compressor_settings(self) -> dict[str, Any]:
        """Get compressor settings. Empty when compression is disabled."""
        return self.config.get('compressor') or {}

    def get_utilities(self) -> dict[str, str]:
        """Get utility path overrides."""
        return self.config.get('utilities') or {}

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self.config.get('logging', {})
