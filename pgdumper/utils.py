"""
Utility functions for PostgreSQL Dumper.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from .models import PostgreSQLSettings


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration."""
    log_level = getattr(logging, log_settings.get('level', 'INFO').upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def print_dry_run_info(dumper, databases: list[dict[str, Any]]) -> None:
    """Print the stages that would run for each database in dry-run mode."""
    for db in databases:
        postgresql = dumper.build(db)
        settings_parts = format_settings_display(postgresql.settings)
        logging.info(f"Would dump {postgresql.settings.target} as {postgresql.label}")
        if settings_parts:
            logging.info(f"  ({', '.join(settings_parts)})")

        stages, artifact = postgresql.build_stages()
        for stage in stages:
            logging.info(f"  [{stage.role.value}] {stage.command}")
        logging.info(f"  -> {artifact.path}")


def format_settings_display(settings: PostgreSQLSettings) -> list[str]:
    """Format settings for display in dry-run mode. Passwords are never shown."""
    parts = []
    connection = settings.connection
    if connection.username:
        parts.append(f"user={connection.username}")
    if connection.socket:
        parts.append(f"socket={connection.socket}")
    elif connection.host or connection.port:
        parts.append(f"host={connection.host or 'localhost'}:{connection.port or 5432}")
    if settings.sudo_user:
        parts.append(f"sudo={settings.sudo_user}")
    if not settings.target.dump_all:
        if settings.tables.only_tables:
            parts.append(f"only={','.join(sorted(settings.tables.only_tables))}")
        if settings.tables.skip_tables:
            parts.append(f"skip={','.join(sorted(settings.tables.skip_tables))}")
    if settings.validation:
        parts.append(f"check='{settings.validation.check_dump_query}'")
    return parts
