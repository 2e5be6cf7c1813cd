"""
Invocation strings for pg_dump, pg_dumpall, psql and pg_restore.
"""

import shlex
from typing import Optional

from . import options
from .models import PostgreSQLSettings
from .utilities import Utilities


class CommandBuilder:
    """Composes option fragments into complete shell commands.

    All commands share the same prefix: the PGPASSWORD assignment first, then
    the sudo wrapper, so the utility itself runs as the sudo user.
    """

    def __init__(self, settings: PostgreSQLSettings, utilities: Utilities):
        self.settings = settings
        self.utilities = utilities

    @property
    def connection(self):
        return self.settings.connection

    def prefix(self) -> str:
        sudo = self.utilities.utility('sudo') if self.settings.sudo_user else ""
        return (
            options.password_option(self.connection.password)
            + options.sudo_option(sudo, self.settings.sudo_user)
        )

    def _command(self, utility: str, *fragments: str) -> str:
        parts = [self.utilities.utility(utility)]
        parts.extend(fragment for fragment in fragments if fragment)
        return self.prefix() + ' '.join(parts)

    def _client_options(self) -> tuple[str, str]:
        return (
            options.username_option(self.connection.username),
            options.connectivity_options(self.connection),
        )

    def pg_dump(self) -> str:
        """Dump the single target database, applying table filters."""
        return self._command(
            'pg_dump',
            *self._client_options(),
            options.user_options(self.settings.additional_options),
            options.tables_to_dump(self.settings.tables.only_tables),
            options.tables_to_skip(self.settings.tables.skip_tables),
            options.database_name(self.settings.target.name),
        )

    def pg_dumpall(self) -> str:
        """Dump every database. Table filters do not apply."""
        return self._command(
            'pg_dumpall',
            *self._client_options(),
            options.user_options(self.settings.additional_options),
        )

    def dump(self) -> str:
        if self.settings.target.dump_all:
            return self.pg_dumpall()
        return self.pg_dump()

    def psql_execute(self, query: str, database: Optional[str] = None, tuples_only: bool = False) -> str:
        """Run ``query`` with psql, optionally connected to ``database``.

        With ``tuples_only`` psql prints bare values (-tA) so the result can be read.
        """
        return self._command(
            'psql',
            *self._client_options(),
            options.database_option(database),
            '-tA' if tuples_only else "",
            options.command_option(query),
        )

    def pg_restore(self, artifact_path: str, database: str) -> str:
        """Restore the dump at ``artifact_path`` into ``database``."""
        return self._command(
            'pg_restore',
            *self._client_options(),
            options.database_option(database),
            shlex.quote(artifact_path),
        )

    def redirect(self, artifact_path: str) -> str:
        """Write the upstream stream to ``artifact_path``."""
        return f"{self.utilities.utility('cat')} > {shlex.quote(artifact_path)}"
