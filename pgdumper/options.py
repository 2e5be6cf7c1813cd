"""
Command line fragments for the PostgreSQL client utilities.

Every function returns an empty string when its field is unset. Values that
come from configuration are quoted with ``shlex.quote`` so no fragment can be
read by the shell as an extra command or an extra flag. The one exception is
``user_options``: additional options are passed through verbatim.
"""

import shlex
from typing import Iterable, Optional

from .models import ConnectionSpec


def password_option(password: Optional[str]) -> str:
    """Environment assignment placed in front of the utility."""
    if password is None:
        return ""
    return f"PGPASSWORD={shlex.quote(password)} "


def sudo_option(sudo: str, sudo_user: Optional[str]) -> str:
    """Run the following utility as ``sudo_user``. ``sudo`` is the resolved binary."""
    if not sudo_user:
        return ""
    return f"{sudo} -n -u {shlex.quote(sudo_user)} "


def username_option(username: Optional[str]) -> str:
    if not username:
        return ""
    return f"--username={shlex.quote(username)}"


def connectivity_options(connection: ConnectionSpec) -> str:
    # libpq treats a directory passed as --host as the socket location
    if connection.socket:
        return f"--host={shlex.quote(connection.socket)}"

    opts = []
    if connection.host:
        opts.append(f"--host={shlex.quote(connection.host)}")
    if connection.port:
        opts.append(f"--port={shlex.quote(str(connection.port))}")
    return ' '.join(opts)


def user_options(additional_options: Iterable[str]) -> str:
    """Join additional options as given. These are trusted and NOT escaped."""
    return ' '.join(additional_options)


def _table_options(flag: str, tables: Iterable[str]) -> str:
    return ' '.join(f"{flag}={shlex.quote(table)}" for table in sorted(tables))


def tables_to_dump(tables: Iterable[str]) -> str:
    return _table_options('--table', tables)


def tables_to_skip(tables: Iterable[str]) -> str:
    return _table_options('--exclude-table', tables)


def database_option(database: Optional[str]) -> str:
    if not database:
        return ""
    return f"-d {shlex.quote(database)}"


def command_option(query: str) -> str:
    return f"-c {shlex.quote(query)}"


def database_name(name: str) -> str:
    """Positional database name. A name starting with '-' goes through --dbname."""
    if name.startswith('-'):
        return f"--dbname={shlex.quote(name)}"
    return shlex.quote(name)
