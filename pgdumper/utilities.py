"""
Locating the command line utilities used by dump pipelines.
"""

import logging
import shutil
from typing import Optional

from .errors import UtilityNotFound


class Utilities:
    """Resolves utility names to absolute paths, honouring configured overrides."""

    NAMES = (
        'pg_dump', 'pg_dumpall', 'psql', 'pg_restore',
        'sudo', 'cat', 'gzip', 'bzip2',
    )

    def __init__(self, overrides: Optional[dict[str, str]] = None):
        self.overrides = dict(overrides or {})
        self._cache: dict[str, str] = {}

    def utility(self, name: str) -> str:
        """Return the path for ``name``, raising UtilityNotFound if it is unavailable."""
        if name in self._cache:
            return self._cache[name]

        path = self.overrides.get(name) or shutil.which(name)
        if not path:
            raise UtilityNotFound(f"Could not locate '{name}'. Make sure it is installed and on PATH.")

        logging.debug(f"Resolved utility '{name}' to {path}")
        self._cache[name] = path
        return path
