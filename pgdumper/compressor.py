"""
Compression stages for dump pipelines.
"""

import logging
import shlex
from typing import Any, Callable, Optional

from .errors import ConfigError
from .utilities import Utilities


CompressCallback = Callable[[str, str], None]


class Compressor:
    """Base class. Subclasses supply a stage command and an extension suffix."""

    name = "Compressor"

    def __init__(self, utilities: Utilities):
        self.utilities = utilities

    def compress_with(self, callback: CompressCallback) -> None:
        """Call ``callback(command, ext)`` with the compression stage."""
        command, ext = self.build()
        logging.info(f"Using Compressor::{self.name} for compression.")
        logging.debug(f"  Command: '{command}'  Ext: '{ext}'")
        callback(command, ext)

    def build(self) -> tuple[str, str]:
        raise NotImplementedError


class Gzip(Compressor):
    name = "Gzip"

    def __init__(self, utilities: Utilities, level: Optional[int] = None, rsyncable: bool = False):
        super().__init__(utilities)
        if level is not None and not 1 <= int(level) <= 9:
            raise ConfigError(f"Gzip level must be between 1 and 9, got {level}")
        self.level = level
        self.rsyncable = rsyncable

    def build(self) -> tuple[str, str]:
        command = self.utilities.utility('gzip')
        if self.rsyncable:
            command += ' --rsyncable'
        if self.level is not None:
            command += f' -{int(self.level)}'
        return command, '.gz'


class Bzip2(Compressor):
    name = "Bzip2"

    def __init__(self, utilities: Utilities, level: Optional[int] = None):
        super().__init__(utilities)
        if level is not None and not 1 <= int(level) <= 9:
            raise ConfigError(f"Bzip2 level must be between 1 and 9, got {level}")
        self.level = level

    def build(self) -> tuple[str, str]:
        command = self.utilities.utility('bzip2')
        if self.level is not None:
            command += f' -{int(self.level)}'
        return command, '.bz2'


class Custom(Compressor):
    """Any command reading stdin and writing compressed data to stdout."""

    name = "Custom"

    def __init__(self, utilities: Utilities, command: str, extension: str):
        super().__init__(utilities)
        if not command or not extension:
            raise ConfigError("Custom compressor requires both 'command' and 'extension'")
        self.command = command
        self.extension = extension

    def build(self) -> tuple[str, str]:
        # Resolve the binary, keep its arguments
        binary, *args = shlex.split(self.command)
        command = ' '.join([self.utilities.utility(binary), *(shlex.quote(arg) for arg in args)])
        ext = self.extension if self.extension.startswith('.') else f'.{self.extension}'
        return command, ext


def compressor_from_config(settings: dict[str, Any], utilities: Utilities) -> Optional[Compressor]:
    """Create the configured compressor, or None when compression is disabled."""
    if not settings:
        return None

    kind = str(settings.get('type', '')).lower()
    if kind == 'gzip':
        return Gzip(utilities, level=settings.get('level'), rsyncable=bool(settings.get('rsyncable', False)))
    if kind == 'bzip2':
        return Bzip2(utilities, level=settings.get('level'))
    if kind == 'custom':
        return Custom(utilities, command=settings.get('command', ''), extension=settings.get('extension', ''))
    raise ConfigError(f"Unknown compressor type '{settings.get('type')}'")
