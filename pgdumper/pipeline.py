"""
Running shell command pipelines with per-stage exit status.
"""

import logging
import os
import shlex
import subprocess
import tempfile
from dataclasses import dataclass
from typing import Iterable

from .errors import PipelineError


@dataclass
class StageResult:
    """Exit status and captured stderr of one pipeline stage."""
    index: int
    command: str
    exit_code: int
    success_codes: tuple[int, ...]
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.exit_code in self.success_codes

    @property
    def command_name(self) -> str:
        """Utility name of the stage, without env assignments or directories."""
        try:
            parts = shlex.split(self.command)
        except ValueError:
            parts = self.command.split()
        while parts and '=' in parts[0]:
            parts.pop(0)
        return os.path.basename(parts[0]) if parts else ''


class Pipeline:
    """Runs commands connected stdout to stdin, like ``a | b | c`` in a shell.

    Each stage's own exit code is checked against its success codes, so a
    failing stage is reported even when later stages succeed.
    """

    def __init__(self, capture_output: bool = False):
        self.capture_output = capture_output
        self.output = ""
        self.commands: list[str] = []
        self.success_codes: list[tuple[int, ...]] = []
        self.results: list[StageResult] = []
        self._ran = False

    def add(self, command: str, success_codes: Iterable[int] = (0,)) -> "Pipeline":
        self.commands.append(command)
        self.success_codes.append(tuple(success_codes))
        return self

    def __len__(self) -> int:
        return len(self.commands)

    def run(self) -> None:
        """Start every stage, wait for all of them and collect their results."""
        if not self.commands:
            raise PipelineError("Pipeline has no commands to run")

        logging.debug(f"Running pipeline: {' | '.join(self.commands)}")

        processes: list[subprocess.Popen] = []
        stderr_files = []
        output_file = tempfile.TemporaryFile() if self.capture_output else subprocess.DEVNULL
        upstream = subprocess.DEVNULL
        try:
            for index, command in enumerate(self.commands):
                is_last = index == len(self.commands) - 1
                err = tempfile.TemporaryFile()
                stderr_files.append(err)
                proc = subprocess.Popen(
                    command,
                    shell=True,
                    stdin=upstream,
                    stdout=output_file if is_last else subprocess.PIPE,
                    stderr=err,
                )
                # Let the upstream stage receive SIGPIPE if this one exits early
                if processes and processes[-1].stdout:
                    processes[-1].stdout.close()
                processes.append(proc)
                upstream = proc.stdout
        except OSError as e:
            for proc in processes:
                proc.kill()
                proc.wait()
            for err in stderr_files:
                err.close()
            if self.capture_output:
                output_file.close()
            raise PipelineError(f"Pipeline failed to execute: {e}") from e

        self.results = []
        for index, (proc, err) in enumerate(zip(processes, stderr_files)):
            exit_code = proc.wait()
            err.seek(0)
            stderr = err.read().decode('utf-8', errors='replace').strip()
            err.close()
            self.results.append(StageResult(
                index=index,
                command=self.commands[index],
                exit_code=exit_code,
                success_codes=self.success_codes[index],
                stderr=stderr,
            ))
        if self.capture_output:
            output_file.seek(0)
            self.output = output_file.read().decode('utf-8', errors='replace').strip()
            output_file.close()
        self._ran = True

        if self.success and self.stderr:
            logging.warning(self.stderr_messages)

    @property
    def errors(self) -> list[StageResult]:
        return [result for result in self.results if not result.success]

    @property
    def success(self) -> bool:
        return self._ran and not self.errors

    @property
    def stderr(self) -> str:
        return '\n'.join(result.stderr for result in self.results if result.stderr)

    @property
    def stderr_messages(self) -> str:
        if not self.stderr:
            return ""
        return f"Pipeline STDERR Messages:\n\n{self.stderr}\n"

    @property
    def error_messages(self) -> str:
        """Stderr of all stages followed by every failing exit status, in stage order."""
        lines = [
            f"'{result.command_name}' returned exit code: {result.exit_code}"
            for result in self.errors
        ]
        return (
            self.stderr_messages
            + "The following system errors were returned:\n"
            + '\n'.join(lines)
        )
