"""
Restore-and-check validation of a finished dump.

The dump is restored into a scratch database named ``<database>_check_dump``,
the check query is run against it, and the scratch database is dropped
whether or not the check passed. A failed check raises ValidationFailed.
"""

import logging
import re
from typing import Callable

from .commands import CommandBuilder
from .errors import DumperError, DumpFailed, ValidationFailed
from .models import CleanupStage, PipelineStage, StageRole, ValidationSpec, ValidationState
from .pipeline import Pipeline


SIMPLE_IDENTIFIER = re.compile(r'^[a-z_][a-z0-9_$]*$')
FALSE_RESULTS = frozenset({'f', 'false'})
MAINTENANCE_DATABASE = 'postgres'


def quote_identifier(name: str) -> str:
    """Double-quote ``name`` for SQL unless it is a plain lower-case identifier."""
    if SIMPLE_IDENTIFIER.match(name):
        return name
    return '"' + name.replace('"', '""') + '"'


class ScratchDatabase:
    """Context manager owning the scratch database.

    Entering creates the database. Exiting always drops it, and a failed drop
    is reported together with any error already propagating.
    """

    def __init__(self, workflow: "ValidationWorkflow"):
        self.workflow = workflow
        self.name = workflow.temporary_database_name

    def __enter__(self) -> "ScratchDatabase":
        self.workflow.execute(self.workflow.create_stage())
        self.workflow.transition(ValidationState.TEMP_CREATED)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        pipeline = self.workflow.run_command(self.workflow.cleanup_stage().success_command)
        if pipeline.success:
            self.workflow.transition(ValidationState.CLEANED)
            return

        logging.error(f"Failed to drop scratch database '{self.name}'")
        message = f"Could not drop scratch database '{self.name}'\n{pipeline.error_messages}"
        if exc_val is None:
            raise DumpFailed(message)
        if isinstance(exc_val, DumperError):
            raise type(exc_val)(f"{exc_val}\n{message}") from exc_val
        logging.error(message)


class ValidationWorkflow:
    """Drives the DUMPED -> ... -> VALID/INVALID state machine for one run."""

    def __init__(
        self,
        builder: CommandBuilder,
        database_name: str,
        artifact_path: str,
        spec: ValidationSpec,
        pipeline_factory: Callable[..., Pipeline] = Pipeline,
    ):
        self.builder = builder
        self.database_name = database_name
        self.artifact_path = artifact_path
        self.spec = spec
        self.pipeline_factory = pipeline_factory
        self.state = ValidationState.DUMPED

    @property
    def temporary_database_name(self) -> str:
        return f"{self.database_name}_check_dump"

    def _drop_statement(self) -> str:
        return f"DROP DATABASE {quote_identifier(self.temporary_database_name)};"

    def create_stage(self) -> PipelineStage:
        name = quote_identifier(self.temporary_database_name)
        return PipelineStage(
            StageRole.CREATE_TEMP,
            self.builder.psql_execute(f"CREATE DATABASE {name};", database=MAINTENANCE_DATABASE),
        )

    def restore_stage(self) -> PipelineStage:
        return PipelineStage(
            StageRole.RESTORE_TEMP,
            self.builder.pg_restore(self.artifact_path, self.temporary_database_name),
        )

    def check_stage(self) -> PipelineStage:
        return PipelineStage(
            StageRole.CHECK_QUERY,
            self.builder.psql_execute(
                self.spec.check_dump_query,
                database=self.temporary_database_name,
                tuples_only=True,
            ),
        )

    def cleanup_stage(self) -> CleanupStage:
        success = self.builder.psql_execute(self._drop_statement(), database=MAINTENANCE_DATABASE)
        failure = self.builder.psql_execute(
            f"{self._drop_statement()} {ValidationFailed.MARKER}", database=MAINTENANCE_DATABASE
        )
        return CleanupStage(
            role=StageRole.DROP_TEMP,
            command=f"{success} || {failure}",
            success_command=success,
            failure_command=failure,
        )

    def stages(self) -> list[PipelineStage]:
        return [self.create_stage(), self.restore_stage(), self.check_stage(), self.cleanup_stage()]

    def transition(self, state: ValidationState) -> None:
        logging.debug(f"Validation of '{self.database_name}': {self.state.value} -> {state.value}")
        self.state = state

    def run_command(self, command: str, capture_output: bool = False) -> Pipeline:
        pipeline = self.pipeline_factory(capture_output=capture_output)
        pipeline.add(command)
        pipeline.run()
        return pipeline

    def execute(self, stage: PipelineStage) -> Pipeline:
        """Run a single stage, raising DumpFailed if it does not succeed."""
        pipeline = self.run_command(stage.command)
        if not pipeline.success:
            raise DumpFailed(f"Dump Failed!\n{pipeline.error_messages}")
        return pipeline

    @staticmethod
    def check_passed(pipeline: Pipeline) -> bool:
        """The check passes when psql succeeds and the first value returned is not false."""
        if not pipeline.success:
            return False
        lines = pipeline.output.splitlines()
        first = lines[0].split('|')[0].strip().lower() if lines else ''
        return first not in FALSE_RESULTS

    def run(self) -> ValidationState:
        """Restore, check and clean up. Raises ValidationFailed if the check fails."""
        logging.info(f"Validating dump of '{self.database_name}' in '{self.temporary_database_name}'")

        try:
            with ScratchDatabase(self):
                self.execute(self.restore_stage())
                self.transition(ValidationState.RESTORED)

                check = self.run_command(self.check_stage().command, capture_output=True)
                passed = self.check_passed(check)
                self.transition(ValidationState.CHECKED)
                if not passed:
                    details = check.error_messages if not check.success else f"Check query returned: {check.output}"
                    raise ValidationFailed(f"{ValidationFailed.MARKER}\n{details}")
        except ValidationFailed:
            self.transition(ValidationState.INVALID)
            raise

        self.transition(ValidationState.VALID)
        logging.info(f"Dump of '{self.database_name}' is valid")
        return self.state
