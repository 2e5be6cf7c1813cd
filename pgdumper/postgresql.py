"""
PostgreSQL dump runs: stage assembly, execution and result handling.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from .commands import CommandBuilder
from .compressor import Compressor
from .errors import DumpFailed
from .models import DumpArtifact, PipelineStage, PostgreSQLSettings, StageRole, ValidationState
from .pipeline import Pipeline
from .utilities import Utilities
from .validation import ValidationWorkflow


class PostgreSQL:
    """Dumps one PostgreSQL target to ``<dump_path>/<dump_filename>.sql[<ext>]``.

    A single database is dumped with pg_dump, ``:all`` with pg_dumpall.
    When a check query is configured the finished dump is restored into a
    scratch database and verified.
    """

    def __init__(
        self,
        settings: PostgreSQLSettings,
        utilities: Utilities,
        output_directory: str,
        trigger: str,
        database_id: Optional[str] = None,
        compressor: Optional[Compressor] = None,
        pipeline_factory: Callable[..., Pipeline] = Pipeline,
    ):
        self.settings = settings
        self.utilities = utilities
        self.output_directory = output_directory
        self.trigger = trigger
        self.database_id = database_id
        self.compressor = compressor
        self.pipeline_factory = pipeline_factory
        self.builder = CommandBuilder(settings, utilities)

    @property
    def dump_path(self) -> str:
        return os.path.join(self.output_directory, self.trigger, 'databases')

    @property
    def dump_filename(self) -> str:
        if self.database_id:
            return f"PostgreSQL-{self.database_id}"
        return "PostgreSQL"

    @property
    def label(self) -> str:
        if self.database_id:
            return f"Database::PostgreSQL ({self.database_id})"
        return "Database::PostgreSQL"

    def validation_workflow(self, artifact: DumpArtifact) -> Optional[ValidationWorkflow]:
        if self.settings.validation is None or self.settings.target.dump_all:
            return None
        return ValidationWorkflow(
            self.builder,
            self.settings.target.name,
            artifact.path,
            self.settings.validation,
            pipeline_factory=self.pipeline_factory,
        )

    def build_stages(self) -> tuple[list[PipelineStage], DumpArtifact]:
        """Assemble every stage of a run and the final artifact location."""
        stages = [PipelineStage(StageRole.DUMP, self.builder.dump())]
        artifact = DumpArtifact(self.dump_path, self.dump_filename)

        if self.compressor:
            compressed = []
            self.compressor.compress_with(lambda command, ext: compressed.append((command, ext)))
            for command, ext in compressed:
                stages.append(PipelineStage(StageRole.COMPRESS, command))
                artifact = artifact.with_suffix(ext)

        stages.append(PipelineStage(StageRole.REDIRECT, self.builder.redirect(artifact.path)))

        workflow = self.validation_workflow(artifact)
        if workflow:
            stages.extend(workflow.stages())

        return stages, artifact

    def perform(self) -> DumpArtifact:
        """Run the dump and, if configured, validate it.

        Raises:
            DumpFailed: if any stage fails. ValidationFailed if the check query fails.
        """
        logging.info(f"{self.label} Started...")

        stages, artifact = self.build_stages()
        Path(self.dump_path).mkdir(parents=True, exist_ok=True)

        pipeline = self.pipeline_factory()
        for stage in stages:
            if not stage.role.is_validation:
                pipeline.add(stage.command)
        pipeline.run()
        self.interpret(pipeline)

        workflow = self.validation_workflow(artifact)
        if workflow and workflow.run() is ValidationState.VALID:
            logging.info(f"{self.label} Dump validated")

        logging.info(f"{self.label} Finished!")
        return artifact

    def interpret(self, pipeline: Pipeline) -> None:
        if not pipeline.success:
            raise DumpFailed(f"Dump Failed!\n{pipeline.error_messages}")
