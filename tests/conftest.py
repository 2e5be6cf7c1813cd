"""
Shared fixtures for PostgreSQL Dumper tests.
"""

import pytest

from pgdumper.utilities import Utilities


class FakePipeline:
    """Records commands instead of running them."""

    def __init__(self, factory, capture_output=False):
        self.factory = factory
        self.capture_output = capture_output
        self.commands = []
        self.success = False
        self.output = ""
        self.error_messages = ""

    def add(self, command, success_codes=(0,)):
        self.commands.append(command)
        return self

    def run(self):
        failed = [c for c in self.commands if any(f in c for f in self.factory.failures)]
        self.success = not failed
        if failed:
            self.error_messages = (
                f"Pipeline STDERR Messages:\n\nstage failed\n"
                "The following system errors were returned:\n"
                + '\n'.join(f"'{c.split()[0]}' returned exit code: 1" for c in failed)
            )
        for key, value in self.factory.outputs.items():
            if any(key in c for c in self.commands):
                self.output = value


class FakePipelineFactory:
    """Creates FakePipelines. Commands containing any of ``failures`` fail."""

    def __init__(self, failures=(), outputs=None):
        self.failures = list(failures)
        self.outputs = outputs or {}
        self.pipelines = []

    def __call__(self, capture_output=False):
        pipeline = FakePipeline(self, capture_output)
        self.pipelines.append(pipeline)
        return pipeline

    @property
    def commands(self):
        return [c for p in self.pipelines for c in p.commands]


@pytest.fixture
def utilities():
    """Utilities resolving every name to /usr/bin/<name>."""
    return Utilities({name: f"/usr/bin/{name}" for name in Utilities.NAMES})


@pytest.fixture
def pipeline_factory():
    return FakePipelineFactory()
