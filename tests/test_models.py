"""
Unit tests for models.py
"""

import dataclasses

import pytest

from pgdumper.errors import ConfigError
from pgdumper.models import (
    ALL_DATABASES,
    CleanupStage,
    ConnectionSpec,
    DatabaseStats,
    DumpArtifact,
    DumpStats,
    DumpTarget,
    PostgreSQLSettings,
    StageRole,
    TableFilter,
    ValidationState,
    parse_port,
)


class TestDumpTarget:
    """Tests for DumpTarget."""

    @pytest.mark.parametrize("name", [None, "", ALL_DATABASES])
    def test_all_databases(self, name):
        target = DumpTarget.from_name(name)
        assert target.dump_all is True
        assert target.name is None
        assert str(target) == ":all"

    def test_single_database(self):
        target = DumpTarget.from_name("orders")
        assert target.dump_all is False
        assert target.name == "orders"
        assert str(target) == "orders"


class TestStageRole:
    """Tests for StageRole enum."""

    def test_validation_roles(self):
        assert StageRole.CREATE_TEMP.is_validation
        assert StageRole.RESTORE_TEMP.is_validation
        assert StageRole.CHECK_QUERY.is_validation
        assert StageRole.DROP_TEMP.is_validation

    def test_dump_roles(self):
        assert not StageRole.DUMP.is_validation
        assert not StageRole.COMPRESS.is_validation
        assert not StageRole.REDIRECT.is_validation


class TestValidationState:
    def test_terminal_states(self):
        assert ValidationState("valid") is ValidationState.VALID
        assert ValidationState("invalid") is ValidationState.INVALID


class TestDumpArtifact:
    """Tests for DumpArtifact dataclass."""

    def test_default_extension(self):
        artifact = DumpArtifact("/backups/nightly/databases", "PostgreSQL")
        assert artifact.extension == "sql"
        assert artifact.path == "/backups/nightly/databases/PostgreSQL.sql"

    def test_with_suffix_returns_new_artifact(self):
        artifact = DumpArtifact("/backups", "PostgreSQL-orders")
        compressed = artifact.with_suffix(".gz")

        assert compressed.extension == "sql.gz"
        assert compressed.path == "/backups/PostgreSQL-orders.sql.gz"
        assert artifact.extension == "sql"

    def test_immutable(self):
        artifact = DumpArtifact("/backups", "PostgreSQL")
        with pytest.raises(dataclasses.FrozenInstanceError):
            artifact.extension = "csv"


class TestCleanupStage:
    def test_carries_both_branches(self):
        stage = CleanupStage(
            role=StageRole.DROP_TEMP,
            command="a || b",
            success_command="a",
            failure_command="b",
        )
        assert stage.role is StageRole.DROP_TEMP
        assert stage.success_command == "a"
        assert stage.failure_command == "b"


class TestPostgreSQLSettings:
    """Tests for PostgreSQLSettings.from_config."""

    def test_defaults(self):
        settings = PostgreSQLSettings.from_config({})
        assert settings.target.dump_all
        assert settings.connection == ConnectionSpec()
        assert settings.sudo_user is None
        assert settings.tables == TableFilter()
        assert settings.additional_options == ()
        assert settings.validation is None

    def test_full_config(self):
        settings = PostgreSQLSettings.from_config({
            "name": "orders",
            "username": "backup",
            "password": "secret",
            "host": "db.internal",
            "port": "5433",
            "sudo_user": "postgres",
            "only_tables": ["orders", "items"],
            "skip_tables": ["audit_log"],
            "additional_options": ["--no-owner", "--format=custom"],
            "check_dump_query": "SELECT 1;",
        })

        assert settings.target.name == "orders"
        assert settings.connection.username == "backup"
        assert settings.connection.password == "secret"
        assert settings.connection.port == 5433
        assert settings.sudo_user == "postgres"
        assert settings.tables.only_tables == frozenset({"orders", "items"})
        assert settings.tables.skip_tables == frozenset({"audit_log"})
        assert settings.additional_options == ("--no-owner", "--format=custom")
        assert settings.validation.check_dump_query == "SELECT 1;"

    def test_empty_check_query_disables_validation(self):
        settings = PostgreSQLSettings.from_config({"name": "orders", "check_dump_query": ""})
        assert settings.validation is None

    @pytest.mark.parametrize("port", ["abc", 0, 70000, True])
    def test_invalid_port(self, port):
        with pytest.raises(ConfigError):
            PostgreSQLSettings.from_config({"name": "orders", "port": port})


class TestParsePort:
    def test_values(self):
        assert parse_port(5432) == 5432
        assert parse_port("5433") == 5433
        assert parse_port(None) is None
        assert parse_port("") is None


class TestStats:
    """Tests for DatabaseStats and DumpStats."""

    def test_database_stats_defaults(self):
        stats = DatabaseStats(database_id="orders", target="orders")
        assert stats.success is False
        assert stats.validated is False
        assert stats.error is None
        assert stats.file_path == ""

    def test_dump_stats_succeeded(self):
        stats = DumpStats()
        stats.databases.append(DatabaseStats("a", "a", success=True))
        stats.databases.append(DatabaseStats("b", "b", success=False, error="boom"))
        assert stats.succeeded == 1
        assert stats.errors == []
