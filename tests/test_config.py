"""Tests for RunnerConfig loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from mongorun import config as config_module
from mongorun.config import ConnectionSettings, RunnerConfig, load_config
from mongorun.errors import ConfigurationError


def test_load_config_reads_values(tmp_path: Path) -> None:
    config_path = tmp_path / "mongorun.toml"
    config_path.write_text(
        """
script_encoding = "utf-8"
training_directories = ["db/training", "/abs/seed"]
credentials_file = "secrets.toml"

[connection]
hostname = "localhost"
port = 27018
database = "app"
user_name = "admin"
password = "secret"

[connection.options]
serverSelectionTimeoutMS = 500
"""
    )

    result = load_config(config_path)

    assert result.script_encoding == "utf-8"
    assert result.connection.hostname == "localhost"
    assert result.connection.port == 27018
    assert result.connection.user_name == "admin"
    assert result.connection.options == {"serverSelectionTimeoutMS": 500}
    assert result.training_directories == [tmp_path / "db" / "training", Path("/abs/seed")]
    assert result.migration_directories is None
    assert result.credentials_file == tmp_path / "secrets.toml"


def test_load_config_accepts_legacy_key_names(tmp_path: Path) -> None:
    config_path = tmp_path / "mongorun.toml"
    config_path.write_text(
        """
[connection]
replicaSet = "db1:27017,db2"
database = "app"
serverId = "mongo-prod"
"""
    )

    result = load_config(config_path)

    assert result.connection.replica_set == "db1:27017,db2"
    assert result.connection.credential_ref == "mongo-prod"


def test_load_config_missing_file_is_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        load_config(tmp_path / "absent.toml")


def test_load_config_handles_toml_errors(tmp_path: Path) -> None:
    config_path = tmp_path / "mongorun.toml"
    config_path.write_text("script_encoding = [unterminated")

    with pytest.raises(ConfigurationError, match="Invalid TOML"):
        load_config(config_path)


def test_load_config_requires_database(tmp_path: Path) -> None:
    config_path = tmp_path / "mongorun.toml"
    config_path.write_text('[connection]\nhostname = "localhost"\n')

    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        load_config(config_path)


def test_load_config_defaults_to_working_directory_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "mongorun.toml"
    config_path.write_text('[connection]\ndatabase = "app"\nhostname = "h"\n')
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    assert load_config().connection.database == "app"


def test_directories_for_selects_mode() -> None:
    config = RunnerConfig(
        connection=ConnectionSettings(database="app", hostname="h"),
        training_directories=[Path("t")],
        migration_directories=[Path("m")],
    )

    assert config.directories_for("training") == [Path("t")]
    assert config.directories_for("migration") == [Path("m")]


def test_with_overrides_replaces_mode_directories_only() -> None:
    config = RunnerConfig(
        connection=ConnectionSettings(database="app", hostname="h"),
        training_directories=[Path("t")],
        migration_directories=[Path("m")],
    )

    updated = config.with_overrides(mode="training", directories=[Path("x")], script_encoding="latin-1")

    assert updated.training_directories == [Path("x")]
    assert updated.migration_directories == [Path("m")]
    assert updated.script_encoding == "latin-1"
    assert config.training_directories == [Path("t")]
