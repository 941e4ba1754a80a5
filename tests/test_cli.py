"""Tests for the command line entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from mongorun import cli
from mongorun.models import EvaluationResult


class _FakeAdmin:
    def command(self, name: str, *args: Any, **kwargs: Any) -> dict[str, Any]:
        return {"ok": 1.0}


class _FakeDatabase:
    def __init__(self, client: "_FakeClient") -> None:
        self._client = client

    def command(self, name: str, code: str, **kwargs: Any) -> dict[str, Any]:
        self._client.evaluated.append(code)
        return {"ok": 1.0}


class _FakeClient:
    instances: list["_FakeClient"] = []

    def __init__(self, host: Any = None, **kwargs: Any) -> None:
        self.host = host
        self.kwargs = kwargs
        self.admin = _FakeAdmin()
        self.evaluated: list[str] = []
        self.dropped: list[str] = []
        self.closed = False
        type(self).instances.append(self)

    def get_database(self, name: str) -> _FakeDatabase:
        return _FakeDatabase(self)

    def drop_database(self, name: str) -> None:
        self.dropped.append(name)

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def fake_client(monkeypatch: pytest.MonkeyPatch) -> type[_FakeClient]:
    _FakeClient.instances = []
    monkeypatch.setattr("mongorun.connections.MongoClient", _FakeClient)
    return _FakeClient


def _write_config(tmp_path: Path, body: str) -> Path:
    config_path = tmp_path / "mongorun.toml"
    config_path.write_text(body)
    return config_path


def test_training_runs_configured_directories(tmp_path: Path, fake_client: type[_FakeClient]) -> None:
    scripts = tmp_path / "training"
    scripts.mkdir()
    (scripts / "002.js").write_text("print(2)")
    (scripts / "001.js").write_text("print(1)")
    config_path = _write_config(
        tmp_path,
        """
script_encoding = "utf-8"
training_directories = ["training"]

[connection]
hostname = "localhost"
database = "app"
""",
    )

    status = cli.main(["--config", str(config_path), "training"])

    assert status == 0
    client = fake_client.instances[-1]
    assert client.evaluated == ["(function() {\nprint(1)})();", "(function() {\nprint(2)})();"]
    assert client.closed is True


def test_directory_override_replaces_configured_ones(tmp_path: Path, fake_client: type[_FakeClient]) -> None:
    override = tmp_path / "other"
    override.mkdir()
    (override / "x.js").write_text("print('x')")
    config_path = _write_config(
        tmp_path,
        """
migration_directories = ["missing"]

[connection]
hostname = "localhost"
database = "app"
""",
    )

    status = cli.main(["--config", str(config_path), "--encoding", "utf-8", "migration", "-d", str(override)])

    assert status == 0
    assert fake_client.instances[-1].evaluated == ["(function() {\nprint('x')})();"]


def test_missing_directories_fail_without_connecting(tmp_path: Path, fake_client: type[_FakeClient]) -> None:
    config_path = _write_config(tmp_path, '[connection]\nhostname = "localhost"\ndatabase = "app"\n')

    status = cli.main(["--config", str(config_path), "training"])

    assert status == 1
    assert fake_client.instances == []


def test_invalid_settings_fail_before_connecting(tmp_path: Path, fake_client: type[_FakeClient]) -> None:
    config_path = _write_config(tmp_path, 'training_directories = ["t"]\n[connection]\ndatabase = "app"\n')

    status = cli.main(["--config", str(config_path), "training"])

    assert status == 1
    assert fake_client.instances == []


def test_script_failures_do_not_change_exit_status(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, fake_client: type[_FakeClient]
) -> None:
    scripts = tmp_path / "training"
    scripts.mkdir()
    (scripts / "001.js").write_text("boom()")
    config_path = _write_config(
        tmp_path,
        """
training_directories = ["training"]

[connection]
hostname = "localhost"
database = "app"
""",
    )
    monkeypatch.setattr(
        "mongorun.connections.PymongoEvaluator.evaluate",
        lambda self, code: EvaluationResult(ok=False, error_message="boom"),
    )

    status = cli.main(["--config", str(config_path), "--encoding", "utf-8", "training"])

    assert status == 0


def test_credentials_file_resolves_reference(tmp_path: Path, fake_client: type[_FakeClient]) -> None:
    scripts = tmp_path / "training"
    scripts.mkdir()
    credentials = tmp_path / "credentials.toml"
    credentials.write_text('[servers.prod]\nusername = "admin"\npassword = "secret"\n')
    config_path = _write_config(
        tmp_path,
        """
training_directories = ["training"]

[connection]
replica_set = "db1:27017,db2"
database = "app"
credential_ref = "prod"
""",
    )

    status = cli.main(["--config", str(config_path), "--credentials", str(credentials), "training"])

    assert status == 0
    client = fake_client.instances[-1]
    assert client.host == ["db1:27017", "db2:27017"]
    assert client.kwargs["username"] == "admin"
    assert client.kwargs["authSource"] == "app"


def test_drop_requires_confirmation(
    tmp_path: Path, fake_client: type[_FakeClient], caplog: pytest.LogCaptureFixture
) -> None:
    config_path = _write_config(tmp_path, '[connection]\nhostname = "localhost"\ndatabase = "app"\n')

    assert cli.main(["--config", str(config_path), "drop"]) == 2
    assert fake_client.instances == []
    assert "Refusing to drop app without --yes" in caplog.text

    assert cli.main(["--config", str(config_path), "drop", "--yes"]) == 0
    assert fake_client.instances[-1].dropped == ["app"]
