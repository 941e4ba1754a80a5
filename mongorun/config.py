"""Runner configuration loading helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import tomllib

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError

CONFIG_FILE = Path("mongorun.toml")
CREDENTIALS_FILE = Path.home() / ".config" / "mongorun" / "credentials.toml"

RunMode = Literal["training", "migration"]


class ConnectionSettings(BaseModel):
    """Database connection settings stored in mongorun.toml."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    database: str
    hostname: str | None = None
    port: int | None = None
    replica_set: str | None = Field(
        default=None,
        validation_alias=AliasChoices("replica_set", "replicaSet"),
    )
    user_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("user_name", "userName", "username"),
    )
    password: str | None = None
    credential_ref: str | None = Field(
        default=None,
        validation_alias=AliasChoices("credential_ref", "server_id", "serverId"),
    )
    options: dict[str, Any] | None = None


class RunnerConfig(BaseModel):
    """Shape of the runner configuration file."""

    connection: ConnectionSettings
    script_encoding: str | None = None
    training_directories: list[Path] | None = None
    migration_directories: list[Path] | None = None
    credentials_file: Path = CREDENTIALS_FILE

    def directories_for(self, mode: RunMode) -> list[Path] | None:
        """Directories configured for the given run mode, if any."""

        if mode == "training":
            return self.training_directories
        return self.migration_directories

    def with_overrides(
        self,
        *,
        mode: RunMode | None = None,
        directories: list[Path] | None = None,
        script_encoding: str | None = None,
        credentials_file: Path | None = None,
    ) -> RunnerConfig:
        """Return a copy with command line overrides applied."""

        updates: dict[str, object] = {}
        if directories and mode is not None:
            updates[f"{mode}_directories"] = list(directories)
        if script_encoding:
            updates["script_encoding"] = script_encoding
        if credentials_file is not None:
            updates["credentials_file"] = credentials_file
        return self.model_copy(update=updates)


def load_config(path: Path | None = None) -> RunnerConfig:
    """Load configuration from disk, resolving directories relative to the file."""

    config_path = path or CONFIG_FILE
    try:
        data = _read_config_file(config_path)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Configuration file not found: {config_path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid TOML in {config_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Cannot read {config_path}: {exc}") from exc

    base = config_path.parent
    for key in ("training_directories", "migration_directories"):
        entries = data.get(key)
        if isinstance(entries, str):
            entries = [entries]
        if isinstance(entries, list):
            data[key] = [_resolve(base, Path(str(entry))) for entry in entries]
    credentials = data.get("credentials_file")
    if isinstance(credentials, str):
        data["credentials_file"] = _resolve(base, Path(credentials).expanduser())

    try:
        return RunnerConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {exc}") from exc


def _read_config_file(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        raw = tomllib.load(handle)
    return dict(raw)


def _resolve(base: Path, entry: Path) -> Path:
    if entry.is_absolute():
        return entry
    return base / entry


__all__ = [
    "CONFIG_FILE",
    "CREDENTIALS_FILE",
    "ConnectionSettings",
    "RunMode",
    "RunnerConfig",
    "load_config",
]
