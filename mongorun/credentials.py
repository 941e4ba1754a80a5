"""Credential resolvers for named server references."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Protocol, runtime_checkable

import tomllib

from .errors import ConfigurationError
from .models import Credentials

LOG = logging.getLogger(__name__)


@runtime_checkable
class CredentialResolver(Protocol):
    """Protocol implemented by credential stores."""

    def resolve(self, ref: str) -> Credentials | None:
        """Return the credentials registered under ``ref``, or None when unknown."""


class MappingCredentialResolver:
    """Resolver backed by an in-memory mapping of reference to credentials."""

    def __init__(self, entries: Mapping[str, Credentials] | None = None) -> None:
        self._entries = dict(entries or {})

    def resolve(self, ref: str) -> Credentials | None:
        return self._entries.get(ref)


class TomlCredentialStore:
    """Reads ``[servers.<ref>]`` tables with ``username``/``password`` keys.

    The file is loaded lazily on first lookup. A missing file behaves like an
    empty store so that inline credentials keep working without one.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._entries: dict[str, Credentials] | None = None

    def resolve(self, ref: str) -> Credentials | None:
        if self._entries is None:
            self._entries = self._load()
        return self._entries.get(ref)

    def _load(self) -> dict[str, Credentials]:
        try:
            with self._path.open("rb") as handle:
                raw = tomllib.load(handle)
        except FileNotFoundError:
            LOG.debug("Credential store missing", extra={"path": str(self._path)})
            return {}
        except (tomllib.TOMLDecodeError, OSError) as exc:
            raise ConfigurationError(f"Cannot read credential store {self._path}: {exc}") from exc
        servers = raw.get("servers")
        entries: dict[str, Credentials] = {}
        if not isinstance(servers, dict):
            return entries
        for ref, server in servers.items():
            if not isinstance(server, dict):
                continue
            username = server.get("username")
            password = server.get("password")
            entries[str(ref)] = Credentials(
                username=username if isinstance(username, str) else None,
                password=password if isinstance(password, str) else None,
            )
        return entries


__all__ = [
    "CredentialResolver",
    "MappingCredentialResolver",
    "TomlCredentialStore",
]
