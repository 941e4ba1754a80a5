"""Connection management for the target MongoDB deployment."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConfigurationError as DriverConfigurationError
from pymongo.errors import OperationFailure, PyMongoError

from .config import ConnectionSettings
from .credentials import CredentialResolver
from .endpoints import is_replica_set, resolve_endpoints
from .errors import ConfigurationError, ConnectivityError
from .models import Credentials, EvaluationResult

LOG = logging.getLogger(__name__)


class PymongoEvaluator:
    """Runs code through the server ``eval`` command of a pymongo database."""

    def __init__(self, database: Database) -> None:
        self._database = database

    def evaluate(self, code: str) -> EvaluationResult:
        try:
            self._database.command("eval", code, args=[])
        except OperationFailure as exc:
            details = exc.details or {}
            message = details.get("errmsg") or str(exc)
            detail = None
            if exc.code is not None:
                detail = f"code={exc.code} codeName={details.get('codeName')}"
            return EvaluationResult(ok=False, error_message=str(message), detail=detail)
        return EvaluationResult(ok=True)


def check_settings(settings: ConnectionSettings, label: str, resolver: CredentialResolver) -> None:
    """Validate settings before any network activity."""

    if settings.credential_ref:
        credentials = resolver.resolve(settings.credential_ref)
        if credentials is None:
            raise ConfigurationError(f"[{label}] Server ID: {settings.credential_ref} not found!")
        if not credentials.username:
            raise ConfigurationError(
                f"[{label}] Server ID: {settings.credential_ref} found, but username is empty!"
            )
    elif not settings.hostname and not settings.replica_set:
        raise ConfigurationError(f"[{label}] hostname or replicaSet must be defined!")


class ConnectionManager:
    """Opens, authenticates and releases the client used by one batch."""

    def __init__(self, settings: ConnectionSettings, resolver: CredentialResolver) -> None:
        self._settings = settings
        self._resolver = resolver

    @property
    def settings(self) -> ConnectionSettings:
        return self._settings

    def check(self, label: str = "connection") -> None:
        check_settings(self._settings, label, self._resolver)

    def resolve_credentials(self) -> Credentials:
        """Credentials from the named reference when set, otherwise inline."""

        ref = self._settings.credential_ref
        if ref:
            credentials = self._resolver.resolve(ref)
            if credentials is None:
                raise ConfigurationError(f"Server ID: {ref} not found!")
            return credentials
        return Credentials(username=self._settings.user_name, password=self._settings.password)

    def open_connection(self, credentials: Credentials | None = None) -> MongoClient:
        """Open a client for the configured endpoints and verify it responds.

        pymongo authenticates per connection, so credentials are applied here
        rather than on the database handle.
        """

        settings = self._settings
        endpoints = resolve_endpoints(settings)
        target = ", ".join(endpoint.address for endpoint in endpoints)
        kwargs: dict[str, Any] = dict(settings.options or {})
        if credentials is not None and credentials.complete:
            kwargs.setdefault("username", credentials.username)
            kwargs.setdefault("password", credentials.password)
            kwargs.setdefault("authSource", settings.database)
        try:
            if is_replica_set(settings):
                LOG.info("Connecting to replica set seeds %s", target)
                client: MongoClient = MongoClient([seed.address for seed in endpoints], **kwargs)
            else:
                endpoint = endpoints[0]
                LOG.info("Connecting to %s", target)
                if endpoint.port is not None:
                    kwargs["port"] = endpoint.port
                client = MongoClient(endpoint.host, **kwargs)
        except (DriverConfigurationError, TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid connection options for {target}: {exc}") from exc

        try:
            client.admin.command("ping")
        except PyMongoError as exc:
            client.close()
            raise ConnectivityError(f"Unable to reach {target}: {exc}") from exc
        return client

    def select_database(self, client: MongoClient, credentials: Credentials | None = None) -> Database:
        """Return the configured database, noting how it was authenticated."""

        name = self._settings.database
        if credentials is not None and credentials.complete:
            LOG.info("Authenticated to %s as %s", name, credentials.username)
        elif credentials is not None and (credentials.username or credentials.password):
            LOG.warning(
                "Username or password missing for %s; continuing without authentication",
                name,
                extra={"database": name},
            )
        return client.get_database(name)

    def drop_database(self, client: MongoClient, name: str | None = None) -> None:
        """Drop the given (default: configured) database. There is no undo."""

        target = name or self._settings.database
        LOG.warning("Dropping database %s", target)
        try:
            client.drop_database(target)
        except PyMongoError as exc:
            raise ConnectivityError(f"Unable to drop {target}: {exc}") from exc

    @contextmanager
    def session(self) -> Iterator[Database]:
        """Yield the authenticated database and close the client on exit."""

        credentials = self.resolve_credentials()
        client = self.open_connection(credentials)
        try:
            yield self.select_database(client, credentials)
        finally:
            client.close()

    @contextmanager
    def client(self) -> Iterator[MongoClient]:
        """Yield an authenticated client for administrative commands."""

        client = self.open_connection(self.resolve_credentials())
        try:
            yield client
        finally:
            client.close()


__all__ = ["ConnectionManager", "PymongoEvaluator", "check_settings"]
