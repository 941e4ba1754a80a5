"""Replica-set seed parsing."""

from __future__ import annotations

from .config import ConnectionSettings
from .errors import ConfigurationError
from .models import Endpoint

DEFAULT_HOST = "localhost"


def parse_replica_set(seeds: str | None) -> tuple[Endpoint, ...]:
    """Parse ``host[:port]`` tokens separated by commas, keeping input order.

    Returns an empty tuple for a missing or blank seed string, which callers
    treat as single-host mode.
    """

    if seeds is None or not seeds.strip():
        return ()
    endpoints: list[Endpoint] = []
    for position, token in enumerate(seeds.split(","), start=1):
        host, _, port_text = token.partition(":")
        host = host.strip()
        if not host:
            raise ConfigurationError(
                f"replicaSet entry {position} ({token!r}) has an empty host in {seeds!r}"
            )
        endpoints.append(Endpoint(host=host, port=_parse_port(port_text, token)))
    return tuple(endpoints)


def is_replica_set(settings: ConnectionSettings) -> bool:
    return bool(parse_replica_set(settings.replica_set))


def resolve_endpoints(settings: ConnectionSettings) -> tuple[Endpoint, ...]:
    """Replica-set endpoints when configured, otherwise the single host."""

    seeds = parse_replica_set(settings.replica_set)
    if seeds:
        return seeds
    host = (settings.hostname or "").strip() or DEFAULT_HOST
    return (Endpoint(host=host, port=settings.port),)


def _parse_port(text: str, token: str) -> int | None:
    value = text.strip()
    if not value:
        return None
    if not (value.isascii() and value.isdigit()):
        raise ConfigurationError(f"replicaSet entry {token.strip()!r} has a non-numeric port")
    return int(value)


__all__ = ["DEFAULT_HOST", "is_replica_set", "parse_replica_set", "resolve_endpoints"]
