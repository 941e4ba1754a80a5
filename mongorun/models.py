"""Shared dataclasses used across connection and batch modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_PORT = 27017


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Single host (and optional port) candidate for a connection."""

    host: str
    port: int | None = None

    @property
    def address(self) -> str:
        port = self.port if self.port is not None else DEFAULT_PORT
        return f"{self.host}:{port}"


@dataclass(frozen=True, slots=True)
class Credentials:
    """Username/password pair resolved inline or from a credential store."""

    username: str | None = None
    password: str | None = None

    @property
    def complete(self) -> bool:
        """Whether both halves are present, which is required to authenticate."""

        return self.username is not None and self.password is not None


@dataclass(frozen=True, slots=True)
class ScriptFile:
    """Read-only view over a script on disk."""

    path: Path
    encoding: str | None = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_compressed(self) -> bool:
        return self.path.name.lower().endswith("gz")


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """What the server reported for one evaluated script."""

    ok: bool
    error_message: str | None = None
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """Per-script result consumed by logging and the batch summary."""

    script_name: str
    succeeded: bool
    error_message: str | None = None
    elapsed_seconds: float = 0.0


@dataclass(frozen=True, slots=True)
class BatchReport:
    """Ordered outcomes of every script executed in one batch."""

    outcomes: tuple[ExecutionOutcome, ...] = field(default_factory=tuple)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.succeeded)

    @property
    def failures(self) -> tuple[ExecutionOutcome, ...]:
        return tuple(outcome for outcome in self.outcomes if not outcome.succeeded)


__all__ = [
    "BatchReport",
    "Credentials",
    "DEFAULT_PORT",
    "Endpoint",
    "EvaluationResult",
    "ExecutionOutcome",
    "ScriptFile",
]
