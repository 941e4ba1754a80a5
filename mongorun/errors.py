"""Error taxonomy shared by the connection and batch modules."""

from __future__ import annotations


class MongorunError(RuntimeError):
    """Base error for failures that abort a run."""


class ConfigurationError(MongorunError):
    """Raised when settings are missing, contradictory or malformed."""


class ConnectivityError(MongorunError):
    """Raised when the database cannot be reached."""


class DirectoryError(MongorunError):
    """Raised when a script directory is not a directory."""


class ScriptReadError(MongorunError):
    """Raised when a script file cannot be read or decoded."""


__all__ = [
    "ConfigurationError",
    "ConnectivityError",
    "DirectoryError",
    "MongorunError",
    "ScriptReadError",
]
