"""Replay directories of MongoDB scripts against a target database."""

from __future__ import annotations

__version__ = "0.1.0"

from .config import ConnectionSettings, RunnerConfig, load_config
from .connections import ConnectionManager, PymongoEvaluator, check_settings
from .credentials import CredentialResolver, MappingCredentialResolver, TomlCredentialStore
from .endpoints import parse_replica_set, resolve_endpoints
from .errors import (
    ConfigurationError,
    ConnectivityError,
    DirectoryError,
    MongorunError,
    ScriptReadError,
)
from .executor import ScriptEvaluator, ScriptExecutor, wrap_script
from .models import BatchReport, Credentials, Endpoint, EvaluationResult, ExecutionOutcome, ScriptFile
from .runner import BatchRunner, execute_for_directories
from .scripts import ScriptSourceReader

__all__ = [
    "BatchReport",
    "BatchRunner",
    "ConfigurationError",
    "ConnectionManager",
    "ConnectionSettings",
    "ConnectivityError",
    "CredentialResolver",
    "Credentials",
    "DirectoryError",
    "Endpoint",
    "EvaluationResult",
    "ExecutionOutcome",
    "MappingCredentialResolver",
    "MongorunError",
    "PymongoEvaluator",
    "RunnerConfig",
    "ScriptEvaluator",
    "ScriptExecutor",
    "ScriptFile",
    "ScriptReadError",
    "ScriptSourceReader",
    "TomlCredentialStore",
    "__version__",
    "check_settings",
    "execute_for_directories",
    "load_config",
    "parse_replica_set",
    "resolve_endpoints",
    "wrap_script",
]
