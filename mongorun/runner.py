"""Directory batch runner: ordered enumeration and per-script timing."""

from __future__ import annotations

import dataclasses
import logging
import time
from pathlib import Path
from typing import Any, Callable, Sequence

from .connections import ConnectionManager, PymongoEvaluator
from .errors import ConfigurationError, DirectoryError
from .executor import ScriptEvaluator, ScriptExecutor
from .models import BatchReport, ExecutionOutcome
from .scripts import ScriptSourceReader

LOG = logging.getLogger(__name__)

EvaluatorFactory = Callable[[Any], ScriptEvaluator]


class BatchRunner:
    """Executes every regular file of each directory in filename order."""

    def __init__(self, reader: ScriptSourceReader, executor: ScriptExecutor) -> None:
        self._reader = reader
        self._executor = executor

    def run_directory(self, directory: Path) -> list[ExecutionOutcome]:
        LOG.info("Executing scripts in: %s", directory.name)
        if not directory.is_dir():
            raise DirectoryError(f"{directory.name} is not a directory")

        outcomes: list[ExecutionOutcome] = []
        for path in sorted(directory.iterdir(), key=lambda entry: entry.name):
            if not path.is_file():
                continue
            started = time.perf_counter()
            outcome = self.run_script(path)
            elapsed = time.perf_counter() - started
            LOG.info(" script completed execution in %s second(s)", round(elapsed, 3))
            outcomes.append(dataclasses.replace(outcome, elapsed_seconds=elapsed))
        return outcomes

    def run_script(self, path: Path) -> ExecutionOutcome:
        LOG.info("executing script: %s", path.name)
        text = self._reader.read(self._reader.script_for(path))
        return self._executor.execute(path.name, text)

    def run_directories(self, directories: Sequence[Path]) -> BatchReport:
        outcomes: list[ExecutionOutcome] = []
        for directory in directories:
            outcomes.extend(self.run_directory(directory))
        return BatchReport(outcomes=tuple(outcomes))


def execute_for_directories(
    directories: Sequence[Path] | None,
    manager: ConnectionManager,
    reader: ScriptSourceReader,
    *,
    label: str = "scripts",
    evaluator_factory: EvaluatorFactory = PymongoEvaluator,
) -> BatchReport:
    """Open one session and replay every directory through it."""

    if directories is None:
        raise ConfigurationError(f"Directory was not defined for this execution: {label}")

    with manager.session() as database:
        runner = BatchRunner(reader, ScriptExecutor(evaluator_factory(database)))
        report = runner.run_directories(directories)

    LOG.info(
        "Finished %s: %d script(s) succeeded, %d failed",
        label,
        report.succeeded,
        report.failed,
        extra={"succeeded": report.succeeded, "failed": report.failed},
    )
    for failure in report.failures:
        LOG.warning("  failed: %s (%s)", failure.script_name, failure.error_message)
    return report


__all__ = ["BatchRunner", "EvaluatorFactory", "execute_for_directories"]
