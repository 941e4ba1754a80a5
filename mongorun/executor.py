"""Server-side evaluation of decoded scripts."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from .models import EvaluationResult, ExecutionOutcome

LOG = logging.getLogger(__name__)


def wrap_script(text: str) -> str:
    """Wrap script text as the body of an immediately invoked function."""

    return "(function() {" + text + "})();"


@runtime_checkable
class ScriptEvaluator(Protocol):
    """Capability that evaluates code on the database server."""

    def evaluate(self, code: str) -> EvaluationResult:
        """Evaluate ``code`` and report whether the server accepted it."""


class ScriptExecutor:
    """Evaluates scripts without letting a failure escape to the batch."""

    def __init__(self, evaluator: ScriptEvaluator) -> None:
        self._evaluator = evaluator

    def execute(self, name: str, text: str) -> ExecutionOutcome:
        try:
            result = self._evaluator.evaluate(wrap_script(text))
        except Exception as exc:
            LOG.exception(" error executing %s", name, extra={"script": name})
            return ExecutionOutcome(script_name=name, succeeded=False, error_message=str(exc))
        if not result.ok:
            LOG.warning(
                "Error executing %s: %s%s",
                name,
                result.error_message,
                f" ({result.detail})" if result.detail else "",
                extra={"script": name},
            )
            return ExecutionOutcome(script_name=name, succeeded=False, error_message=result.error_message)
        LOG.info(" %s executed successfully", name)
        return ExecutionOutcome(script_name=name, succeeded=True)


__all__ = ["ScriptEvaluator", "ScriptExecutor", "wrap_script"]
