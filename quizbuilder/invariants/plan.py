"""
Sequential dependent writes with attached compensating actions.

The store has no multi-statement transactions, so an operation that needs
"write A, then write B" declares an undo for A up front. If B fails, the
undo actions of the steps already committed run in reverse order.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from quizbuilder.exceptions import CompensationFailed, OperationAborted

logger = logging.getLogger(__name__)


@dataclass
class Step:
    name: str
    action: Callable[[], Any]
    # Receives the action's return value
    compensate: Optional[Callable[[Any], None]] = None


class WritePlan:
    def __init__(self, operation: str):
        self.operation = operation
        self.steps: List[Step] = []

    def add(self, name: str, action: Callable[[], Any], compensate: Optional[Callable[[Any], None]] = None):
        self.steps.append(Step(name, action, compensate))
        return self

    def execute(self) -> List[Any]:
        """Run every step in order and return their results.

        If nothing needed undoing, the original exception propagates as is,
        so a caller's retry policy still sees the raw race. Otherwise the
        failure becomes ``OperationAborted`` once the undo has run.
        """
        completed = []
        for step in self.steps:
            try:
                result = step.action()
            except Exception as exc:
                logger.warning(f"{self.operation}: step '{step.name}' failed: {exc}")
                if not any(s.compensate for s, _ in completed):
                    raise
                self._unwind(completed, exc)
                raise OperationAborted(self.operation, exc) from exc
            completed.append((step, result))
        return [result for _, result in completed]

    def _unwind(self, completed, cause: Exception):
        for step, result in reversed(completed):
            if step.compensate is None:
                continue
            logger.warning(f"{self.operation}: compensating '{step.name}'")
            try:
                step.compensate(result)
            except Exception as exc:
                logger.error(f"{self.operation}: compensation for '{step.name}' failed: {exc}")
                raise CompensationFailed(self.operation, cause, exc) from exc
