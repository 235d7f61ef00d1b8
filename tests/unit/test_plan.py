"""
Unit tests for WritePlan compensation
"""
import pytest
from quizbuilder.exceptions import CompensationFailed, ConstraintViolation, OperationAborted, StoreError
from quizbuilder.invariants.plan import WritePlan


def fail(exc):
    def action(*args):
        raise exc
    return action


class TestWritePlan:

    def test_runs_steps_in_order(self):
        calls = []
        plan = WritePlan("demo")
        plan.add("first", lambda: calls.append("first") or 1)
        plan.add("second", lambda: calls.append("second") or 2)

        assert plan.execute() == [1, 2]
        assert calls == ["first", "second"]

    def test_failure_undoes_completed_steps_in_reverse(self):
        undone = []
        plan = WritePlan("demo")
        plan.add("insert", lambda: "row-1", compensate=lambda row: undone.append(("delete", row)))
        plan.add("demote", lambda: "old", compensate=lambda _: undone.append(("restore", None)))
        plan.add("promote", fail(StoreError("timeout")))

        with pytest.raises(OperationAborted) as exc_info:
            plan.execute()

        assert undone == [("restore", None), ("delete", "row-1")]
        assert isinstance(exc_info.value.cause, StoreError)
        assert exc_info.value.operation == "demo"

    def test_failure_before_any_undoable_write_propagates_unchanged(self):
        plan = WritePlan("demo")
        plan.add("insert", fail(ConstraintViolation("duplicate key")), compensate=lambda _: None)
        plan.add("never", lambda: pytest.fail("must not run"))

        with pytest.raises(ConstraintViolation):
            plan.execute()

    def test_failed_compensation_is_reported(self):
        plan = WritePlan("demo")
        plan.add("insert", lambda: "row-1", compensate=fail(StoreError("delete refused")))
        plan.add("demote", fail(StoreError("update refused")))

        with pytest.raises(CompensationFailed) as exc_info:
            plan.execute()

        assert str(exc_info.value.cause) == "update refused"
        assert str(exc_info.value.compensation_error) == "delete refused"
