import logging

from quizbuilder.exceptions import CompensationFailed, ConstraintViolation, OperationAborted, StoreError, \
    ValidationFailure
from quizbuilder.schemas import FailureReason, OperationResult


def to_failure(operation: str, exc: BaseException) -> OperationResult:
    """Map an exception onto the reason codes callers branch on"""
    if isinstance(exc, CompensationFailed):
        logging.error(f"Error {operation}: {exc}; cleanup failed: {exc.compensation_error}")
        return OperationResult.fail(
            FailureReason.STORE_ERROR,
            f"{exc.cause}; cleanup failed: {exc.compensation_error}",
        )
    if isinstance(exc, OperationAborted):
        return to_failure(operation, exc.cause)
    if isinstance(exc, ValidationFailure):
        return OperationResult.fail(FailureReason(exc.reason), exc.message)
    if isinstance(exc, ConstraintViolation):
        logging.error(f"Error {operation} after retries: {exc.message}")
        return OperationResult.fail(FailureReason.CONSTRAINT_VIOLATION, exc.message)
    if isinstance(exc, StoreError):
        logging.error(f"Error {operation}: {exc.message}")
        return OperationResult.fail(FailureReason.STORE_ERROR, exc.message)

    logging.error(f"Unexpected error {operation}: {exc}", exc_info=exc)
    return OperationResult.fail(FailureReason.STORE_ERROR, f"Failed {operation}")


def run(operation: str, fn, *args, **kwargs) -> OperationResult:
    """Execute a write operation; failures are returned, never raised"""
    try:
        return OperationResult.ok(fn(*args, **kwargs))
    except Exception as e:
        return to_failure(operation, e)


def tidy(operation: str, fn, *args, **kwargs):
    """Follow-up write after a committed change; a failure is logged, not reported"""
    try:
        fn(*args, **kwargs)
    except Exception as e:
        logging.error(f"Error {operation}, left for the next reorder or delete: {e}")


def read(operation: str, fn, *args, **kwargs) -> list:
    """Execute a read; any failure degrades to an empty list"""
    try:
        return fn(*args, **kwargs)
    except Exception as e:
        logging.error(f"Error {operation}: {e}")
        return []
