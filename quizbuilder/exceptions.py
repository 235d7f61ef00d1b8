"""
Error taxonomy for the invariant-maintenance layer.

Store errors come back from the persistence layer, validation failures are
raised by the managers before any write, and ``OperationAborted`` marks a
multi-write operation whose committed writes were undone.
"""


class QuizBuilderError(Exception):
    """Base class for every error raised deliberately by this package"""


class StoreError(QuizBuilderError):
    """The store rejected a read or write; ``message`` is the store's text"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConstraintViolation(StoreError):
    """A write was rejected by a uniqueness rule (SQLSTATE 23505)"""


class ValidationFailure(QuizBuilderError):
    reason = "invalid_operation"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(ValidationFailure):
    reason = "not_found"


class LastAlternative(ValidationFailure):
    reason = "last_alternative"


class LastCorrectAlternative(ValidationFailure):
    reason = "last_correct_alternative"


class InvalidOperation(ValidationFailure):
    reason = "invalid_operation"


class OperationAborted(QuizBuilderError):
    """A dependent write failed after earlier writes were compensated"""

    def __init__(self, operation: str, cause: BaseException):
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class CompensationFailed(OperationAborted):
    """The cleanup write itself failed; the group may need manual repair"""

    def __init__(self, operation: str, cause: BaseException, compensation_error: BaseException):
        super().__init__(operation, cause)
        self.compensation_error = compensation_error
