from functools import lru_cache

from fastapi import HTTPException

from quizbuilder.config import settings
from quizbuilder.database import get_database
from quizbuilder.schemas import FailureReason, OperationResult
from quizbuilder.services import QuizBuilder

FAILURE_STATUS = {
    FailureReason.NOT_FOUND: 404,
    FailureReason.LAST_ALTERNATIVE: 409,
    FailureReason.LAST_CORRECT_ALTERNATIVE: 409,
    FailureReason.CONSTRAINT_VIOLATION: 409,
    FailureReason.INVALID_OPERATION: 400,
    FailureReason.STORE_ERROR: 400,
}


@lru_cache
def get_quiz_builder() -> QuizBuilder:
    return QuizBuilder(get_database(), settings)


def unwrap(result: OperationResult) -> OperationResult:
    """Turn a failed operation into an HTTP error the client can branch on"""
    if not result.success:
        raise HTTPException(
            status_code=FAILURE_STATUS.get(result.reason, 400),
            detail={"reason": result.reason.value if result.reason else None, "error": result.error},
        )
    return result
