"""
Bounded exponential backoff for writes that can race on a unique constraint.

The "one correct alternative" partial index and the ``(scope, order)`` unique
constraints turn concurrent writers into a visible ``ConstraintViolation`` on
the loser, which retries from a fresh read.
"""
import logging
import time

from tenacity import Retrying, before_sleep_log, retry_if_exception, stop_after_attempt, wait_exponential

from quizbuilder.exceptions import ConstraintViolation, QuizBuilderError

logger = logging.getLogger(__name__)


def is_transient(exc: BaseException) -> bool:
    """Constraint races and unexpected exceptions; never validation or store errors"""
    return isinstance(exc, ConstraintViolation) or not isinstance(exc, QuizBuilderError)


def is_constraint_race(exc: BaseException) -> bool:
    return isinstance(exc, ConstraintViolation)


class RetryPolicy:
    """Up to ``max_attempts`` tries, sleeping min(base * 2**n, max_delay) between them.

    After the last attempt the final exception propagates unchanged.
    """

    def __init__(self, max_attempts: int = 5, base_delay: float = 0.1, max_delay: float = 1.0,
                 sleep=time.sleep, retry_unexpected: bool = True):
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.sleep = sleep
        self.retry_unexpected = retry_unexpected

    @classmethod
    def from_settings(cls, settings, sleep=time.sleep):
        return cls(
            max_attempts=settings.max_write_attempts,
            base_delay=settings.backoff_base_seconds,
            max_delay=settings.backoff_max_seconds,
            sleep=sleep,
        )

    def constraint_only(self) -> "RetryPolicy":
        """Same timing, but unexpected exceptions become terminal"""
        return RetryPolicy(self.max_attempts, self.base_delay, self.max_delay, self.sleep, retry_unexpected=False)

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay, max=self.max_delay),
            retry=retry_if_exception(is_transient if self.retry_unexpected else is_constraint_race),
            sleep=self.sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def call(self, fn, *args, **kwargs):
        return self._retrying()(fn, *args, **kwargs)
