import time

from quizbuilder.invariants import CorrectnessManager, OrderManager, OrderScope, REPLACEMENT_POLICIES, RetryPolicy
from quizbuilder.invariants.ordering import offset_sentinel
from quizbuilder.models import EXERCISES, MODULES
from quizbuilder.services.alternatives import AlternativeService
from quizbuilder.services.exercises import ExerciseService
from quizbuilder.services.modules import ModuleService


class QuizBuilder:
    """Entry point for every operation: one service per entity kind"""

    def __init__(self, db, settings, sleep=time.sleep):
        if settings.replacement_policy not in REPLACEMENT_POLICIES:
            raise ValueError(f"Unknown replacement policy: {settings.replacement_policy}")

        retry_policy = RetryPolicy.from_settings(settings, sleep=sleep)
        orders = OrderManager(db)
        sentinel = offset_sentinel(settings.order_sentinel_offset)

        self.modules = ModuleService(db, orders, retry_policy, OrderScope(MODULES, "company_id", "Module", sentinel))
        self.exercises = ExerciseService(
            db, orders, retry_policy, OrderScope(EXERCISES, "module_id", "Exercise", sentinel)
        )
        self.alternatives = AlternativeService(
            db,
            CorrectnessManager(db, retry_policy, REPLACEMENT_POLICIES[settings.replacement_policy]),
            orders,
        )


__all__ = ["QuizBuilder", "AlternativeService", "ExerciseService", "ModuleService"]
