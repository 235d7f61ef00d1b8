from typing import List

from quizbuilder.invariants import CorrectnessManager, OrderManager, OrderScope
from quizbuilder.invariants.ordering import negative_sentinel
from quizbuilder.models import ALTERNATIVES
from quizbuilder.schemas import Alternative, AlternativeCreate, AlternativeUpdate, OperationResult
from quizbuilder.services.base import read, run, tidy

ALTERNATIVE_SCOPE = OrderScope(ALTERNATIVES, "exercise_id", "Alternative", negative_sentinel)


class AlternativeService:
    def __init__(self, db, correctness: CorrectnessManager, orders: OrderManager):
        self.db = db
        self.correctness = correctness
        self.orders = orders

    def list(self, exercise_id: str) -> List[Alternative]:
        return read(
            "fetching alternatives",
            lambda: [Alternative(**row) for row in
                     self.db.select(ALTERNATIVES, "*", {"exercise_id": exercise_id}, order_by="order")],
        )

    def create(self, exercise_id: str, payload: AlternativeCreate) -> OperationResult:
        def create():
            row = self.correctness.create(
                exercise_id,
                payload.content,
                is_correct=payload.is_correct,
                explanation=payload.explanation,
                image_url=payload.image_url,
                image_urls=payload.image_urls,
            )
            return Alternative(**row)
        return run("creating alternative", create)

    def update(self, alternative_id: str, exercise_id: str, payload: AlternativeUpdate) -> OperationResult:
        patch = payload.model_dump(exclude_unset=True)
        return run(
            "updating alternative",
            lambda: Alternative(**self.correctness.update(alternative_id, exercise_id, patch)),
        )

    def reorder(self, alternative_id: str, new_index: int, exercise_id: str) -> OperationResult:
        return run(
            "updating alternative order",
            self.orders.move, ALTERNATIVE_SCOPE, exercise_id, alternative_id, new_index,
        )

    def delete(self, alternative_id: str, exercise_id: str) -> OperationResult:
        result = run("deleting alternative", self.correctness.delete, alternative_id, exercise_id)
        if result.success:
            tidy("compacting alternative order", self.orders.compact, ALTERNATIVE_SCOPE, exercise_id)
        return result
