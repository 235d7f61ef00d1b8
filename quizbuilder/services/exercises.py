from typing import List

from quizbuilder.exceptions import NotFound
from quizbuilder.invariants import OrderManager, OrderScope, RetryPolicy
from quizbuilder.invariants.ordering import next_order
from quizbuilder.models import EXERCISES
from quizbuilder.schemas import Exercise, ExerciseCreate, ExerciseUpdate, ImageLayout, OperationResult
from quizbuilder.services.base import read, run, tidy


class ExerciseService:
    def __init__(self, db, orders: OrderManager, retry_policy: RetryPolicy, scope: OrderScope):
        self.db = db
        self.orders = orders
        self.retry_policy = retry_policy
        self.scope = scope

    def list(self, module_id: str) -> List[Exercise]:
        return read(
            "fetching exercises",
            lambda: [Exercise(**row) for row in
                     self.db.select(EXERCISES, "*", {"module_id": module_id}, order_by="order")],
        )

    def _create_attempt(self, module_id: str, payload: ExerciseCreate) -> Exercise:
        last = self.db.select(EXERCISES, "order", {"module_id": module_id}, order_by="order", desc=True, limit=1)
        row = self.db.insert(EXERCISES, {
            "module_id": module_id,
            "question": payload.question,
            "image_url": payload.image_url or None,
            "image_urls": None,
            "video_url": None,
            "image_layout": ImageLayout.GRID.value,
            "weight": payload.weight,
            "order": next_order(last),
        })
        return Exercise(**row)

    def create(self, module_id: str, payload: ExerciseCreate) -> OperationResult:
        # Two admins adding at once compute the same next order; the loser retries
        return run("creating exercise", self.retry_policy.call, self._create_attempt, module_id, payload)

    def _update(self, exercise_id: str, module_id: str, patch: dict) -> Exercise:
        if not patch:
            rows = self.db.select(EXERCISES, "*", {"id": exercise_id, "module_id": module_id})
            if not rows:
                raise NotFound("Exercise not found")
            return Exercise(**rows[0])
        row = self.db.update(EXERCISES, patch, {"id": exercise_id, "module_id": module_id})
        if row is None:
            raise NotFound("Exercise not found")
        return Exercise(**row)

    def update(self, exercise_id: str, module_id: str, payload: ExerciseUpdate) -> OperationResult:
        patch = payload.model_dump(mode="json", exclude_unset=True)
        return run("updating exercise", self._update, exercise_id, module_id, patch)

    def update_image_display_size(self, exercise_id: str, module_id: str, image_display_size: str) -> OperationResult:
        return run(
            "updating image display size",
            self._update, exercise_id, module_id, {"image_display_size": image_display_size},
        )

    def update_image_layout(self, exercise_id: str, module_id: str, image_layout: ImageLayout) -> OperationResult:
        return run(
            "updating image layout",
            self._update, exercise_id, module_id, {"image_layout": ImageLayout(image_layout).value},
        )

    def reorder(self, exercise_id: str, new_index: int, module_id: str) -> OperationResult:
        return run("updating exercise order", self.orders.move, self.scope, module_id, exercise_id, new_index)

    def delete(self, exercise_id: str, module_id: str) -> OperationResult:
        def delete():
            if not self.db.select(EXERCISES, "id", {"id": exercise_id, "module_id": module_id}):
                raise NotFound("Exercise not found")
            # Alternatives and exam answers go with it
            self.db.delete_exercise_tree(exercise_id, module_id)

        result = run("deleting exercise", delete)
        if result.success:
            tidy("compacting exercise order", self.orders.compact, self.scope, module_id)
        return result
