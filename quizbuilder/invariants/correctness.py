"""
Exactly one ``is_correct`` alternative per exercise, across create/update/delete.

The store enforces "at most one correct row per exercise" with a partial
unique index, so no write may ever produce two correct rows, not even
transiently. Every hand-over of correctness therefore runs demote-then-promote,
and the promote is retried: a ``ConstraintViolation`` there means a concurrent
writer promoted its own row in between, and the retry demotes it and tries
again. Whichever writer promotes last keeps the flag.

Between the demote and the promote the group briefly has no correct row.
If the promote never succeeds, the demote's compensation puts the flag back.
"""
import logging
import random
from uuid import uuid4

from quizbuilder.exceptions import ConstraintViolation, LastAlternative, LastCorrectAlternative, NotFound
from quizbuilder.invariants.ordering import next_order
from quizbuilder.invariants.plan import WritePlan
from quizbuilder.models import ALTERNATIVES
from quizbuilder.schemas import MAX_IMAGES

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("content", "is_correct", "explanation", "image_url", "image_urls")


def random_replacement(candidates):
    return random.choice(candidates)


def lowest_order_replacement(candidates):
    return min(candidates, key=lambda row: row["order"])


REPLACEMENT_POLICIES = {
    "random": random_replacement,
    "lowest_order": lowest_order_replacement,
}


class CorrectnessManager:
    def __init__(self, db, retry_policy, choose_replacement=random_replacement):
        self.db = db
        self.retry_policy = retry_policy
        self.claim_policy = retry_policy.constraint_only()
        self.choose_replacement = choose_replacement

    # Reads and single writes

    def _group(self, exercise_id: str, desc: bool = False):
        return self.db.select(ALTERNATIVES, "*", {"exercise_id": exercise_id}, order_by="order", desc=desc)

    def _holders(self, exercise_id: str):
        rows = self.db.select(ALTERNATIVES, "id", {"exercise_id": exercise_id, "is_correct": True})
        return [row["id"] for row in rows]

    def _demote(self, exercise_id: str, ids):
        if ids:
            self.db.update(ALTERNATIVES, {"is_correct": False}, {"id": list(ids), "exercise_id": exercise_id})

    def _claim(self, exercise_id: str, target_id: str):
        """Make ``target_id`` the only correct alternative of the exercise"""
        def attempt():
            self._demote(exercise_id, [i for i in self._holders(exercise_id) if i != target_id])
            row = self.db.update(ALTERNATIVES, {"is_correct": True}, {"id": target_id, "exercise_id": exercise_id})
            if row is None:
                raise NotFound("Alternative not found")
            return row

        return self.claim_policy.call(attempt)

    def _restore(self, exercise_id: str, previous_ids):
        """Compensation: put correctness back on the first previous holder if nobody has it"""
        if not previous_ids or self._holders(exercise_id):
            return
        try:
            self.db.update(ALTERNATIVES, {"is_correct": True}, {"id": previous_ids[0], "exercise_id": exercise_id})
        except ConstraintViolation:
            # A concurrent writer already made some alternative correct
            logger.info(f"Exercise {exercise_id} regained a correct alternative concurrently")

    # Operations

    def create(self, exercise_id: str, content: str, is_correct: bool = False, explanation: str = "",
               image_url: str = None, image_urls=None) -> dict:
        fields = {
            "exercise_id": exercise_id,
            "content": content,
            "explanation": explanation or None,
            "image_url": image_url or None,
            "image_urls": image_urls[:MAX_IMAGES] if image_urls else None,
        }
        return self.retry_policy.call(self._create_attempt, exercise_id, fields, is_correct)

    def _create_attempt(self, exercise_id: str, fields: dict, requested_correct: bool) -> dict:
        group = self._group(exercise_id, desc=True)
        holders = [row["id"] for row in group if row["is_correct"]]

        # The first alternative, or any alternative of a group that lost its
        # correct answer, becomes correct whatever the caller asked for.
        should_be_correct = not group or not holders or requested_correct
        row = {**fields, "id": str(uuid4()), "order": next_order(group)}

        if not (should_be_correct and holders):
            return self.db.insert(ALTERNATIVES, {**row, "is_correct": should_be_correct})

        plan = WritePlan(f"Create alternative in exercise {exercise_id}")
        plan.add(
            "insert alternative",
            lambda: self.db.insert(ALTERNATIVES, {**row, "is_correct": False}),
            compensate=lambda _: self.db.delete(ALTERNATIVES, {"id": row["id"], "exercise_id": exercise_id}),
        )
        plan.add(
            "demote previous correct",
            lambda: self._demote(exercise_id, holders),
            compensate=lambda _: self._restore(exercise_id, holders),
        )
        plan.add("claim correctness", lambda: self._claim(exercise_id, row["id"]))
        return plan.execute()[-1]

    def update(self, alternative_id: str, exercise_id: str, patch: dict) -> dict:
        patch = {key: value for key, value in patch.items() if key in UPDATABLE_FIELDS}
        if patch.get("image_urls"):
            patch["image_urls"] = patch["image_urls"][:MAX_IMAGES]

        target = next((row for row in self._group(exercise_id) if row["id"] == alternative_id), None)
        if target is None:
            raise NotFound("Alternative not found")

        if patch.get("is_correct") is True and not target["is_correct"]:
            return self._update_as_correct(target, exercise_id, patch)

        if patch.get("is_correct") is False and target["is_correct"]:
            raise LastCorrectAlternative(
                "Cannot unmark the only correct alternative; mark another alternative as correct instead"
            )

        patch.pop("is_correct", None)
        return self._apply(alternative_id, exercise_id, patch) if patch else target

    def _apply(self, alternative_id: str, exercise_id: str, patch: dict) -> dict:
        row = self.db.update(ALTERNATIVES, patch, {"id": alternative_id, "exercise_id": exercise_id})
        if row is None:
            raise NotFound("Alternative not found")
        return row

    def _update_as_correct(self, target: dict, exercise_id: str, patch: dict) -> dict:
        alternative_id = target["id"]
        others = self._holders(exercise_id)
        changes = {key: value for key, value in patch.items() if key != "is_correct"}

        plan = WritePlan(f"Mark alternative {alternative_id} correct")
        if changes:
            plan.add("apply changes", lambda: self._apply(alternative_id, exercise_id, changes))
        plan.add(
            "demote previous correct",
            lambda: self._demote(exercise_id, others),
            compensate=lambda _: self._restore(exercise_id, others),
        )
        plan.add("claim correctness", lambda: self._claim(exercise_id, alternative_id))
        return plan.execute()[-1]

    def delete(self, alternative_id: str, exercise_id: str):
        group = self._group(exercise_id)
        target = next((row for row in group if row["id"] == alternative_id), None)
        if target is None:
            raise NotFound("Alternative not found")
        if len(group) == 1:
            raise LastAlternative("Cannot delete the last alternative")

        if target["is_correct"]:
            survivors = [row for row in group if row["id"] != alternative_id]
            replacement = self.choose_replacement(survivors)
            logger.info(f"Transferring correctness in exercise {exercise_id} to {replacement['id']}")

            plan = WritePlan(f"Transfer correctness from alternative {alternative_id}")
            plan.add(
                "demote deleted alternative",
                lambda: self._demote(exercise_id, [alternative_id]),
                compensate=lambda _: self._restore(exercise_id, [alternative_id]),
            )
            plan.add("promote replacement", lambda: self._claim(exercise_id, replacement["id"]))
            plan.execute()

        self.db.delete(ALTERNATIVES, {"id": alternative_id, "exercise_id": exercise_id})
