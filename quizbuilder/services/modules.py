from typing import List

from quizbuilder.exceptions import InvalidOperation, NotFound
from quizbuilder.invariants import OrderManager, OrderScope, RetryPolicy
from quizbuilder.invariants.ordering import next_order
from quizbuilder.models import MODULES
from quizbuilder.schemas import Module, ModuleCreate, ModuleType, ModuleUpdate, OperationResult
from quizbuilder.services.base import read, run, tidy


class ModuleService:
    def __init__(self, db, orders: OrderManager, retry_policy: RetryPolicy, scope: OrderScope):
        self.db = db
        self.orders = orders
        self.retry_policy = retry_policy
        self.scope = scope

    def list(self, company_id: str) -> List[Module]:
        return read(
            "fetching modules",
            lambda: [Module(**row) for row in
                     self.db.select(MODULES, "*", {"company_id": company_id}, order_by="order")],
        )

    def _get(self, module_id: str, company_id: str) -> dict:
        rows = self.db.select(MODULES, "*", {"id": module_id, "company_id": company_id})
        if not rows:
            raise NotFound("Module not found")
        return rows[0]

    def _create_attempt(self, company_id: str, payload: ModuleCreate) -> Module:
        last = self.db.select(MODULES, "order", {"company_id": company_id}, order_by="order", desc=True, limit=1)
        row = self.db.insert(MODULES, {
            "company_id": company_id,
            "title": payload.title,
            "description": payload.description,
            "type": payload.type.value,
            "is_unlocked": False,
            "order": next_order(last),
        })
        return Module(**row)

    def create(self, company_id: str, payload: ModuleCreate) -> OperationResult:
        return run("creating module", self.retry_policy.call, self._create_attempt, company_id, payload)

    def update(self, module_id: str, company_id: str, payload: ModuleUpdate) -> OperationResult:
        patch = payload.model_dump(exclude_unset=True)

        def update():
            if not patch:
                return Module(**self._get(module_id, company_id))
            row = self.db.update(MODULES, patch, {"id": module_id, "company_id": company_id})
            if row is None:
                raise NotFound("Module not found")
            return Module(**row)
        return run("updating module", update)

    def _set_unlocked(self, module_id: str, company_id: str, unlocked: bool) -> Module:
        module = self._get(module_id, company_id)
        if module["type"] != ModuleType.EXAM.value:
            raise InvalidOperation("Only exams can be locked or unlocked")
        row = self.db.update(MODULES, {"is_unlocked": unlocked}, {"id": module_id, "company_id": company_id})
        if row is None:
            raise NotFound("Module not found")
        return Module(**row)

    def unlock_exam(self, module_id: str, company_id: str) -> OperationResult:
        return run("unlocking exam", self._set_unlocked, module_id, company_id, True)

    def lock_exam(self, module_id: str, company_id: str) -> OperationResult:
        return run("locking exam", self._set_unlocked, module_id, company_id, False)

    def reorder(self, module_id: str, new_index: int, company_id: str) -> OperationResult:
        return run("updating module order", self.orders.move, self.scope, company_id, module_id, new_index)

    def delete(self, module_id: str, company_id: str) -> OperationResult:
        def delete():
            # Exercises and alternatives cascade through foreign keys
            if not self.db.delete(MODULES, {"id": module_id, "company_id": company_id}):
                raise NotFound("Module not found")

        result = run("deleting module", delete)
        if result.success:
            tidy("compacting module order", self.orders.compact, self.scope, company_id)
        return result
