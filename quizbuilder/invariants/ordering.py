"""
Dense, unique, zero-based ``order`` within a scope, kept without transactions.

A move is written in two phases. Phase A parks every row of the scope on a
sentinel value outside the legal range ``0..n-1``; phase B writes the final
positions in list order. Because no phase B value can still be held by a
live row, neither phase ever trips the ``(scope, order)`` unique constraint.
A failure between phases leaves sentinel values behind and is reported, not
repaired.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List

from quizbuilder.exceptions import NotFound

logger = logging.getLogger(__name__)


def negative_sentinel(index: int) -> int:
    return -(index + 1)


def offset_sentinel(offset: int) -> Callable[[int], int]:
    def sentinel(index: int) -> int:
        return offset + index
    return sentinel


@dataclass(frozen=True)
class OrderScope:
    table: str
    scope_column: str
    label: str
    sentinel: Callable[[int], int]


def next_order(rows: List[dict]) -> int:
    if not rows:
        return 0
    return max(row["order"] for row in rows) + 1


def is_dense(rows: List[dict]) -> bool:
    """rows must already be sorted by order"""
    return [row["order"] for row in rows] == list(range(len(rows)))


class OrderManager:
    def __init__(self, db):
        self.db = db

    def _rows(self, scope: OrderScope, scope_id: str) -> List[dict]:
        return self.db.select(scope.table, "id,order", {scope.scope_column: scope_id}, order_by="order")

    def move(self, scope: OrderScope, scope_id: str, row_id: str, new_index: int):
        rows = self._rows(scope, scope_id)
        old_index = next((i for i, row in enumerate(rows) if row["id"] == row_id), None)
        if old_index is None:
            raise NotFound(f"{scope.label} not found")

        new_index = max(0, min(new_index, len(rows) - 1))
        reordered = list(rows)
        moved = reordered.pop(old_index)
        reordered.insert(new_index, moved)

        if old_index == new_index and is_dense(rows):
            logger.debug(f"{scope.label} {row_id} already at {new_index}, nothing to write")
            return
        self._renumber(scope, scope_id, rows, reordered)

    def compact(self, scope: OrderScope, scope_id: str):
        """Close gaps left by deletions, keeping relative order"""
        rows = self._rows(scope, scope_id)
        if is_dense(rows):
            return
        self._renumber(scope, scope_id, rows, rows)

    def _renumber(self, scope: OrderScope, scope_id: str, current: List[dict], final: List[dict]):
        logger.info(f"Renumbering {len(final)} {scope.table} in {scope.scope_column}={scope_id}")
        filters = {scope.scope_column: scope_id}

        # Phase A
        for index, row in enumerate(current):
            self.db.update(scope.table, {"order": scope.sentinel(index)}, {"id": row["id"], **filters})

        # Phase B
        for index, row in enumerate(final):
            self.db.update(scope.table, {"order": index}, {"id": row["id"], **filters})
