"""In-process expense store, used by service tests and local tooling."""

import copy
import threading

from expenses.domain import Expense, ExpenseId
from expenses.stores.interfaces import ExpenseStore


class InMemoryExpenseStore(ExpenseStore):
    """Dict-backed store holding deep copies of each aggregate."""

    def __init__(self) -> None:
        self._by_id: dict[ExpenseId, Expense] = {}
        self._lock = threading.Lock()

    def get_by_slug(self, slug: str) -> Expense | None:
        with self._lock:
            for expense in self._by_id.values():
                if expense.slug == slug:
                    return copy.deepcopy(expense)
        return None

    def slug_exists(self, slug: str) -> bool:
        with self._lock:
            return any(expense.slug == slug for expense in self._by_id.values())

    def save(self, expense: Expense) -> Expense:
        with self._lock:
            self._by_id[expense.id] = copy.deepcopy(expense)
            return copy.deepcopy(expense)

    def __len__(self) -> int:
        return len(self._by_id)
