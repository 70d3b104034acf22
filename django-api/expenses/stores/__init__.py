from expenses.stores.interfaces import ExpenseStore
from expenses.stores.memory import InMemoryExpenseStore

__all__ = ["ExpenseStore", "InMemoryExpenseStore"]
