"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod

from expenses.domain import Expense


class ExpenseStore(ABC):
    """Interface for expense persistence operations."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> Expense | None:
        """Return the whole expense aggregate by slug, or None if not found."""
        ...

    @abstractmethod
    def slug_exists(self, slug: str) -> bool:
        """Check if an expense already uses the slug."""
        ...

    @abstractmethod
    def save(self, expense: Expense) -> Expense:
        """Insert or replace the aggregate keyed by its id and return it as stored."""
        ...
