"""Cache keys for expense reads."""

from django.conf import settings
from django.core.cache import cache


def expense_key(slug: str) -> str:
    return f"expenses:{slug}"


def get_expense(slug: str) -> dict | None:
    return cache.get(expense_key(slug))


def set_expense(slug: str, data: dict) -> None:
    cache.set(expense_key(slug), data, timeout=settings.EXPENSES["CACHE_TIMEOUT"])


def invalidate_expense(slug: str) -> None:
    cache.delete(expense_key(slug))
