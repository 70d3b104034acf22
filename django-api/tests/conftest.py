"""Pytest configuration and shared fixtures."""

import random
from datetime import datetime, timezone

import pytest
from rest_framework.test import APIClient

from expenses.domain import (
    Expense,
    ExpenseDraft,
    ExpenseId,
    Item,
    ItemDraft,
    ItemId,
    Money,
    Person,
    PersonId,
)
from expenses.services import ExpenseService
from expenses.slugs import SlugGenerator
from expenses.stores import InMemoryExpenseStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def store() -> InMemoryExpenseStore:
    return InMemoryExpenseStore()


@pytest.fixture
def service(store: InMemoryExpenseStore) -> ExpenseService:
    return ExpenseService(store=store, slug_generator=SlugGenerator(store, rng=random.Random(7)))


@pytest.fixture
def burger_draft() -> ExpenseDraft:
    return ExpenseDraft(
        payer_name="John Doe",
        restaurant_name="Burger Joint",
        subtotal=Money("80.00"),
        tax=Money("10.00"),
        service_charge=Money("10.00"),
        total_amount=Money("100.00"),
        items=(ItemDraft(name="Burger", price=Money("80.00")),),
    )


@pytest.fixture
def make_expense():
    """Build an in-memory aggregate from (name, price) items and person names."""

    def _make(
        items=(("Pizza", "50.00"), ("Burger", "30.00")),
        people=("Alice", "Bob"),
        subtotal="80.00",
        tax="10.00",
        service_charge="10.00",
        discount=None,
        total_amount="100.00",
    ) -> Expense:
        return Expense(
            id=ExpenseId.new(),
            slug="test-expense",
            created_at=datetime(2024, 5, 1, 19, 30, tzinfo=timezone.utc),
            payer_name="John Doe",
            subtotal=Money(subtotal) if subtotal is not None else None,
            tax=Money(tax) if tax is not None else None,
            service_charge=Money(service_charge) if service_charge is not None else None,
            discount=Money(discount) if discount is not None else None,
            total_amount=Money(total_amount),
            items=[Item(id=ItemId.new(), name=name, price=Money(price)) for name, price in items],
            people=[Person(id=PersonId.new(), name=name) for name in people],
        )

    return _make
