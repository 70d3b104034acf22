"""Unit tests for ExpenseService.

These test orchestration and domain error mapping against the in-memory store.
Run with: pytest tests/test_services.py -v
"""

import random
from dataclasses import replace
from decimal import Decimal

import pytest

from expenses.domain import ItemDraft, Money, PersonDraft
from expenses.domain.errors import (
    BillParseError,
    ExpenseNotFoundError,
    ExpenseValidationError,
    IngestionUnavailableError,
    InvalidIdentifierError,
    ItemAlreadyClaimedError,
    ItemNotClaimedError,
    ItemNotFoundError,
    PersonNotFoundError,
    TotalMismatchError,
)
from expenses.ingestion import BillParser, ParsedBill, ParsedBillItem
from expenses.services import ExpenseService
from expenses.slugs import SlugGenerator


class StaticBillParser(BillParser):
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    def parse(self, image_bytes):
        if self.error is not None:
            raise self.error
        return self.result


def _with_person(service, slug, name="Alice"):
    expense = service.add_person(slug, PersonDraft(name=name))
    return expense.people[-1]


class TestCreateExpense:
    """Tests for ExpenseService.create_expense."""

    def test_create_assigns_slug_and_ids(self, service, burger_draft):
        expense = service.create_expense(burger_draft)

        assert expense.slug
        assert len(expense.slug.split("-")) == 3
        assert expense.created_at is not None
        assert [item.name for item in expense.items] == ["Burger"]

    def test_create_then_get_round_trips(self, service, burger_draft):
        draft = replace(
            burger_draft,
            items=(
                ItemDraft(name="Burger", price=Money("50.00")),
                ItemDraft(name="Fries", price=Money("30.00")),
            ),
            people=(PersonDraft(name="Alice"), PersonDraft(name="Bob", is_finished=True)),
        )
        created = service.create_expense(draft)

        fetched = service.get_expense(created.slug)

        assert fetched.id == created.id
        assert fetched.payer_name == "John Doe"
        assert fetched.restaurant_name == "Burger Joint"
        assert fetched.subtotal == Money("80.00")
        assert fetched.tax == Money("10.00")
        assert fetched.service_charge == Money("10.00")
        assert fetched.discount is None
        assert fetched.total_amount == Money("100.00")
        assert [(i.name, i.price) for i in fetched.items] == [
            ("Burger", Money("50.00")),
            ("Fries", Money("30.00")),
        ]
        assert [(p.name, p.is_finished) for p in fetched.people] == [("Alice", False), ("Bob", True)]
        assert all(p.shares.total_owed == Money("0.00") for p in fetched.people)

    def test_create_keeps_seeded_amounts(self, service, burger_draft):
        draft = replace(burger_draft, people=(PersonDraft(name="Alice", subtotal=Money("5.00")),))

        expense = service.create_expense(draft)

        assert expense.people[0].shares.subtotal == Money("5.00")

    def test_create_without_items_raises_error(self, service, burger_draft):
        with pytest.raises(ExpenseValidationError):
            service.create_expense(replace(burger_draft, items=()))

    def test_create_with_non_positive_price_raises_error(self, service, burger_draft):
        draft = replace(burger_draft, items=(ItemDraft(name="Water", price=Money("0.00")),))
        with pytest.raises(ExpenseValidationError) as excinfo:
            service.create_expense(draft)
        assert "0.00" in excinfo.value.message

    def test_total_check_disabled_by_default(self, service, burger_draft):
        expense = service.create_expense(replace(burger_draft, total_amount=Money("500.00")))
        assert expense.total_amount == Money("500.00")

    def test_total_check_reports_expected_actual_and_difference(self, store, burger_draft):
        checking = ExpenseService(
            store=store,
            slug_generator=SlugGenerator(store, rng=random.Random(1)),
            validate_total=True,
        )

        with pytest.raises(TotalMismatchError) as excinfo:
            checking.create_expense(replace(burger_draft, total_amount=Money("120.00")))

        message = excinfo.value.message
        assert "Expected: 100.00" in message
        assert "Actual: 120.00" in message
        assert "Difference: 20.00" in message

    def test_total_check_accepts_within_margin(self, store, burger_draft):
        checking = ExpenseService(
            store=store,
            slug_generator=SlugGenerator(store, rng=random.Random(1)),
            validate_total=True,
        )
        draft = replace(burger_draft, discount=Money("2.00"), total_amount=Money("100.00"))

        assert checking.create_expense(draft).total_amount == Money("100.00")


class TestGetExpense:
    def test_get_unknown_slug_raises_error(self, service):
        with pytest.raises(ExpenseNotFoundError):
            service.get_expense("nope-nope-nope")


class TestClaims:
    """Tests for claim and unclaim orchestration."""

    def test_end_to_end_claim_and_unclaim(self, service, burger_draft):
        expense = service.create_expense(burger_draft)
        alice = _with_person(service, expense.slug)
        burger_id = str(expense.items[0].id)

        claimed = service.claim_item(expense.slug, burger_id, str(alice.id))
        shares = claimed.people[0].shares
        assert shares.subtotal == Money("80.00")
        assert shares.tax_share == Money("10.00")
        assert shares.service_charge_share == Money("10.00")
        assert shares.total_owed == Money("100.00")

        unclaimed = service.unclaim_item(expense.slug, burger_id, str(alice.id))
        shares = unclaimed.people[0].shares
        assert shares.subtotal == Money("0.00")
        assert shares.tax_share == Money("0.00")
        assert shares.service_charge_share == Money("0.00")
        assert shares.total_owed == Money("0.00")

    def test_claim_is_persisted(self, service, burger_draft):
        expense = service.create_expense(burger_draft)
        alice = _with_person(service, expense.slug)
        service.claim_item(expense.slug, str(expense.items[0].id), str(alice.id))

        fetched = service.get_expense(expense.slug)

        assert fetched.claimants_of(expense.items[0].id) == (alice.id,)
        assert fetched.people[0].shares.total_owed == Money("100.00")

    def test_claim_twice_raises_error(self, service, burger_draft):
        expense = service.create_expense(burger_draft)
        alice = _with_person(service, expense.slug)
        item_id = str(expense.items[0].id)
        service.claim_item(expense.slug, item_id, str(alice.id))

        with pytest.raises(ItemAlreadyClaimedError):
            service.claim_item(expense.slug, item_id, str(alice.id))

    def test_unclaim_unclaimed_item_raises_error(self, service, burger_draft):
        expense = service.create_expense(burger_draft)
        alice = _with_person(service, expense.slug)

        with pytest.raises(ItemNotClaimedError):
            service.unclaim_item(expense.slug, str(expense.items[0].id), str(alice.id))

    def test_claim_invalid_id_raises_error(self, service, burger_draft):
        expense = service.create_expense(burger_draft)
        alice = _with_person(service, expense.slug)

        with pytest.raises(InvalidIdentifierError):
            service.claim_item(expense.slug, "item-1", str(alice.id))

    def test_claim_unknown_item_raises_not_found(self, service, burger_draft):
        expense = service.create_expense(burger_draft)
        alice = _with_person(service, expense.slug)

        with pytest.raises(ItemNotFoundError):
            service.claim_item(expense.slug, "00000000-0000-0000-0000-000000000000", str(alice.id))

    def test_claim_unknown_person_raises_not_found(self, service, burger_draft):
        expense = service.create_expense(burger_draft)

        with pytest.raises(PersonNotFoundError):
            service.claim_item(
                expense.slug, str(expense.items[0].id), "00000000-0000-0000-0000-000000000000"
            )


class TestPeople:
    def test_add_person_defaults_to_zero_and_pending(self, service, burger_draft):
        expense = service.create_expense(burger_draft)

        updated = service.add_person(expense.slug, PersonDraft(name="Alice"))

        alice = updated.people[0]
        assert alice.name == "Alice"
        assert alice.is_finished is False
        assert alice.shares.total_owed == Money("0.00")
        assert updated.items_claimed_by(alice.id) == ()

    def test_add_person_blank_name_raises_error(self, service, burger_draft):
        expense = service.create_expense(burger_draft)
        with pytest.raises(ExpenseValidationError):
            service.add_person(expense.slug, PersonDraft(name="  "))

    def test_finish_and_pending_toggle(self, service, burger_draft):
        expense = service.create_expense(burger_draft)
        alice = _with_person(service, expense.slug)

        service.mark_person_finished(expense.slug, str(alice.id))
        assert service.get_expense(expense.slug).people[0].is_finished is True

        service.mark_person_pending(expense.slug, str(alice.id))
        assert service.get_expense(expense.slug).people[0].is_finished is False

    def test_finish_unknown_person_raises_not_found(self, service, burger_draft):
        expense = service.create_expense(burger_draft)
        with pytest.raises(PersonNotFoundError):
            service.mark_person_finished(expense.slug, "00000000-0000-0000-0000-000000000000")


class TestUpdateExpense:
    """Tests for the merge-only item update policy."""

    def test_update_merges_items_by_id(self, service, burger_draft):
        expense = service.create_expense(burger_draft)
        burger_id = str(expense.items[0].id)
        draft = replace(
            burger_draft,
            payer_name="Jane Doe",
            subtotal=Money("90.00"),
            items=(
                ItemDraft(id=burger_id, name="Cheeseburger", price=Money("85.00")),
                ItemDraft(name="Soda", price=Money("5.00")),
            ),
        )

        updated = service.update_expense(expense.slug, draft)

        assert updated.payer_name == "Jane Doe"
        assert updated.subtotal == Money("90.00")
        assert [(str(i.id) == burger_id, i.name, i.price) for i in updated.items] == [
            (True, "Cheeseburger", Money("85.00")),
            (False, "Soda", Money("5.00")),
        ]

    def test_update_never_deletes_omitted_items(self, service, burger_draft):
        expense = service.create_expense(
            replace(
                burger_draft,
                items=(
                    ItemDraft(name="Burger", price=Money("50.00")),
                    ItemDraft(name="Fries", price=Money("30.00")),
                ),
            )
        )
        fries_id = str(expense.items[1].id)

        updated = service.update_expense(
            expense.slug,
            replace(burger_draft, items=(ItemDraft(id=fries_id, name="Fries", price=Money("30.00")),)),
        )

        assert [item.name for item in updated.items] == ["Burger", "Fries"]

    def test_update_recomputes_existing_claims(self, service, burger_draft):
        expense = service.create_expense(burger_draft)
        alice = _with_person(service, expense.slug)
        burger_id = str(expense.items[0].id)
        service.claim_item(expense.slug, burger_id, str(alice.id))

        updated = service.update_expense(
            expense.slug,
            replace(
                burger_draft,
                tax=Money("20.00"),
                items=(ItemDraft(id=burger_id, name="Burger", price=Money("80.00")),),
            ),
        )

        assert updated.people[0].shares.tax_share == Money("20.00")
        assert updated.people[0].shares.total_owed == Money("110.00")

    def test_update_unknown_slug_raises_not_found(self, service, burger_draft):
        with pytest.raises(ExpenseNotFoundError):
            service.update_expense("nope-nope-nope", burger_draft)


class TestCreateFromImage:
    """Tests for ExpenseService.create_expense_from_image."""

    def _service(self, store, parser):
        return ExpenseService(
            store=store,
            slug_generator=SlugGenerator(store, rng=random.Random(3)),
            bill_parser=parser,
        )

    def test_without_parser_raises_unavailable(self, service):
        with pytest.raises(IngestionUnavailableError):
            service.create_expense_from_image(b"image", "John")

    def test_expands_quantities_into_unit_items(self, store):
        parsed = ParsedBill(
            subtotal=Decimal("25.00"),
            tax=Decimal("2.00"),
            total_amount=Decimal("27.00"),
            restaurant_name="Luigi's Restaurant",
            items=(
                ParsedBillItem(name="Coke", price=Decimal("10.00"), quantity=3),
                ParsedBillItem(name="Pizza", price=Decimal("15.00")),
            ),
        )
        service = self._service(store, StaticBillParser(result=parsed))

        expense = service.create_expense_from_image(b"image", "John")

        assert expense.payer_name == "John"
        assert expense.restaurant_name == "Luigi's Restaurant"
        assert [(i.name, i.price, i.total_quantity) for i in expense.items] == [
            ("Coke", Money("3.34"), 3),
            ("Coke", Money("3.34"), 3),
            ("Coke", Money("3.34"), 3),
            ("Pizza", Money("15.00"), 1),
        ]

    def test_parser_failure_short_circuits(self, store):
        service = self._service(store, StaticBillParser(error=BillParseError("blurry")))

        with pytest.raises(BillParseError):
            service.create_expense_from_image(b"image", "John")
        assert len(store) == 0

    def test_unexpected_parser_error_is_wrapped(self, store):
        service = self._service(store, StaticBillParser(error=RuntimeError("upstream down")))

        with pytest.raises(BillParseError) as excinfo:
            service.create_expense_from_image(b"image", "John")
        assert "upstream down" in excinfo.value.message
        assert len(store) == 0
