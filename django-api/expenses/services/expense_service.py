"""Expense service - all business logic lives here.

Services:
- Depend only on interfaces (stores, slug generator, bill parser)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every mutation loads one aggregate, changes it through its own methods
and saves it back as a unit.
"""

import logging
from collections.abc import Iterable

from django.utils import timezone

from expenses.domain import (
    Expense,
    ExpenseDraft,
    ExpenseId,
    Item,
    ItemDraft,
    ItemId,
    Money,
    Person,
    PersonDraft,
    PersonId,
    Shares,
)
from expenses.domain.errors import (
    BillParseError,
    ExpenseNotFoundError,
    ExpenseValidationError,
    IngestionUnavailableError,
    InvalidIdentifierError,
    ItemAlreadyClaimedError,
    ItemNotClaimedError,
    TotalMismatchError,
)
from expenses.ingestion import BillParser, expand_items
from expenses.slugs import SlugGenerator
from expenses.stores.interfaces import ExpenseStore

logger = logging.getLogger(__name__)

DEFAULT_TOTAL_MARGIN = Money("5.00")


def _or_zero(value: Money | None) -> Money:
    return value if value is not None else Money.zero()


def _seed_shares(draft: PersonDraft) -> Shares:
    return Shares(
        subtotal=_or_zero(draft.subtotal),
        tax_share=_or_zero(draft.tax_share),
        service_charge_share=_or_zero(draft.service_charge_share),
        discount_share=_or_zero(draft.discount_share),
        total_owed=_or_zero(draft.total_owed),
    )


class ExpenseService:
    """Service for shared-bill operations."""

    def __init__(
        self,
        store: ExpenseStore,
        slug_generator: SlugGenerator,
        bill_parser: BillParser | None = None,
        validate_total: bool = False,
        total_margin: Money = DEFAULT_TOTAL_MARGIN,
    ) -> None:
        self._store = store
        self._slug_generator = slug_generator
        self._bill_parser = bill_parser
        self._validate_total = validate_total
        self._total_margin = total_margin

    def create_expense(self, draft: ExpenseDraft) -> Expense:
        """Create and store a new expense from the draft.

        Raises:
            ExpenseValidationError: If there are no items or a price is not positive.
            TotalMismatchError: If total checking is enabled and the total is off.
        """
        self._validate_items(draft.items)
        self._check_total(draft)
        if any(not person.name or not person.name.strip() for person in draft.people):
            raise ExpenseValidationError("Person name is required")

        expense = Expense(
            id=ExpenseId.new(),
            slug=self._slug_generator.generate_unique(),
            created_at=timezone.now(),
            payer_name=draft.payer_name,
            restaurant_name=draft.restaurant_name,
            subtotal=draft.subtotal,
            tax=draft.tax,
            service_charge=draft.service_charge,
            discount=draft.discount,
            total_amount=draft.total_amount,
        )
        for item_draft in draft.items:
            expense.add_item(
                Item(
                    id=ItemId.new(),
                    name=item_draft.name,
                    price=item_draft.price,
                    quantity=item_draft.quantity,
                    total_quantity=item_draft.total_quantity,
                )
            )
        for person_draft in draft.people:
            expense.add_person(self._new_person(person_draft))

        saved = self._store.save(expense)
        logger.info(
            "Created expense %s with %d items and %d people",
            saved.slug,
            len(saved.items),
            len(saved.people),
        )
        return saved

    def get_expense(self, slug: str) -> Expense:
        """Return an expense by slug.

        Raises:
            ExpenseNotFoundError: If no expense has the slug.
        """
        expense = self._store.get_by_slug(slug)
        if expense is None:
            raise ExpenseNotFoundError(slug)
        return expense

    def update_expense(self, slug: str, draft: ExpenseDraft) -> Expense:
        """Overwrite the expense's fields and merge its items by id.

        Items are updated in place when the id matches and appended
        otherwise. Existing items are never removed here.
        """
        self._validate_items(draft.items)
        self._check_total(draft)
        expense = self.get_expense(slug)

        expense.update_details(
            payer_name=draft.payer_name,
            restaurant_name=draft.restaurant_name,
            subtotal=draft.subtotal,
            total_amount=draft.total_amount,
            tax=draft.tax,
            service_charge=draft.service_charge,
            discount=draft.discount,
        )
        for item_draft in draft.items:
            expense.upsert_item(
                self._optional_item_id(item_draft.id),
                name=item_draft.name,
                price=item_draft.price,
                quantity=item_draft.quantity,
                total_quantity=item_draft.total_quantity,
            )
        expense.recompute_amounts()

        saved = self._store.save(expense)
        logger.info("Updated expense %s", slug)
        return saved

    def claim_item(self, slug: str, item_id: str, person_id: str) -> Expense:
        """Let a person claim a share of an item.

        Raises:
            ExpenseNotFoundError, ItemNotFoundError, PersonNotFoundError
            InvalidIdentifierError: If an id is not a valid UUID.
            ItemAlreadyClaimedError: If the person already claimed the item.
        """
        item_key = self._item_id(item_id)
        person_key = self._person_id(person_id)
        expense = self.get_expense(slug)
        expense.find_item(item_key)
        expense.find_person(person_key)

        if expense.is_claimed_by(item_key, person_key):
            raise ItemAlreadyClaimedError(item_id, person_id)

        expense.claim(item_key, person_key)
        saved = self._store.save(expense)
        logger.info("Person %s claimed item %s on expense %s", person_id, item_id, slug)
        return saved

    def unclaim_item(self, slug: str, item_id: str, person_id: str) -> Expense:
        """Withdraw a person's claim on an item.

        Raises:
            ItemNotClaimedError: If the person has not claimed the item.
        """
        item_key = self._item_id(item_id)
        person_key = self._person_id(person_id)
        expense = self.get_expense(slug)
        expense.find_item(item_key)
        expense.find_person(person_key)

        if not expense.is_claimed_by(item_key, person_key):
            raise ItemNotClaimedError(item_id, person_id)

        expense.unclaim(item_key, person_key)
        saved = self._store.save(expense)
        logger.info("Person %s unclaimed item %s on expense %s", person_id, item_id, slug)
        return saved

    def add_person(self, slug: str, draft: PersonDraft) -> Expense:
        """Append a participant. Shares are not recomputed until they claim."""
        if not draft.name or not draft.name.strip():
            raise ExpenseValidationError("Person name is required")
        expense = self.get_expense(slug)
        person = self._new_person(draft)
        expense.add_person(person)

        saved = self._store.save(expense)
        logger.info("Added person %s to expense %s", person.id, slug)
        return saved

    def mark_person_finished(self, slug: str, person_id: str) -> Expense:
        return self._set_finished(slug, person_id, True)

    def mark_person_pending(self, slug: str, person_id: str) -> Expense:
        return self._set_finished(slug, person_id, False)

    def create_expense_from_image(self, image_bytes: bytes, payer_name: str) -> Expense:
        """Read a bill image and create an expense from its line items.

        Raises:
            IngestionUnavailableError: If no bill parser is configured.
            BillParseError: If the bill could not be read.
        """
        if self._bill_parser is None:
            raise IngestionUnavailableError()
        try:
            parsed = self._bill_parser.parse(image_bytes)
        except BillParseError as exc:
            logger.warning("Bill parsing failed: %s", exc.message)
            raise
        except Exception as exc:
            logger.exception("Bill parser crashed")
            raise BillParseError(str(exc) or type(exc).__name__) from exc

        draft = ExpenseDraft(
            payer_name=payer_name,
            restaurant_name=parsed.restaurant_name,
            subtotal=Money(parsed.subtotal),
            tax=Money(parsed.tax) if parsed.tax is not None else None,
            service_charge=Money(parsed.service_charge) if parsed.service_charge is not None else None,
            discount=Money(parsed.discount) if parsed.discount is not None else None,
            total_amount=Money(parsed.total_amount),
            items=tuple(expand_items(parsed)),
        )
        return self.create_expense(draft)

    def _set_finished(self, slug: str, person_id: str, value: bool) -> Expense:
        person_key = self._person_id(person_id)
        expense = self.get_expense(slug)
        expense.set_finished(person_key, value)
        saved = self._store.save(expense)
        logger.info(
            "Marked person %s as %s on expense %s",
            person_id,
            "finished" if value else "pending",
            slug,
        )
        return saved

    def _new_person(self, draft: PersonDraft) -> Person:
        return Person(
            id=PersonId.new(),
            name=draft.name,
            shares=_seed_shares(draft),
            is_finished=draft.is_finished,
        )

    def _validate_items(self, items: Iterable[ItemDraft]) -> None:
        items = list(items)
        if not items:
            raise ExpenseValidationError("At least one item is required")
        for item in items:
            if not item.name or not item.name.strip():
                raise ExpenseValidationError("Item name is required")
            if not item.price.is_positive():
                raise ExpenseValidationError(
                    f"Item price must be positive, got {item.price} for {item.name!r}"
                )

    def _check_total(self, draft: ExpenseDraft) -> None:
        if not self._validate_total:
            return
        expected = (
            draft.subtotal
            + _or_zero(draft.tax)
            + _or_zero(draft.service_charge)
            - _or_zero(draft.discount)
        )
        difference = abs(draft.total_amount - expected)
        if difference > self._total_margin:
            raise TotalMismatchError(
                expected=expected,
                actual=draft.total_amount,
                difference=difference,
                margin=self._total_margin,
            )

    def _item_id(self, value: str) -> ItemId:
        try:
            return ItemId.from_string(value)
        except (ValueError, TypeError, AttributeError) as exc:
            raise InvalidIdentifierError("item", value) from exc

    def _person_id(self, value: str) -> PersonId:
        try:
            return PersonId.from_string(value)
        except (ValueError, TypeError, AttributeError) as exc:
            raise InvalidIdentifierError("person", value) from exc

    def _optional_item_id(self, value: str | None) -> ItemId | None:
        """Parse an item id from an update, treating junk as a new item."""
        if not value:
            return None
        try:
            return ItemId.from_string(value)
        except ValueError:
            return None

