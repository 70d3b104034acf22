"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in expenses/models.py (persistence layer).

The Expense is the aggregate root. Items and people belong to exactly one
expense, and the claim relation between them is only changed through the
expense's own methods so both directions stay in step.
"""

from dataclasses import dataclass, field
from datetime import datetime

from expenses.domain.claims import ClaimIndex
from expenses.domain.errors import ItemNotFoundError, PersonNotFoundError
from expenses.domain.split import Charges, Shares, compute_shares
from expenses.domain.value_objects import ExpenseId, ItemId, Money, PersonId


@dataclass
class Item:
    """Domain representation of a bill line item."""

    id: ItemId
    name: str
    price: Money
    quantity: int | None = None
    total_quantity: int | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Item name cannot be empty")


@dataclass
class Person:
    """Domain representation of a participant."""

    id: PersonId
    name: str
    shares: Shares = field(default_factory=Shares.zero)
    is_finished: bool = False

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Person name cannot be empty")


@dataclass
class Expense:
    """Domain representation of a shared bill (aggregate root)."""

    id: ExpenseId
    slug: str
    created_at: datetime
    payer_name: str
    subtotal: Money
    total_amount: Money
    restaurant_name: str | None = None
    tax: Money | None = None
    service_charge: Money | None = None
    discount: Money | None = None
    items: list[Item] = field(default_factory=list)
    people: list[Person] = field(default_factory=list)
    claims: ClaimIndex = field(default_factory=ClaimIndex, repr=False)

    def __post_init__(self) -> None:
        item_ids = [item.id for item in self.items]
        if len(set(item_ids)) != len(item_ids):
            raise ValueError("Item ids must be unique within an expense")
        person_ids = [person.id for person in self.people]
        if len(set(person_ids)) != len(person_ids):
            raise ValueError("Person ids must be unique within an expense")
        for item_id, person_id in self.claims.pairs():
            self.find_item(item_id)
            self.find_person(person_id)

    @property
    def charges(self) -> Charges:
        return Charges(
            subtotal=self.subtotal,
            tax=self.tax,
            service_charge=self.service_charge,
            discount=self.discount,
        )

    def find_item(self, item_id: ItemId) -> Item:
        for item in self.items:
            if item.id == item_id:
                return item
        raise ItemNotFoundError(item_id)

    def find_person(self, person_id: PersonId) -> Person:
        for person in self.people:
            if person.id == person_id:
                return person
        raise PersonNotFoundError(person_id)

    def has_item(self, item_id: ItemId) -> bool:
        return any(item.id == item_id for item in self.items)

    def add_item(self, item: Item) -> None:
        if self.has_item(item.id):
            raise ValueError(f"Item {item.id} already belongs to this expense")
        self.items.append(item)

    def add_person(self, person: Person) -> None:
        if any(existing.id == person.id for existing in self.people):
            raise ValueError(f"Person {person.id} already belongs to this expense")
        self.people.append(person)

    def claimants_of(self, item_id: ItemId) -> tuple[PersonId, ...]:
        return self.claims.claimants(item_id)

    def items_claimed_by(self, person_id: PersonId) -> tuple[ItemId, ...]:
        return self.claims.items_of(person_id)

    def is_claimed_by(self, item_id: ItemId, person_id: PersonId) -> bool:
        return self.claims.contains(item_id, person_id)

    def claim(self, item_id: ItemId, person_id: PersonId) -> None:
        """Record that the person shares the item, then recompute.

        Claiming an already claimed pair leaves the relation unchanged.
        """
        self.find_item(item_id)
        self.find_person(person_id)
        self.claims.add(item_id, person_id)
        self.recompute_amounts()

    def unclaim(self, item_id: ItemId, person_id: PersonId) -> None:
        """Remove the claim if present, then recompute."""
        self.find_item(item_id)
        self.find_person(person_id)
        self.claims.remove(item_id, person_id)
        self.recompute_amounts()

    def recompute_amounts(self) -> None:
        shares = compute_shares(self.items, self.people, self.claims, self.charges)
        for person in self.people:
            person.shares = shares[person.id]

    def set_finished(self, person_id: PersonId, value: bool) -> None:
        self.find_person(person_id).is_finished = value

    def update_details(
        self,
        *,
        payer_name: str,
        restaurant_name: str | None,
        subtotal: Money,
        total_amount: Money,
        tax: Money | None,
        service_charge: Money | None,
        discount: Money | None,
    ) -> None:
        self.payer_name = payer_name
        self.restaurant_name = restaurant_name
        self.subtotal = subtotal
        self.total_amount = total_amount
        self.tax = tax
        self.service_charge = service_charge
        self.discount = discount

    def upsert_item(
        self,
        item_id: ItemId | None,
        name: str,
        price: Money,
        quantity: int | None = None,
        total_quantity: int | None = None,
    ) -> Item:
        """Update the item with a matching id in place, or append a new one.

        Claims on an updated item are kept.
        """
        if item_id is not None and self.has_item(item_id):
            item = self.find_item(item_id)
            item.name = name
            item.price = price
            item.quantity = quantity
            item.total_quantity = total_quantity
            return item
        item = Item(
            id=ItemId.new(),
            name=name,
            price=price,
            quantity=quantity,
            total_quantity=total_quantity,
        )
        self.items.append(item)
        return item
