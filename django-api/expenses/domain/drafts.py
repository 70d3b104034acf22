"""Input shapes accepted by the expense service.

Handlers build these from validated request data. Ingestion builds them
from parsed bills.
"""

from dataclasses import dataclass, field

from expenses.domain.value_objects import Money


@dataclass(frozen=True)
class ItemDraft:
    name: str
    price: Money
    id: str | None = None
    quantity: int | None = None
    total_quantity: int | None = None


@dataclass(frozen=True)
class PersonDraft:
    """A participant to add. Amounts are only an initial seed."""

    name: str
    subtotal: Money | None = None
    tax_share: Money | None = None
    service_charge_share: Money | None = None
    discount_share: Money | None = None
    total_owed: Money | None = None
    is_finished: bool = False


@dataclass(frozen=True)
class ExpenseDraft:
    payer_name: str
    subtotal: Money
    total_amount: Money
    restaurant_name: str | None = None
    tax: Money | None = None
    service_charge: Money | None = None
    discount: Money | None = None
    items: tuple[ItemDraft, ...] = ()
    people: tuple[PersonDraft, ...] = field(default=())
