"""Split engine: derive every person's shares from the claim relation.

`compute_shares` is a pure function of the items, people, claims and the
expense-level charges. Calling it again on the same state gives the same
result.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from expenses.domain.claims import ClaimIndex
from expenses.domain.value_objects import Money, PersonId

if TYPE_CHECKING:
    from expenses.domain.models import Item, Person


@dataclass(frozen=True)
class Shares:
    """Amounts one person owes, all rounded to cents."""

    subtotal: Money
    tax_share: Money
    service_charge_share: Money
    discount_share: Money
    total_owed: Money

    @classmethod
    def zero(cls) -> "Shares":
        return cls(
            subtotal=Money.zero(),
            tax_share=Money.zero(),
            service_charge_share=Money.zero(),
            discount_share=Money.zero(),
            total_owed=Money.zero(),
        )


@dataclass(frozen=True)
class Charges:
    """Expense-level amounts that are apportioned by subtotal ratio."""

    subtotal: Money | None
    tax: Money | None = None
    service_charge: Money | None = None
    discount: Money | None = None


def person_subtotal(person_id: PersonId, items: Sequence["Item"], claims: ClaimIndex) -> Money:
    """Sum of the person's even share of each item they claimed.

    Each share is rounded before summing, so the shares of one item may
    not add back up to its price exactly.
    """
    prices = {item.id: item.price for item in items}
    total = Money.zero()
    for item_id in claims.items_of(person_id):
        price = prices.get(item_id)
        count = claims.claimant_count(item_id)
        if price is None or count == 0:
            continue
        total = total + price.split(count)
    return total


def shares_for_subtotal(subtotal: Money, charges: Charges) -> Shares:
    if charges.subtotal is None or not charges.subtotal.is_positive():
        return Shares(
            subtotal=subtotal,
            tax_share=Money.zero(),
            service_charge_share=Money.zero(),
            discount_share=Money.zero(),
            total_owed=subtotal,
        )

    ratio = subtotal.ratio_to(charges.subtotal)
    tax_share = charges.tax.portion(ratio) if charges.tax is not None else Money.zero()
    service_share = (
        charges.service_charge.portion(ratio) if charges.service_charge is not None else Money.zero()
    )
    discount_share = charges.discount.portion(ratio) if charges.discount is not None else Money.zero()
    return Shares(
        subtotal=subtotal,
        tax_share=tax_share,
        service_charge_share=service_share,
        discount_share=discount_share,
        total_owed=subtotal + tax_share + service_share - discount_share,
    )


def compute_shares(
    items: Sequence["Item"],
    people: Sequence["Person"],
    claims: ClaimIndex,
    charges: Charges,
) -> dict[PersonId, Shares]:
    """Return the recomputed shares of every person, keyed by person id."""
    return {
        person.id: shares_for_subtotal(person_subtotal(person.id, items, claims), charges)
        for person in people
    }
