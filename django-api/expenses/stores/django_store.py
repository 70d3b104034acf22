"""Django ORM implementation of the ExpenseStore."""

import logging
from decimal import Decimal

from django.db import transaction

from expenses import models
from expenses.domain import (
    ClaimIndex,
    Expense,
    ExpenseId,
    Item,
    ItemId,
    Money,
    Person,
    PersonId,
    Shares,
)
from expenses.stores.interfaces import ExpenseStore

logger = logging.getLogger(__name__)


def _money(value: Decimal | None) -> Money | None:
    return Money(value) if value is not None else None


def _amount(value: Money | None) -> Decimal | None:
    return value.amount if value is not None else None


class DjangoExpenseStore(ExpenseStore):
    """Relational expense store using Django ORM (SQLite or PostgreSQL)."""

    def get_by_slug(self, slug: str) -> Expense | None:
        row = (
            models.Expense.objects.filter(slug=slug)
            .prefetch_related("items", "people")
            .first()
        )
        if row is None:
            return None
        return self._to_domain(row)

    def slug_exists(self, slug: str) -> bool:
        return models.Expense.objects.filter(slug=slug).exists()

    @transaction.atomic
    def save(self, expense: Expense) -> Expense:
        row, created = models.Expense.objects.update_or_create(
            id=expense.id.value,
            defaults={
                "slug": expense.slug,
                "created_at": expense.created_at,
                "payer_name": expense.payer_name,
                "restaurant_name": expense.restaurant_name,
                "subtotal": expense.subtotal.amount,
                "tax": _amount(expense.tax),
                "service_charge": _amount(expense.service_charge),
                "discount": _amount(expense.discount),
                "total_amount": expense.total_amount.amount,
            },
        )

        item_ids = []
        for position, item in enumerate(expense.items):
            models.Item.objects.update_or_create(
                id=item.id.value,
                defaults={
                    "expense": row,
                    "position": position,
                    "name": item.name,
                    "price": item.price.amount,
                    "quantity": item.quantity,
                    "total_quantity": item.total_quantity,
                },
            )
            item_ids.append(item.id.value)
        models.Item.objects.filter(expense=row).exclude(id__in=item_ids).delete()

        person_ids = []
        for position, person in enumerate(expense.people):
            shares = person.shares
            models.Person.objects.update_or_create(
                id=person.id.value,
                defaults={
                    "expense": row,
                    "position": position,
                    "name": person.name,
                    "subtotal": shares.subtotal.amount,
                    "tax_share": shares.tax_share.amount,
                    "service_charge_share": shares.service_charge_share.amount,
                    "discount_share": shares.discount_share.amount,
                    "total_owed": shares.total_owed.amount,
                    "is_finished": person.is_finished,
                },
            )
            person_ids.append(person.id.value)
        models.Person.objects.filter(expense=row).exclude(id__in=person_ids).delete()

        self._sync_claims(row, expense)

        logger.debug(
            "%s expense %s (%d items, %d people, %d claims)",
            "Created" if created else "Updated",
            expense.slug,
            len(item_ids),
            len(person_ids),
            len(expense.claims),
        )
        return self.get_by_slug(expense.slug)

    def _sync_claims(self, row: models.Expense, expense: Expense) -> None:
        """Insert and delete only the changed claim rows so row ids keep claim order."""
        wanted = [(item_id.value, person_id.value) for item_id, person_id in expense.claims.pairs()]
        wanted_set = set(wanted)
        existing = {
            (item_id, person_id): claim_id
            for claim_id, item_id, person_id in models.Claim.objects.filter(
                item__expense=row
            ).values_list("id", "item_id", "person_id")
        }
        stale = [claim_id for pair, claim_id in existing.items() if pair not in wanted_set]
        if stale:
            models.Claim.objects.filter(id__in=stale).delete()
        models.Claim.objects.bulk_create(
            models.Claim(item_id=item_id, person_id=person_id)
            for item_id, person_id in wanted
            if (item_id, person_id) not in existing
        )

    def _to_domain(self, row: models.Expense) -> Expense:
        items = [
            Item(
                id=ItemId(value=item.id),
                name=item.name,
                price=Money(item.price),
                quantity=item.quantity,
                total_quantity=item.total_quantity,
            )
            for item in row.items.all()
        ]
        people = [
            Person(
                id=PersonId(value=person.id),
                name=person.name,
                shares=Shares(
                    subtotal=Money(person.subtotal),
                    tax_share=Money(person.tax_share),
                    service_charge_share=Money(person.service_charge_share),
                    discount_share=Money(person.discount_share),
                    total_owed=Money(person.total_owed),
                ),
                is_finished=person.is_finished,
            )
            for person in row.people.all()
        ]
        claims = ClaimIndex(
            (ItemId(value=item_id), PersonId(value=person_id))
            for item_id, person_id in models.Claim.objects.filter(item__expense=row)
            .order_by("id")
            .values_list("item_id", "person_id")
        )
        return Expense(
            id=ExpenseId(value=row.id),
            slug=row.slug,
            created_at=row.created_at,
            payer_name=row.payer_name,
            restaurant_name=row.restaurant_name,
            subtotal=Money(row.subtotal),
            tax=_money(row.tax),
            service_charge=_money(row.service_charge),
            discount=_money(row.discount),
            total_amount=Money(row.total_amount),
            items=items,
            people=people,
            claims=claims,
        )
