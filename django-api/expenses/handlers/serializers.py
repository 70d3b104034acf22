"""Serializers for request validation and for rendering domain models.

Input serializers turn request bodies into domain drafts. Output
serializers render the Expense aggregate; the claim relation is read
from the aggregate passed in the serializer context.
"""

from decimal import Decimal

from rest_framework import serializers

from expenses.domain import ExpenseDraft, ItemDraft, Money, PersonDraft

MONEY_FIELD = {"max_digits": 12, "decimal_places": 2}


def _money(value) -> Money | None:
    return Money(value) if value is not None else None


class MoneyField(serializers.Field):
    """Renders Money as a string with two decimal places."""

    def to_representation(self, value: Money) -> str:
        return str(value)


class IdentifierField(serializers.Field):
    def to_representation(self, value) -> str:
        return str(value.value)


# Input


class ItemRequestSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    name = serializers.CharField(max_length=255)
    price = serializers.DecimalField(min_value=Decimal("0.01"), **MONEY_FIELD)
    quantity = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    total_quantity = serializers.IntegerField(required=False, allow_null=True, min_value=1)

    @staticmethod
    def build_draft(data: dict) -> ItemDraft:
        return ItemDraft(
            id=data.get("id") or None,
            name=data["name"],
            price=Money(data["price"]),
            quantity=data.get("quantity"),
            total_quantity=data.get("total_quantity"),
        )


class PersonRequestSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    subtotal = serializers.DecimalField(required=False, allow_null=True, **MONEY_FIELD)
    tax_share = serializers.DecimalField(required=False, allow_null=True, **MONEY_FIELD)
    service_charge_share = serializers.DecimalField(required=False, allow_null=True, **MONEY_FIELD)
    discount_share = serializers.DecimalField(required=False, allow_null=True, **MONEY_FIELD)
    total_owed = serializers.DecimalField(required=False, allow_null=True, **MONEY_FIELD)
    is_finished = serializers.BooleanField(required=False, default=False)

    @staticmethod
    def build_draft(data: dict) -> PersonDraft:
        return PersonDraft(
            name=data["name"],
            subtotal=_money(data.get("subtotal")),
            tax_share=_money(data.get("tax_share")),
            service_charge_share=_money(data.get("service_charge_share")),
            discount_share=_money(data.get("discount_share")),
            total_owed=_money(data.get("total_owed")),
            is_finished=data.get("is_finished", False),
        )

    def to_draft(self) -> PersonDraft:
        return self.build_draft(self.validated_data)


class ExpenseRequestSerializer(serializers.Serializer):
    payer_name = serializers.CharField(max_length=255)
    restaurant_name = serializers.CharField(
        max_length=255, required=False, allow_null=True, allow_blank=True
    )
    total_amount = serializers.DecimalField(min_value=Decimal("0.01"), **MONEY_FIELD)
    subtotal = serializers.DecimalField(min_value=Decimal("0"), **MONEY_FIELD)
    tax = serializers.DecimalField(required=False, allow_null=True, min_value=Decimal("0"), **MONEY_FIELD)
    service_charge = serializers.DecimalField(
        required=False, allow_null=True, min_value=Decimal("0"), **MONEY_FIELD
    )
    discount = serializers.DecimalField(required=False, allow_null=True, min_value=Decimal("0"), **MONEY_FIELD)
    items = ItemRequestSerializer(many=True, allow_empty=False)
    people = PersonRequestSerializer(many=True, required=False)

    def to_draft(self) -> ExpenseDraft:
        data = self.validated_data
        return ExpenseDraft(
            payer_name=data["payer_name"],
            restaurant_name=data.get("restaurant_name") or None,
            subtotal=Money(data["subtotal"]),
            tax=_money(data.get("tax")),
            service_charge=_money(data.get("service_charge")),
            discount=_money(data.get("discount")),
            total_amount=Money(data["total_amount"]),
            items=tuple(ItemRequestSerializer.build_draft(item) for item in data["items"]),
            people=tuple(
                PersonRequestSerializer.build_draft(person) for person in data.get("people", [])
            ),
        )


class ClaimRequestSerializer(serializers.Serializer):
    person_id = serializers.UUIDField()


class BillUploadSerializer(serializers.Serializer):
    bill = serializers.FileField(allow_empty_file=False)
    payer_name = serializers.CharField(max_length=255)


# Output


class ItemSerializer(serializers.Serializer):
    """Serializer for Item domain model."""

    id = IdentifierField()
    name = serializers.CharField()
    price = MoneyField()
    quantity = serializers.IntegerField(allow_null=True)
    total_quantity = serializers.IntegerField(allow_null=True)
    claimed_by = serializers.SerializerMethodField()

    def get_claimed_by(self, item) -> list[str]:
        expense = self.context["expense"]
        return [str(person_id) for person_id in expense.claimants_of(item.id)]


class PersonSerializer(serializers.Serializer):
    """Serializer for Person domain model."""

    id = IdentifierField()
    name = serializers.CharField()
    items_claimed = serializers.SerializerMethodField()
    subtotal = MoneyField(source="shares.subtotal")
    tax_share = MoneyField(source="shares.tax_share")
    service_charge_share = MoneyField(source="shares.service_charge_share")
    discount_share = MoneyField(source="shares.discount_share")
    total_owed = MoneyField(source="shares.total_owed")
    is_finished = serializers.BooleanField()

    def get_items_claimed(self, person) -> list[str]:
        expense = self.context["expense"]
        return [str(item_id) for item_id in expense.items_claimed_by(person.id)]


class ExpenseSerializer(serializers.Serializer):
    """Serializer for the Expense aggregate."""

    id = IdentifierField()
    slug = serializers.CharField()
    created_at = serializers.DateTimeField()
    payer_name = serializers.CharField()
    restaurant_name = serializers.CharField(allow_null=True)
    subtotal = MoneyField()
    tax = MoneyField(allow_null=True)
    service_charge = MoneyField(allow_null=True)
    discount = MoneyField(allow_null=True)
    total_amount = MoneyField()
    items = serializers.SerializerMethodField()
    people = serializers.SerializerMethodField()

    def get_items(self, expense) -> list[dict]:
        return ItemSerializer(expense.items, many=True, context={"expense": expense}).data

    def get_people(self, expense) -> list[dict]:
        return PersonSerializer(expense.people, many=True, context={"expense": expense}).data
