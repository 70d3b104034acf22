"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


class Expense(models.Model):
    """Persistence model for expenses."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    slug = models.SlugField(max_length=64, unique=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)
    payer_name = models.CharField(max_length=255)
    restaurant_name = models.CharField(max_length=255, blank=True, null=True)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    tax = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    service_charge = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    discount = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="expense_created_idx"),
        ]

    def __str__(self) -> str:
        return self.slug


class Item(models.Model):
    """Persistence model for bill line items."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    expense = models.ForeignKey(Expense, on_delete=models.CASCADE, related_name="items")
    position = models.PositiveIntegerField()
    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    quantity = models.PositiveIntegerField(blank=True, null=True)
    total_quantity = models.PositiveIntegerField(blank=True, null=True)

    class Meta:
        ordering = ["position"]
        indexes = [
            models.Index(fields=["expense", "position"], name="item_expense_position_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.price}"


class Person(models.Model):
    """Persistence model for participants and their computed shares."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    expense = models.ForeignKey(Expense, on_delete=models.CASCADE, related_name="people")
    position = models.PositiveIntegerField()
    name = models.CharField(max_length=255)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax_share = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    service_charge_share = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount_share = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_owed = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    is_finished = models.BooleanField(default=False)

    class Meta:
        verbose_name_plural = "people"
        ordering = ["position"]
        indexes = [
            models.Index(fields=["expense", "position"], name="person_expense_position_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Claim(models.Model):
    """One person sharing one item."""

    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name="claims")
    person = models.ForeignKey(Person, on_delete=models.CASCADE, related_name="claims")

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["item", "person"], name="unique_item_claim"),
        ]

    def __str__(self) -> str:
        return f"{self.person.name} -> {self.item.name}"
