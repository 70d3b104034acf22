import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("slug", models.SlugField(max_length=64, unique=True)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("payer_name", models.CharField(max_length=255)),
                ("restaurant_name", models.CharField(blank=True, max_length=255, null=True)),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=12)),
                ("tax", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("service_charge", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("discount", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=12)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["-created_at"], name="expense_created_idx")],
            },
        ),
        migrations.CreateModel(
            name="Item",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("position", models.PositiveIntegerField()),
                ("name", models.CharField(max_length=255)),
                ("price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("quantity", models.PositiveIntegerField(blank=True, null=True)),
                ("total_quantity", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "expense",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="expenses.expense",
                    ),
                ),
            ],
            options={
                "ordering": ["position"],
                "indexes": [models.Index(fields=["expense", "position"], name="item_expense_position_idx")],
            },
        ),
        migrations.CreateModel(
            name="Person",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("position", models.PositiveIntegerField()),
                ("name", models.CharField(max_length=255)),
                ("subtotal", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("tax_share", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("service_charge_share", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("discount_share", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("total_owed", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("is_finished", models.BooleanField(default=False)),
                (
                    "expense",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="people",
                        to="expenses.expense",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "people",
                "ordering": ["position"],
                "indexes": [models.Index(fields=["expense", "position"], name="person_expense_position_idx")],
            },
        ),
        migrations.CreateModel(
            name="Claim",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="claims",
                        to="expenses.item",
                    ),
                ),
                (
                    "person",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="claims",
                        to="expenses.person",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "constraints": [models.UniqueConstraint(fields=("item", "person"), name="unique_item_claim")],
            },
        ),
    ]
