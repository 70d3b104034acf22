from django.contrib import admin

from expenses.models import Claim, Expense, Item, Person


class ItemInline(admin.TabularInline):
    model = Item
    extra = 1


class PersonInline(admin.TabularInline):
    model = Person
    extra = 0
    readonly_fields = ["subtotal", "tax_share", "service_charge_share", "discount_share", "total_owed"]


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ["slug", "payer_name", "restaurant_name", "total_amount", "created_at"]
    search_fields = ["slug", "payer_name", "restaurant_name"]
    inlines = [ItemInline, PersonInline]


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    list_display = ["name", "expense", "total_owed", "is_finished"]
    list_filter = ["is_finished"]


@admin.register(Claim)
class ClaimAdmin(admin.ModelAdmin):
    list_display = ["person", "item"]
    list_filter = ["item__expense"]
