from expenses.handlers.views import (
    ExpenseCreateView,
    ExpenseDetailView,
    ExpenseUploadView,
    ItemClaimView,
    ItemUnclaimView,
    PersonFinishView,
    PersonListView,
    PersonPendingView,
)

__all__ = [
    "ExpenseCreateView",
    "ExpenseDetailView",
    "ExpenseUploadView",
    "ItemClaimView",
    "ItemUnclaimView",
    "PersonFinishView",
    "PersonListView",
    "PersonPendingView",
]
