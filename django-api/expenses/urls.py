from django.urls import path

from expenses.handlers import (
    ExpenseCreateView,
    ExpenseDetailView,
    ExpenseUploadView,
    ItemClaimView,
    ItemUnclaimView,
    PersonFinishView,
    PersonListView,
    PersonPendingView,
)

urlpatterns = [
    path("expenses", ExpenseCreateView.as_view(), name="expense-create"),
    path("expenses/upload", ExpenseUploadView.as_view(), name="expense-upload"),
    path("expenses/<slug:slug>", ExpenseDetailView.as_view(), name="expense-detail"),
    path(
        "expenses/<slug:slug>/items/<str:item_id>/claim",
        ItemClaimView.as_view(),
        name="item-claim",
    ),
    path(
        "expenses/<slug:slug>/items/<str:item_id>/claim/<str:person_id>",
        ItemUnclaimView.as_view(),
        name="item-unclaim",
    ),
    path("expenses/<slug:slug>/people", PersonListView.as_view(), name="person-list"),
    path(
        "expenses/<slug:slug>/people/<str:person_id>/finish",
        PersonFinishView.as_view(),
        name="person-finish",
    ),
    path(
        "expenses/<slug:slug>/people/<str:person_id>/pending",
        PersonPendingView.as_view(),
        name="person-pending",
    ),
]
