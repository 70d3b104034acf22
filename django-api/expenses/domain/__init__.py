from expenses.domain.claims import ClaimIndex
from expenses.domain.drafts import ExpenseDraft, ItemDraft, PersonDraft
from expenses.domain.models import Expense, Item, Person
from expenses.domain.split import Charges, Shares, compute_shares
from expenses.domain.value_objects import ExpenseId, ItemId, Money, PersonId

__all__ = [
    "Expense",
    "Item",
    "Person",
    "ExpenseId",
    "ItemId",
    "PersonId",
    "Money",
    "ClaimIndex",
    "Charges",
    "Shares",
    "compute_shares",
    "ExpenseDraft",
    "ItemDraft",
    "PersonDraft",
]
