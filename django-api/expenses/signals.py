"""Django signals for cache invalidation.

The store saves the expense row on every mutation, so these handlers also
fire for claim, unclaim and person changes. The cached read is dropped once
the surrounding transaction commits, so a concurrent GET cannot cache the
pre-commit state again.
"""

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from expenses import cache
from expenses.models import Expense


@receiver([post_save, post_delete], sender=Expense)
def invalidate_expense_cache(sender, instance, **kwargs):
    """Invalidate the cached read when an expense is saved or deleted."""
    slug = instance.slug
    transaction.on_commit(lambda: cache.invalidate_expense(slug))
