"""Claim relation between items and people.

The index is the only place the relation is stored. Both directions, and
the pairs themselves in claim order, are kept as insertion-ordered dicts
used as sets, and every mutation updates them together.
"""

from collections.abc import Iterable, Iterator

from expenses.domain.value_objects import ItemId, PersonId


class ClaimIndex:
    """Bidirectional item <-> person claim index."""

    def __init__(self, pairs: Iterable[tuple[ItemId, PersonId]] = ()) -> None:
        self._claimants: dict[ItemId, dict[PersonId, None]] = {}
        self._claimed: dict[PersonId, dict[ItemId, None]] = {}
        self._pairs: dict[tuple[ItemId, PersonId], None] = {}
        for item_id, person_id in pairs:
            self.add(item_id, person_id)

    def add(self, item_id: ItemId, person_id: PersonId) -> bool:
        """Record a claim. Returns False if it already existed."""
        if self.contains(item_id, person_id):
            return False
        self._claimants.setdefault(item_id, {})[person_id] = None
        self._claimed.setdefault(person_id, {})[item_id] = None
        self._pairs[(item_id, person_id)] = None
        return True

    def remove(self, item_id: ItemId, person_id: PersonId) -> bool:
        """Drop a claim. Returns False if there was nothing to drop."""
        if not self.contains(item_id, person_id):
            return False
        del self._claimants[item_id][person_id]
        del self._claimed[person_id][item_id]
        del self._pairs[(item_id, person_id)]
        if not self._claimants[item_id]:
            del self._claimants[item_id]
        if not self._claimed[person_id]:
            del self._claimed[person_id]
        return True

    def contains(self, item_id: ItemId, person_id: PersonId) -> bool:
        return person_id in self._claimants.get(item_id, {})

    def claimants(self, item_id: ItemId) -> tuple[PersonId, ...]:
        return tuple(self._claimants.get(item_id, ()))

    def claimant_count(self, item_id: ItemId) -> int:
        return len(self._claimants.get(item_id, ()))

    def items_of(self, person_id: PersonId) -> tuple[ItemId, ...]:
        return tuple(self._claimed.get(person_id, ()))

    def pairs(self) -> Iterator[tuple[ItemId, PersonId]]:
        """Claims in the order they were made."""
        return iter(tuple(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __repr__(self) -> str:
        return f"ClaimIndex({list(self.pairs())!r})"
