"""Human-shareable expense slugs such as ``bado-kim-ruse``."""

import logging
import random
import secrets

from expenses.stores.interfaces import ExpenseStore

logger = logging.getLogger(__name__)

CONSONANTS = "bcdfghjklmnpqrstvwxyz"
VOWELS = "aeiou"
WORD_COUNT = 3
MIN_WORD_LENGTH = 3
MAX_WORD_LENGTH = 4
MAX_ATTEMPTS = 10


class SlugGenerator:
    """Generates slugs that are unique against the store at call time."""

    def __init__(self, store: ExpenseStore, rng: random.Random | None = None) -> None:
        self._store = store
        self._rng = rng or secrets.SystemRandom()

    def generate_unique(self) -> str:
        """Return a slug no stored expense uses yet.

        After MAX_ATTEMPTS collisions a numeric suffix is appended to each
        further candidate.
        """
        attempts = 0
        while True:
            slug = self.generate()
            attempts += 1
            if attempts >= MAX_ATTEMPTS:
                slug = f"{slug}-{self._rng.randrange(1000)}"
                if attempts == MAX_ATTEMPTS:
                    logger.warning("Slug space crowded after %d attempts, adding suffix", attempts)
            if not self._store.slug_exists(slug):
                return slug

    def generate(self) -> str:
        return "-".join(self._word() for _ in range(WORD_COUNT))

    def _word(self) -> str:
        length = self._rng.randint(MIN_WORD_LENGTH, MAX_WORD_LENGTH)
        use_consonant = self._rng.random() < 0.5
        letters = []
        for _ in range(length):
            letters.append(self._rng.choice(CONSONANTS if use_consonant else VOWELS))
            use_consonant = not use_consonant
        return "".join(letters)
