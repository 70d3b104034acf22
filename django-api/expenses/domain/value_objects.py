"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Self
from uuid import UUID, uuid4

CENTS = Decimal("0.01")
RATIO_PRECISION = Decimal("0.0000000001")


@dataclass(frozen=True)
class ExpenseId:
    """Unique identifier for an Expense."""

    value: UUID

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ItemId:
    """Unique identifier for an Item within its Expense."""

    value: UUID

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class PersonId:
    """Unique identifier for a Person within its Expense."""

    value: UUID

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class Money:
    """Exact decimal amount displayed with two fractional digits.

    Arithmetic keeps full precision. Rounding only happens in the
    explicit operations below, always half-up.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if not self.amount.is_finite():
            raise ValueError(f"Money amount must be finite, got {self.amount}")

    @classmethod
    def zero(cls) -> Self:
        return cls(Decimal("0.00"))

    def __str__(self) -> str:
        return f"{self.amount:.2f}"

    def __add__(self, other: "Money") -> "Money":
        return Money(self.amount + other.amount)

    def __sub__(self, other: "Money") -> "Money":
        return Money(self.amount - other.amount)

    def __abs__(self) -> "Money":
        return Money(abs(self.amount))

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_positive(self) -> bool:
        return self.amount > 0

    def rounded(self) -> "Money":
        """Round half-up to cents."""
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP))

    def split(self, parts: int) -> "Money":
        """One of `parts` even shares, rounded half-up to cents."""
        if parts <= 0:
            raise ValueError(f"Cannot split into {parts} parts")
        return Money((self.amount / parts).quantize(CENTS, rounding=ROUND_HALF_UP))

    def ratio_to(self, whole: "Money") -> Decimal:
        """This amount as a fraction of `whole`, half-up to 10 places."""
        return (self.amount / whole.amount).quantize(RATIO_PRECISION, rounding=ROUND_HALF_UP)

    def portion(self, ratio: Decimal) -> "Money":
        """This amount scaled by `ratio`, rounded half-up to cents."""
        return Money((self.amount * ratio).quantize(CENTS, rounding=ROUND_HALF_UP))
