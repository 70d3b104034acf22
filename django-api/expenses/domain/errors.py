"""Domain error codes for the expenses module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EXPENSE_NOT_FOUND = "EXPENSE_NOT_FOUND"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    PERSON_NOT_FOUND = "PERSON_NOT_FOUND"
    INVALID_ID = "INVALID_ID"
    INVALID_EXPENSE = "INVALID_EXPENSE"
    ITEM_ALREADY_CLAIMED = "ITEM_ALREADY_CLAIMED"
    ITEM_NOT_CLAIMED = "ITEM_NOT_CLAIMED"
    TOTAL_MISMATCH = "TOTAL_MISMATCH"
    BILL_PARSE_FAILED = "BILL_PARSE_FAILED"
    INGESTION_UNAVAILABLE = "INGESTION_UNAVAILABLE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ExpenseNotFoundError(DomainError):
    """Raised when no expense has the requested slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(
            code=ErrorCode.EXPENSE_NOT_FOUND,
            message=f"Expense not found with slug: {slug}",
        )
        self.slug = slug


class ItemNotFoundError(DomainError):
    """Raised when an item is not part of the expense."""

    def __init__(self, item_id: object) -> None:
        super().__init__(
            code=ErrorCode.ITEM_NOT_FOUND,
            message=f"Item not found with ID: {item_id}",
        )
        self.item_id = item_id


class PersonNotFoundError(DomainError):
    """Raised when a person is not part of the expense."""

    def __init__(self, person_id: object) -> None:
        super().__init__(
            code=ErrorCode.PERSON_NOT_FOUND,
            message=f"Person not found with ID: {person_id}",
        )
        self.person_id = person_id


class InvalidIdentifierError(DomainError):
    """Raised when an item or person ID is not a valid UUID."""

    def __init__(self, kind: str, value: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} ID format: {value!r}",
        )


class ExpenseValidationError(DomainError):
    """Raised when expense input breaks a business rule."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_EXPENSE, message=message)


class ItemAlreadyClaimedError(DomainError):
    def __init__(self, item_id: object, person_id: object) -> None:
        super().__init__(
            code=ErrorCode.ITEM_ALREADY_CLAIMED,
            message=f"Item {item_id} is already claimed by person {person_id}",
        )


class ItemNotClaimedError(DomainError):
    def __init__(self, item_id: object, person_id: object) -> None:
        super().__init__(
            code=ErrorCode.ITEM_NOT_CLAIMED,
            message=f"Item {item_id} is not claimed by person {person_id}",
        )


class TotalMismatchError(DomainError):
    """Raised when the total amount is too far from its components."""

    def __init__(self, expected: object, actual: object, difference: object, margin: object) -> None:
        super().__init__(
            code=ErrorCode.TOTAL_MISMATCH,
            message=(
                f"Total amount must be within {margin} of calculated total "
                f"(subtotal + tax + service charge - discount). "
                f"Expected: {expected}, Actual: {actual}, Difference: {difference}"
            ),
        )


class BillParseError(DomainError):
    """Raised when a bill image could not be turned into line items."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            code=ErrorCode.BILL_PARSE_FAILED,
            message=f"Failed to process bill: {reason}",
        )


class IngestionUnavailableError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INGESTION_UNAVAILABLE,
            message="Bill ingestion is not configured",
        )
