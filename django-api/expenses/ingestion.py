"""Bill ingestion: turn a receipt image into a structured bill.

Parsers only produce a `ParsedBill`. The expense service decides what to
do with it, so a failed parse never reaches the expense aggregate.
"""

import io
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal, InvalidOperation

import pytesseract
from PIL import Image

from expenses.domain import ItemDraft, Money
from expenses.domain.errors import BillParseError

logger = logging.getLogger(__name__)

# Grouped amounts first: 1,250.00 and 1,25,000.00, or 1.250,00.
AMOUNT_RE = re.compile(
    r"(\d{1,3}(?:,\d{2,3})+\.\d{2}|\d{1,3}(?:\.\d{3})+,\d{2}|\d+[.,]\d{2})(?!\d)"
)
QUANTITY_RE = re.compile(r"^(\d{1,3})\s*[xX×@]\s+(?=\D)")
# A bare leading count only counts when the line also carries unit and line prices.
BARE_QUANTITY_RE = re.compile(r"^(\d{1,3})\s+(?=\D)")
DATE_RE = re.compile(r"\b(\d{4}-\d{2}-\d{2}|\d{1,2}[/.-]\d{1,2}[/.-]\d{2,4})\b")
RESTAURANT_RE = re.compile(
    r"([\w\s&']+(?:Restaurant|Cafe|Café|Bar|Grill|Bistro|Diner|Eatery|Kitchen)[\w\s&']*)",
    re.IGNORECASE,
)

SUMMARY_PATTERNS = (
    ("subtotal", re.compile(r"\bsub\s*-?\s*total\b", re.IGNORECASE)),
    ("discount", re.compile(r"\b(discount|promo|coupon)\b", re.IGNORECASE)),
    ("service_charge", re.compile(r"\b(service|gratuity|tip)\b", re.IGNORECASE)),
    ("tax", re.compile(r"\b(tax|gst|vat|hst)\b", re.IGNORECASE)),
    ("total_amount", re.compile(r"\b(total|amount\s+due|balance\s+due|net\s+amount)\b", re.IGNORECASE)),
)
IGNORED_RE = re.compile(r"\b(change|cash|card|visa|mastercard|tendered|paid)\b", re.IGNORECASE)

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class ParsedBillItem:
    name: str
    price: Decimal
    quantity: int = 1


@dataclass(frozen=True)
class ParsedBill:
    """Structured result of reading a receipt."""

    subtotal: Decimal
    total_amount: Decimal
    items: tuple[ParsedBillItem, ...]
    tax: Decimal | None = None
    service_charge: Decimal | None = None
    discount: Decimal | None = None
    restaurant_name: str | None = None
    date: str | None = None


class BillParser(ABC):
    """Interface for turning an uploaded bill into a ParsedBill."""

    @abstractmethod
    def parse(self, image_bytes: bytes) -> ParsedBill:
        """Raise BillParseError if the bill cannot be read."""
        ...


class TesseractBillParser(BillParser):
    """OCR-based parser using the local Tesseract install."""

    def __init__(self, language: str = "eng", page_segmentation_mode: int = 6) -> None:
        self.language = language
        self.page_segmentation_mode = page_segmentation_mode

    def parse(self, image_bytes: bytes) -> ParsedBill:
        if not image_bytes:
            raise BillParseError("File is empty")
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except OSError as exc:
            raise BillParseError("File is not a valid image") from exc

        config = f"--psm {self.page_segmentation_mode} --oem 1"
        try:
            text = pytesseract.image_to_string(image.convert("L"), lang=self.language, config=config)
        except (pytesseract.TesseractError, OSError) as exc:
            raise BillParseError(f"OCR failed: {exc}") from exc

        logger.debug("OCR produced %d characters", len(text))
        return parse_receipt_text(text)


def _to_decimal(raw: str) -> Decimal:
    """Read an amount whose last separator is the decimal mark."""
    whole = re.sub(r"[.,]", "", raw[:-3])
    try:
        return Decimal(f"{whole}.{raw[-2:]}")
    except InvalidOperation as exc:
        raise BillParseError(f"Unreadable amount {raw!r}") from exc


def _leading_quantity(name: str, amounts: list[str]) -> re.Match | None:
    match = QUANTITY_RE.match(name)
    if match or len(amounts) < 2:
        return match
    match = BARE_QUANTITY_RE.match(name)
    if match and _to_decimal(amounts[-2]) * int(match.group(1)) == _to_decimal(amounts[-1]):
        return match
    return None


def _summary_field(line: str) -> str | None:
    for field_name, pattern in SUMMARY_PATTERNS:
        if pattern.search(line):
            return field_name
    return None


def parse_receipt_text(text: str) -> ParsedBill:
    """Parse OCR text of a receipt into line items and charges.

    Lines naming a charge (subtotal, tax, service, discount, total) set that
    charge from their last amount. Any other line with an amount is an
    item; a line without an amount is kept as the name of the next priced
    line. A leading ``2 x`` sets the quantity, as does a bare leading count
    when the line lists both a unit price and a matching line price.
    """
    charges: dict[str, Decimal] = {}
    items: list[ParsedBillItem] = []
    restaurant_name = None
    date = None
    pending_name = None

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if date is None:
            date_match = DATE_RE.search(line)
            if date_match:
                date = date_match.group(1)
                line = (line[: date_match.start()] + line[date_match.end():]).strip()
                if not line:
                    continue

        amounts = AMOUNT_RE.findall(line)
        field_name = _summary_field(line)
        if field_name is not None:
            if amounts and field_name not in charges:
                charges[field_name] = abs(_to_decimal(amounts[-1]))
            pending_name = None
            continue
        if IGNORED_RE.search(line):
            pending_name = None
            continue

        if not amounts:
            if restaurant_name is None and not items:
                match = RESTAURANT_RE.search(line)
                if match:
                    restaurant_name = match.group(1).strip()
                    continue
            if re.search(r"[A-Za-z]", line):
                pending_name = line
            continue

        name = AMOUNT_RE.split(line, maxsplit=1)[0].strip(" .:-$£€₹\t")
        quantity = 1
        quantity_match = _leading_quantity(name, amounts)
        if quantity_match:
            quantity = max(1, int(quantity_match.group(1)))
            name = name[quantity_match.end():].strip()
        if not re.search(r"[A-Za-z]", name):
            if pending_name is None:
                continue
            name = pending_name
        pending_name = None

        price = _to_decimal(amounts[-1])
        if price <= 0:
            continue
        items.append(ParsedBillItem(name=name, price=price, quantity=quantity))

    if not items:
        raise BillParseError("No line items found on the bill")

    subtotal = charges.get("subtotal", sum((item.price for item in items), Decimal("0.00")))
    tax = charges.get("tax")
    service_charge = charges.get("service_charge")
    discount = charges.get("discount")
    total_amount = charges.get(
        "total_amount",
        subtotal + (tax or 0) + (service_charge or 0) - (discount or 0),
    )
    return ParsedBill(
        subtotal=subtotal,
        total_amount=total_amount,
        items=tuple(items),
        tax=tax,
        service_charge=service_charge,
        discount=discount,
        restaurant_name=restaurant_name,
        date=date,
    )


def expand_items(parsed: ParsedBill) -> list[ItemDraft]:
    """Turn each quantity-N line into N single-unit items.

    The unit price is the line price divided by N, rounded up to cents.
    """
    drafts = []
    for line in parsed.items:
        quantity = max(1, line.quantity)
        unit_price = (line.price / quantity).quantize(CENTS, rounding=ROUND_CEILING)
        for _ in range(quantity):
            drafts.append(
                ItemDraft(
                    name=line.name,
                    price=Money(unit_price),
                    quantity=1,
                    total_quantity=quantity,
                )
            )
    return drafts
