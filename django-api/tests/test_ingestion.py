"""Tests for receipt parsing and item expansion.

Run with: pytest tests/test_ingestion.py -v
"""

import io
from decimal import Decimal

import pytest
from PIL import Image

from expenses.domain import Money
from expenses.domain.errors import BillParseError
from expenses.ingestion import (
    ParsedBill,
    ParsedBillItem,
    TesseractBillParser,
    expand_items,
    parse_receipt_text,
)

RECEIPT = """
Luigi's Pizza Restaurant
2024-05-12
Margherita Pizza        12.50
2 x Coke                 6.00
Tiramisu
                         7.25
Subtotal                25.75
Tax                      2.06
Service Charge           3.00
Total                   30.81
Visa                    30.81
"""


class TestParseReceiptText:
    def test_extracts_items_and_charges(self):
        bill = parse_receipt_text(RECEIPT)

        assert [(i.name, i.price, i.quantity) for i in bill.items] == [
            ("Margherita Pizza", Decimal("12.50"), 1),
            ("Coke", Decimal("6.00"), 2),
            ("Tiramisu", Decimal("7.25"), 1),
        ]
        assert bill.subtotal == Decimal("25.75")
        assert bill.tax == Decimal("2.06")
        assert bill.service_charge == Decimal("3.00")
        assert bill.total_amount == Decimal("30.81")
        assert bill.discount is None

    def test_extracts_restaurant_and_date(self):
        bill = parse_receipt_text(RECEIPT)

        assert bill.restaurant_name == "Luigi's Pizza Restaurant"
        assert bill.date == "2024-05-12"

    def test_derives_missing_subtotal_and_total(self):
        bill = parse_receipt_text("Noodles 9,50\nDumplings 4.50\nDiscount 1.00\n")

        assert bill.subtotal == Decimal("14.00")
        assert bill.discount == Decimal("1.00")
        assert bill.total_amount == Decimal("13.00")
        assert bill.tax is None

    def test_reads_amounts_with_thousands_separators(self):
        bill = parse_receipt_text("Biryani 1,250.00\nNaan 80.00\nThali 1,25,000.00\nTotal 1,26,330.00\n")

        assert [(i.name, i.price) for i in bill.items] == [
            ("Biryani", Decimal("1250.00")),
            ("Naan", Decimal("80.00")),
            ("Thali", Decimal("125000.00")),
        ]
        assert bill.subtotal == Decimal("126330.00")
        assert bill.total_amount == Decimal("126330.00")

    def test_reads_european_grouped_amount(self):
        bill = parse_receipt_text("Fondue 1.250,00\n")

        assert bill.items[0].price == Decimal("1250.00")

    def test_leading_number_in_name_is_not_a_quantity(self):
        bill = parse_receipt_text("12 Inch Pizza 15.00\n")

        assert bill.items == (ParsedBillItem(name="12 Inch Pizza", price=Decimal("15.00")),)

    def test_bare_count_with_unit_and_line_price_sets_quantity(self):
        bill = parse_receipt_text("3 Lassi 2.50 7.50\n")

        assert bill.items == (ParsedBillItem(name="Lassi", price=Decimal("7.50"), quantity=3),)

    def test_no_items_raises_error(self):
        with pytest.raises(BillParseError):
            parse_receipt_text("Thank you for dining with us\nTotal 0.00\n")


class TestExpandItems:
    def test_quantity_lines_become_unit_items(self):
        bill = ParsedBill(
            subtotal=Decimal("20.00"),
            total_amount=Decimal("20.00"),
            items=(
                ParsedBillItem(name="Beer", price=Decimal("10.00"), quantity=3),
                ParsedBillItem(name="Nachos", price=Decimal("10.00")),
            ),
        )

        drafts = expand_items(bill)

        assert [(d.name, d.price, d.quantity, d.total_quantity) for d in drafts] == [
            ("Beer", Money("3.34"), 1, 3),
            ("Beer", Money("3.34"), 1, 3),
            ("Beer", Money("3.34"), 1, 3),
            ("Nachos", Money("10.00"), 1, 1),
        ]


class TestTesseractBillParser:
    def test_empty_upload_raises_error(self):
        with pytest.raises(BillParseError):
            TesseractBillParser().parse(b"")

    def test_non_image_raises_error(self):
        with pytest.raises(BillParseError):
            TesseractBillParser().parse(b"definitely not a png")

    def test_ocr_text_is_parsed(self, monkeypatch):
        buffer = io.BytesIO()
        Image.new("RGB", (10, 10), "white").save(buffer, format="PNG")
        captured = {}

        def fake_image_to_string(image, lang, config):
            captured["lang"] = lang
            captured["config"] = config
            return "Pasta 11.00\nTotal 11.00\n"

        monkeypatch.setattr("expenses.ingestion.pytesseract.image_to_string", fake_image_to_string)

        bill = TesseractBillParser(language="ita").parse(buffer.getvalue())

        assert [item.name for item in bill.items] == ["Pasta"]
        assert captured == {"lang": "ita", "config": "--psm 6 --oem 1"}
