import json
from datetime import date, datetime

import pytest
from conftest import make_line

from services.checkout.receipts import (
    add_weekdays,
    build_receipt_payload,
    parse_receipt_payload,
    remaining_validity_days,
)


def test_build_receipt_payload_fields(student, fixed_now):
    text = build_receipt_payload(
        "ORD-20250602-0000000000AB",
        student,
        [make_line("Shorts", "S", quantity=2), make_line("ID Lace (College)", None)],
        order_type="regular",
        issued_at=fixed_now,
    )
    payload = json.loads(text)
    assert payload["type"] == "order_receipt"
    assert payload["studentId"] == "student-1"
    assert payload["studentName"] == "Ana Cruz"
    assert payload["totalItems"] == 2
    assert payload["totalAmount"] == 0
    assert payload["status"] == "pending"
    assert payload["qrValidDays"] == 7
    assert payload["items"][1] == {"name": "ID Lace (College)", "quantity": 1, "size": "N/A"}


def test_receipt_payload_is_deterministic(student, fixed_now):
    args = ("ORD-1", student, [make_line("Shorts", "S")])
    first = build_receipt_payload(*args, order_type="regular", issued_at=fixed_now)
    second = build_receipt_payload(*args, order_type="regular", issued_at=fixed_now)
    assert first == second


def test_receipt_requires_lines(student, fixed_now):
    with pytest.raises(ValueError):
        build_receipt_payload("ORD-1", student, [], order_type="regular", issued_at=fixed_now)


@pytest.mark.parametrize("text", ["not json", "[]", '{"type": "coupon", "orderNumber": "X"}', '{"type": "order_receipt"}'])
def test_parse_rejects_foreign_payloads(text):
    assert parse_receipt_payload(text) is None


def test_add_weekdays_skips_weekend():
    # Friday + 1 weekday is the following Monday.
    assert add_weekdays(date(2025, 6, 6), 1) == date(2025, 6, 9)
    assert add_weekdays(date(2025, 6, 2), 7) == date(2025, 6, 11)


def test_remaining_validity_days():
    issued = datetime(2025, 6, 2, 9, 0)
    assert remaining_validity_days(issued, date(2025, 6, 2)) == 8
    assert remaining_validity_days(issued, date(2025, 6, 11)) == 0
    assert remaining_validity_days(issued, date(2025, 6, 13)) < 0
    assert remaining_validity_days(None, date(2025, 6, 2)) is None
