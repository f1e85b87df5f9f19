import json
import re

import pytest
from conftest import make_line

from services.checkout import StockClassification, build_order_drafts, generate_order_number

IN_STOCK = StockClassification("fulfillable", "found-in-stock")
BACKORDER = StockClassification("backorder", "zero-stock")


def test_generate_order_number_format(fixed_now):
    number = generate_order_number(fixed_now)
    assert re.fullmatch(r"ORD-20250602-[0-9A-F]{12}", number)
    assert generate_order_number(fixed_now, prefix="UNI").startswith("UNI-20250602-")
    assert generate_order_number(fixed_now) != number


def test_split_integrity(student, fixed_now, sequential_numbers):
    lines = [make_line("Shorts", "S"), make_line("ID Lace (College)"), make_line("Logo Patch", quantity=2)]
    drafts = build_order_drafts(
        lines,
        [IN_STOCK, BACKORDER, IN_STOCK],
        student,
        now=fixed_now,
        order_number_factory=sequential_numbers,
    )
    assert [draft.order_type for draft in drafts] == ["regular", "pre-order"]
    regular, preorder = drafts
    assert regular.lines == (lines[0], lines[2])
    assert preorder.lines == (lines[1],)
    assert regular.order_number != preorder.order_number
    assert regular.created_at == fixed_now


def test_single_draft_when_everything_in_stock(student, fixed_now):
    drafts = build_order_drafts([make_line("Shorts", "S")], [IN_STOCK], student, now=fixed_now)
    assert len(drafts) == 1
    assert drafts[0].order_type == "regular"
    assert drafts[0].notes == "Order placed via cart checkout. 1 item(s) ordered."


def test_no_lines_no_drafts(student):
    assert build_order_drafts([], [], student) == []


def test_intent_override_for_single_item(student, fixed_now):
    line = make_line("Shorts", "S")
    drafts = build_order_drafts(
        [line], [IN_STOCK], student, intent_override="pre-order", source="direct", now=fixed_now
    )
    assert [draft.order_type for draft in drafts] == ["pre-order"]
    assert drafts[0].notes.startswith("Pre-order placed via direct checkout.")


def test_intent_override_ignored_for_multi_line_cart(student, fixed_now):
    lines = [make_line("Shorts", "S"), make_line("ID Lace (College)")]
    drafts = build_order_drafts(lines, [BACKORDER, BACKORDER], student, intent_override="regular", now=fixed_now)
    assert [draft.order_type for draft in drafts] == ["pre-order"]


def test_classification_count_must_match(student):
    with pytest.raises(ValueError):
        build_order_drafts([make_line("Shorts", "S")], [], student)


def test_receipt_covers_only_the_drafts_lines(student, fixed_now, sequential_numbers):
    lines = [make_line("Shorts", "S", education_level="Senior High School"), make_line("ID Lace (College)")]
    drafts = build_order_drafts(
        lines, [BACKORDER, IN_STOCK], student, now=fixed_now, order_number_factory=sequential_numbers
    )
    regular, preorder = drafts
    receipt = json.loads(preorder.receipt_payload)
    assert receipt["orderNumber"] == preorder.order_number
    assert receipt["orderType"] == "pre-order"
    assert receipt["items"] == [{"name": "Shorts", "quantity": 1, "size": "S"}]
    assert receipt["educationLevel"] == "Senior High School"
    assert preorder.education_level == "Senior High School"
    assert json.loads(regular.receipt_payload)["items"][0]["name"] == "ID Lace (College)"
