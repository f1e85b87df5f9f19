from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence
from uuid import uuid4

from .constants import RECEIPT_VALID_DAYS
from .models import CartLine, OrderDraft, OrderType, StockClassification, StudentContext
from .receipts import build_receipt_payload

ORDER_TYPE_SEQUENCE: Sequence[OrderType] = ("regular", "pre-order")


def generate_order_number(now: Optional[datetime] = None, prefix: str = "ORD") -> str:
    moment = now or datetime.now(timezone.utc)
    return f"{prefix}-{moment:%Y%m%d}-{uuid4().hex[:12].upper()}"


def _draft_notes(order_type: OrderType, lines: Sequence[CartLine], source: str) -> str:
    label = "Pre-order" if order_type == "pre-order" else "Order"
    return f"{label} placed via {source} checkout. {len(lines)} item(s) ordered."


def _partition(
    lines: Sequence[CartLine],
    classifications: Sequence[StockClassification],
    intent_override: Optional[OrderType],
) -> Dict[str, List[CartLine]]:
    if len(lines) != len(classifications):
        raise ValueError("Every cart line needs exactly one stock classification")
    groups: Dict[str, List[CartLine]] = {order_type: [] for order_type in ORDER_TYPE_SEQUENCE}
    if intent_override is not None and len(lines) == 1:
        groups[intent_override].append(lines[0])
        return groups
    for line, classification in zip(lines, classifications):
        order_type = "regular" if classification.is_fulfillable else "pre-order"
        groups[order_type].append(line)
    return groups


def build_order_drafts(
    lines: Sequence[CartLine],
    classifications: Sequence[StockClassification],
    student: StudentContext,
    *,
    intent_override: Optional[OrderType] = None,
    source: str = "cart",
    now: Optional[datetime] = None,
    order_number_factory: Callable[[datetime], str] = generate_order_number,
    receipt_valid_days: int = RECEIPT_VALID_DAYS,
) -> List[OrderDraft]:
    """Split classified lines into at most one regular and one pre-order draft.

    An explicit intent from a single-item "buy now" replaces the computed
    classification; it is ignored for multi-line carts.
    """
    created_at = now or datetime.now(timezone.utc)
    groups = _partition(lines, classifications, intent_override)
    drafts: List[OrderDraft] = []
    for order_type in ORDER_TYPE_SEQUENCE:
        group = tuple(groups[order_type])
        if not group:
            continue
        order_number = order_number_factory(created_at)
        education_level = group[0].education_level or student.education_level
        receipt = build_receipt_payload(
            order_number,
            replace(student, education_level=education_level),
            group,
            order_type=order_type,
            issued_at=created_at,
            valid_days=receipt_valid_days,
        )
        drafts.append(
            OrderDraft(
                order_number=order_number,
                lines=group,
                order_type=order_type,
                receipt_payload=receipt,
                student_id=student.student_id,
                education_level=education_level,
                created_at=created_at,
                notes=_draft_notes(order_type, group, source),
            )
        )
    return drafts
