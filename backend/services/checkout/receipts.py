import json
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional, Sequence

from .constants import RECEIPT_TYPE, RECEIPT_VALID_DAYS
from .models import CartLine, StudentContext


def build_receipt_payload(
    order_number: str,
    student: StudentContext,
    lines: Sequence[CartLine],
    *,
    order_type: str,
    issued_at: datetime,
    valid_days: int = RECEIPT_VALID_DAYS,
) -> str:
    """Build the scannable confirmation payload for one order.

    The payload is derived only from the arguments, so the same draft always
    yields the same text.
    """
    if not order_number:
        raise ValueError("Order number is required for a receipt")
    if not lines:
        raise ValueError("A receipt needs at least one item")
    items = [
        {"name": line.product_name, "quantity": line.quantity, "size": line.size or "N/A"}
        for line in lines
    ]
    issued = issued_at.isoformat()
    payload = {
        "type": RECEIPT_TYPE,
        "orderNumber": order_number,
        "studentId": student.student_id,
        "studentName": student.name or "Unknown Student",
        "studentEmail": student.email,
        "items": items,
        "totalItems": len(items),
        "totalAmount": 0,
        "orderDate": issued,
        "educationLevel": student.education_level,
        "orderType": order_type,
        "status": "pending",
        "qrIssuedAt": issued,
        "qrValidDays": valid_days,
    }
    return json.dumps(payload, separators=(",", ":"))


def parse_receipt_payload(text: str) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    if data.get("type") != RECEIPT_TYPE or not data.get("orderNumber"):
        return None
    return data


def _is_weekday(day: date) -> bool:
    return day.weekday() < 5


def add_weekdays(start: date, count: int) -> date:
    current = start
    added = 0
    while added < count:
        current += timedelta(days=1)
        if _is_weekday(current):
            added += 1
    return current


def _count_weekdays(start: date, end: date) -> int:
    if start > end:
        return 0
    count = 0
    current = start
    while current <= end:
        if _is_weekday(current):
            count += 1
        current += timedelta(days=1)
    return count


def remaining_validity_days(
    issued_at: Optional[datetime],
    today: date,
    valid_days: int = RECEIPT_VALID_DAYS,
) -> Optional[int]:
    """Weekdays left before a receipt expires: 0 on the last day, negative once expired."""
    if issued_at is None:
        return None
    expiry = add_weekdays(issued_at.date(), valid_days)
    if today > expiry:
        return -max(1, _count_weekdays(expiry, today))
    if today == expiry:
        return 0
    return _count_weekdays(today, expiry)
