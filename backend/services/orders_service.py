import asyncio
from datetime import date, datetime, timezone
from typing import Any, Optional

from config import settings
from repositories.orders_repository import fetch_order as repo_fetch_order
from schemas import PreOrderAvailabilityResponse, ReceiptVerifyResponse
from services.checkout import check_preorder_availability
from services.checkout.preorders import order_lines
from services.checkout.receipts import parse_receipt_payload, remaining_validity_days
from services.checkout_service import format_classifications, lookup_available_sizes


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _parse_int(value: Any) -> Optional[int]:
    try:
        if value is None or value == "":
            return None
        return int(value)
    except (TypeError, ValueError):
        return None


async def get_preorder_availability(
    student_id: str, order_id: str
) -> Optional[PreOrderAvailabilityResponse]:
    order = await asyncio.to_thread(repo_fetch_order, student_id, order_id)
    if not order:
        return None
    convertible, classifications = await check_preorder_availability(
        order, lookup_available_sizes
    )
    return PreOrderAvailabilityResponse(
        order_id=order_id,
        convertible=convertible,
        lines=format_classifications(order_lines(order), classifications),
        checked_at=datetime.now(timezone.utc),
    )


def verify_receipt(text: str, today: Optional[date] = None) -> ReceiptVerifyResponse:
    payload = parse_receipt_payload(text)
    if payload is None:
        return ReceiptVerifyResponse(valid=False)
    valid_days = _parse_int(payload.get("qrValidDays"))
    remaining = remaining_validity_days(
        _parse_datetime(payload.get("qrIssuedAt")),
        today or date.today(),
        settings.receipt_valid_days if valid_days is None else valid_days,
    )
    items = payload.get("items")
    return ReceiptVerifyResponse(
        valid=remaining is not None and remaining >= 0,
        order_number=payload.get("orderNumber"),
        student_id=payload.get("studentId"),
        remaining_validity_days=remaining,
        items=[item for item in items if isinstance(item, dict)] if isinstance(items, list) else [],
    )
