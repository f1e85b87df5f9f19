import asyncio
import logging
from functools import partial
from typing import Any, Dict, List

from config import settings
from repositories.cart_repository import clear_cart as repo_clear_cart
from repositories.inventory_repository import fetch_available_sizes
from repositories.orders_repository import find_order_by_number, insert_order
from schemas import (
    CartLineIn,
    CheckoutGateResponse,
    CheckoutRequest,
    CheckoutResponse,
    CreatedOrder,
    FailedOrder,
    LineClassification,
    ViolationOut,
)
from services.checkout import (
    CartLine,
    CheckoutGate,
    CheckoutResult,
    OrderDraft,
    StockClassification,
    StudentContext,
    evaluate_checkout_gate,
    generate_order_number,
    load_eligibility,
    run_checkout,
)
from services.eligibility_service import fetch_eligibility, load_student_profile, student_context

logger = logging.getLogger("uniform-orders")


def _to_cart_line(line: CartLineIn) -> CartLine:
    return CartLine(
        product_name=line.product_name,
        size=line.size,
        education_level=line.education_level,
        quantity=line.quantity,
        unit_price=line.unit_price,
        item_type=line.item_type,
    )


async def lookup_available_sizes(product_name: str, education_level: str) -> List[Dict[str, Any]]:
    return await asyncio.wait_for(
        asyncio.to_thread(fetch_available_sizes, product_name, education_level),
        timeout=settings.stock_lookup_timeout_seconds,
    )


def draft_to_record(draft: OrderDraft, student: StudentContext) -> Dict[str, Any]:
    return {
        "order_number": draft.order_number,
        "student_id": draft.student_id,
        "student_name": student.name or student.email,
        "student_email": student.email,
        "education_level": draft.education_level,
        "items": [
            {
                "name": line.product_name,
                "size": line.size or "N/A",
                "quantity": line.quantity,
                "item_type": line.item_type,
                "education_level": line.education_level,
            }
            for line in draft.lines
        ],
        "total_amount": 0,
        "status": "pending",
        "order_type": draft.order_type,
        "qr_code_data": draft.receipt_payload,
        "notes": draft.notes,
    }


def _persist_order(record: Dict[str, Any]) -> Dict[str, Any]:
    existing = find_order_by_number(record["order_number"])
    if existing:
        logger.info("Order %s already stored; skipping insert", record["order_number"])
        return existing
    return insert_order(record)


async def _create_order(student: StudentContext, draft: OrderDraft) -> Dict[str, Any]:
    return await asyncio.to_thread(_persist_order, draft_to_record(draft, student))


async def _clear_cart(student_id: str) -> None:
    await asyncio.to_thread(repo_clear_cart, student_id)


def _format_gate(gate: CheckoutGate) -> CheckoutGateResponse:
    return CheckoutGateResponse(
        allowed=gate.allowed,
        state=gate.state,
        message=gate.message,
        violations=[
            ViolationOut(
                key=violation.key,
                item_name=violation.item_name,
                reason=violation.reason,
                message=violation.message,
                limit=violation.limit,
            )
            for violation in gate.violations
        ],
    )


def format_classifications(
    lines: List[CartLine], classifications: List[StockClassification]
) -> List[LineClassification]:
    return [
        LineClassification(
            product_name=line.product_name,
            size=line.size,
            availability=classification.availability,
            reason=classification.reason,
        )
        for line, classification in zip(lines, classifications)
    ]


def _format_result(lines: List[CartLine], result: CheckoutResult) -> CheckoutResponse:
    outcome = result.outcome
    return CheckoutResponse(
        status=result.status,
        message=result.message,
        gate=_format_gate(result.gate),
        classifications=format_classifications(lines, result.classifications),
        created=[
            CreatedOrder(
                id=outcome.order_ids.get(draft.order_number),
                order_number=draft.order_number,
                order_type=draft.order_type,
                item_count=len(draft.lines),
                qr_code_data=draft.receipt_payload,
            )
            for draft in outcome.created
        ],
        failed=[
            FailedOrder(
                order_number=failure.draft.order_number,
                order_type=failure.draft.order_type,
                error=failure.error,
            )
            for failure in outcome.failed
        ],
        cart_cleared=result.cart_cleared,
    )


async def validate_checkout(student_id: str, lines: List[CartLineIn]) -> CheckoutGateResponse:
    eligibility, usage = await load_eligibility(fetch_eligibility, student_id)
    gate = evaluate_checkout_gate([_to_cart_line(line) for line in lines], eligibility, usage)
    return _format_gate(gate)


async def checkout(student_id: str, payload: CheckoutRequest) -> CheckoutResponse:
    profile = await load_student_profile(student_id)
    student = student_context(student_id, profile)
    lines = [_to_cart_line(line) for line in payload.lines]
    result = await run_checkout(
        student,
        lines,
        eligibility_lookup=partial(fetch_eligibility, profile=profile),
        size_lookup=lookup_available_sizes,
        create_order=partial(_create_order, student),
        clear_cart=_clear_cart if payload.source == "cart" else None,
        intent=payload.intent,
        source=payload.source,
        order_number_factory=partial(
            generate_order_number, prefix=settings.order_number_prefix
        ),
        receipt_valid_days=settings.receipt_valid_days,
    )
    return _format_result(lines, result)
