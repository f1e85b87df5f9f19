import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional, Sequence, Tuple

from .builder import build_order_drafts, generate_order_number
from .constants import RECEIPT_VALID_DAYS
from .models import (
    CartLine,
    CheckoutGate,
    CheckoutResult,
    OrderType,
    StudentContext,
    StudentEligibility,
    UsageSnapshot,
)
from .stock import SizeLookup, classify_lines
from .submission import OrderSink, outcome_message, submit_drafts
from .validation import VOID_LOCKOUT_MESSAGE, evaluate_checkout_gate

logger = logging.getLogger("uniform-orders")

EligibilityLookup = Callable[[str], Awaitable[Tuple[StudentEligibility, UsageSnapshot]]]
CartClearer = Callable[[str], Awaitable[None]]


async def load_eligibility(
    lookup: EligibilityLookup, student_id: str
) -> Tuple[StudentEligibility, UsageSnapshot]:
    """Fetch eligibility and usage, falling back to no entitlement on any error."""
    try:
        return await lookup(student_id)
    except Exception as exc:
        logger.warning("Eligibility lookup failed student=%s err=%s; failing closed", student_id, exc)
        return StudentEligibility(), UsageSnapshot()


async def _clear_cart(clear_cart: CartClearer, student_id: str) -> bool:
    try:
        await clear_cart(student_id)
    except Exception:
        logger.exception("Clearing cart failed after checkout student=%s", student_id)
        return False
    return True


async def run_checkout(
    student: StudentContext,
    lines: Sequence[CartLine],
    *,
    eligibility_lookup: EligibilityLookup,
    size_lookup: SizeLookup,
    create_order: OrderSink,
    clear_cart: Optional[CartClearer] = None,
    intent: Optional[OrderType] = None,
    source: str = "cart",
    now: Optional[datetime] = None,
    order_number_factory: Callable[[datetime], str] = generate_order_number,
    receipt_valid_days: int = RECEIPT_VALID_DAYS,
) -> CheckoutResult:
    eligibility, usage = await load_eligibility(eligibility_lookup, student.student_id)

    if usage.blocked_due_to_void:
        gate = CheckoutGate(state="void-lockout", message=VOID_LOCKOUT_MESSAGE)
        logger.info("Checkout blocked by void lockout student=%s", student.student_id)
        return CheckoutResult(status="blocked", gate=gate, message=gate.message)

    gate = evaluate_checkout_gate(lines, eligibility, usage)
    if not gate.allowed:
        logger.info("Checkout blocked student=%s state=%s", student.student_id, gate.state)
        return CheckoutResult(status="blocked", gate=gate, message=gate.message)

    classifications = await classify_lines(lines, size_lookup)
    drafts = build_order_drafts(
        lines,
        classifications,
        student,
        intent_override=intent if source == "direct" else None,
        source=source,
        now=now,
        order_number_factory=order_number_factory,
        receipt_valid_days=receipt_valid_days,
    )
    outcome = await submit_drafts(drafts, create_order)

    cart_cleared = False
    if outcome.any_created and clear_cart is not None:
        cart_cleared = await _clear_cart(clear_cart, student.student_id)

    if not outcome.failed:
        status = "submitted"
    elif outcome.any_created:
        status = "partial"
    else:
        status = "failed"
    logger.info(
        "Checkout finished student=%s status=%s created=%d failed=%d",
        student.student_id,
        status,
        len(outcome.created),
        len(outcome.failed),
    )
    return CheckoutResult(
        status=status,
        gate=gate,
        classifications=classifications,
        drafts=drafts,
        outcome=outcome,
        cart_cleared=cart_cleared,
        message=outcome_message(outcome),
    )
