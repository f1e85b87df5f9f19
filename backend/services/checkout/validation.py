from typing import Dict, List, Sequence, Tuple

from .constants import SLOT_LIMIT_KEY
from .entitlements import effective_max, slots_left
from .keys import resolve_item_key
from .models import CartLine, CheckoutGate, StudentEligibility, UsageSnapshot, Violation

VOID_LOCKOUT_MESSAGE = (
    "You cannot place new orders because a previous order was not claimed in time "
    "and was voided. Contact your administrator if you need assistance."
)
LIMIT_NOT_CONFIGURED_MESSAGE = (
    "No total item limit is configured for this student. An administrator must set "
    "the student's order limit before checkout is possible."
)
EMPTY_CART_MESSAGE = "Your cart is empty."


def _group_cart(lines: Sequence[CartLine]) -> Dict[str, Tuple[str, int]]:
    grouped: Dict[str, Tuple[str, int]] = {}
    for line in lines:
        key = resolve_item_key(line.product_name)
        name, quantity = grouped.get(key, (line.product_name, 0))
        grouped[key] = (name, quantity + line.quantity)
    return grouped


def _item_violation(
    key: str,
    name: str,
    cart_qty: int,
    eligibility: StudentEligibility,
    usage: UsageSnapshot,
) -> Violation | None:
    max_allowed = effective_max(key, eligibility)
    claimed = usage.claimed.get(key, 0)
    if max_allowed > 0 and claimed >= max_allowed:
        return Violation(
            key=key,
            item_name=name,
            reason="claimed-max-reached",
            message=(
                f"You have already claimed the maximum allowed quantity for {name}. "
                "Remove it from your cart."
            ),
            limit=max_allowed,
        )
    if claimed + cart_qty > max_allowed:
        if max_allowed == 0:
            message = f"{name} is not available for your account."
        else:
            message = (
                f"{name}: at most {max_allowed} allowed; {claimed} already claimed "
                f"and {cart_qty} in your cart."
            )
        return Violation(
            key=key, item_name=name, reason="exceeds-max", message=message, limit=max_allowed
        )
    # Multi-unit items may be reordered up to the max regardless of unclaimed orders.
    if max_allowed == 1 and usage.placed_unclaimed.get(key, 0) + cart_qty > max_allowed:
        return Violation(
            key=key,
            item_name=name,
            reason="already-placed",
            message=f"You already have an unclaimed order for {name}. Claim it before ordering again.",
            limit=max_allowed,
        )
    return None


def _slot_violation(
    distinct_keys: int, eligibility: StudentEligibility, usage: UsageSnapshot
) -> Violation | None:
    if not eligibility.has_item_type_limit:
        return None
    limit = eligibility.total_item_type_limit
    used = usage.distinct_types_in_placed_orders
    if used >= limit:
        return Violation(
            key=SLOT_LIMIT_KEY,
            item_name="",
            reason="slot-limit-reached",
            message=f"You have already reached your limit of {limit} item types.",
            limit=limit,
        )
    left = slots_left(eligibility, usage)
    if distinct_keys > left:
        plural = "s" if left != 1 else ""
        return Violation(
            key=SLOT_LIMIT_KEY,
            item_name="",
            reason="slot-limit-exceeded",
            message=(
                f"You have {left} item type{plural} left for this order (max {limit} total; "
                f"{used} already in placed orders). Your cart has {distinct_keys}. "
                "Remove some item types to proceed."
            ),
            limit=limit,
        )
    return None


def validate_cart(
    lines: Sequence[CartLine],
    eligibility: StudentEligibility,
    usage: UsageSnapshot,
) -> List[Violation]:
    violations: List[Violation] = []
    grouped = _group_cart(lines)
    for key, (name, cart_qty) in grouped.items():
        violation = _item_violation(key, name, cart_qty, eligibility, usage)
        if violation:
            violations.append(violation)
    slot_violation = _slot_violation(len(grouped), eligibility, usage)
    if slot_violation:
        violations.append(slot_violation)
    return violations


def evaluate_checkout_gate(
    lines: Sequence[CartLine],
    eligibility: StudentEligibility,
    usage: UsageSnapshot,
) -> CheckoutGate:
    if not lines:
        return CheckoutGate(state="empty-cart", message=EMPTY_CART_MESSAGE)
    if usage.blocked_due_to_void:
        return CheckoutGate(state="void-lockout", message=VOID_LOCKOUT_MESSAGE)
    violations = tuple(validate_cart(lines, eligibility, usage))
    if not eligibility.has_item_type_limit:
        return CheckoutGate(
            state="limit-not-configured",
            violations=violations,
            message=LIMIT_NOT_CONFIGURED_MESSAGE,
        )
    if violations:
        return CheckoutGate(
            state="violations",
            violations=violations,
            message=" ".join(violation.message for violation in violations),
        )
    return CheckoutGate(state="ok")
