import asyncio
from typing import Any, Dict, Optional, Tuple

from repositories.orders_repository import fetch_student_orders
from repositories.students_repository import fetch_student_profile
from schemas import CheckoutLimitsResponse, ItemLimit
from services.checkout import (
    StudentContext,
    StudentEligibility,
    UsageSnapshot,
    build_eligibility,
    effective_max,
    load_eligibility,
    remaining_allowance,
    slots_left,
    summarize_order_history,
)
from services.checkout.constants import ALIAS_TABLE_VERSION


async def load_student_profile(student_id: str) -> Dict[str, Any]:
    return await asyncio.to_thread(fetch_student_profile, student_id) or {}


def student_context(student_id: str, profile: Dict[str, Any]) -> StudentContext:
    return StudentContext(
        student_id=student_id,
        name=profile.get("name") or "",
        email=profile.get("email") or "",
        education_level=profile.get("education_level") or "General",
    )


async def fetch_eligibility(
    student_id: str, profile: Optional[Dict[str, Any]] = None
) -> Tuple[StudentEligibility, UsageSnapshot]:
    """Build eligibility and usage, reusing ``profile`` when the caller already loaded it."""
    if profile is None:
        profile, orders = await asyncio.gather(
            load_student_profile(student_id),
            asyncio.to_thread(fetch_student_orders, student_id),
        )
    else:
        orders = await asyncio.to_thread(fetch_student_orders, student_id)
    return build_eligibility(profile), summarize_order_history(orders)


async def get_checkout_limits(student_id: str) -> CheckoutLimitsResponse:
    eligibility, usage = await load_eligibility(fetch_eligibility, student_id)
    keys = sorted(
        set(eligibility.per_key_override) | set(usage.claimed) | set(usage.placed_unclaimed)
    )
    items = [
        ItemLimit(
            key=key,
            max=effective_max(key, eligibility),
            claimed=usage.claimed.get(key, 0),
            placed_unclaimed=usage.placed_unclaimed.get(key, 0),
            remaining=remaining_allowance(key, eligibility, usage),
        )
        for key in keys
    ]
    return CheckoutLimitsResponse(
        student_type=eligibility.student_type,
        items=items,
        total_item_limit=eligibility.total_item_type_limit,
        slots_used=usage.distinct_types_in_placed_orders,
        slots_left=slots_left(eligibility, usage),
        blocked_due_to_void=usage.blocked_due_to_void,
        alias_table_version=ALIAS_TABLE_VERSION,
    )
