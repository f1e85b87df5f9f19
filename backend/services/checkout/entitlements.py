import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, Mapping, Optional

from .constants import (
    CLAIMED_ORDER_STATUSES,
    DEFAULT_MAX_PER_KEY,
    LOGO_PATCH_DEFAULT_MAX,
    LOGO_PATCH_KEY,
    UNCLAIMED_ORDER_STATUSES,
    VOIDED_ORDER_STATUS,
)
from .keys import resolve_item_key
from .models import StudentEligibility, UsageSnapshot

logger = logging.getLogger("uniform-orders")


def default_max_for_key(key: str) -> int:
    if key == LOGO_PATCH_KEY:
        return LOGO_PATCH_DEFAULT_MAX
    return DEFAULT_MAX_PER_KEY


def effective_max(key: str, eligibility: StudentEligibility) -> int:
    """Resolve how many units of ``key`` the student may hold in total.

    An administrator override always wins, including an explicit 0. Without
    one, new students get the per-key default while old students are blocked
    from everything except the logo patch.
    """
    if key in eligibility.per_key_override:
        return eligibility.per_key_override[key]
    if eligibility.student_type == "old":
        return LOGO_PATCH_DEFAULT_MAX if key == LOGO_PATCH_KEY else 0
    return default_max_for_key(key)


def remaining_allowance(key: str, eligibility: StudentEligibility, usage: UsageSnapshot) -> int:
    max_allowed = effective_max(key, eligibility)
    used = usage.claimed.get(key, 0)
    # Single-use items also count orders that are placed but not yet claimed.
    if max_allowed == 1:
        used += usage.placed_unclaimed.get(key, 0)
    return max(0, max_allowed - used)


def slots_left(eligibility: StudentEligibility, usage: UsageSnapshot) -> int:
    if not eligibility.has_item_type_limit:
        return 0
    return max(0, eligibility.total_item_type_limit - usage.distinct_types_in_placed_orders)


def _parse_count(value: Any) -> Optional[int]:
    try:
        if value is None or value == "":
            return None
        count = int(value)
    except (TypeError, ValueError):
        return None
    return count if count >= 0 else None


def _normalize_student_type(value: Any) -> str:
    return "old" if str(value or "").strip().lower() == "old" else "new"


def build_eligibility(profile: Mapping[str, Any]) -> StudentEligibility:
    overrides: Dict[str, int] = {}
    raw_overrides = profile.get("item_max_quantities") or {}
    if isinstance(raw_overrides, Mapping):
        for name, value in raw_overrides.items():
            count = _parse_count(value)
            if count is None:
                logger.warning("Ignoring invalid item limit name=%s value=%r", name, value)
                continue
            overrides[resolve_item_key(name)] = count
    limit = _parse_count(profile.get("max_items_per_order"))
    return StudentEligibility(
        student_type=_normalize_student_type(profile.get("student_type")),
        per_key_override=overrides,
        total_item_type_limit=limit,
    )


def _order_items(order: Mapping[str, Any]) -> Iterable[Mapping[str, Any]]:
    items = order.get("items")
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, Mapping)]


def summarize_order_history(orders: Iterable[Mapping[str, Any]]) -> UsageSnapshot:
    claimed: Dict[str, int] = defaultdict(int)
    placed: Dict[str, int] = defaultdict(int)
    keys_in_orders = set()
    blocked = False
    for order in orders:
        status = str(order.get("status") or "").strip().lower()
        if status == VOIDED_ORDER_STATUS:
            blocked = True
            continue
        if status in CLAIMED_ORDER_STATUSES:
            bucket = claimed
        elif status in UNCLAIMED_ORDER_STATUSES:
            bucket = placed
        else:
            continue
        for item in _order_items(order):
            name = item.get("name")
            if not name:
                continue
            key = resolve_item_key(name)
            quantity = _parse_count(item.get("quantity"))
            bucket[key] += 1 if quantity is None else quantity
            keys_in_orders.add(key)
    return UsageSnapshot(
        claimed=dict(claimed),
        placed_unclaimed=dict(placed),
        distinct_types_in_placed_orders=len(keys_in_orders),
        blocked_due_to_void=blocked,
    )
