from typing import Any, List, Mapping

from .models import CartLine, StockClassification
from .stock import SizeLookup, classify_lines


def order_lines(order: Mapping[str, Any]) -> List[CartLine]:
    default_level = order.get("education_level") or "General"
    lines: List[CartLine] = []
    for item in order.get("items") or []:
        if not isinstance(item, Mapping) or not item.get("name"):
            continue
        try:
            quantity = max(1, int(item.get("quantity") or 1))
        except (TypeError, ValueError):
            quantity = 1
        lines.append(
            CartLine(
                product_name=str(item["name"]),
                size=item.get("size") or "N/A",
                education_level=item.get("education_level") or default_level,
                quantity=quantity,
                item_type=item.get("item_type") or "Uniform",
            )
        )
    return lines


async def check_preorder_availability(
    order: Mapping[str, Any], size_lookup: SizeLookup
) -> tuple[bool, List[StockClassification]]:
    """Report whether every line of a pre-order can now be fulfilled from stock."""
    if order.get("order_type") != "pre-order":
        return False, []
    lines = order_lines(order)
    if not lines:
        return False, []
    classifications = await classify_lines(lines, size_lookup)
    return all(item.is_fulfillable for item in classifications), classifications
