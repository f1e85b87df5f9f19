import asyncio
import logging
import re
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Sequence

from .constants import OUT_OF_STOCK_STATUSES
from .models import CartLine, StockClassification, StockReason

logger = logging.getLogger("uniform-orders")

SizeLookup = Callable[[str, str], Awaitable[Any]]

_PARENTHETICAL = re.compile(r"\([^)]*\)")
_WHITESPACE = re.compile(r"\s+")

FULFILLABLE = StockClassification("fulfillable", "found-in-stock")


def normalize_size(size: Optional[str]) -> str:
    text = _PARENTHETICAL.sub(" ", size or "")
    return _WHITESPACE.sub(" ", text).strip().lower()


def requires_size(line: CartLine) -> bool:
    if "uniform" not in (line.item_type or "").lower():
        return False
    size = (line.size or "").strip()
    return bool(size) and size.upper() != "N/A"


def _backorder(line: CartLine, reason: StockReason) -> StockClassification:
    logger.warning(
        "Routing line to backorder product=%s size=%s level=%s reason=%s",
        line.product_name,
        line.size,
        line.education_level,
        reason,
    )
    return StockClassification("backorder", reason)


def _parse_stock(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _is_out_of_stock_status(value: Any) -> bool:
    return str(value or "").strip().lower() in OUT_OF_STOCK_STATUSES


def _validated_entries(payload: Any) -> Optional[List[Mapping[str, Any]]]:
    if not isinstance(payload, list):
        return None
    if not all(isinstance(entry, Mapping) for entry in payload):
        return None
    if any(_parse_stock(entry.get("stock")) is None for entry in payload):
        return None
    return payload


def _classify_sizeless(line: CartLine, entries: Sequence[Mapping[str, Any]]) -> StockClassification:
    if not entries:
        return _backorder(line, "lookup-ambiguous")
    total = sum(_parse_stock(entry.get("stock")) for entry in entries)
    if total <= 0 or any(_is_out_of_stock_status(entry.get("status")) for entry in entries):
        return _backorder(line, "zero-stock")
    return FULFILLABLE


def _classify_sized(line: CartLine, entries: Sequence[Mapping[str, Any]]) -> StockClassification:
    wanted = normalize_size(line.size)
    # Exact match only: "small" must never match "xsmall".
    matches = [entry for entry in entries if normalize_size(entry.get("size")) == wanted]
    if not matches:
        return _backorder(line, "size-not-found")
    if len(matches) > 1:
        return _backorder(line, "lookup-ambiguous")
    if _parse_stock(matches[0].get("stock")) <= 0:
        return _backorder(line, "zero-stock")
    return FULFILLABLE


async def classify_line(line: CartLine, lookup: SizeLookup) -> StockClassification:
    try:
        payload = await lookup(line.product_name, line.education_level)
    except Exception as exc:
        logger.warning("Stock lookup failed product=%s err=%s", line.product_name, exc)
        return _backorder(line, "lookup-failed")
    entries = _validated_entries(payload)
    if entries is None:
        return _backorder(line, "lookup-failed")
    if requires_size(line):
        return _classify_sized(line, entries)
    return _classify_sizeless(line, entries)


async def classify_lines(
    lines: Sequence[CartLine], lookup: SizeLookup
) -> List[StockClassification]:
    """Classify every line concurrently; results keep the order of ``lines``."""
    return list(await asyncio.gather(*(classify_line(line, lookup) for line in lines)))
