"""
Entitlement checks and fulfillment routing for student uniform checkout.
Callers outside this package go through services.checkout_service.
"""

from .builder import build_order_drafts, generate_order_number
from .entitlements import (
    build_eligibility,
    default_max_for_key,
    effective_max,
    remaining_allowance,
    slots_left,
    summarize_order_history,
)
from .keys import normalize_item_name, resolve_item_key
from .models import (
    CartLine,
    CheckoutGate,
    CheckoutResult,
    OrderDraft,
    StockClassification,
    StudentContext,
    StudentEligibility,
    SubmissionOutcome,
    UsageSnapshot,
    Violation,
)
from .pipeline import load_eligibility, run_checkout
from .preorders import check_preorder_availability
from .stock import classify_line, classify_lines, normalize_size
from .submission import outcome_message, submit_drafts
from .validation import evaluate_checkout_gate, validate_cart

__all__ = [
    "CartLine",
    "CheckoutGate",
    "CheckoutResult",
    "OrderDraft",
    "StockClassification",
    "StudentContext",
    "StudentEligibility",
    "SubmissionOutcome",
    "UsageSnapshot",
    "Violation",
    "build_eligibility",
    "build_order_drafts",
    "check_preorder_availability",
    "classify_line",
    "classify_lines",
    "default_max_for_key",
    "effective_max",
    "evaluate_checkout_gate",
    "generate_order_number",
    "load_eligibility",
    "normalize_item_name",
    "normalize_size",
    "outcome_message",
    "remaining_allowance",
    "resolve_item_key",
    "run_checkout",
    "slots_left",
    "submit_drafts",
    "summarize_order_history",
    "validate_cart",
]
