from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Literal, Optional, Tuple

StudentType = Literal["new", "old"]
OrderType = Literal["regular", "pre-order"]
Availability = Literal["fulfillable", "backorder"]
StockReason = Literal[
    "found-in-stock",
    "size-not-found",
    "zero-stock",
    "lookup-failed",
    "lookup-ambiguous",
]
ViolationReason = Literal[
    "claimed-max-reached",
    "exceeds-max",
    "already-placed",
    "slot-limit-reached",
    "slot-limit-exceeded",
]
GateState = Literal["ok", "empty-cart", "void-lockout", "limit-not-configured", "violations"]
CheckoutStatus = Literal["blocked", "submitted", "partial", "failed"]


@dataclass(frozen=True)
class StudentEligibility:
    student_type: StudentType = "new"
    per_key_override: Dict[str, int] = field(default_factory=dict)
    total_item_type_limit: Optional[int] = None

    @property
    def has_item_type_limit(self) -> bool:
        return self.total_item_type_limit is not None and self.total_item_type_limit > 0


@dataclass(frozen=True)
class UsageSnapshot:
    claimed: Dict[str, int] = field(default_factory=dict)
    placed_unclaimed: Dict[str, int] = field(default_factory=dict)
    distinct_types_in_placed_orders: int = 0
    blocked_due_to_void: bool = False


@dataclass(frozen=True)
class StudentContext:
    student_id: str
    name: str = ""
    email: str = ""
    education_level: str = "General"


@dataclass(frozen=True)
class CartLine:
    product_name: str
    size: Optional[str]
    education_level: str
    quantity: int
    unit_price: float = 0.0
    item_type: str = "Uniform"

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"Cart line quantity must be positive, got {self.quantity}")


@dataclass(frozen=True)
class Violation:
    key: str
    item_name: str
    reason: ViolationReason
    message: str
    limit: int


@dataclass(frozen=True)
class CheckoutGate:
    state: GateState
    violations: Tuple[Violation, ...] = ()
    message: str = ""

    @property
    def allowed(self) -> bool:
        return self.state == "ok"


@dataclass(frozen=True)
class StockClassification:
    availability: Availability
    reason: StockReason

    @property
    def is_fulfillable(self) -> bool:
        return self.availability == "fulfillable"


@dataclass(frozen=True)
class OrderDraft:
    order_number: str
    lines: Tuple[CartLine, ...]
    order_type: OrderType
    receipt_payload: str
    student_id: str
    education_level: str
    created_at: datetime
    notes: str = ""


@dataclass(frozen=True)
class FailedSubmission:
    draft: OrderDraft
    error: str


@dataclass
class SubmissionOutcome:
    created: List[OrderDraft] = field(default_factory=list)
    failed: List[FailedSubmission] = field(default_factory=list)
    order_ids: Dict[str, str] = field(default_factory=dict)

    @property
    def any_created(self) -> bool:
        return bool(self.created)


@dataclass
class CheckoutResult:
    status: CheckoutStatus
    gate: CheckoutGate
    classifications: List[StockClassification] = field(default_factory=list)
    drafts: List[OrderDraft] = field(default_factory=list)
    outcome: SubmissionOutcome = field(default_factory=SubmissionOutcome)
    cart_cleared: bool = False
    message: str = ""
