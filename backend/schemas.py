from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, StringConstraints

ProductName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CartLineIn(BaseModel):
    product_name: ProductName = Field(..., description="Item display name")
    size: Optional[str] = Field(default=None, description="Selected size, N/A for sizeless items")
    education_level: str = Field(default="General")
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(default=0.0, ge=0)
    item_type: str = Field(default="Uniform")


class CheckoutRequest(BaseModel):
    lines: List[CartLineIn]
    source: Literal["cart", "direct"] = Field(
        default="cart", description="cart checkout or single-item buy now"
    )
    intent: Optional[Literal["regular", "pre-order"]] = Field(
        default=None, description="Order type chosen by the student for a buy now item"
    )


class ValidateCartRequest(BaseModel):
    lines: List[CartLineIn]


class ViolationOut(BaseModel):
    key: str
    item_name: str
    reason: str
    message: str
    limit: int


class CheckoutGateResponse(BaseModel):
    allowed: bool
    state: str
    message: str
    violations: List[ViolationOut] = []


class ItemLimit(BaseModel):
    key: str
    max: int
    claimed: int
    placed_unclaimed: int
    remaining: int


class CheckoutLimitsResponse(BaseModel):
    student_type: str
    items: List[ItemLimit]
    total_item_limit: Optional[int]
    slots_used: int
    slots_left: int
    blocked_due_to_void: bool
    alias_table_version: str


class LineClassification(BaseModel):
    product_name: str
    size: Optional[str]
    availability: str
    reason: str


class CreatedOrder(BaseModel):
    id: Optional[str]
    order_number: str
    order_type: str
    item_count: int
    qr_code_data: str


class FailedOrder(BaseModel):
    order_number: str
    order_type: str
    error: str


class CheckoutResponse(BaseModel):
    status: str
    message: str
    gate: CheckoutGateResponse
    classifications: List[LineClassification] = []
    created: List[CreatedOrder] = []
    failed: List[FailedOrder] = []
    cart_cleared: bool = False


class PreOrderAvailabilityResponse(BaseModel):
    order_id: str
    convertible: bool
    lines: List[LineClassification]
    checked_at: datetime


class ReceiptVerifyRequest(BaseModel):
    qr_code_data: str


class ReceiptVerifyResponse(BaseModel):
    valid: bool
    order_number: Optional[str] = None
    student_id: Optional[str] = None
    remaining_validity_days: Optional[int] = None
    items: List[Dict[str, Any]] = []
