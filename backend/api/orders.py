from fastapi import APIRouter, Depends, HTTPException, status

from auth import get_current_student_id
from schemas import PreOrderAvailabilityResponse, ReceiptVerifyRequest, ReceiptVerifyResponse
from services import orders_service

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("/{order_id}/availability", response_model=PreOrderAvailabilityResponse)
async def read_preorder_availability(
    order_id: str,
    student_id: str = Depends(get_current_student_id),
) -> PreOrderAvailabilityResponse:
    availability = await orders_service.get_preorder_availability(student_id, order_id)
    if availability is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return availability


@router.post(
    "/receipts/verify",
    response_model=ReceiptVerifyResponse,
    dependencies=[Depends(get_current_student_id)],
)
async def verify_receipt(payload: ReceiptVerifyRequest) -> ReceiptVerifyResponse:
    return orders_service.verify_receipt(payload.qr_code_data)
