from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from auth import get_current_student_id
from schemas import (
    CheckoutGateResponse,
    CheckoutLimitsResponse,
    CheckoutRequest,
    CheckoutResponse,
    ValidateCartRequest,
)
from services import checkout_service, eligibility_service

router = APIRouter(prefix="/api/checkout", tags=["checkout"])

RESULT_STATUS_CODES = {
    "blocked": status.HTTP_409_CONFLICT,
    "submitted": status.HTTP_201_CREATED,
    "partial": status.HTTP_207_MULTI_STATUS,
    "failed": status.HTTP_502_BAD_GATEWAY,
}


@router.get("/limits", response_model=CheckoutLimitsResponse)
async def read_checkout_limits(
    student_id: str = Depends(get_current_student_id),
) -> CheckoutLimitsResponse:
    return await eligibility_service.get_checkout_limits(student_id)


@router.post("/validate", response_model=CheckoutGateResponse)
async def validate_cart(
    payload: ValidateCartRequest,
    student_id: str = Depends(get_current_student_id),
) -> CheckoutGateResponse:
    return await checkout_service.validate_checkout(student_id, payload.lines)


@router.post(
    "",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_207_MULTI_STATUS: {"model": CheckoutResponse},
        status.HTTP_409_CONFLICT: {"model": CheckoutGateResponse},
        status.HTTP_502_BAD_GATEWAY: {"model": CheckoutResponse},
    },
)
async def create_checkout(
    payload: CheckoutRequest,
    student_id: str = Depends(get_current_student_id),
):
    result = await checkout_service.checkout(student_id, payload)
    if result.status == "blocked":
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=result.gate.model_dump(),
        )
    return JSONResponse(
        status_code=RESULT_STATUS_CODES[result.status],
        content=result.model_dump(mode="json"),
    )
