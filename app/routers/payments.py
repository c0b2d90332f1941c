"""
Payment API endpoints for the per-sale payment ledger.
"""

from fastapi import APIRouter, Depends, status, Path
from typing import List
from uuid import UUID

from app.services.authorization import Actor
from app.services.payment import PaymentService
from app.schemas.property import MessageResponse
from app.schemas.payment import (
    PaymentCreate,
    PaymentStatusUpdate,
    PaymentResponse,
    PaymentCreatedResponse
)
from app.schemas.error import error_responses
from app.utils.dependencies import get_current_actor, get_payment_service


router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get(
    "/sale/{sale_id}",
    response_model=List[PaymentResponse],
    summary="List payments of a sale",
    description="Payments of a sale, most recent first. Sale participants and admins only.",
    responses=error_responses(401, 403, 404)
)
async def list_sale_payments(
    sale_id: UUID = Path(..., description="Sale ID"),
    actor: Actor = Depends(get_current_actor),
    payment_service: PaymentService = Depends(get_payment_service)
) -> List[PaymentResponse]:
    payments = await payment_service.list_sale_payments(sale_id, actor)
    return [PaymentResponse.model_validate(p.to_dict()) for p in payments]


@router.post(
    "",
    response_model=PaymentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a payment",
    responses=error_responses(401, 403, 404, 422)
)
async def create_payment(
    payment_data: PaymentCreate,
    actor: Actor = Depends(get_current_actor),
    payment_service: PaymentService = Depends(get_payment_service)
) -> PaymentCreatedResponse:
    payment = await payment_service.create_payment(payment_data, actor)
    return PaymentCreatedResponse(message="Payment created successfully", payment_id=str(payment.id))


@router.put(
    "/{payment_id}",
    response_model=MessageResponse,
    summary="Update payment status",
    description="Set the status of a payment. Admin only.",
    responses=error_responses(401, 403, 422)
)
async def update_payment_status(
    payment_data: PaymentStatusUpdate,
    payment_id: UUID = Path(..., description="Payment ID"),
    actor: Actor = Depends(get_current_actor),
    payment_service: PaymentService = Depends(get_payment_service)
) -> MessageResponse:
    await payment_service.update_payment_status(
        payment_id,
        payment_data.status,
        payment_data.notes,
        actor
    )
    return MessageResponse(message="Payment updated successfully")


@router.get(
    "",
    response_model=List[PaymentResponse],
    summary="List all payments",
    description="Every payment with sale, property and buyer details. Admin only.",
    responses=error_responses(401, 403)
)
async def list_all_payments(
    actor: Actor = Depends(get_current_actor),
    payment_service: PaymentService = Depends(get_payment_service)
) -> List[PaymentResponse]:
    payments = await payment_service.list_all_payments(actor)
    return [PaymentResponse.model_validate(p.to_dict(include_sale=True)) for p in payments]
