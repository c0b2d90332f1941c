"""
Sale API endpoints.
Buyers start sales, participants follow them through completion or cancellation.
"""

from fastapi import APIRouter, Depends, status, Path
from typing import List
from uuid import UUID

from app.services.authorization import Actor
from app.services.sale import SaleService
from app.schemas.property import MessageResponse
from app.schemas.sale import (
    SaleCreate,
    SaleUpdate,
    SaleResponse,
    SaleCreatedResponse,
    SaleStatsResponse
)
from app.schemas.error import error_responses
from app.utils.dependencies import get_current_actor, get_sale_service


router = APIRouter(prefix="/sales", tags=["Sales"])


@router.get(
    "",
    response_model=List[SaleResponse],
    summary="List sales",
    description="Admins see all sales, sellers their sales and buyers their purchases",
    responses=error_responses(401)
)
async def list_sales(
    actor: Actor = Depends(get_current_actor),
    sale_service: SaleService = Depends(get_sale_service)
) -> List[SaleResponse]:
    sales = await sale_service.list_sales(actor)
    return [SaleResponse.model_validate(sale.to_dict()) for sale in sales]


# Registered before /{sale_id} so "stats" is not parsed as an id
@router.get(
    "/stats",
    response_model=SaleStatsResponse,
    summary="Sales statistics",
    description="Completed and pending totals with a monthly breakdown for the current year. Admin only.",
    responses=error_responses(401, 403)
)
async def get_sale_statistics(
    actor: Actor = Depends(get_current_actor),
    sale_service: SaleService = Depends(get_sale_service)
) -> SaleStatsResponse:
    statistics = await sale_service.get_sale_statistics(actor)
    return SaleStatsResponse.model_validate(statistics)


@router.get(
    "/{sale_id}",
    response_model=SaleResponse,
    summary="Get sale details",
    responses=error_responses(401, 403, 404)
)
async def get_sale(
    sale_id: UUID = Path(..., description="Sale ID"),
    actor: Actor = Depends(get_current_actor),
    sale_service: SaleService = Depends(get_sale_service)
) -> SaleResponse:
    sale = await sale_service.get_sale(sale_id, actor)
    return SaleResponse.model_validate(sale.to_dict())


@router.post(
    "",
    response_model=SaleCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a sale",
    description="Start a sale on an available property, which becomes pending. Requires buyer or admin role.",
    responses=error_responses(400, 401, 403, 422)
)
async def create_sale(
    sale_data: SaleCreate,
    actor: Actor = Depends(get_current_actor),
    sale_service: SaleService = Depends(get_sale_service)
) -> SaleCreatedResponse:
    """
    Start a sale.

    Raises:
        PropertyNotAvailableError: If the property is missing or not available
        InsufficientPermissionsError: If the caller is a seller
    """
    sale = await sale_service.create_sale(sale_data, actor)
    return SaleCreatedResponse(message="Sale created successfully", sale_id=str(sale.id))


@router.put(
    "/{sale_id}",
    response_model=MessageResponse,
    summary="Update sale status",
    description="Completing a sale marks the property sold; cancelling puts it back on the market.",
    responses=error_responses(401, 403, 404, 422)
)
async def update_sale(
    sale_data: SaleUpdate,
    sale_id: UUID = Path(..., description="Sale ID"),
    actor: Actor = Depends(get_current_actor),
    sale_service: SaleService = Depends(get_sale_service)
) -> MessageResponse:
    await sale_service.update_sale(sale_id, sale_data, actor)
    return MessageResponse(message="Sale updated successfully")
