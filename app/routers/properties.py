"""
Property listing API endpoints.
Browsing is public; creating requires a seller or admin and changes require ownership.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import Optional, List
from decimal import Decimal
from uuid import UUID
from pydantic import ValidationError as PydanticValidationError

from app.models.property import PropertyStatus
from app.services.authorization import Actor
from app.services.property import PropertyService
from app.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertySearchParams,
    PropertyCreatedResponse,
    MessageResponse
)
from app.schemas.error import error_responses
from app.utils.exceptions import ValidationError
from app.utils.dependencies import get_current_actor, get_property_service


router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get(
    "",
    response_model=List[PropertyResponse],
    summary="List properties",
    description="List properties newest first with optional status, city, price and type filters",
    responses=error_responses(400, 422)
)
async def list_properties(
    status_filter: Optional[PropertyStatus] = Query(None, alias="status", description="Availability status"),
    city: Optional[str] = Query(None, description="Case-insensitive partial city match"),
    min_price: Optional[Decimal] = Query(None, ge=0, description="Minimum price filter"),
    max_price: Optional[Decimal] = Query(None, ge=0, description="Maximum price filter"),
    property_type: Optional[str] = Query(None, description="Property type"),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    try:
        params = PropertySearchParams(
            status=status_filter,
            city=city,
            min_price=min_price,
            max_price=max_price,
            property_type=property_type
        )
    except PydanticValidationError as e:
        raise ValidationError(e.errors()[0]["msg"])

    properties = await property_service.list_properties(params)
    return [PropertyResponse.model_validate(p.to_dict()) for p in properties]


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Get property details",
    description="Get a property with its seller contact details",
    responses=error_responses(404)
)
async def get_property(
    property_id: UUID = Path(..., description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.get_property(property_id)
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.post(
    "",
    response_model=PropertyCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a new property listing. Requires seller or admin role.",
    responses=error_responses(401, 403, 422)
)
async def create_property(
    property_data: PropertyCreate,
    actor: Actor = Depends(get_current_actor),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyCreatedResponse:
    """
    Create a new property listing owned by the caller.

    Admins may pass seller_id to list on behalf of a seller.
    """
    property_obj = await property_service.create_property(property_data, actor)
    return PropertyCreatedResponse(
        message="Property created successfully",
        property_id=str(property_obj.id)
    )


@router.put(
    "/{property_id}",
    response_model=MessageResponse,
    summary="Update property",
    description="Update a property. Only the owner or an admin can update.",
    responses=error_responses(401, 403, 404, 422)
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    actor: Actor = Depends(get_current_actor),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    await property_service.update_property(property_id, property_data, actor)
    return MessageResponse(message="Property updated successfully")


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    summary="Delete property",
    description="Delete a property. Only the owner or an admin can delete.",
    responses=error_responses(401, 403, 404)
)
async def delete_property(
    property_id: UUID = Path(..., description="Property ID"),
    actor: Actor = Depends(get_current_actor),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    await property_service.delete_property(property_id, actor)
    return MessageResponse(message="Property deleted successfully")
