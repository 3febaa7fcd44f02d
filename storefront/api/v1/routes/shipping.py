from decimal import Decimal
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from storefront.api.deps import get_shipping_service, get_storage
from storefront.core.errors import NotFoundError
from storefront.core.middleware import get_current_user
from storefront.models.store import Store
from storefront.services.shipping_service import ShippingService
from storefront.services.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


class ShippingConfigRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    free_shipping_threshold: Optional[Decimal] = Field(None, alias="freeShippingThreshold")
    default_shipping_cost: Optional[Decimal] = Field(None, alias="defaultShippingCost")


class ShippingConfigResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    store_id: str
    free_shipping_threshold: Optional[Decimal] = None
    default_shipping_cost: Optional[Decimal] = None


class ZoneCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    zip_code_start: str = Field(..., alias="zipCodeStart", max_length=9)
    zip_code_end: str = Field(..., alias="zipCodeEnd", max_length=9)
    shipping_cost: Decimal = Field(..., alias="shippingCost", ge=0)
    estimated_days: Optional[int] = Field(None, alias="estimatedDays", ge=0)
    is_active: bool = Field(True, alias="isActive")


class ZoneUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    zip_code_start: Optional[str] = Field(None, alias="zipCodeStart", max_length=9)
    zip_code_end: Optional[str] = Field(None, alias="zipCodeEnd", max_length=9)
    shipping_cost: Optional[Decimal] = Field(None, alias="shippingCost", ge=0)
    estimated_days: Optional[int] = Field(None, alias="estimatedDays", ge=0)
    is_active: Optional[bool] = Field(None, alias="isActive")


class ZoneResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    store_id: str
    name: str
    zip_code_start: str
    zip_code_end: str
    shipping_cost: Decimal
    estimated_days: Optional[int] = None
    is_active: bool


class ShippingCalculateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    store_slug: Optional[str] = Field(None, alias="storeSlug")
    zip_code: Optional[str] = Field(None, alias="zipCode")
    # Cart subtotal after coupon discounts
    order_total: Optional[Decimal] = Field(None, alias="orderTotal")


def _merchant_store(storage: Storage, current_user: dict) -> Store:
    store = storage.get_store_by_user_id(current_user['uid'])
    if not store:
        raise NotFoundError("Store")
    return store


@router.get("/config")
def get_shipping_config(
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ShippingService = Depends(get_shipping_service)
):
    """Get the merchant's shipping config ({} when never saved)"""
    store = _merchant_store(storage, current_user)
    config = service.get_config(storage, store.id)
    if config is None:
        return {}
    return ShippingConfigResponse.model_validate(config)


@router.post("/config", response_model=ShippingConfigResponse)
def save_shipping_config(
    config_data: ShippingConfigRequest,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ShippingService = Depends(get_shipping_service)
):
    """Create or update the merchant's shipping config"""
    logger.info(f"save_shipping_config: Entry - user: {current_user['uid']}")

    store = _merchant_store(storage, current_user)
    try:
        config = service.save_config(
            storage,
            store.id,
            free_shipping_threshold=config_data.free_shipping_threshold,
            default_shipping_cost=config_data.default_shipping_cost
        )
        logger.info(f"save_shipping_config: Success - store: {store.id}")
        return config
    except Exception as e:
        logger.error(f"save_shipping_config: Failure - {e}")
        raise HTTPException(status_code=500, detail="Failed to save shipping config")


@router.get("/zones", response_model=list[ZoneResponse])
def list_zones(
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ShippingService = Depends(get_shipping_service)
):
    """List the merchant's active shipping zones"""
    store = _merchant_store(storage, current_user)
    return service.list_zones(storage, store.id)


@router.post("/zones", response_model=ZoneResponse)
def create_zone(
    zone_data: ZoneCreate,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ShippingService = Depends(get_shipping_service)
):
    """Create a shipping zone for the merchant's store"""
    store = _merchant_store(storage, current_user)
    try:
        return service.create_zone(
            storage,
            store.id,
            name=zone_data.name,
            zip_code_start=zone_data.zip_code_start,
            zip_code_end=zone_data.zip_code_end,
            shipping_cost=zone_data.shipping_cost,
            estimated_days=zone_data.estimated_days,
            is_active=zone_data.is_active
        )
    except Exception as e:
        logger.error(f"create_zone: Failure - {e}")
        raise HTTPException(status_code=500, detail="Failed to create shipping zone")


@router.patch("/zones/{zone_id}", response_model=ZoneResponse)
def update_zone(
    zone_id: str,
    zone_data: ZoneUpdate,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ShippingService = Depends(get_shipping_service)
):
    """Update fields of one of the merchant's shipping zones"""
    store = _merchant_store(storage, current_user)
    fields = zone_data.model_dump(exclude_unset=True)
    return service.update_zone(storage, store.id, zone_id, **fields)


@router.delete("/zones/{zone_id}")
def delete_zone(
    zone_id: str,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ShippingService = Depends(get_shipping_service)
):
    """Delete one of the merchant's shipping zones"""
    store = _merchant_store(storage, current_user)
    service.delete_zone(storage, store.id, zone_id)
    return {"message": "Shipping zone deleted"}


@router.post("/calculate")
def calculate_shipping(
    request: ShippingCalculateRequest,
    storage: Storage = Depends(get_storage),
    service: ShippingService = Depends(get_shipping_service)
):
    """
    Quote shipping for a storefront checkout.
    Public endpoint - shoppers are not authenticated. The zip code is passed
    through raw; the shipping service extracts its digits.
    """
    logger.info(f"calculate_shipping: Entry - store: {request.store_slug}")

    if not request.store_slug or not request.zip_code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Store slug and zip code are required"
        )

    store = storage.get_store_by_slug(request.store_slug)
    if not store:
        raise NotFoundError("Store", request.store_slug)

    try:
        order_total = request.order_total or Decimal("0")
        quote = service.quote(storage, store.id, request.zip_code, order_total)
        logger.info(f"calculate_shipping: Success - store: {store.id}, cost: {quote.cost}")
        return quote.to_response()
    except Exception as e:
        logger.error(f"calculate_shipping: Failure - {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to calculate shipping"
        )
