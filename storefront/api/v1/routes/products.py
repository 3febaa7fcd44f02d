from decimal import Decimal
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from storefront.api.deps import get_storage, require_product_quota
from storefront.core.errors import NotFoundError
from storefront.core.middleware import get_current_user
from storefront.services.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


class ProductCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    price: Decimal = Field(..., ge=0)
    is_active: bool = Field(True, alias="isActive")


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    store_id: str
    name: str
    price: Decimal
    is_active: bool


@router.get("", response_model=list[ProductResponse])
@router.get("/", response_model=list[ProductResponse], include_in_schema=False)
def list_products(
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """List all products of the merchant's store"""
    store = storage.get_store_by_user_id(current_user['uid'])
    if not store:
        raise NotFoundError("Store")
    return storage.get_products_by_store_id(store.id)


@router.post("", response_model=ProductResponse)
@router.post("/", response_model=ProductResponse, include_in_schema=False)
def create_product(
    product_data: ProductCreate,
    current_user: dict = Depends(require_product_quota),
    storage: Storage = Depends(get_storage),
):
    """
    Create a product.
    Gated by the plan's product ceiling: at the limit this answers 403 with
    an upgrade payload instead of creating the product.

    There is no separate active-subscription check. An expired, past_due or
    lapsed subscription is not rejected outright; its ceilings fall back to
    the free plan (see SubscriptionService.effective_plan).
    """
    logger.info(f"create_product: Entry - user: {current_user['uid']}, name: {product_data.name}")

    store = storage.get_store_by_user_id(current_user['uid'])
    if not store:
        raise NotFoundError("Store")

    try:
        product = storage.create_product(
            store.id,
            name=product_data.name,
            price=product_data.price,
            is_active=product_data.is_active
        )
        logger.info(f"create_product: Success - product: {product.id}")
        return product
    except Exception as e:
        logger.error(f"create_product: Failure - {e}")
        raise HTTPException(status_code=500, detail="Failed to create product")
