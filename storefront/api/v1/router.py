from fastapi import APIRouter
from storefront.api.v1.routes import plans, subscriptions, shipping, products

api_router = APIRouter()

api_router.include_router(plans.router, prefix="/plans", tags=["plans"])
api_router.include_router(subscriptions.router, prefix="/subscriptions", tags=["subscriptions"])
api_router.include_router(shipping.router, prefix="/shipping", tags=["shipping"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
