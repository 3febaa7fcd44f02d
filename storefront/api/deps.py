from fastapi import Depends, Request
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.errors import LimitExceededError
from storefront.core.middleware import get_current_user
from storefront.services.entitlement_service import EntitlementService
from storefront.services.plan_catalog import PlanCatalog
from storefront.services.shipping_service import ShippingService
from storefront.services.storage import Storage
from storefront.services.subscription_service import SubscriptionService
from storefront.services.usage_service import UsageService


def get_storage(db: Session = Depends(get_db)) -> Storage:
    """Dependency to get the storage collaborator for this request's session"""
    return Storage(db)


def get_plan_catalog(request: Request) -> PlanCatalog:
    """The process-wide plan catalog created at startup"""
    return request.app.state.plan_catalog


def get_shipping_service() -> ShippingService:
    return ShippingService()


def get_subscription_service(
    catalog: PlanCatalog = Depends(get_plan_catalog)
) -> SubscriptionService:
    return SubscriptionService(catalog)


def get_usage_service(
    subscription_service: SubscriptionService = Depends(get_subscription_service)
) -> UsageService:
    return UsageService(subscription_service)


def get_entitlement_service(
    usage_service: UsageService = Depends(get_usage_service)
) -> EntitlementService:
    return EntitlementService(usage_service)


def require_product_quota(
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    entitlements: EntitlementService = Depends(get_entitlement_service)
) -> dict:
    """Block product creation once the plan's product ceiling is reached"""
    decision = entitlements.check_product_limit(storage, current_user['uid'])
    if not decision.allowed:
        raise LimitExceededError(decision.denial)
    return current_user


def require_order_quota(
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    entitlements: EntitlementService = Depends(get_entitlement_service)
) -> dict:
    """Block order creation once the plan's monthly order ceiling is reached"""
    decision = entitlements.check_order_limit(storage, current_user['uid'])
    if not decision.allowed:
        raise LimitExceededError(decision.denial)
    return current_user
