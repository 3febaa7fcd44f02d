import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from storefront.api.deps import get_storage, get_subscription_service, get_usage_service
from storefront.core.errors import NotFoundError, PaymentRequiredError
from storefront.core.middleware import get_current_user
from storefront.services.storage import Storage
from storefront.services.subscription_service import SubscriptionService
from storefront.services.usage_service import UsageService, UsageSnapshot

router = APIRouter()
logger = logging.getLogger(__name__)


class SubscribeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)  # Allows both plan_id and planId

    plan_id: str = Field(..., alias="planId")


@router.get("/current")
def get_current_subscription(
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    subscription_service: SubscriptionService = Depends(get_subscription_service)
):
    """
    Get current user's subscription.
    Users without any subscription are reported on the free plan.
    Requires authentication.
    """
    user_id = current_user['uid']
    logger.info(f"get_current_subscription: Entry - user: {user_id}")

    try:
        resolved = subscription_service.resolve(storage, user_id)
        logger.info(f"get_current_subscription: Success - user: {user_id}")
        return resolved.to_dict()
    except Exception as e:
        logger.error(f"get_current_subscription: Failure - {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@router.post("/subscribe")
def subscribe(
    request: SubscribeRequest,
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    subscription_service: SubscriptionService = Depends(get_subscription_service)
):
    """
    Subscribe to a free plan.
    Paid plans answer 402 and must go through payment checkout.
    Requires authentication.
    """
    user_id = current_user['uid']
    logger.info(f"subscribe: Entry - user: {user_id}, plan: {request.plan_id}")

    try:
        subscription = subscription_service.subscribe(
            storage, user_id, request.plan_id, email=current_user.get('email'))
        logger.info(f"subscribe: Success - user: {user_id}, subscription: {subscription.id}")
        return {
            "success": True,
            "subscription_id": subscription.id,
            "status": subscription.status.value,
            "current_period_end": subscription.current_period_end.isoformat(),
        }
    except (NotFoundError, PaymentRequiredError):
        raise
    except Exception as e:
        logger.error(f"subscribe: Failure - {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@router.post("/cancel")
def cancel_subscription(
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    subscription_service: SubscriptionService = Depends(get_subscription_service)
):
    """
    Cancel current subscription.
    Paid entitlements continue until the end of the billing period.
    Requires authentication.
    """
    user_id = current_user['uid']
    logger.info(f"cancel_subscription: Entry - user: {user_id}")

    try:
        subscription_service.cancel(storage, user_id)
        logger.info(f"cancel_subscription: Success - user: {user_id}")
        return {
            "success": True,
            "message": "Subscription cancelled. Access will continue until the end of the billing period."
        }
    except NotFoundError:
        raise
    except Exception as e:
        logger.error(f"cancel_subscription: Failure - {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@router.get("/usage", response_model=UsageSnapshot)
def get_plan_usage(
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    usage_service: UsageService = Depends(get_usage_service)
):
    """
    Get product and monthly order usage against the plan ceilings.
    Requires authentication.
    """
    user_id = current_user['uid']
    logger.info(f"get_plan_usage: Entry - user: {user_id}")

    try:
        snapshot = usage_service.usage(storage, user_id)
        logger.info(f"get_plan_usage: Success - user: {user_id}")
        return snapshot
    except NotFoundError:
        raise
    except Exception as e:
        logger.error(f"get_plan_usage: Failure - {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
