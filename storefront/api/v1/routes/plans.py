import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from storefront.api.deps import get_plan_catalog, get_storage
from storefront.core.config import settings
from storefront.core.middleware import get_current_user
from storefront.services.plan_catalog import PlanCatalog, PlanResponse, seed_plans
from storefront.services.storage import Storage

router = APIRouter()
logger = logging.getLogger(__name__)


def is_admin(current_user: dict) -> bool:
    """Admins carry the Firebase "admin" custom claim or are listed in ADMIN_EMAILS"""
    if (current_user.get('token') or {}).get('admin') is True:
        return True
    email = (current_user.get('email') or '').lower()
    return bool(email) and email in settings.admin_email_list


@router.get("", response_model=list[PlanResponse])
@router.get("/", response_model=list[PlanResponse], include_in_schema=False)
async def get_plans(
    response: Response,
    catalog: PlanCatalog = Depends(get_plan_catalog)
):
    """
    Get all active plans, cheapest first.
    Public endpoint - no authentication required. Served from the plan
    catalog, which never fails: it degrades to stale or built-in plans.
    """
    logger.info("get_plans: Entry")

    # Browsers must not keep their own copy; the server-side cache decides freshness
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, private"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"

    plans = catalog.list_active_plans()
    logger.info(f"get_plans: Success - {len(plans)} plans")
    return plans


@router.post("/setup")
def setup_plans(
    current_user: dict = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    catalog: PlanCatalog = Depends(get_plan_catalog)
):
    """
    Write the four canonical plans to the database.
    Admin only.
    """
    logger.info(f"setup_plans: Entry - user: {current_user['uid']}")

    if not is_admin(current_user):
        logger.warning(f"setup_plans: Unauthorized - user: {current_user['uid']}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )

    try:
        plans = seed_plans(storage, catalog)
        logger.info(f"setup_plans: Success - {len(plans)} plans")
        return {
            "success": True,
            "created": len(plans),
            "plans": [PlanResponse.model_validate(plan) for plan in plans],
        }
    except Exception as e:
        logger.error(f"setup_plans: Failure - {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
