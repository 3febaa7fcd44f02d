from datetime import datetime
from typing import Callable, Optional
import logging

from pydantic import BaseModel

from storefront.core.config import settings
from storefront.core.errors import NotFoundError
from storefront.models.store import Store
from storefront.services.analytics_service import AnalyticsService
from storefront.services.plan_catalog import PlanResponse
from storefront.services.storage import Storage
from storefront.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)


class ResourceUsage(BaseModel):
    current: int
    limit: Optional[int] = None
    percentage: float = 0.0
    near_limit: bool = False
    at_limit: bool = False


class UsagePlan(BaseModel):
    name: str
    slug: str
    max_products: Optional[int] = None
    max_orders: Optional[int] = None


class UsageSnapshot(BaseModel):
    plan: UsagePlan
    products: ResourceUsage
    orders: ResourceUsage


def start_of_month(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def measure(current: int, limit: Optional[int]) -> ResourceUsage:
    """Express a count against a ceiling. Unlimited (or zero) ceilings report 0%."""
    percentage = (current / limit) * 100 if limit else 0.0
    return ResourceUsage(
        current=current,
        limit=limit,
        percentage=percentage,
        near_limit=percentage >= settings.near_limit_percentage,
        at_limit=percentage >= 100,
    )


class UsageService:
    def __init__(
        self,
        subscription_service: SubscriptionService,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.subscription_service = subscription_service
        # Server-local time, matching Order.created_at
        self.clock = clock
        self.analytics = AnalyticsService()
        self.logger = logging.getLogger(__name__)

    def get_store(self, storage: Storage, user_id: str) -> Store:
        store = storage.get_store_by_user_id(user_id)
        if not store:
            raise NotFoundError("Store", user_id)
        return store

    def current_plan(self, storage: Storage, user_id: str) -> PlanResponse:
        resolved = self.subscription_service.resolve(storage, user_id)
        return self.subscription_service.effective_plan(resolved)

    def product_count(self, storage: Storage, store_id: str) -> int:
        """Every product of the store, active or not"""
        return storage.count_products_by_store_id(store_id)

    def monthly_order_count(self, storage: Storage, store_id: str) -> int:
        """
        Orders created since the first of the current month, any status.

        Cancelled orders are included: cancelling an order does not give
        quota back.
        """
        return storage.count_orders_since(store_id, start_of_month(self.clock()))

    def usage(self, storage: Storage, user_id: str) -> UsageSnapshot:
        """Compute a fresh usage snapshot. Never cached."""
        self.logger.info(f"usage: Entry - user: {user_id}")

        try:
            store = self.get_store(storage, user_id)
            plan = self.current_plan(storage, user_id)

            snapshot = UsageSnapshot(
                plan=UsagePlan(
                    name=plan.name,
                    slug=plan.slug,
                    max_products=plan.max_products,
                    max_orders=plan.max_orders,
                ),
                products=measure(self.product_count(storage, store.id), plan.max_products),
                orders=measure(self.monthly_order_count(storage, store.id), plan.max_orders),
            )

            self.logger.info(
                f"usage: Success - user: {user_id}, plan: {plan.slug}, "
                f"products: {snapshot.products.current}/{plan.max_products}, "
                f"orders: {snapshot.orders.current}/{plan.max_orders}")
            return snapshot
        except NotFoundError:
            raise
        except Exception as e:
            self.analytics.log_failure(
                action='usage',
                error=str(e),
                user_id=user_id
            )
            self.logger.error(f"usage: Failure - {e}")
            raise
