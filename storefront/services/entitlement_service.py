"""
Plan ceiling checks run before resource-creating mutations.

A check resolves the merchant's effective plan, counts the guarded resource
and either allows the mutation or returns a denial carrying everything the
request layer needs to render an upgrade prompt.

The check is not transactional with the mutation it guards: two concurrent
requests just under the ceiling can both pass and overshoot it by one.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
import logging

from storefront.core.config import settings
from storefront.services.analytics_service import AnalyticsService
from storefront.services.plan_catalog import PlanResponse
from storefront.services.storage import Storage
from storefront.services.usage_service import UsageService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntitlementDecision:
    allowed: bool
    denial: Optional[Dict[str, Any]] = None

    @classmethod
    def allow(cls) -> "EntitlementDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, message: str, limit: int, current: int, redirect_to: str) -> "EntitlementDecision":
        return cls(allowed=False, denial={
            'message': message,
            'limit': limit,
            'current': current,
            'upgradeRequired': True,
            'redirectTo': redirect_to,
        })


class EntitlementService:
    def __init__(self, usage_service: UsageService, redirect_to: str = None):
        self.usage_service = usage_service
        self.redirect_to = redirect_to or settings.upgrade_redirect
        self.analytics = AnalyticsService()
        self.logger = logging.getLogger(__name__)

    def check_product_limit(self, storage: Storage, user_id: str) -> EntitlementDecision:
        return self._check(
            storage,
            user_id,
            resource='products',
            limit_of=lambda plan: plan.max_products,
            count=self.usage_service.product_count,
            message="You have reached the limit of {limit} products on the {plan} plan. "
                    "Upgrade to add more products.",
        )

    def check_order_limit(self, storage: Storage, user_id: str) -> EntitlementDecision:
        return self._check(
            storage,
            user_id,
            resource='orders',
            limit_of=lambda plan: plan.max_orders,
            count=self.usage_service.monthly_order_count,
            message="You have reached the limit of {limit} orders/month on the {plan} plan. "
                    "Upgrade to process more orders.",
        )

    def _check(
        self,
        storage: Storage,
        user_id: str,
        resource: str,
        limit_of: Callable[[PlanResponse], Optional[int]],
        count: Callable[[Storage, str], int],
        message: str
    ) -> EntitlementDecision:
        self.logger.info(f"check_{resource}_limit: Entry - user: {user_id}")

        store = self.usage_service.get_store(storage, user_id)
        plan = self.usage_service.current_plan(storage, user_id)
        limit = limit_of(plan)

        if limit is None:
            self.logger.info(f"check_{resource}_limit: Allowed (unlimited) - user: {user_id}, plan: {plan.slug}")
            return EntitlementDecision.allow()

        current = count(storage, store.id)
        if current >= limit:
            self.analytics.log_event(
                event_name='upgrade_prompt',
                user_id=user_id,
                parameters={'resource': resource, 'plan': plan.slug, 'limit': limit, 'current': current}
            )
            self.logger.info(
                f"check_{resource}_limit: Denied - user: {user_id}, plan: {plan.slug}, {current}/{limit}")
            return EntitlementDecision.deny(
                message=message.format(limit=limit, plan=plan.name),
                limit=limit,
                current=current,
                redirect_to=self.redirect_to,
            )

        self.logger.info(f"check_{resource}_limit: Allowed - user: {user_id}, plan: {plan.slug}, {current}/{limit}")
        return EntitlementDecision.allow()
