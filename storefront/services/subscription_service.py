from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Union
import logging

from storefront.core.errors import NotFoundError, PaymentRequiredError
from storefront.models.subscription import Subscription, SubscriptionStatus
from storefront.services.analytics_service import AnalyticsService
from storefront.services.plan_catalog import PlanCatalog, PlanResponse
from storefront.services.storage import Storage

logger = logging.getLogger(__name__)

FREE_PLAN_PERIOD = timedelta(days=365)


@dataclass(frozen=True)
class ExplicitSubscription:
    """The user's most recent subscription row, whatever its status"""
    subscription: Subscription
    plan: PlanResponse
    is_free: bool = False

    @property
    def status(self) -> str:
        return SubscriptionStatus(self.subscription.status).value

    def to_dict(self) -> dict:
        sub = self.subscription
        return {
            'id': sub.id,
            'status': self.status,
            'plan': self.plan.model_dump(mode='json'),
            'isFree': self.is_free,
            'currentPeriodStart': sub.current_period_start.isoformat() if sub.current_period_start else None,
            'currentPeriodEnd': sub.current_period_end.isoformat() if sub.current_period_end else None,
            'cancelAtPeriodEnd': bool(sub.cancel_at_period_end),
        }


@dataclass(frozen=True)
class ImplicitFree:
    """No subscription row exists: the user is on the free plan, status active"""
    plan: PlanResponse
    status: str = SubscriptionStatus.ACTIVE.value
    is_free: bool = True

    def to_dict(self) -> dict:
        return {
            'status': self.status,
            'plan': self.plan.model_dump(mode='json'),
            'isFree': self.is_free,
        }


ResolvedSubscription = Union[ExplicitSubscription, ImplicitFree]


class SubscriptionService:
    def __init__(self, catalog: PlanCatalog, clock: Callable[[], datetime] = datetime.utcnow):
        self.catalog = catalog
        self.clock = clock
        self.analytics = AnalyticsService()
        self.logger = logging.getLogger(__name__)

    def resolve(self, storage: Storage, user_id: str) -> ResolvedSubscription:
        """
        Resolve the user's current subscription.

        Non-active rows are returned as they are; deciding what a canceled or
        past_due subscription entitles the user to is left to effective_plan().
        """
        self.logger.info(f"resolve: Entry - user: {user_id}")

        try:
            subscription = storage.get_subscription_by_user_id(user_id)

            if subscription is None or subscription.plan is None:
                resolved = ImplicitFree(plan=self.catalog.free_plan())
                self.logger.info(f"resolve: Success - user: {user_id}, implicit free plan")
                return resolved

            resolved = ExplicitSubscription(
                subscription=subscription,
                plan=PlanResponse.model_validate(subscription.plan)
            )
            self.logger.info(
                f"resolve: Success - user: {user_id}, plan: {resolved.plan.slug}, status: {resolved.status}")
            return resolved
        except Exception as e:
            self.analytics.log_failure(
                action='resolve_subscription',
                error=str(e),
                user_id=user_id
            )
            self.logger.error(f"resolve: Failure - {e}")
            raise

    def effective_plan(self, resolved: ResolvedSubscription) -> PlanResponse:
        """
        Plan whose ceilings apply right now.

        Active subscriptions grant their plan. A subscription canceled at
        period end keeps its plan until current_period_end. Anything else
        (expired, past_due, lapsed cancellation) falls back to the free tier.
        """
        if isinstance(resolved, ImplicitFree):
            return resolved.plan

        subscription = resolved.subscription
        status = SubscriptionStatus(subscription.status)

        if status == SubscriptionStatus.ACTIVE:
            return resolved.plan

        if (status == SubscriptionStatus.CANCELED
                and subscription.cancel_at_period_end
                and subscription.current_period_end is not None
                and self.clock() < subscription.current_period_end):
            return resolved.plan

        self.logger.info(
            f"effective_plan: {status.value} subscription {subscription.id} degraded to free plan")
        return self.catalog.free_plan()

    def subscribe(self, storage: Storage, user_id: str, plan_id: str, email: str = None) -> Subscription:
        """
        Subscribe the user to a free plan directly.

        Paid plans go through the hosted payment flow, which creates the
        subscription once payment completes.
        """
        self.logger.info(f"subscribe: Entry - user: {user_id}, plan: {plan_id}")

        try:
            plan = self.catalog.get_by_id(plan_id)
            if plan is None:
                raise NotFoundError("Plan", plan_id)

            if plan.price > 0:
                raise PaymentRequiredError(f"Plan {plan.name} requires payment checkout")

            storage.get_or_create_user(user_id, email)
            start = self.clock()
            subscription = storage.create_subscription(
                user_id=user_id,
                plan_id=plan.id,
                status=SubscriptionStatus.ACTIVE,
                current_period_start=start,
                current_period_end=start + FREE_PLAN_PERIOD
            )

            self.analytics.log_success(
                action='subscribe',
                user_id=user_id,
                parameters={'plan': plan.slug}
            )
            self.logger.info(f"subscribe: Success - user: {user_id}, subscription: {subscription.id}")
            return subscription
        except (NotFoundError, PaymentRequiredError):
            raise
        except Exception as e:
            storage.db.rollback()
            self.analytics.log_failure(
                action='subscribe',
                error=str(e),
                user_id=user_id,
                parameters={'plan_id': plan_id}
            )
            self.logger.error(f"subscribe: Failure - {e}")
            raise

    def cancel(self, storage: Storage, user_id: str) -> int:
        """
        Cancel the user's subscription at period end.

        Rows are kept as history; entitlements follow effective_plan().
        """
        self.logger.info(f"cancel: Entry - user: {user_id}")

        try:
            rows = storage.cancel_subscriptions(user_id)
            if rows == 0:
                raise NotFoundError("Subscription", user_id)

            self.analytics.log_success(
                action='cancel_subscription',
                user_id=user_id,
                parameters={'rows': rows}
            )
            self.logger.info(f"cancel: Success - user: {user_id}, rows: {rows}")
            return rows
        except NotFoundError:
            raise
        except Exception as e:
            storage.db.rollback()
            self.analytics.log_failure(
                action='cancel_subscription',
                error=str(e),
                user_id=user_id
            )
            self.logger.error(f"cancel: Failure - {e}")
            raise
