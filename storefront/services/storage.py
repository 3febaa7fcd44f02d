"""
Persistence collaborator for the shipping and entitlement services.

Wraps a SQLAlchemy session behind the repository operations the services
depend on, so services can be unit tested against a mock Storage.
"""
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional
import logging
import uuid

from sqlalchemy.orm import Session, joinedload

from storefront.models.order import Order
from storefront.models.plan import Plan
from storefront.models.product import Product
from storefront.models.shipping import ShippingConfig, ShippingZone
from storefront.models.store import Store
from storefront.models.subscription import Subscription, SubscriptionStatus
from storefront.models.user import User

logger = logging.getLogger(__name__)


class Storage:
    def __init__(self, db: Session):
        self.db = db

    # Users / stores

    def get_or_create_user(self, user_id: str, email: str = None) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            user = User(id=user_id, email=email or None)
            self.db.add(user)
            self.db.flush()
        return user

    def get_store_by_user_id(self, user_id: str) -> Optional[Store]:
        return self.db.query(Store).filter(
            Store.user_id == user_id
        ).order_by(Store.created_at).first()

    def get_store_by_slug(self, slug: str) -> Optional[Store]:
        return self.db.query(Store).filter(Store.slug == slug).first()

    # Products / orders

    def get_products_by_store_id(self, store_id: str) -> list[Product]:
        return self.db.query(Product).filter(
            Product.store_id == store_id
        ).order_by(Product.created_at.desc()).all()

    def count_products_by_store_id(self, store_id: str) -> int:
        return self.db.query(Product).filter(Product.store_id == store_id).count()

    def create_product(self, store_id: str, name: str, price: Decimal, is_active: bool = True) -> Product:
        product = Product(
            id=str(uuid.uuid4()),
            store_id=store_id,
            name=name,
            price=price,
            is_active=is_active
        )
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def get_orders_by_store_id(self, store_id: str) -> list[Order]:
        return self.db.query(Order).filter(
            Order.store_id == store_id
        ).order_by(Order.created_at.desc()).all()

    def count_orders_since(self, store_id: str, since: datetime) -> int:
        """Count orders of any status created on or after `since`"""
        return self.db.query(Order).filter(
            Order.store_id == store_id,
            Order.created_at >= since
        ).count()

    # Plans

    def get_all_plans(self) -> list[Plan]:
        return self.db.query(Plan).filter(
            Plan.is_active == True).order_by(Plan.price).all()

    def get_plan_by_id(self, plan_id: str) -> Optional[Plan]:
        return self.db.query(Plan).filter(Plan.id == plan_id).first()

    def get_plan_by_slug(self, slug: str) -> Optional[Plan]:
        return self.db.query(Plan).filter(Plan.slug == slug).first()

    def upsert_plans(self, plans: list[dict]) -> list[Plan]:
        """
        Insert or update plans keyed by slug.

        Existing rows keep their id so subscriptions referencing them stay valid.
        """
        saved = []
        for data in plans:
            fields = {k: v for k, v in data.items() if k != 'id'}
            plan = self.get_plan_by_slug(fields['slug'])
            if plan:
                for key, value in fields.items():
                    setattr(plan, key, value)
            else:
                plan = Plan(id=str(uuid.uuid4()), **fields)
                self.db.add(plan)
            saved.append(plan)
        self.db.commit()
        for plan in saved:
            self.db.refresh(plan)
        return saved

    # Subscriptions

    def get_subscription_by_user_id(self, user_id: str) -> Optional[Subscription]:
        """Most recently created subscription regardless of status, with its plan loaded"""
        return self.db.query(Subscription).options(
            joinedload(Subscription.plan)
        ).filter(
            Subscription.user_id == user_id
        ).order_by(Subscription.created_at.desc()).first()

    def create_subscription(
        self,
        user_id: str,
        plan_id: str,
        status: SubscriptionStatus,
        current_period_start: datetime,
        current_period_end: datetime
    ) -> Subscription:
        subscription = Subscription(
            id=str(uuid.uuid4()),
            user_id=user_id,
            plan_id=plan_id,
            status=status,
            current_period_start=current_period_start,
            current_period_end=current_period_end,
            cancel_at_period_end=False
        )
        self.db.add(subscription)
        self.db.commit()
        self.db.refresh(subscription)
        return subscription

    def cancel_subscriptions(self, user_id: str) -> int:
        """Mark every subscription row of the user canceled at period end"""
        rows = self.db.query(Subscription).filter(
            Subscription.user_id == user_id
        ).update({
            "status": SubscriptionStatus.CANCELED,
            "cancel_at_period_end": True,
            "updated_at": datetime.utcnow()
        }, synchronize_session="fetch")
        self.db.commit()
        return rows

    # Shipping

    def get_shipping_config(self, store_id: str) -> Optional[ShippingConfig]:
        return self.db.query(ShippingConfig).filter(
            ShippingConfig.store_id == store_id
        ).first()

    def upsert_shipping_config(
        self,
        store_id: str,
        free_shipping_threshold: Optional[Decimal],
        default_shipping_cost: Optional[Decimal]
    ) -> ShippingConfig:
        config = self.get_shipping_config(store_id)
        if config:
            config.free_shipping_threshold = free_shipping_threshold
            config.default_shipping_cost = default_shipping_cost
            config.updated_at = datetime.utcnow()
        else:
            config = ShippingConfig(
                id=str(uuid.uuid4()),
                store_id=store_id,
                free_shipping_threshold=free_shipping_threshold,
                default_shipping_cost=default_shipping_cost
            )
            self.db.add(config)
        self.db.commit()
        self.db.refresh(config)
        return config

    def get_shipping_zones(self, store_id: str) -> list[ShippingZone]:
        """Active zones of the store, ordered by name"""
        return self.db.query(ShippingZone).filter(
            ShippingZone.store_id == store_id,
            ShippingZone.is_active == True
        ).order_by(ShippingZone.name).all()

    def get_shipping_zone(self, store_id: str, zone_id: str) -> Optional[ShippingZone]:
        return self.db.query(ShippingZone).filter(
            ShippingZone.id == zone_id,
            ShippingZone.store_id == store_id
        ).first()

    def create_shipping_zone(self, store_id: str, **fields) -> ShippingZone:
        zone = ShippingZone(id=str(uuid.uuid4()), store_id=store_id, **fields)
        self.db.add(zone)
        self.db.commit()
        self.db.refresh(zone)
        return zone

    def update_shipping_zone(self, zone: ShippingZone, **fields) -> ShippingZone:
        for key, value in fields.items():
            setattr(zone, key, value)
        self.db.commit()
        self.db.refresh(zone)
        return zone

    def delete_shipping_zone(self, zone: ShippingZone):
        self.db.delete(zone)
        self.db.commit()


class SessionPlanSource:
    """
    Plan reads for the process-wide PlanCatalog.

    The catalog outlives any single request, so each read opens and closes its
    own session instead of borrowing a request-scoped one.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _read(self, fn):
        db = self.session_factory()
        try:
            return fn(Storage(db))
        finally:
            db.close()

    def get_all_plans(self) -> list[Plan]:
        return self._read(lambda storage: storage.get_all_plans())

    def get_plan_by_id(self, plan_id: str) -> Optional[Plan]:
        return self._read(lambda storage: storage.get_plan_by_id(plan_id))

    def get_plan_by_slug(self, slug: str) -> Optional[Plan]:
        return self._read(lambda storage: storage.get_plan_by_slug(slug))
