from storefront.models.user import User
from storefront.models.store import Store
from storefront.models.product import Product
from storefront.models.order import Order, OrderStatus
from storefront.models.plan import Plan
from storefront.models.subscription import Subscription, SubscriptionStatus
from storefront.models.shipping import ShippingConfig, ShippingZone

__all__ = ["User", "Store", "Product", "Order", "OrderStatus", "Plan", "Subscription", "SubscriptionStatus", "ShippingConfig", "ShippingZone"]
