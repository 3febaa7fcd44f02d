"""
Tests for the storage layer against SQLite
"""

from datetime import datetime, timedelta
from decimal import Decimal


class TestUsersAndStores:
    def test_get_or_create_user_is_idempotent(self, storage):
        first = storage.get_or_create_user("uid_1", "a@example.com")
        storage.db.commit()
        second = storage.get_or_create_user("uid_1", "other@example.com")

        assert first.id == second.id
        assert second.email == "a@example.com"

    def test_store_lookup_by_user_and_slug(self, storage, merchant):
        assert storage.get_store_by_user_id("merchant_1").id == "store_1"
        assert storage.get_store_by_slug("loja-teste").id == "store_1"
        assert storage.get_store_by_slug("missing") is None


class TestProductsAndOrders:
    def test_create_product(self, storage, merchant):
        product = storage.create_product("store_1", name="Camiseta", price=Decimal("49.90"))

        assert product.id
        assert storage.count_products_by_store_id("store_1") == 1
        assert storage.get_products_by_store_id("store_1")[0].name == "Camiseta"

    def test_count_orders_since_is_inclusive(self, storage, merchant, add_orders):
        since = datetime(2026, 3, 1)
        add_orders("store_1", 1, created_at=since)
        add_orders("store_1", 1, created_at=since - timedelta(seconds=1))

        assert storage.count_orders_since("store_1", since) == 1


class TestPlans:
    def test_get_all_plans_skips_inactive(self, storage, seeded_plans):
        seeded_plans["enterprise"].is_active = False
        storage.db.commit()

        slugs = [plan.slug for plan in storage.get_all_plans()]

        assert slugs == ["gratis", "basico", "profissional"]

    def test_upsert_updates_existing_plan(self, storage, seeded_plans):
        original_id = seeded_plans["basico"].id

        storage.upsert_plans([{'slug': 'basico', 'name': 'Básico', 'price': Decimal('39.90'),
                               'max_products': 60, 'max_orders': 120, 'features': [], 'is_active': True}])

        plan = storage.get_plan_by_slug("basico")
        assert plan.id == original_id
        assert plan.max_products == 60


class TestSubscriptions:
    def test_latest_subscription_wins(self, storage, merchant, seeded_plans):
        from storefront.models import Subscription, SubscriptionStatus

        older = Subscription(
            id="sub_old", user_id="merchant_1", plan_id=seeded_plans["gratis"].id,
            status=SubscriptionStatus.ACTIVE, created_at=datetime(2026, 1, 1))
        newer = Subscription(
            id="sub_new", user_id="merchant_1", plan_id=seeded_plans["basico"].id,
            status=SubscriptionStatus.PAST_DUE, created_at=datetime(2026, 2, 1))
        storage.db.add_all([older, newer])
        storage.db.commit()

        subscription = storage.get_subscription_by_user_id("merchant_1")

        assert subscription.id == "sub_new"
        assert subscription.plan.slug == "basico"

    def test_cancel_without_rows_returns_zero(self, storage, merchant):
        assert storage.cancel_subscriptions("merchant_1") == 0


class TestShipping:
    def test_upsert_config_keeps_one_row(self, storage, merchant):
        from storefront.models import ShippingConfig

        storage.upsert_shipping_config("store_1", free_shipping_threshold=Decimal("100"), default_shipping_cost=Decimal("10"))
        storage.upsert_shipping_config("store_1", free_shipping_threshold=None, default_shipping_cost=Decimal("12"))

        assert storage.db.query(ShippingConfig).count() == 1
        config = storage.get_shipping_config("store_1")
        assert config.free_shipping_threshold is None
        assert config.default_shipping_cost == Decimal("12")

    def test_zone_update_and_delete(self, storage, merchant):
        zone = storage.create_shipping_zone(
            "store_1", name="SP", zip_code_start="01000000", zip_code_end="05999999",
            shipping_cost=Decimal("10.00"), estimated_days=3, is_active=True)

        storage.update_shipping_zone(zone, shipping_cost=Decimal("11.00"))
        assert storage.get_shipping_zone("store_1", zone.id).shipping_cost == Decimal("11.00")
        assert storage.get_shipping_zone("other_store", zone.id) is None

        storage.delete_shipping_zone(zone)
        assert storage.get_shipping_zones("store_1") == []
