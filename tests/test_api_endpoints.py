"""
Tests for API endpoints
"""

from datetime import datetime
from decimal import Decimal

import pytest


@pytest.fixture
def store_with_shipping(storage, merchant):
    storage.upsert_shipping_config("store_1", free_shipping_threshold=Decimal("200.00"), default_shipping_cost=Decimal("30.00"))
    storage.create_shipping_zone(
        "store_1", name="SP Capital", zip_code_start="01000000", zip_code_end="05999999",
        shipping_cost=Decimal("15.00"), estimated_days=3, is_active=True)
    return merchant


class TestHealthEndpoint:
    """Test health check endpoint"""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestPlanEndpoints:
    def test_plans_sorted_with_no_cache_headers(self, client, seeded_plans):
        response = client.get("/api/v1/plans")

        assert response.status_code == 200
        assert [p["slug"] for p in response.json()] == ["gratis", "basico", "profissional", "enterprise"]
        assert "no-store" in response.headers["cache-control"]

    def test_plans_fall_back_to_builtin_when_source_fails(self, client):
        from storefront.main import app
        from unittest.mock import MagicMock
        from storefront.services.plan_catalog import PlanCatalog

        source = MagicMock()
        source.get_all_plans.side_effect = RuntimeError("database unreachable")
        app.state.plan_catalog = PlanCatalog(source)

        response = client.get("/api/v1/plans")

        assert response.status_code == 200
        assert len(response.json()) == 4

    def test_setup_seeds_plans_for_admin(self, client, monkeypatch):
        from storefront.core.config import settings
        monkeypatch.setattr(settings, "admin_emails", "ops@example.com, Merchant@Example.com")

        response = client.post("/api/v1/plans/setup")

        assert response.status_code == 200
        assert response.json()["created"] == 4

    def test_setup_accepts_admin_claim(self, client, mock_current_user):
        mock_current_user["token"]["admin"] = True

        response = client.post("/api/v1/plans/setup")

        assert response.status_code == 200

    def test_setup_forbidden_for_merchant(self, client, storage):
        response = client.post("/api/v1/plans/setup")

        assert response.status_code == 403
        assert storage.get_all_plans() == []


class TestShippingEndpoints:
    def test_calculate_uses_zone(self, client, store_with_shipping):
        response = client.post("/api/v1/shipping/calculate", json={
            "storeSlug": "loja-teste", "zipCode": "01310-100", "orderTotal": 120
        })

        assert response.status_code == 200
        assert response.json() == {"shippingCost": "15.00", "estimatedDays": 3, "isFree": False}

    def test_calculate_null_order_total_counts_as_zero(self, client, store_with_shipping):
        response = client.post("/api/v1/shipping/calculate", json={
            "storeSlug": "loja-teste", "zipCode": "01310-100", "orderTotal": None
        })

        assert response.status_code == 200
        assert response.json() == {"shippingCost": "15.00", "estimatedDays": 3, "isFree": False}

    def test_calculate_without_order_total(self, client, store_with_shipping):
        response = client.post("/api/v1/shipping/calculate", json={
            "storeSlug": "loja-teste", "zipCode": "01310-100"
        })

        assert response.status_code == 200
        assert response.json()["shippingCost"] == "15.00"

    def test_hyphenated_zone_bounds_are_stored_as_digits(self, client, merchant):
        response = client.post("/api/v1/shipping/zones", json={
            "name": "SP", "zipCodeStart": "01000-000", "zipCodeEnd": "05999-999", "shippingCost": "12.00"
        })

        assert response.status_code == 200
        zone = response.json()
        assert zone["zip_code_start"] == "01000000"
        assert zone["zip_code_end"] == "05999999"

        response = client.patch(f"/api/v1/shipping/zones/{zone['id']}", json={"zipCodeEnd": "06999-999"})
        assert response.json()["zip_code_end"] == "06999999"
        assert len(response.json()["zip_code_end"]) <= 8

    def test_calculate_free_over_threshold(self, client, store_with_shipping):
        response = client.post("/api/v1/shipping/calculate", json={
            "storeSlug": "loja-teste", "zipCode": "01310-100", "orderTotal": 250
        })

        assert response.json()["isFree"] is True
        assert response.json()["shippingCost"] == "0.00"

    def test_calculate_requires_slug_and_zip(self, client):
        response = client.post("/api/v1/shipping/calculate", json={"storeSlug": "loja-teste"})
        assert response.status_code == 400

    def test_calculate_unknown_store(self, client):
        response = client.post("/api/v1/shipping/calculate", json={"storeSlug": "nope", "zipCode": "01310100"})
        assert response.status_code == 404

    def test_get_config_empty(self, client, merchant):
        response = client.get("/api/v1/shipping/config")

        assert response.status_code == 200
        assert response.json() == {}

    def test_save_config_and_zone_crud(self, client, merchant):
        response = client.post("/api/v1/shipping/config", json={"freeShippingThreshold": "150.00"})
        assert response.status_code == 200
        assert Decimal(response.json()["default_shipping_cost"]) == Decimal("0")

        response = client.post("/api/v1/shipping/zones", json={
            "name": "Sul", "zipCodeStart": "80000000", "zipCodeEnd": "99999999", "shippingCost": "25.00"
        })
        assert response.status_code == 200
        zone_id = response.json()["id"]
        assert response.json()["estimated_days"] == 7

        response = client.patch(f"/api/v1/shipping/zones/{zone_id}", json={"estimatedDays": 9})
        assert response.json()["estimated_days"] == 9

        assert client.delete(f"/api/v1/shipping/zones/{zone_id}").status_code == 200
        assert client.delete(f"/api/v1/shipping/zones/{zone_id}").status_code == 404


class TestProductEndpoints:
    def test_create_product_under_limit(self, client, merchant, seeded_plans, add_products):
        add_products("store_1", 4)

        response = client.post("/api/v1/products", json={"name": "Caneca", "price": "19.90"})

        assert response.status_code == 200
        assert response.json()["name"] == "Caneca"

    def test_create_product_at_limit_returns_upgrade_payload(self, client, merchant, seeded_plans, add_products):
        add_products("store_1", 5)

        response = client.post("/api/v1/products", json={"name": "Caneca", "price": "19.90"})

        assert response.status_code == 403
        body = response.json()
        assert body["limit"] == 5
        assert body["current"] == 5
        assert body["upgradeRequired"] is True
        assert body["redirectTo"] == "/dashboard/subscription"


class TestSubscriptionEndpoints:
    def test_current_is_free_without_subscription(self, client, merchant, seeded_plans):
        response = client.get("/api/v1/subscriptions/current")

        assert response.status_code == 200
        assert response.json()["isFree"] is True
        assert response.json()["plan"]["slug"] == "gratis"

    def test_subscribe_paid_plan_requires_payment(self, client, merchant, seeded_plans):
        response = client.post("/api/v1/subscriptions/subscribe", json={"planId": seeded_plans["basico"].id})
        assert response.status_code == 402

    def test_subscribe_free_plan(self, client, merchant, seeded_plans):
        response = client.post("/api/v1/subscriptions/subscribe", json={"planId": seeded_plans["gratis"].id})

        assert response.status_code == 200
        assert response.json()["status"] == "active"

    def test_cancel_without_subscription(self, client, merchant):
        assert client.post("/api/v1/subscriptions/cancel").status_code == 404

    def test_usage(self, client, merchant, seeded_plans, add_products, add_orders):
        add_products("store_1", 4)
        add_orders("store_1", 1, created_at=datetime.now())

        response = client.get("/api/v1/subscriptions/usage")

        assert response.status_code == 200
        body = response.json()
        assert body["plan"]["slug"] == "gratis"
        assert body["products"]["current"] == 4
        assert body["products"]["near_limit"] is True
        assert body["orders"]["current"] == 1

    def test_usage_without_store(self, client):
        assert client.get("/api/v1/subscriptions/usage").status_code == 404
