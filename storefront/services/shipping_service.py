from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence
import logging
import re

from storefront.core.config import settings
from storefront.core.errors import NotFoundError
from storefront.models.shipping import ShippingConfig, ShippingZone
from storefront.services.analytics_service import AnalyticsService
from storefront.services.storage import Storage

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


def clean_zip(raw_zip: str) -> str:
    """Strip every non-digit character from a postal code"""
    return _NON_DIGITS.sub("", raw_zip or "")


@dataclass(frozen=True)
class ShippingQuote:
    cost: Decimal
    estimated_days: int
    is_free: bool

    def to_response(self) -> dict:
        return {
            'shippingCost': f"{self.cost:.2f}",
            'estimatedDays': self.estimated_days,
            'isFree': self.is_free,
        }


class ZoneMatcher:
    """
    Finds the zone whose [start, end] range contains a cleaned postal code.

    Bounds are compared as strings, not numbers. This is only correct while
    every code has the same digit count (8 for CEP); a 5-digit zone bound will
    compare oddly against an 8-digit code. Kept for compatibility with zones
    already configured by merchants.
    """

    def match(self, zones: Sequence[ShippingZone], cleaned_zip: str) -> Optional[ShippingZone]:
        for zone in zones:
            zip_start = clean_zip(zone.zip_code_start)
            zip_end = clean_zip(zone.zip_code_end)
            if zip_start <= cleaned_zip <= zip_end:
                return zone
        return None


class ShippingService:
    def __init__(self, matcher: ZoneMatcher = None):
        self.matcher = matcher or ZoneMatcher()
        self.analytics = AnalyticsService()
        self.logger = logging.getLogger(__name__)
        self.default_days = settings.default_estimated_days

    def quote(
        self,
        storage: Storage,
        store_id: str,
        raw_zip_code: str,
        order_subtotal: Decimal
    ) -> ShippingQuote:
        """
        Resolve the shipping cost for an order subtotal (after discounts).

        Order of precedence: free-shipping threshold, first matching active
        zone, store default cost. A store without config or zones quotes zero;
        missing data is never an error here.
        """
        self.logger.info(f"quote: Entry - store: {store_id}, zip: {raw_zip_code}, subtotal: {order_subtotal}")

        try:
            cleaned_zip = clean_zip(raw_zip_code)
            subtotal = Decimal(str(order_subtotal or 0))
            config = storage.get_shipping_config(store_id)

            threshold = config.free_shipping_threshold if config else None
            if threshold is not None and threshold > 0 and subtotal >= threshold:
                self.logger.info(f"quote: Success - free shipping threshold {threshold} met, store: {store_id}")
                return ShippingQuote(cost=Decimal("0"), estimated_days=self.default_days, is_free=True)

            zones = storage.get_shipping_zones(store_id)
            zone = self.matcher.match(zones, cleaned_zip)
            if zone is not None:
                cost = Decimal(zone.shipping_cost)
                days = zone.estimated_days or self.default_days
                self.logger.info(f"quote: Success - zone: {zone.name}, cost: {cost}, days: {days}")
                return ShippingQuote(cost=cost, estimated_days=days, is_free=cost == 0)

            default_cost = config.default_shipping_cost if config else None
            cost = Decimal(default_cost) if default_cost is not None else Decimal("0")
            self.logger.info(f"quote: Success - no zone for {cleaned_zip}, default cost: {cost}")
            return ShippingQuote(cost=cost, estimated_days=self.default_days, is_free=cost == 0)
        except Exception as e:
            self.analytics.log_failure(
                action='shipping_quote',
                error=str(e),
                parameters={'store_id': store_id}
            )
            self.logger.error(f"quote: Failure - {e}")
            raise

    def get_config(self, storage: Storage, store_id: str) -> Optional[ShippingConfig]:
        return storage.get_shipping_config(store_id)

    def save_config(
        self,
        storage: Storage,
        store_id: str,
        free_shipping_threshold: Optional[Decimal],
        default_shipping_cost: Optional[Decimal]
    ) -> ShippingConfig:
        """Create the store's shipping config, or update the existing row"""
        self.logger.info(f"save_config: Entry - store: {store_id}")

        try:
            config = storage.upsert_shipping_config(
                store_id,
                free_shipping_threshold=free_shipping_threshold,
                default_shipping_cost=default_shipping_cost if default_shipping_cost is not None else Decimal("0")
            )
            self.logger.info(f"save_config: Success - store: {store_id}, config: {config.id}")
            return config
        except Exception as e:
            self.logger.error(f"save_config: Failure - {e}")
            raise

    def list_zones(self, storage: Storage, store_id: str) -> list[ShippingZone]:
        return storage.get_shipping_zones(store_id)

    def create_zone(
        self,
        storage: Storage,
        store_id: str,
        name: str,
        zip_code_start: str,
        zip_code_end: str,
        shipping_cost: Decimal,
        estimated_days: Optional[int] = None,
        is_active: bool = True
    ) -> ShippingZone:
        self.logger.info(f"create_zone: Entry - store: {store_id}, name: {name}")

        try:
            zone = storage.create_shipping_zone(
                store_id,
                name=name,
                zip_code_start=clean_zip(zip_code_start),
                zip_code_end=clean_zip(zip_code_end),
                shipping_cost=shipping_cost,
                estimated_days=estimated_days if estimated_days is not None else self.default_days,
                is_active=is_active
            )
            self.logger.info(f"create_zone: Success - zone: {zone.id}")
            return zone
        except Exception as e:
            self.logger.error(f"create_zone: Failure - {e}")
            raise

    def update_zone(self, storage: Storage, store_id: str, zone_id: str, **fields) -> ShippingZone:
        self.logger.info(f"update_zone: Entry - store: {store_id}, zone: {zone_id}")

        zone = storage.get_shipping_zone(store_id, zone_id)
        if not zone:
            raise NotFoundError("Shipping zone", zone_id)

        # Bounds are stored as bare digits (String(8) columns)
        for bound in ('zip_code_start', 'zip_code_end'):
            if fields.get(bound) is not None:
                fields[bound] = clean_zip(fields[bound])

        zone = storage.update_shipping_zone(zone, **fields)
        self.logger.info(f"update_zone: Success - zone: {zone_id}")
        return zone

    def delete_zone(self, storage: Storage, store_id: str, zone_id: str):
        self.logger.info(f"delete_zone: Entry - store: {store_id}, zone: {zone_id}")

        zone = storage.get_shipping_zone(store_id, zone_id)
        if not zone:
            raise NotFoundError("Shipping zone", zone_id)

        storage.delete_shipping_zone(zone)
        self.logger.info(f"delete_zone: Success - zone: {zone_id}")
