"""
Read-through cache over the plans table.

Plans are read on every storefront page load and must never hard-fail the UI,
so reads degrade in three steps: fresh cache, then stale cache when the
database is unreachable, then the built-in plan table below.
"""
from decimal import Decimal
from typing import Callable, Optional, Protocol
import logging
import threading
import time

from pydantic import BaseModel, ConfigDict

from storefront.services.storage import Storage

logger = logging.getLogger(__name__)

FREE_PLAN_SLUG = "gratis"


class PlanResponse(BaseModel):
    """Plan as served to the API and used by the entitlement services"""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    name: str
    slug: str
    price: Decimal
    max_products: Optional[int] = None
    max_orders: Optional[int] = None
    features: list[str] = []
    is_active: bool = True


DEFAULT_PLANS = [
    {
        'id': 'gratis',
        'name': 'Grátis',
        'slug': 'gratis',
        'price': Decimal('0.00'),
        'max_products': 5,
        'max_orders': 10,
        'features': ['Até 5 produtos', 'Até 10 pedidos/mês', 'Loja básica', 'Suporte por email'],
        'is_active': True,
    },
    {
        'id': 'basico',
        'name': 'Básico',
        'slug': 'basico',
        'price': Decimal('29.90'),
        'max_products': 50,
        'max_orders': 100,
        'features': ['Até 50 produtos', 'Até 100 pedidos/mês', 'Personalização de cores',
                     'Cupons de desconto', 'Suporte prioritário'],
        'is_active': True,
    },
    {
        'id': 'profissional',
        'name': 'Profissional',
        'slug': 'profissional',
        'price': Decimal('79.90'),
        'max_products': 200,
        'max_orders': None,
        'features': ['Até 200 produtos', 'Pedidos ilimitados', 'Personalização completa',
                     'Cupons ilimitados', 'Análises avançadas', 'Suporte VIP'],
        'is_active': True,
    },
    {
        'id': 'enterprise',
        'name': 'Enterprise',
        'slug': 'enterprise',
        'price': Decimal('199.90'),
        'max_products': None,
        'max_orders': None,
        'features': ['Produtos ilimitados', 'Pedidos ilimitados', 'Todas as funcionalidades',
                     'API personalizada', 'Suporte dedicado 24/7'],
        'is_active': True,
    },
]


def fallback_plans() -> list[PlanResponse]:
    plans = [PlanResponse(**data) for data in DEFAULT_PLANS]
    return sorted(plans, key=lambda plan: plan.price)


class PlanSource(Protocol):
    def get_all_plans(self) -> list: ...

    def get_plan_by_id(self, plan_id: str): ...

    def get_plan_by_slug(self, slug: str): ...


class PlanCatalog:
    def __init__(
        self,
        source: PlanSource,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic
    ):
        self.source = source
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._plans: Optional[list[PlanResponse]] = None
        self._loaded_at: float = 0.0
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

    def _is_fresh(self) -> bool:
        return self._plans is not None and (self.clock() - self._loaded_at) < self.ttl_seconds

    def list_active_plans(self) -> list[PlanResponse]:
        """Active plans ascending by price. Never raises."""
        with self._lock:
            if self._is_fresh():
                return list(self._plans)
            stale = self._plans

        try:
            plans = [PlanResponse.model_validate(plan) for plan in self.source.get_all_plans()]
        except Exception as e:
            self.logger.error(f"list_active_plans: Failure - {e}")
            if stale is not None:
                self.logger.warning("list_active_plans: Returning stale plans from cache")
                return list(stale)
            self.logger.warning("list_active_plans: Returning built-in plans")
            return fallback_plans()

        plans.sort(key=lambda plan: plan.price)
        with self._lock:
            self._plans = plans
            self._loaded_at = self.clock()
        self.logger.info(f"list_active_plans: Success - {len(plans)} plans")
        return list(plans)

    def get_by_id(self, plan_id: str) -> Optional[PlanResponse]:
        return self._get('id', plan_id, self.source.get_plan_by_id)

    def get_by_slug(self, slug: str) -> Optional[PlanResponse]:
        return self._get('slug', slug, self.source.get_plan_by_slug)

    def _get(self, field: str, value: str, lookup) -> Optional[PlanResponse]:
        try:
            plan = lookup(value)
            return PlanResponse.model_validate(plan) if plan is not None else None
        except Exception as e:
            self.logger.error(f"get_by_{field}: Failure - {e}, falling back to cached plans")
            for plan in self.list_active_plans():
                if getattr(plan, field) == value:
                    return plan
            return None

    def free_plan(self) -> PlanResponse:
        """The free tier, from storage when present, else the built-in definition"""
        plan = self.get_by_slug(FREE_PLAN_SLUG)
        if plan is None:
            self.logger.warning("free_plan: 'gratis' plan missing from storage, using built-in definition")
            plan = next(p for p in fallback_plans() if p.slug == FREE_PLAN_SLUG)
        return plan

    def invalidate(self):
        with self._lock:
            self._plans = None
            self._loaded_at = 0.0


def seed_plans(storage: Storage, catalog: PlanCatalog = None) -> list:
    """Write the four canonical plans to storage and drop any cached copy"""
    logger.info("seed_plans: Entry")

    try:
        plans = storage.upsert_plans([dict(data) for data in DEFAULT_PLANS])
        if catalog is not None:
            catalog.invalidate()
        logger.info(f"seed_plans: Success - {len(plans)} plans")
        return plans
    except Exception as e:
        storage.db.rollback()
        logger.error(f"seed_plans: Failure - {e}")
        raise
