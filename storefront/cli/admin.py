import click
from storefront.core.config import settings
from storefront.core.database import SessionLocal
from storefront.core.errors import NotFoundError
from storefront.services.plan_catalog import PlanCatalog, seed_plans as seed_canonical_plans
from storefront.services.storage import SessionPlanSource, Storage
import logging

logger = logging.getLogger(__name__)


def _format_limit(value) -> str:
    return "unlimited" if value is None else str(value)


@click.group()
def cli():
    """Storefront admin commands"""
    pass


@cli.command()
def seed_plans():
    """Create or update the four canonical plans (gratis, basico, profissional, enterprise)"""
    db = SessionLocal()
    try:
        plans = seed_canonical_plans(Storage(db))
        click.echo(f"✓ Saved {len(plans)} plans:")
        for plan in sorted(plans, key=lambda p: p.price):
            click.echo(
                f"  - {plan.slug}: {plan.name} R$ {plan.price} "
                f"(products: {_format_limit(plan.max_products)}, orders/month: {_format_limit(plan.max_orders)})")
    except Exception as e:
        logger.error(f"CLI error: {e}")
        click.echo(f"❌ Error: {e}", err=True)
    finally:
        db.close()


@cli.command()
@click.option('--id', 'user_id', required=True, help='User id (Firebase UID)')
def usage(user_id):
    """Show a merchant's plan and usage against its ceilings"""
    # Imported here so seed-plans works without Firebase credentials
    from storefront.core.firebase import init_firebase
    from storefront.services.subscription_service import SubscriptionService
    from storefront.services.usage_service import UsageService

    if settings.analytics_enabled:
        init_firebase()

    db = SessionLocal()
    try:
        catalog = PlanCatalog(SessionPlanSource(SessionLocal), ttl_seconds=settings.plans_cache_ttl_seconds)
        service = UsageService(SubscriptionService(catalog))
        snapshot = service.usage(Storage(db), user_id)
        click.echo(f"Plan: {snapshot.plan.name} ({snapshot.plan.slug})")
        for label, resource in (("Products", snapshot.products), ("Orders this month", snapshot.orders)):
            marker = " ⚠" if resource.near_limit else ""
            click.echo(
                f"  {label}: {resource.current}/{_format_limit(resource.limit)} "
                f"({resource.percentage:.0f}%){marker}")
    except NotFoundError as e:
        click.echo(f"❌ {e}", err=True)
    except Exception as e:
        logger.error(f"CLI error: {e}")
        click.echo(f"❌ Error: {e}", err=True)
    finally:
        db.close()


if __name__ == '__main__':
    cli()
