import datetime
import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task
def initialize_planner_markers():
    """Set missing weekly / monthly planner markers on every book."""
    # import lazily to avoid circular imports at module import time
    from .services.planner import initialize_markers

    count = initialize_markers()
    logger.info("Initialised %d planner markers", count)
    return count


@shared_task
def post_depreciation_batch(company_id, asset_type_ids, rate, start, end, actor="system"):
    """Run a depreciation batch off-request. Dates arrive as ISO strings."""
    from .models import AssetType, Company
    from .services.assets import post_depreciation

    company = Company.objects.get(pk=company_id)
    asset_types = list(AssetType.objects.for_company(company).filter(pk__in=asset_type_ids))
    voucher, entries = post_depreciation(
        company,
        asset_types=asset_types,
        rate=rate,
        start=datetime.date.fromisoformat(start),
        end=datetime.date.fromisoformat(end),
        actor=actor,
    )
    return {"voucher_id": voucher.voucher_id, "assets": len(entries)}
