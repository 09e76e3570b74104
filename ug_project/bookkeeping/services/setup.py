import logging

from django.db import transaction
from django.utils.text import slugify

from ..conf import get_setting
from ..models import Account, Company, Currency
from ..models.account import SYSTEM_ACCOUNTS
from .audit_helper import log_action

logger = logging.getLogger(__name__)


def unique_slug(name, max_tries=100):
    """slug of the name, with -1, -2, ... appended while taken."""
    base = slugify(name) or "company"
    slug = base
    i = 1
    while Company.objects.filter(slug=slug).exists():
        slug = f"{base}-{i}"
        i += 1
        if i > max_tries:
            raise RuntimeError("Couldn't generate unique slug")
    return slug


@transaction.atomic
def create_book(name, *, base_currency=None, actor=""):
    """A new company with the base currency and the system chart of accounts."""
    base_currency = base_currency or get_setting("BASE_CURRENCY")
    currency, _ = Currency.objects.get_or_create(
        code=base_currency, defaults={"name": base_currency}
    )
    company = Company.objects.create(
        name=name, slug=unique_slug(name), base_currency=currency
    )
    ensure_system_accounts(company)
    log_action(action="create", instance=company, company=company, actor=actor)
    logger.info("Created book %s", company)
    return company


def ensure_system_accounts(company):
    """Create any missing fixed-code accounts. Returns the ones created."""
    created = []
    for code, name, kind in SYSTEM_ACCOUNTS:
        account, was_created = Account.objects.get_or_create(
            company=company, code=code, defaults={"name": name, "kind": kind}
        )
        if was_created:
            created.append(account)
    return created
