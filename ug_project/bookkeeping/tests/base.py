import datetime

from django.core.cache import cache
from django.test import TestCase

from bookkeeping.models import Account, BusinessEntity, Currency
from bookkeeping.services import create_book


def d(text):
    return datetime.date.fromisoformat(text)


class BookTestCase(TestCase):
    """A fresh book with the system accounts, a cash account and two parties."""

    def setUp(self):
        # ledgers are cached per snapshot; start every test cold
        cache.clear()
        self.company = create_book("Test Books")
        self.usd = Currency.objects.get(code="USD")
        self.eur = Currency.objects.create(code="EUR", name="Euro")
        self.cash = Account.objects.create(
            company=self.company, code="CASH-1", name="Cash Box", kind="cash"
        )
        self.customer = BusinessEntity.objects.create(
            company=self.company, code="C1", name="Customer One", entity_type="customer"
        )
        self.supplier = BusinessEntity.objects.create(
            company=self.company, code="S1", name="Supplier One", entity_type="supplier"
        )

    def account(self, code):
        return Account.objects.get(company=self.company, code=code)
