import datetime
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from bookkeeping.models import (Account, AssetType, BusinessEntity, Currency,
                                Item, PackingMaterialItem, Production)
from bookkeeping.models.account import CASH_CODE
from bookkeeping.services import (acquire_asset, create_book, record_expense,
                                  record_packing_purchase, record_receipt)


class Command(BaseCommand):
    help = "Create a demo book with the system chart of accounts and sample vouchers."

    def add_arguments(self, parser):
        parser.add_argument(
            "--company-name",
            default="USMAN GLOBAL",
            help="Name of the demo company to create.",
        )
        parser.add_argument(
            "--date",
            default=None,
            help="Date for the sample vouchers (YYYY-MM-DD, default today).",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        day = (
            datetime.date.fromisoformat(options["date"])
            if options["date"]
            else datetime.date.today()
        )
        actor = "create_demo_book"

        # 1. Book + chart of accounts
        company = create_book(options["company_name"], actor=actor)
        self.stdout.write(self.style.SUCCESS(f"Created book: {company} ({company.slug})"))

        eur, _ = Currency.objects.get_or_create(code="EUR", defaults={"name": "Euro"})
        cash = Account.objects.get(company=company, code=CASH_CODE)
        freight = Account.objects.create(
            company=company, code="EXP-001", name="Freight Charges", kind="expense"
        )

        # 2. Parties
        customer = BusinessEntity.objects.create(
            company=company, code="C1", name="Demo Customer",
            entity_type="customer", default_currency=eur,
        )
        vendor = BusinessEntity.objects.create(
            company=company, code="V1", name="Demo Packing Vendor", entity_type="vendor"
        )
        self.stdout.write(self.style.SUCCESS("Created customer and vendor"))

        # 3. Vouchers
        record_receipt(
            company, date=day, customer=customer, account=cash,
            amount=Decimal("500.00"), currency=eur, rate=Decimal("1.10"),
            description="Advance from Demo Customer", actor=actor,
        )
        record_expense(
            company, date=day, expense_account=freight, account=cash,
            amount=Decimal("120.00"), description="Inland freight", actor=actor,
        )
        self.stdout.write(self.style.SUCCESS("Created receipt and expense vouchers"))

        # 4. Assets, stock and packing material
        machinery = AssetType.objects.create(company=company, name="Machinery")
        acquire_asset(
            company, code="FA-0001", name="Baling Press", asset_type=machinery,
            purchase_date=day, purchase_value=Decimal("1000.00"), actor=actor,
        )
        item = Item.objects.create(
            company=company, code="ITM-001", name="Mixed Rags",
            packing_type="Bales", bale_size=Decimal("45"),
            avg_production_price=Decimal("0.80"), opening_stock=Decimal("10"),
        )
        Production.objects.create(company=company, date=day, item=item, quantity_produced=Decimal("5"))
        roll = PackingMaterialItem.objects.create(company=company, name="Stretch Film", unit="Roll")
        record_packing_purchase(
            company, date=day, vendor=vendor, item=roll, quantity=Decimal("20"),
            rate=Decimal("3.5"), currency="USD", actor=actor,
        )
        self.stdout.write(self.style.SUCCESS("Demo book setup complete!"))
