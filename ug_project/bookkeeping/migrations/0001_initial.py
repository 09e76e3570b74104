from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models

ENTITY_TYPES = [
    ("customer", "Customer"),
    ("supplier", "Supplier"),
    ("vendor", "Vendor"),
    ("commissionAgent", "Commission Agent"),
    ("freightForwarder", "Freight Forwarder"),
    ("clearingAgent", "Clearing Agent"),
    ("employee", "Employee"),
]

PACKING_TYPES = [
    ("Bales", "Bales"),
    ("Sacks", "Sacks"),
    ("Kg", "Kg"),
    ("Box", "Box"),
    ("Bags", "Bags"),
]

PLANNER_GROUPS = [
    ("customers", "Customers"),
    ("suppliers", "Suppliers"),
    ("expense_accounts", "Expense accounts"),
]


def money(**kwargs):
    return models.DecimalField(max_digits=18, decimal_places=2, **kwargs)


def company_fk():
    return models.ForeignKey(
        on_delete=django.db.models.deletion.CASCADE, to="bookkeeping.company"
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Currency",
            fields=[
                ("code", models.CharField(max_length=3, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=64)),
                ("symbol", models.CharField(blank=True, max_length=8, null=True)),
            ],
            options={"verbose_name_plural": "currencies"},
        ),
        migrations.CreateModel(
            name="Company",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=80, unique=True)),
                ("next_receipt_voucher_number", models.PositiveIntegerField(default=1)),
                ("next_payment_voucher_number", models.PositiveIntegerField(default=1)),
                ("next_expense_voucher_number", models.PositiveIntegerField(default=1)),
                ("next_journal_voucher_number", models.PositiveIntegerField(default=1)),
                ("next_packing_material_purchase_number", models.PositiveIntegerField(default=1)),
                ("planner_last_weekly_reset", models.DateField(blank=True, null=True)),
                ("planner_last_monthly_reset", models.DateField(blank=True, null=True)),
                ("snapshot_version", models.PositiveBigIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("base_currency", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="companies", to="bookkeeping.currency")),
            ],
            options={"verbose_name_plural": "companies"},
        ),
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=32)),
                ("name", models.CharField(max_length=200)),
                ("kind", models.CharField(choices=[
                    ("cash", "Cash"),
                    ("bank", "Bank"),
                    ("receivable", "Receivable"),
                    ("payable", "Payable"),
                    ("revenue", "Revenue"),
                    ("expense", "Expense"),
                    ("inventory", "Inventory"),
                    ("packing_inventory", "Packing Material Inventory"),
                    ("fixed_asset", "Fixed Asset"),
                    ("accumulated_depreciation", "Accumulated Depreciation"),
                    ("capital", "Capital"),
                    ("loan", "Loan"),
                    ("investment", "Investment"),
                ], max_length=30)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", company_fk()),
                ("currency", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, to="bookkeeping.currency")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "kind"], name="acct_company_kind_idx"),
                    models.Index(fields=["company", "code"], name="acct_company_code_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "code"), name="uq_company_account_code"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BusinessEntity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=32)),
                ("name", models.CharField(max_length=200)),
                ("entity_type", models.CharField(choices=ENTITY_TYPES, max_length=20)),
                ("is_active", models.BooleanField(default=True)),
                ("company", company_fk()),
                ("default_currency", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, to="bookkeeping.currency")),
            ],
            options={
                "verbose_name_plural": "business entities",
                "indexes": [
                    models.Index(fields=["company", "entity_type"], name="entity_company_type_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "code"), name="uq_company_entity_code"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AssetType",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("company", company_fk()),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("company", "name"), name="uq_company_asset_type"),
                ],
            },
        ),
        migrations.CreateModel(
            name="FixedAsset",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=40)),
                ("name", models.CharField(max_length=200)),
                ("purchase_date", models.DateField()),
                ("purchase_value", money()),
                ("location", models.CharField(blank=True, default="", max_length=200)),
                ("status", models.CharField(choices=[("Active", "Active"), ("Sold", "Sold"), ("Scrapped", "Scrapped")], default="Active", max_length=10)),
                ("company", company_fk()),
                ("asset_type", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="assets", to="bookkeeping.assettype")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "asset_type"], name="asset_company_type_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "code"), name="uq_company_asset_code"),
                ],
            },
        ),
        migrations.CreateModel(
            name="DepreciationEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("amount", money()),
                ("description", models.CharField(max_length=200)),
                ("voucher_id", models.CharField(max_length=64)),
                ("company", company_fk()),
                ("asset", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="depreciation_entries", to="bookkeeping.fixedasset")),
            ],
            options={
                "verbose_name_plural": "depreciation entries",
                "indexes": [
                    models.Index(fields=["company", "voucher_id"], name="dep_company_voucher_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Item",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=40)),
                ("name", models.CharField(max_length=200)),
                ("category", models.CharField(blank=True, default="", max_length=120)),
                ("packing_type", models.CharField(choices=PACKING_TYPES, max_length=10)),
                ("bale_size", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("avg_production_price", models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=18)),
                ("opening_stock", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14)),
                ("company", company_fk()),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("company", "code"), name="uq_company_item_code"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Production",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("quantity_produced", models.DecimalField(decimal_places=2, max_digits=14)),
                ("company", company_fk()),
                ("item", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="productions", to="bookkeeping.item")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "date"], name="prod_company_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SalesInvoice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("invoice_number", models.CharField(max_length=40)),
                ("date", models.DateField()),
                ("status", models.CharField(choices=[("Unposted", "Unposted"), ("Posted", "Posted"), ("Shipped", "Shipped")], default="Unposted", max_length=10)),
                ("company", company_fk()),
                ("customer", models.ForeignKey(limit_choices_to={"entity_type": "customer"}, on_delete=django.db.models.deletion.PROTECT, to="bookkeeping.businessentity")),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("company", "invoice_number"), name="uq_company_invoice_number"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SalesInvoiceItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.DecimalField(decimal_places=2, max_digits=14)),
                ("rate", models.DecimalField(blank=True, decimal_places=4, max_digits=18, null=True)),
                ("invoice", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="bookkeeping.salesinvoice")),
                ("item", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="sales_lines", to="bookkeeping.item")),
            ],
        ),
        migrations.CreateModel(
            name="OriginalType",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("packing_type", models.CharField(choices=PACKING_TYPES, max_length=10)),
                ("packing_size", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("company", company_fk()),
            ],
        ),
        migrations.CreateModel(
            name="OriginalPurchase",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("quantity_purchased", models.DecimalField(decimal_places=2, max_digits=14)),
                ("rate", models.DecimalField(decimal_places=4, max_digits=18)),
                ("conversion_rate", models.DecimalField(decimal_places=6, default=Decimal("1"), max_digits=18)),
                ("freight_amount", money(default=Decimal("0"))),
                ("freight_conversion_rate", models.DecimalField(decimal_places=6, default=Decimal("1"), max_digits=18)),
                ("clearing_amount", money(default=Decimal("0"))),
                ("clearing_conversion_rate", models.DecimalField(decimal_places=6, default=Decimal("1"), max_digits=18)),
                ("commission_amount", money(default=Decimal("0"))),
                ("commission_conversion_rate", models.DecimalField(decimal_places=6, default=Decimal("1"), max_digits=18)),
                ("discount_surcharge", money(default=Decimal("0"))),
                ("company", company_fk()),
                ("currency", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="bookkeeping.currency")),
                ("original_type", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="purchases", to="bookkeeping.originaltype")),
                ("supplier", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="bookkeeping.businessentity")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "date"], name="orig_purchase_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OriginalOpening",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("opened", models.DecimalField(decimal_places=2, max_digits=14)),
                ("total_kg", models.DecimalField(decimal_places=2, max_digits=14)),
                ("company", company_fk()),
                ("original_type", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="openings", to="bookkeeping.originaltype")),
            ],
        ),
        migrations.CreateModel(
            name="PackingMaterialItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("unit", models.CharField(choices=[("Roll", "Roll"), ("Kg", "Kg"), ("Box", "Box"), ("Pcs", "Pcs")], max_length=4)),
                ("opening_stock", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14)),
                ("company", company_fk()),
            ],
        ),
        migrations.CreateModel(
            name="PackingMaterialPurchase",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("purchase_id", models.CharField(max_length=40)),
                ("date", models.DateField()),
                ("quantity", models.DecimalField(decimal_places=2, max_digits=14)),
                ("rate", models.DecimalField(decimal_places=4, max_digits=18)),
                ("conversion_rate", models.DecimalField(decimal_places=6, default=Decimal("1"), max_digits=18)),
                ("total_amount_usd", money()),
                ("company", company_fk()),
                ("currency", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="bookkeeping.currency")),
                ("item", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="purchases", to="bookkeeping.packingmaterialitem")),
                ("vendor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="packing_purchases", to="bookkeeping.businessentity")),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("company", "purchase_id"), name="uq_company_pmp_id"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PlannerMember",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("group", models.CharField(choices=PLANNER_GROUPS, max_length=20)),
                ("company", company_fk()),
                ("entity", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, to="bookkeeping.businessentity")),
                ("account", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, to="bookkeeping.account")),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("company", "group", "entity", "account"), name="uq_planner_member"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PlannerData",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("group", models.CharField(choices=PLANNER_GROUPS, max_length=20)),
                ("cadence", models.CharField(choices=[("weekly", "Weekly"), ("monthly", "Monthly")], max_length=10)),
                ("current_plan", money(default=Decimal("0.00"))),
                ("last_plan", money(default=Decimal("0.00"))),
                ("last_actual", money(default=Decimal("0.00"))),
                ("company", company_fk()),
                ("entity", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, to="bookkeeping.businessentity")),
                ("account", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, to="bookkeeping.account")),
            ],
            options={
                "verbose_name_plural": "planner data",
                "constraints": [
                    models.UniqueConstraint(fields=("company", "group", "entity", "account", "cadence"), name="uq_planner_data"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Voucher",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("voucher_id", models.CharField(max_length=64)),
                ("date", models.DateField()),
                ("entry_type", models.CharField(choices=[("Receipt", "Receipt"), ("Payment", "Payment"), ("Expense", "Expense"), ("Journal", "Journal")], max_length=10)),
                ("description", models.TextField(blank=True, default="")),
                ("created_by", models.CharField(blank=True, default="", max_length=150)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("posting_fingerprint", models.CharField(max_length=64)),
                ("company", company_fk()),
                ("reverses", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="reversed_by", to="bookkeeping.voucher")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "date"], name="voucher_company_date_idx"),
                    models.Index(fields=["company", "entry_type"], name="voucher_company_type_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "voucher_id"), name="uq_company_voucher_id"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("debit", money(default=Decimal("0.00"))),
                ("credit", money(default=Decimal("0.00"))),
                ("description", models.TextField(blank=True, default="")),
                ("entity_type", models.CharField(blank=True, choices=ENTITY_TYPES, default="", max_length=20)),
                ("original_amount", money(blank=True, null=True)),
                ("created_by", models.CharField(blank=True, default="", max_length=150)),
                ("company", company_fk()),
                ("voucher", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="entries", to="bookkeeping.voucher")),
                ("account", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="entries", to="bookkeeping.account")),
                ("entity", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="entries", to="bookkeeping.businessentity")),
                ("original_currency", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, to="bookkeeping.currency")),
            ],
            options={
                "verbose_name_plural": "journal entries",
                "indexes": [
                    models.Index(fields=["company", "account"], name="entry_company_account_idx"),
                    models.Index(fields=["account", "entity"], name="entry_account_entity_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("debit__gte", 0), ("credit__gte", 0)), name="ck_entry_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("actor", models.CharField(blank=True, default="", max_length=150)),
                ("action", models.CharField(max_length=50)),
                ("object_type", models.CharField(max_length=100)),
                ("object_id", models.CharField(max_length=100)),
                ("changes", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="bookkeeping.company")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "created_at"], name="audit_company_created_idx"),
                ],
            },
        ),
    ]
