from django.contrib import admin

from bookkeeping.models import (Account, AssetType, BusinessEntity, Company,
                                Currency, FixedAsset, Item,
                                PackingMaterialItem, PackingMaterialPurchase)

from .inlines import DepreciationEntryInline
from .mixins import ReadOnlyAdminMixin


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "base_currency", "snapshot_version")
    readonly_fields = (
        "snapshot_version",
        "next_receipt_voucher_number",
        "next_payment_voucher_number",
        "next_expense_voucher_number",
        "next_journal_voucher_number",
        "next_packing_material_purchase_number",
    )


@admin.register(Currency)
class CurrencyAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "symbol")


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "kind", "currency", "company", "is_active")
    list_filter = ("company", "kind", "is_active")
    search_fields = ("code", "name")

    # the code is what vouchers and reports key on
    def get_readonly_fields(self, request, obj=None):
        return ("code", "kind") if obj else ()


@admin.register(BusinessEntity)
class BusinessEntityAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "entity_type", "default_currency", "company")
    list_filter = ("company", "entity_type")
    search_fields = ("code", "name")


@admin.register(AssetType)
class AssetTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "company")


@admin.register(FixedAsset)
class FixedAssetAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "asset_type", "purchase_date", "purchase_value",
                    "book_value", "status")
    list_filter = ("company", "asset_type", "status")
    inlines = [DepreciationEntryInline]

    # created through acquire_asset so the voucher is written too
    def has_add_permission(self, request):
        return False

    def get_readonly_fields(self, request, obj=None):
        return ("company", "code", "purchase_date", "purchase_value", "asset_type")

    def book_value(self, obj):
        return obj.current_value


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "packing_type", "bale_size",
                    "avg_production_price", "opening_stock")
    list_filter = ("company", "packing_type")


@admin.register(PackingMaterialItem)
class PackingMaterialItemAdmin(admin.ModelAdmin):
    list_display = ("name", "unit", "opening_stock", "company")


@admin.register(PackingMaterialPurchase)
class PackingMaterialPurchaseAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("purchase_id", "date", "vendor", "item", "quantity", "total_amount_usd")
    list_filter = ("company",)
