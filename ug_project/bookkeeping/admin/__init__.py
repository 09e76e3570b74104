from .actions import reverse_vouchers
from .inlines import DepreciationEntryInline, JournalEntryInline
from .journal import AuditLogAdmin, VoucherAdmin
from .masters import (AccountAdmin, AssetTypeAdmin, BusinessEntityAdmin,
                      CompanyAdmin, CurrencyAdmin, FixedAssetAdmin, ItemAdmin,
                      PackingMaterialItemAdmin, PackingMaterialPurchaseAdmin)
from .mixins import ReadOnlyAdminMixin
