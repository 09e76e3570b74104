from .account import Account
from .auditlog import AuditLog
from .company import Company
from .currency import Currency
from .entity import BusinessEntity
from .fixed_asset import AssetType, DepreciationEntry, FixedAsset
from .inventory import (Item, OriginalOpening, OriginalPurchase, OriginalType,
                        Production, SalesInvoice, SalesInvoiceItem)
from .journal import JournalEntry, Voucher
from .packing import PackingMaterialItem, PackingMaterialPurchase
from .planner import PlannerData, PlannerMember
