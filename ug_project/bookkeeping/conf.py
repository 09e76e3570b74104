from decimal import Decimal

from django.conf import settings

DEFAULTS = {
    "BASE_CURRENCY": "USD",
    "JOURNAL_BALANCE_TOLERANCE": "0.001",
    "REPORT_BALANCE_EPSILON": "0.01",
    "LEDGER_CACHE_TIMEOUT": 300,
}

# settings that are compared against money amounts
DECIMAL_SETTINGS = ("JOURNAL_BALANCE_TOLERANCE", "REPORT_BALANCE_EPSILON")


def get_setting(name):
    """Read a value from settings.BOOKKEEPING, falling back to DEFAULTS."""
    overrides = getattr(settings, "BOOKKEEPING", {}) or {}
    value = overrides.get(name, DEFAULTS[name])
    if name in DECIMAL_SETTINGS:
        return Decimal(str(value))
    return value
