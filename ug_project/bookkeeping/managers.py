from django.db import models


# -----------------------------------------
# Scope every query to one book (company)
# -----------------------------------------
class TenantQuerySet(models.QuerySet):
    def for_company(self, company):
        return self.filter(company=company)


class TenantManager(models.Manager.from_queryset(TenantQuerySet)):
    pass


class JournalEntryQuerySet(TenantQuerySet):
    """Row-level filters used by the ledger and statement builders."""

    def up_to(self, date):
        return self.filter(voucher__date__lte=date)

    def between(self, start, end):
        return self.filter(voucher__date__gte=start, voucher__date__lte=end)

    def for_subledger(self, account, entity):
        # entity sub-ledgers share a general account
        return self.filter(account=account, entity=entity)

    def in_order(self):
        return self.order_by("voucher__date", "voucher__pk", "pk")


class JournalEntryManager(models.Manager.from_queryset(JournalEntryQuerySet)):
    pass
