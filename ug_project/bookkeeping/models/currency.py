from django.db import models


# ---------- Currency ----------
class Currency(models.Model):
    """
    ISO currencies. USD is the reporting currency of the books;
    anything else is treated as a foreign (FCY) currency.
    """
    code = models.CharField(max_length=3, primary_key=True)  # 'USD', 'EUR'
    name = models.CharField(max_length=64)
    symbol = models.CharField(max_length=8, blank=True, null=True)

    class Meta:
        verbose_name_plural = "currencies"

    def __str__(self):
        return self.code
