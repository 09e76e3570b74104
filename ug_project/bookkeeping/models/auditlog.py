from django.db import models

from ..managers import TenantManager
from .company import Company


# ---------- Audit / Event log ----------
class AuditLog(models.Model):
    """Who did what to which object, with the relevant figures as JSON."""
    company = models.ForeignKey(Company, null=True, blank=True, on_delete=models.SET_NULL)
    # free-text actor; background jobs log as "system"
    actor = models.CharField(max_length=150, blank=True, default="")
    action = models.CharField(max_length=50)  # append, reverse, depreciate, ...
    object_type = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    changes = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        indexes = [models.Index(fields=["company", "created_at"], name="audit_company_created_idx")]

    def __str__(self):
        return f"[{self.created_at:%Y-%m-%d %H:%M}] {self.actor} {self.action} {self.object_type}({self.object_id})"
