"""
AuditLog model - immutable chronological record of security-relevant actions.

Audit logs are append-only. No update or delete operations through the ORM;
rows only disappear by cascade when their society is deleted.
"""

import uuid
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class AuditLogQuerySet(models.QuerySet):
    """Blocks bulk mutation of audit rows."""

    def update(self, **kwargs):
        raise ValueError("AuditLog entries are append-only. Updates are not allowed.")

    def delete(self):
        raise ValueError("AuditLog entries are append-only. Deletions are not allowed.")


class AuditLog(models.Model):
    """AuditLog model - immutable audit trail."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    actor = models.ForeignKey(
        "users.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_actions",
    )
    society = models.ForeignKey(
        "societies.Society",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="audit_logs",
    )
    action = models.CharField(max_length=100)
    table_name = models.CharField(max_length=50, null=True, blank=True)
    record_id = models.CharField(max_length=36, null=True, blank=True)
    old_values = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    new_values = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(null=True, blank=True)
    request_id = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        db_table = "audit_logs"
        indexes = [
            models.Index(fields=["table_name", "record_id"], name="idx_audit_record"),
            models.Index(fields=["created_at"], name="idx_audit_created"),
            models.Index(fields=["actor"], name="idx_audit_actor"),
            models.Index(fields=["society"], name="idx_audit_society"),
            models.Index(fields=["action"], name="idx_audit_action"),
        ]
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.action} - {self.table_name}:{self.record_id} at {self.created_at}"

    def save(self, *args, **kwargs):
        """Override save to prevent updates."""
        if self.pk and AuditLog.objects.filter(pk=self.pk).exists():
            raise ValueError(
                "AuditLog entries are append-only. Updates are not allowed."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Override delete to prevent deletion."""
        raise ValueError("AuditLog entries are append-only. Deletions are not allowed.")
