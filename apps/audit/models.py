"""Audit log model."""

from __future__ import annotations

from django.core.serializers.json import DjangoJSONEncoder  # type: ignore
from django.db import models  # type: ignore


class AuditLog(models.Model):
    class Action(models.TextChoices):
        CREATE = "CREATE", "Create"
        UPDATE = "UPDATE", "Update"
        DELETE = "DELETE", "Delete"

    action = models.CharField(max_length=10, choices=Action.choices)
    entity = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=64)
    actor = models.CharField(max_length=150, default="system")
    before = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    after = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [models.Index(fields=["entity", "entity_id"], name="audit_entity_idx")]

    def __str__(self) -> str:
        return f"{self.action} {self.entity}#{self.entity_id} by {self.actor}"
