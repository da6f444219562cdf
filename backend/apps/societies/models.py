"""
Society domain models: Society, SocietyDocument.

A society is a cooperative tenant. It owns its admin user(s) and the
documents uploaded with its registration; both go away with it.
"""

import uuid
from django.db import models


class SocietyType(models.TextChoices):
    CREDIT = "credit"
    CONSUMER = "consumer"
    PRODUCER = "producer"
    HOUSING = "housing"
    WORKER = "worker"
    OTHER = "other"


class SocietyStatus(models.TextChoices):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DocumentType(models.TextChoices):
    REGISTRATION_CERTIFICATE = "registration_certificate"
    BYLAWS = "bylaws"
    ADDITIONAL = "additional"


class Society(models.Model):
    """Society model - registered cooperative awaiting or past approval."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    registration_number = models.CharField(max_length=100, unique=True)
    society_type = models.CharField(max_length=20, choices=SocietyType.choices)
    establishment_date = models.DateField()
    address = models.TextField()
    status = models.CharField(
        max_length=20, choices=SocietyStatus.choices, default=SocietyStatus.PENDING
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "societies"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(
                    society_type__in=[
                        "credit",
                        "consumer",
                        "producer",
                        "housing",
                        "worker",
                        "other",
                    ]
                ),
                name="valid_society_type",
            ),
            models.CheckConstraint(
                condition=models.Q(status__in=["pending", "approved", "rejected"]),
                name="valid_society_status",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="idx_society_status"),
            models.Index(fields=["created_at"], name="idx_society_created"),
        ]

    def __str__(self):
        return f"{self.name} ({self.status})"


class SocietyDocument(models.Model):
    """Document uploaded for a society. Never updated after creation."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    society = models.ForeignKey(
        Society, on_delete=models.CASCADE, related_name="documents"
    )
    document_type = models.CharField(max_length=30, choices=DocumentType.choices)
    file_name = models.CharField(max_length=255)
    file_path = models.CharField(max_length=500)  # Storage path or identifier
    file_size = models.PositiveIntegerField()
    mime_type = models.CharField(max_length=100)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "society_documents"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(
                    document_type__in=[
                        "registration_certificate",
                        "bylaws",
                        "additional",
                    ]
                ),
                name="valid_document_type",
            ),
        ]
        indexes = [
            models.Index(fields=["society"], name="idx_document_society"),
        ]

    def __str__(self):
        return f"{self.document_type}: {self.file_name}"
