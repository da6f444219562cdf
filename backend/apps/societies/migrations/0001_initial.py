# Initial Society and SocietyDocument models.

import uuid
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Society",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("registration_number", models.CharField(max_length=100, unique=True)),
                (
                    "society_type",
                    models.CharField(
                        choices=[
                            ("credit", "Credit"),
                            ("consumer", "Consumer"),
                            ("producer", "Producer"),
                            ("housing", "Housing"),
                            ("worker", "Worker"),
                            ("other", "Other"),
                        ],
                        max_length=20,
                    ),
                ),
                ("establishment_date", models.DateField()),
                ("address", models.TextField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("approved", "Approved"),
                            ("rejected", "Rejected"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "societies",
                "indexes": [
                    models.Index(fields=["status"], name="idx_society_status"),
                    models.Index(fields=["created_at"], name="idx_society_created"),
                ],
                "constraints": [
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
                        condition=models.Q(
                            status__in=["pending", "approved", "rejected"]
                        ),
                        name="valid_society_status",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SocietyDocument",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "document_type",
                    models.CharField(
                        choices=[
                            ("registration_certificate", "Registration Certificate"),
                            ("bylaws", "Bylaws"),
                            ("additional", "Additional"),
                        ],
                        max_length=30,
                    ),
                ),
                ("file_name", models.CharField(max_length=255)),
                ("file_path", models.CharField(max_length=500)),
                ("file_size", models.PositiveIntegerField()),
                ("mime_type", models.CharField(max_length=100)),
                ("uploaded_at", models.DateTimeField(auto_now_add=True)),
                (
                    "society",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="documents",
                        to="societies.society",
                    ),
                ),
            ],
            options={
                "db_table": "society_documents",
                "indexes": [
                    models.Index(fields=["society"], name="idx_document_society"),
                ],
                "constraints": [
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
                ],
            },
        ),
    ]
