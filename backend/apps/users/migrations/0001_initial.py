# Initial User model (developer, society_admin, member) owned by a society.

import uuid
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("societies", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
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
                ("password", models.CharField(max_length=128, verbose_name="password")),
                (
                    "last_login",
                    models.DateTimeField(
                        blank=True, null=True, verbose_name="last login"
                    ),
                ),
                ("email", models.EmailField(max_length=255, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("phone", models.CharField(blank=True, max_length=20, null=True)),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("developer", "Developer"),
                            ("society_admin", "Society Admin"),
                            ("member", "Member"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("inactive", "Inactive"),
                            ("suspended", "Suspended"),
                        ],
                        default="active",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "society",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="users",
                        to="societies.society",
                    ),
                ),
            ],
            options={
                "db_table": "users",
                "indexes": [
                    models.Index(
                        fields=["role", "status"], name="idx_user_role_status"
                    ),
                    models.Index(fields=["society"], name="idx_user_society"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            role__in=["developer", "society_admin", "member"]
                        ),
                        name="valid_role",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            status__in=["active", "inactive", "suspended"]
                        ),
                        name="valid_user_status",
                    ),
                    models.CheckConstraint(
                        condition=~models.Q(role="society_admin")
                        | models.Q(society__isnull=False),
                        name="society_admin_has_society",
                    ),
                    models.CheckConstraint(
                        condition=~models.Q(role="developer")
                        | models.Q(society__isnull=True),
                        name="developer_has_no_society",
                    ),
                ],
            },
        ),
    ]
