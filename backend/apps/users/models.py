"""
User model for the CoopBase backend.

Fields: id (UUID), email, password, name, phone, role, society, status,
created_at, updated_at. Email unique. Role choices DEVELOPER, SOCIETY_ADMIN,
MEMBER. A developer never belongs to a society; a society admin always does.
"""

import uuid
from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.db import models


class Role(models.TextChoices):
    DEVELOPER = "developer"
    SOCIETY_ADMIN = "society_admin"
    MEMBER = "member"


class UserStatus(models.TextChoices):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class UserManager(BaseUserManager):
    """Custom user manager."""

    def create_user(self, email, password=None, name=None, role=Role.MEMBER, **extra_fields):
        from . import services

        return services.create_user(
            email=email,
            password=password,
            name=name,
            role=role,
            **extra_fields,
        )

    def create_superuser(self, email, password=None, **extra_fields):
        from . import services

        return services.create_developer(email=email, password=password, **extra_fields)


class User(AbstractBaseUser):
    """Custom User model with UUID primary key, role and owning society."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(max_length=255, unique=True)
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=20, null=True, blank=True)
    role = models.CharField(max_length=20, choices=Role.choices)
    society = models.ForeignKey(
        "societies.Society",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="users",
    )
    status = models.CharField(
        max_length=20, choices=UserStatus.choices, default=UserStatus.ACTIVE
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["name", "role"]

    objects = UserManager()

    class Meta:
        db_table = "users"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(role__in=["developer", "society_admin", "member"]),
                name="valid_role",
            ),
            models.CheckConstraint(
                condition=models.Q(status__in=["active", "inactive", "suspended"]),
                name="valid_user_status",
            ),
            # society_admin must reference a society
            models.CheckConstraint(
                condition=~models.Q(role="society_admin")
                | models.Q(society__isnull=False),
                name="society_admin_has_society",
            ),
            # developer is system-wide
            models.CheckConstraint(
                condition=~models.Q(role="developer") | models.Q(society__isnull=True),
                name="developer_has_no_society",
            ),
        ]
        indexes = [
            models.Index(fields=["role", "status"], name="idx_user_role_status"),
            models.Index(fields=["society"], name="idx_user_society"),
        ]

    def __str__(self):
        return self.email

    @property
    def is_active(self):
        """Only active accounts may authenticate."""
        return self.status == UserStatus.ACTIVE
