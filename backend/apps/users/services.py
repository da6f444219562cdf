"""
Service-layer functions for the Users app.

This module exists to keep models passive:
- No business logic in models
- No permission logic in models
- Persistence orchestration (create/save/update) lives here

Update functions never mutate the instance they are given; they write the
change-set and return a freshly loaded record.
"""

from __future__ import annotations

from typing import Any, Optional

from django.contrib.auth.hashers import make_password
from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from core.exceptions import ConflictError, NotFoundError, ValidationError
from apps.societies.state_machine import validate_transition
from apps.users.models import Role, User, UserStatus

ROLE_PERMISSIONS = {
    Role.DEVELOPER: (
        "manage_societies",
        "approve_registrations",
        "view_all_data",
        "system_admin",
    ),
    Role.SOCIETY_ADMIN: (
        "manage_society",
        "manage_members",
        "manage_services",
        "view_society_data",
    ),
    Role.MEMBER: ("view_own_data", "make_transactions"),
}

UPDATABLE_FIELDS = ("name", "phone", "status")


def normalize_email(email: Optional[str]) -> str:
    """Emails are stored and compared lowercased."""
    return User.objects.normalize_email((email or "").strip()).lower()


def create_user(
    *,
    email: str,
    password: Optional[str] = None,
    name: Optional[str] = None,
    role: str = Role.MEMBER,
    phone: Optional[str] = None,
    society=None,
    status: str = UserStatus.ACTIVE,
    **extra_fields: Any,
) -> User:
    """
    Create and persist a user with a hashed password.

    A user without a password gets an unusable password hash.
    """
    if not email:
        raise ValueError("The email field must be set")

    user = User(
        email=normalize_email(email),
        name=name or email,
        role=role,
        phone=phone,
        society=society,
        status=status,
        **extra_fields,
    )
    user.set_password(password)
    user.save()
    return user


def create_developer(
    *, email: str, password: Optional[str] = None, **extra_fields: Any
) -> User:
    """Create a system-wide developer. Only one developer per email."""
    if find_user_by_email_and_role(email, Role.DEVELOPER) is not None:
        raise ConflictError("Developer user already exists")

    extra_fields.pop("role", None)
    extra_fields.pop("society", None)
    return create_user(
        email=email,
        password=password,
        role=Role.DEVELOPER,
        status=UserStatus.ACTIVE,
        **extra_fields,
    )


def create_society_admin(
    *,
    society,
    email: str,
    password: str,
    name: str,
    phone: Optional[str] = None,
) -> User:
    """
    Create the admin user for a society.

    Args:
        society: Owning Society (must already be persisted)
    """
    if email_exists(email):
        raise ConflictError(
            "A user with this email is already registered",
            {"field": "adminEmail"},
        )

    user = User(
        email=normalize_email(email),
        name=name,
        phone=phone,
        role=Role.SOCIETY_ADMIN,
        society=society,
        status=UserStatus.ACTIVE,
        password=make_password(password),
    )
    user.save()
    return user


def get_user(user_id) -> User:
    try:
        return User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise NotFoundError(f"User {user_id} does not exist")


def find_user_by_email(email) -> Optional[User]:
    return User.objects.filter(email=normalize_email(email)).first()


def find_user_by_email_and_role(email, role) -> Optional[User]:
    return User.objects.filter(email=normalize_email(email), role=role).first()


def find_active_user_for_login(email, role) -> Optional[User]:
    """Active user of the given role, with the owning society preloaded."""
    return (
        User.objects.select_related("society")
        .filter(email=normalize_email(email), role=role, status=UserStatus.ACTIVE)
        .first()
    )


def find_society_admin(society_id) -> Optional[User]:
    return User.objects.filter(society_id=society_id, role=Role.SOCIETY_ADMIN).first()


def list_users(*, role=None, society_id=None, status=None):
    queryset = User.objects.all()
    if role:
        queryset = queryset.filter(role=role)
    if society_id:
        queryset = queryset.filter(society_id=society_id)
    if status:
        queryset = queryset.filter(status=status)
    return queryset.order_by("-created_at")


def email_exists(email) -> bool:
    return User.objects.filter(email=normalize_email(email)).exists()


def update_user(user: User, changes: dict) -> User:
    """
    Apply a change-set to a user and return the stored result.

    Only name, phone and status can change; unknown keys are rejected.
    Status moves through the user transition table.
    """
    unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
    if unknown:
        raise ValidationError(
            "These fields cannot be updated", {"fields": unknown}
        )

    fields = {k: v for k, v in changes.items() if v is not None}
    if not fields:
        return get_user(user.id)

    with transaction.atomic():
        current = User.objects.select_for_update().filter(id=user.id).first()
        if current is None:
            raise NotFoundError(f"User {user.id} does not exist")

        if "status" in fields and fields["status"] != current.status:
            validate_transition("User", current.status, fields["status"])

        User.objects.filter(id=user.id).update(updated_at=timezone.now(), **fields)

    return get_user(user.id)


def update_password(user: User, new_password: str) -> User:
    if not new_password:
        raise ValidationError("Password must be non-empty")

    updated = User.objects.filter(id=user.id).update(
        password=make_password(new_password), updated_at=timezone.now()
    )
    if updated == 0:
        raise NotFoundError(f"User {user.id} does not exist")
    return get_user(user.id)


def record_login(user: User) -> None:
    User.objects.filter(id=user.id).update(last_login=timezone.now())


def delete_user(user_id) -> bool:
    deleted, _ = User.objects.filter(id=user_id).delete()
    return deleted > 0


def user_statistics() -> dict:
    return User.objects.aggregate(
        total_users=Count("id"),
        developer_users=Count("id", filter=Q(role=Role.DEVELOPER)),
        society_admin_users=Count("id", filter=Q(role=Role.SOCIETY_ADMIN)),
        member_users=Count("id", filter=Q(role=Role.MEMBER)),
        active_users=Count("id", filter=Q(status=UserStatus.ACTIVE)),
        inactive_users=Count("id", filter=Q(status=UserStatus.INACTIVE)),
        suspended_users=Count("id", filter=Q(status=UserStatus.SUSPENDED)),
    )


def permissions_for_role(role) -> tuple:
    return ROLE_PERMISSIONS.get(role, ())


def has_permission(user: User, permission: str) -> bool:
    return permission in permissions_for_role(user.role)
