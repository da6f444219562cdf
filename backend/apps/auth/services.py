"""
Login services for developers and society admins.

Both entry points look up an active user of one role, verify the password
with Django's hasher in constant time and issue a simplejwt access token.
The caller never learns whether the email or the password was wrong.
"""

import logging
from dataclasses import dataclass

from django.contrib.auth.hashers import check_password, make_password
from rest_framework_simplejwt.tokens import AccessToken

from core.exceptions import AuthenticationError, SocietyNotApprovedError
from apps.audit.services import record_event
from apps.societies.models import SocietyStatus
from apps.users import services as user_services
from apps.users.models import Role

logger = logging.getLogger(__name__)

# Hash checked against when no user matches, so a miss costs one hasher run.
_DUMMY_PASSWORD = "coopbase-dummy-password"


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: object
    society: object = None


def issue_token(user):
    """Signed access token carrying user_id, email, role and society_id."""
    token = AccessToken.for_user(user)
    token["email"] = user.email
    token["role"] = user.role
    if user.society_id is not None:
        token["society_id"] = str(user.society_id)
    return str(token)


def _verify_password(user, password):
    if user is None:
        check_password(password, make_password(_DUMMY_PASSWORD))
        return False
    return check_password(password, user.password)


def _fail(email, role, context, reason):
    logger.warning(
        "login_failed",
        extra={
            "operation": f"LOGIN_{role.upper()}",
            "entity_id": email,
            "request_id": getattr(context, "request_id", None),
            "reason": reason,
        },
    )


def _succeed(user, context):
    user_services.record_login(user)
    record_event(
        "LOGIN",
        actor_id=user.id,
        society_id=user.society_id,
        table_name="users",
        record_id=user.id,
        new_values={"role": user.role},
        context=context,
    )
    logger.info(
        "login_succeeded",
        extra={
            "operation": f"LOGIN_{user.role.upper()}",
            "entity_id": str(user.id),
            "request_id": getattr(context, "request_id", None),
        },
    )


def login_developer(email, password, context=None):
    """
    Authenticate a developer.

    Returns:
        LoginResult with token and user

    Raises:
        AuthenticationError: unknown email or wrong password
    """
    user = user_services.find_active_user_for_login(email, Role.DEVELOPER)
    if not _verify_password(user, password):
        _fail(email, Role.DEVELOPER, context, "invalid_credentials")
        raise AuthenticationError()

    _succeed(user, context)
    return LoginResult(token=issue_token(user), user=user)


def login_society(email, password, context=None):
    """
    Authenticate a society admin whose society is approved.

    The approval check runs before the password check.

    Raises:
        SocietyNotApprovedError: society is pending or rejected
        AuthenticationError: unknown email or wrong password
    """
    user = user_services.find_active_user_for_login(email, Role.SOCIETY_ADMIN)
    if user is not None and user.society.status != SocietyStatus.APPROVED:
        _fail(email, Role.SOCIETY_ADMIN, context, "society_not_approved")
        raise SocietyNotApprovedError(
            "Your society registration is still pending approval",
            {"status": user.society.status},
        )

    if not _verify_password(user, password):
        _fail(email, Role.SOCIETY_ADMIN, context, "invalid_credentials")
        raise AuthenticationError()

    _succeed(user, context)
    return LoginResult(token=issue_token(user), user=user, society=user.society)
