"""
Authentication views: developer login, society login, logout.

No domain logic - authentication only.
"""

from rest_framework import status
from rest_framework.decorators import (
    api_view,
    authentication_classes,
    permission_classes,
    throttle_classes,
)
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.middleware import context_from_request
from core.throttling import LoginThrottle, WindowedIPThrottle
from apps.auth import services
from apps.auth.serializers import LoginSerializer, LogoutSerializer
from apps.societies.serializers import SocietySerializer
from apps.users.serializers import UserSerializer


def _credentials(request):
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data["email"], serializer.validated_data["password"]


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([WindowedIPThrottle, LoginThrottle])
def developer_login(request):
    """
    POST /api/auth/developer/login

    Authenticate a developer and return a JWT access token.
    """
    email, password = _credentials(request)
    result = services.login_developer(email, password, context_from_request(request))

    return Response(
        {
            "data": {
                "message": "Login successful",
                "token": result.token,
                "user": UserSerializer(result.user).data,
            }
        },
        status=status.HTTP_200_OK,
    )


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([WindowedIPThrottle, LoginThrottle])
def society_login(request):
    """
    POST /api/auth/society/login

    Authenticate a society admin of an approved society.
    """
    email, password = _credentials(request)
    result = services.login_society(email, password, context_from_request(request))

    return Response(
        {
            "data": {
                "message": "Login successful",
                "token": result.token,
                "user": UserSerializer(result.user).data,
                "society": SocietySerializer(result.society).data,
            }
        },
        status=status.HTTP_200_OK,
    )


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def logout(request):
    """
    POST /api/auth/logout

    Tokens are stateless; the client discards its token.
    """
    return Response(
        {"data": LogoutSerializer({}).data}, status=status.HTTP_200_OK
    )
