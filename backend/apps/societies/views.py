"""
Society API views: registration, approval queue, approval decision, detail,
document upload and statistics.

All mutations flow through the service layer.
"""

import logging

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.middleware import context_from_request
from core.permissions import IsDeveloper, IsSocietyAdmin
from apps.societies import services
from apps.societies.serializers import (
    ApprovalSerializer,
    DocumentSerializer,
    PendingSocietySerializer,
    SocietyDetailSerializer,
    SocietyRegistrationSerializer,
)

logger = logging.getLogger(__name__)


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def register(request):
    """
    POST /api/auth/society/register

    Multipart: society and admin fields plus registrationCertificate,
    bylaws and up to three additionalDocs.
    """
    serializer = SocietyRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    result = services.register_society(
        serializer.validated_data, request.FILES, context_from_request(request)
    )

    return Response(
        {
            "data": {
                "message": "Society registration submitted successfully",
                "societyId": str(result.society.id),
                "status": result.society.status,
                "documents": DocumentSerializer(result.documents, many=True).data,
            }
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET"])
@permission_classes([IsDeveloper])
def pending_societies(request):
    """GET /api/auth/pending-societies"""
    serializer = PendingSocietySerializer(services.pending_societies(), many=True)
    return Response({"data": serializer.data}, status=status.HTTP_200_OK)


@api_view(["PUT"])
@permission_classes([IsDeveloper])
def update_approval(request, societyId):
    """
    PUT /api/auth/society/{societyId}/approval

    Body: {"status": "approved" | "rejected", "reason": optional}
    """
    serializer = ApprovalSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    society = services.decide_approval(
        societyId,
        serializer.validated_data["status"],
        reason=serializer.validated_data.get("reason"),
        actor=request.user,
        context=context_from_request(request),
    )

    return Response(
        {
            "data": {
                "message": f"Society {society.status} successfully",
                "societyId": str(society.id),
                "status": society.status,
            }
        },
        status=status.HTTP_200_OK,
    )


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def society_detail(request, societyId):
    """GET /api/auth/society/{societyId}"""
    detail = services.get_society_detail(societyId)
    return Response(
        {"data": SocietyDetailSerializer(detail).data}, status=status.HTTP_200_OK
    )


@api_view(["POST"])
@permission_classes([IsSocietyAdmin])
def upload_documents(request, societyId):
    """POST /api/auth/society/{societyId}/documents"""
    documents = services.upload_documents(
        societyId,
        request.FILES,
        actor=request.user,
        context=context_from_request(request),
    )
    return Response(
        {"data": {"documents": DocumentSerializer(documents, many=True).data}},
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET"])
@permission_classes([IsDeveloper])
def statistics(request):
    """GET /api/auth/statistics"""
    return Response({"data": services.society_statistics()}, status=status.HTTP_200_OK)
