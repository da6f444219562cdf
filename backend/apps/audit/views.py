"""
Audit log views - query audit log entries.

Read-only - audit logs are append-only.
"""

from uuid import UUID

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.pagination import LimitOffsetPagination
from django.utils.dateparse import parse_datetime
from core.exceptions import error_body
from core.permissions import IsDeveloper
from apps.audit.models import AuditLog
from apps.audit.serializers import AuditLogSerializer


def _bad_request(message):
    return Response(
        error_body("VALIDATION_ERROR", message), status=status.HTTP_400_BAD_REQUEST
    )


@api_view(["GET"])
@permission_classes([IsDeveloper])
def query_audit_log(request):
    """
    GET /api/audit

    Query audit log entries with optional filters: action, societyId,
    actorId, fromDate, toDate (ISO 8601). Paginated with limit/offset.
    """
    action = request.query_params.get("action")
    society_id = request.query_params.get("societyId")
    actor_id = request.query_params.get("actorId")
    from_date = request.query_params.get("fromDate")
    to_date = request.query_params.get("toDate")

    queryset = AuditLog.objects.all()

    if action:
        queryset = queryset.filter(action=action)

    if society_id:
        try:
            queryset = queryset.filter(society_id=UUID(society_id))
        except ValueError:
            return _bad_request("Invalid societyId format")

    if actor_id:
        try:
            queryset = queryset.filter(actor_id=UUID(actor_id))
        except ValueError:
            return _bad_request("Invalid actorId format")

    if from_date:
        try:
            from_dt = parse_datetime(from_date)
        except ValueError:
            from_dt = None
        if from_dt is None:
            return _bad_request("Invalid fromDate format (use ISO 8601)")
        queryset = queryset.filter(created_at__gte=from_dt)

    if to_date:
        try:
            to_dt = parse_datetime(to_date)
        except ValueError:
            to_dt = None
        if to_dt is None:
            return _bad_request("Invalid toDate format (use ISO 8601)")
        queryset = queryset.filter(created_at__lte=to_dt)

    queryset = queryset.order_by("-created_at")

    # Paginate
    paginator = LimitOffsetPagination()
    paginator.default_limit = 50
    paginator.max_limit = 100

    page = paginator.paginate_queryset(queryset, request)
    serializer = AuditLogSerializer(page, many=True)

    return paginator.get_paginated_response(serializer.data)
