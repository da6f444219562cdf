import logging
import uuid
from contextvars import ContextVar
from dataclasses import dataclass

# Context var for request_id so logging filter can access it (Gunicorn logs
# don't have record.request; they run in the same request context).
_request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_current_request_id() -> str | None:
    """Return the current request_id from context, for logging."""
    return _request_id_ctx.get()


@dataclass(frozen=True)
class RequestContext:
    """Request provenance recorded alongside audit entries."""

    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None


def get_client_ip(request) -> str | None:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def context_from_request(request) -> RequestContext:
    return RequestContext(
        ip_address=get_client_ip(request),
        user_agent=request.META.get("HTTP_USER_AGENT"),
        request_id=getattr(request, "request_id", None) or get_current_request_id(),
    )


class RequestIDFilter(logging.Filter):
    """Injects request_id, operation and entity_id into log records."""

    def filter(self, record):
        # Flow records carry operation/entity_id; everything else gets "-"
        for name in ("operation", "entity_id"):
            if not hasattr(record, name):
                setattr(record, name, "-")

        # Django logs may pass extra={"request": request}; Gunicorn logs use contextvar
        request = getattr(record, "request", None)
        if getattr(record, "request_id", None):
            return True
        record.request_id = (
            getattr(request, "request_id", None) or get_current_request_id()
        )
        return True


class RequestIDMiddleware:
    """
    Injects X-Request-ID into:
    - request object
    - response header
    - logging context (via request attribute)
    """

    HEADER_NAME = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-ID"
    # audit_logs.request_id column width
    MAX_LENGTH = 64

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = (request.META.get(self.HEADER_NAME) or "").strip()

        if not request_id or len(request_id) > self.MAX_LENGTH:
            request_id = str(uuid.uuid4())

        request.request_id = request_id
        token = _request_id_ctx.set(request_id)

        try:
            response = self.get_response(request)
        finally:
            _request_id_ctx.reset(token)
        response[self.RESPONSE_HEADER] = request_id
        return response
