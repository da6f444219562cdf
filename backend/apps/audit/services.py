"""
Audit service - appends immutable audit log entries.

Recording is best-effort: a failed write is logged and dropped, it never
reaches the caller. Flows schedule entries with record_event_on_commit so
an entry is only written once the business transaction has committed.
"""

import logging
from functools import partial

from django.db import transaction

from apps.audit.models import AuditLog

logger = logging.getLogger(__name__)


def create_audit_entry(
    action,
    actor_id=None,
    society_id=None,
    table_name=None,
    record_id=None,
    old_values=None,
    new_values=None,
    context=None,
):
    """
    Create an audit log entry.

    Args:
        action: Action label (e.g. 'SOCIETY_REGISTRATION')
        actor_id: User identifier (None for anonymous/system events)
        society_id: Subject society identifier (optional)
        table_name: Affected table (e.g. 'societies')
        record_id: Identifier of affected row
        old_values: Snapshot before change (optional)
        new_values: Snapshot after change (optional)
        context: RequestContext with ip_address, user_agent, request_id

    Returns:
        AuditLog: Created audit log entry
    """
    return AuditLog.objects.create(
        action=action,
        actor_id=actor_id,
        society_id=society_id,
        table_name=table_name,
        record_id=str(record_id) if record_id is not None else None,
        old_values=old_values,
        new_values=new_values,
        ip_address=getattr(context, "ip_address", None),
        user_agent=getattr(context, "user_agent", None),
        request_id=getattr(context, "request_id", None),
    )


def record_event(action, **fields):
    """
    Append an audit entry, swallowing any failure.

    The insert runs in its own savepoint so a failure cannot poison an
    enclosing transaction.

    Returns:
        AuditLog or None when the write failed
    """
    try:
        with transaction.atomic():
            return create_audit_entry(action, **fields)
    except Exception:
        logger.exception(
            "audit_write_failed",
            extra={
                "operation": action,
                "entity_id": str(fields.get("record_id")),
                "request_id": getattr(fields.get("context"), "request_id", None),
            },
        )
        return None


def record_event_on_commit(action, **fields):
    """Schedule record_event to run after the current transaction commits."""
    transaction.on_commit(partial(record_event, action, **fields))
