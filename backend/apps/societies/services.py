"""
Society services - registration, approval and entity access.

Rules:
- Registration is a single transaction.atomic unit
- Status changes go through the society transition table
- Audit entries are written after commit and never fail the caller
- Views never touch Society or SocietyDocument persistence directly
"""

import datetime
import logging
from dataclasses import dataclass, field

from django.db import IntegrityError, transaction
from django.db.models import Count, OuterRef, Subquery
from django.utils import timezone

from core.db import query
from core.exceptions import ConflictError, NotFoundError, ValidationError
from apps.audit.services import record_event_on_commit
from apps.societies import uploads
from apps.societies.models import (
    Society,
    SocietyDocument,
    SocietyStatus,
    SocietyType,
)
from apps.societies.state_machine import validate_transition
from apps.users import services as user_services
from apps.users.models import Role, User

logger = logging.getLogger(__name__)

REGISTRATION_FIELDS = (
    "society_name",
    "registration_number",
    "society_type",
    "establishment_date",
    "society_address",
    "admin_name",
    "admin_email",
    "admin_phone",
    "password",
)

UPDATABLE_FIELDS = ("name", "society_type", "address")

DECISIONS = (SocietyStatus.APPROVED, SocietyStatus.REJECTED)


@dataclass(frozen=True)
class RegistrationResult:
    society: Society
    admin: User
    documents: list = field(default_factory=list)


@dataclass(frozen=True)
class SocietyDetail:
    society: Society
    admin: User | None
    documents: list = field(default_factory=list)


def _request_id(context):
    return getattr(context, "request_id", None)


def _parse_date(value):
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(
            "Invalid establishment date, expected YYYY-MM-DD",
            {"field": "establishmentDate"},
        )


def _validate_registration(data):
    missing = [name for name in REGISTRATION_FIELDS if not data.get(name)]
    if missing:
        raise ValidationError("Missing required fields", {"missing": missing})

    if data["society_type"] not in SocietyType.values:
        raise ValidationError(
            "Invalid society type",
            {"field": "societyType", "allowed": list(SocietyType.values)},
        )

    return _parse_date(data["establishment_date"])


# Entity accessors


def create_society(
    *, name, registration_number, society_type, establishment_date, address
):
    return Society.objects.create(
        name=name,
        registration_number=registration_number,
        society_type=society_type,
        establishment_date=establishment_date,
        address=address,
        status=SocietyStatus.PENDING,
    )


def get_society(society_id):
    try:
        return Society.objects.get(id=society_id)
    except Society.DoesNotExist:
        raise NotFoundError("Society not found", {"society_id": str(society_id)})


def find_by_registration_number(registration_number):
    return Society.objects.filter(registration_number=registration_number).first()


def list_societies(*, status=None, society_type=None):
    queryset = Society.objects.all()
    if status:
        queryset = queryset.filter(status=status)
    if society_type:
        queryset = queryset.filter(society_type=society_type)
    return queryset.order_by("-created_at")


def update_society(society, changes):
    """
    Apply a change-set to a society and return the stored result.

    Only name, society_type and address can change here; status has its
    own path through update_status.
    """
    unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
    if unknown:
        raise ValidationError("These fields cannot be updated", {"fields": unknown})

    fields = {k: v for k, v in changes.items() if v is not None}
    if "society_type" in fields and fields["society_type"] not in SocietyType.values:
        raise ValidationError("Invalid society type", {"field": "society_type"})

    if fields:
        updated = Society.objects.filter(id=society.id).update(
            updated_at=timezone.now(), **fields
        )
        if updated == 0:
            raise NotFoundError("Society not found", {"society_id": str(society.id)})
    return get_society(society.id)


def update_status(society, new_status):
    """Move a society through the transition table. Returns the stored record."""
    validate_transition("Society", society.status, new_status)
    Society.objects.filter(id=society.id).update(
        status=new_status, updated_at=timezone.now()
    )
    return get_society(society.id)


def delete_society(society_id):
    """Delete a society; users, documents and audit rows go with it."""
    deleted, _ = Society.objects.filter(id=society_id).delete()
    return deleted > 0


def list_documents(society_id):
    return SocietyDocument.objects.filter(society_id=society_id).order_by(
        "uploaded_at"
    )


def add_document(*, society, document_type, file_name, file_path, file_size, mime_type):
    return SocietyDocument.objects.create(
        society=society,
        document_type=document_type,
        file_name=file_name,
        file_path=file_path,
        file_size=file_size,
        mime_type=mime_type,
    )


def pending_societies():
    """Pending societies, newest first, with admin contact and document count."""
    admins = User.objects.filter(
        society_id=OuterRef("pk"), role=Role.SOCIETY_ADMIN
    ).order_by("created_at")
    return (
        Society.objects.filter(status=SocietyStatus.PENDING)
        .annotate(
            admin_name=Subquery(admins.values("name")[:1]),
            admin_email=Subquery(admins.values("email")[:1]),
            admin_phone=Subquery(admins.values("phone")[:1]),
            document_count=Count("documents", distinct=True),
        )
        .order_by("-created_at")
    )


def get_society_detail(society_id):
    society = get_society(society_id)
    return SocietyDetail(
        society=society,
        admin=user_services.find_society_admin(society.id),
        documents=list(list_documents(society.id)),
    )


def society_statistics():
    """Counts of societies by status, plus user counts."""
    result = query(
        """
        SELECT
            COUNT(*) AS total_societies,
            SUM(CASE WHEN status = %s THEN 1 ELSE 0 END) AS pending_societies,
            SUM(CASE WHEN status = %s THEN 1 ELSE 0 END) AS approved_societies,
            SUM(CASE WHEN status = %s THEN 1 ELSE 0 END) AS rejected_societies
        FROM societies
        """,
        [SocietyStatus.PENDING, SocietyStatus.APPROVED, SocietyStatus.REJECTED],
    )
    row = result.rows[0] if result.rows else {}
    stats = {key: int(value or 0) for key, value in row.items()}
    stats.update(user_services.user_statistics())
    return stats


# Flows


def _registration_conflict(data):
    """ConflictError for a taken registration number or admin email, else None."""
    if find_by_registration_number(data["registration_number"]) is not None:
        return ConflictError(
            "Society with this registration number already exists",
            {"field": "registrationNumber"},
        )
    if user_services.email_exists(data["admin_email"]):
        return ConflictError(
            "A user with this email is already registered",
            {"field": "adminEmail"},
        )
    return None


def register_society(data, files, context=None):
    """
    Register a society together with its admin user and documents.

    Args:
        data: Mapping with society_name, registration_number, society_type,
            establishment_date, society_address, admin_name, admin_email,
            admin_phone, password
        files: Uploaded files keyed by form field
        context: RequestContext of the calling request

    Returns:
        RegistrationResult

    Raises:
        ValidationError: Missing/malformed fields or attachments
        ConflictError: Registration number or admin email already taken
    """
    establishment_date = _validate_registration(data)
    accepted = uploads.validate_uploads(files, uploads.REGISTRATION_FIELDS)

    conflict = _registration_conflict(data)
    if conflict is not None:
        raise conflict

    stored_paths = []
    try:
        with transaction.atomic():
            society = create_society(
                name=data["society_name"],
                registration_number=data["registration_number"],
                society_type=data["society_type"],
                establishment_date=establishment_date,
                address=data["society_address"],
            )
            admin = user_services.create_society_admin(
                society=society,
                email=data["admin_email"],
                password=data["password"],
                name=data["admin_name"],
                phone=data["admin_phone"],
            )
            documents = []
            for upload in accepted:
                stored = uploads.store_upload(upload)
                stored_paths.append(stored.file_path)
                documents.append(
                    add_document(
                        society=society,
                        document_type=upload.document_type,
                        file_name=stored.file_name,
                        file_path=stored.file_path,
                        file_size=stored.file_size,
                        mime_type=stored.mime_type,
                    )
                )
            record_event_on_commit(
                "SOCIETY_REGISTRATION",
                actor_id=admin.id,
                society_id=society.id,
                table_name="societies",
                record_id=society.id,
                new_values={
                    "name": society.name,
                    "registration_number": society.registration_number,
                    "society_type": society.society_type,
                    "status": society.status,
                    "documents": len(documents),
                },
                context=context,
            )
    except IntegrityError as exc:
        uploads.discard(stored_paths)
        # Only a concurrent duplicate is a conflict; other violations are 500s
        conflict = _registration_conflict(data)
        if conflict is None:
            raise
        raise conflict from exc
    except Exception:
        uploads.discard(stored_paths)
        raise

    logger.info(
        "society_registered",
        extra={
            "operation": "SOCIETY_REGISTRATION",
            "entity_id": str(society.id),
            "request_id": _request_id(context),
        },
    )
    return RegistrationResult(society=society, admin=admin, documents=documents)


def decide_approval(society_id, decision, reason=None, actor=None, context=None):
    """
    Record a developer's decision on a society registration.

    Re-applying the current decision is allowed and audited again; flipping
    an approved society to rejected (or back) is not.

    Returns:
        Society: stored record with the new status

    Raises:
        ValidationError: decision is not approved/rejected
        NotFoundError: society does not exist
        InvalidStateError: transition not allowed
    """
    if decision not in DECISIONS:
        raise ValidationError(
            "Status must be either approved or rejected",
            {"field": "status", "allowed": list(DECISIONS)},
        )

    with transaction.atomic():
        society = Society.objects.select_for_update().filter(id=society_id).first()
        if society is None:
            raise NotFoundError("Society not found", {"society_id": str(society_id)})

        old_status = society.status
        society = update_status(society, decision)

        record_event_on_commit(
            "SOCIETY_APPROVAL_UPDATE",
            actor_id=getattr(actor, "id", None),
            society_id=society.id,
            table_name="societies",
            record_id=society.id,
            old_values={"status": old_status},
            new_values={"status": decision, "reason": reason},
            context=context,
        )

    logger.info(
        "society_approval_updated",
        extra={
            "operation": "SOCIETY_APPROVAL_UPDATE",
            "entity_id": str(society.id),
            "request_id": _request_id(context),
        },
    )
    return society


def upload_documents(society_id, files, actor=None, context=None):
    """Attach additional documents to an existing society."""
    society = get_society(society_id)
    accepted = uploads.validate_uploads(files, uploads.ADDITIONAL_FIELDS)

    stored_paths = []
    try:
        with transaction.atomic():
            documents = []
            for upload in accepted:
                stored = uploads.store_upload(upload)
                stored_paths.append(stored.file_path)
                documents.append(
                    add_document(
                        society=society,
                        document_type=upload.document_type,
                        file_name=stored.file_name,
                        file_path=stored.file_path,
                        file_size=stored.file_size,
                        mime_type=stored.mime_type,
                    )
                )
            record_event_on_commit(
                "DOCUMENT_UPLOAD",
                actor_id=getattr(actor, "id", None),
                society_id=society.id,
                table_name="society_documents",
                record_id=society.id,
                new_values={"files": [d.file_name for d in documents]},
                context=context,
            )
    except Exception:
        uploads.discard(stored_paths)
        raise

    logger.info(
        "documents_uploaded",
        extra={
            "operation": "DOCUMENT_UPLOAD",
            "entity_id": str(society.id),
            "request_id": _request_id(context),
        },
    )
    return documents
