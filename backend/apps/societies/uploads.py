"""
Multipart document handling for society registration and later uploads.

Validation happens before anything is written: field names, per-field
counts, the total count, per-file size and declared mime type. Stored files
go through Django's default_storage under societies/.
"""

import logging
import os
import uuid
from dataclasses import dataclass

from django.conf import settings
from django.core.files.storage import default_storage

from core.exceptions import ValidationError
from apps.societies.models import DocumentType

logger = logging.getLogger(__name__)

IMAGE_OR_PDF = ("image/jpeg", "image/jpg", "image/png", "application/pdf")
PDF_ONLY = ("application/pdf",)

UPLOAD_DIR = "societies"


@dataclass(frozen=True)
class FieldRule:
    document_type: str
    max_count: int
    required: bool
    mime_types: tuple


@dataclass(frozen=True)
class AcceptedUpload:
    field_name: str
    document_type: str
    file: object


@dataclass(frozen=True)
class StoredFile:
    file_name: str
    file_path: str
    file_size: int
    mime_type: str


REGISTRATION_FIELDS = {
    "registrationCertificate": FieldRule(
        DocumentType.REGISTRATION_CERTIFICATE, 1, True, IMAGE_OR_PDF
    ),
    "bylaws": FieldRule(DocumentType.BYLAWS, 1, True, PDF_ONLY),
    "additionalDocs": FieldRule(DocumentType.ADDITIONAL, 3, False, IMAGE_OR_PDF),
}

ADDITIONAL_FIELDS = {
    "additionalDocs": FieldRule(DocumentType.ADDITIONAL, 3, True, IMAGE_OR_PDF),
}


def _getlist(files, key):
    if files is None:
        return []
    if hasattr(files, "getlist"):
        return files.getlist(key)
    value = files.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def validate_uploads(files, rules):
    """
    Check uploaded files against per-field rules.

    Args:
        files: request.FILES (or a dict of field name -> file / list of files)
        rules: Mapping of field name -> FieldRule

    Returns:
        list[AcceptedUpload]: in rule order

    Raises:
        ValidationError: On a missing required file, unexpected field, too
            many files, oversized file or disallowed mime type
    """
    field_names = set(files.keys()) if files else set()
    unexpected = sorted(field_names - set(rules))
    if unexpected:
        raise ValidationError(
            "Unexpected file field in the request", {"fields": unexpected}
        )

    missing = [
        name for name, rule in rules.items() if rule.required and not _getlist(files, name)
    ]
    if missing:
        raise ValidationError(
            "Required documents are missing",
            {"missing": missing},
        )

    accepted = []
    for name, rule in rules.items():
        uploaded = _getlist(files, name)
        if len(uploaded) > rule.max_count:
            raise ValidationError(
                "Number of files exceeds the maximum allowed limit",
                {"field": name, "max_count": rule.max_count},
            )
        for f in uploaded:
            if f.size > settings.MAX_FILE_SIZE:
                raise ValidationError(
                    "File size exceeds the maximum allowed limit",
                    {"field": name, "file_name": f.name, "max_size": settings.MAX_FILE_SIZE},
                )
            content_type = (getattr(f, "content_type", None) or "").lower()
            if content_type not in rule.mime_types:
                raise ValidationError(
                    f"Invalid file type for {name}. Allowed types: {', '.join(rule.mime_types)}",
                    {"field": name, "mime_type": content_type},
                )
            accepted.append(AcceptedUpload(name, rule.document_type, f))

    if len(accepted) > settings.MAX_FILES_PER_REQUEST:
        raise ValidationError(
            "Number of files exceeds the maximum allowed limit",
            {"max_files": settings.MAX_FILES_PER_REQUEST},
        )

    return accepted


def store_upload(upload):
    """Persist one accepted file and return what the document row needs."""
    f = upload.file
    _, ext = os.path.splitext(f.name)
    name = f"{UPLOAD_DIR}/{upload.field_name}-{uuid.uuid4().hex}{ext.lower()}"
    path = default_storage.save(name, f)
    return StoredFile(
        file_name=os.path.basename(f.name),
        file_path=path,
        file_size=f.size,
        mime_type=f.content_type,
    )


def discard(paths):
    """Best-effort removal of files stored by a unit of work that failed."""
    for path in paths:
        try:
            default_storage.delete(path)
        except OSError:
            logger.warning("upload_cleanup_failed", extra={"entity_id": path})
