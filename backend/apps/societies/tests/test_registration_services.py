"""
Service-level tests for society registration, approval and document upload.
"""

import datetime
import uuid
from unittest import mock

from django.core.files.storage import default_storage
from django.db import IntegrityError
from django.test import TestCase

from core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from apps.audit.models import AuditLog
from apps.societies import services
from apps.societies.models import Society, SocietyDocument
from apps.societies.tests.helpers import (
    TempMediaMixin,
    pdf,
    png,
    registration_data,
    registration_files,
)
from apps.users.models import User
from apps.users import services as user_services


class RegisterSocietyTests(TempMediaMixin, TestCase):
    def _counts(self):
        return (
            Society.objects.count(),
            User.objects.count(),
            SocietyDocument.objects.count(),
        )

    def test_registration_creates_society_admin_and_documents(self):
        data = registration_data(registration_number="RC-001")
        files = registration_files(additionalDocs=[pdf("minutes.pdf")])

        result = services.register_society(data, files)

        self.assertEqual(result.society.status, "pending")
        self.assertEqual(result.society.registration_number, "RC-001")
        self.assertEqual(result.society.establishment_date, datetime.date(2020, 1, 15))
        self.assertEqual(result.admin.role, "society_admin")
        self.assertEqual(result.admin.status, "active")
        self.assertEqual(result.admin.society_id, result.society.id)
        self.assertTrue(result.admin.check_password("s3cret-pass"))
        self.assertEqual(
            sorted(d.document_type for d in result.documents),
            ["additional", "bylaws", "registration_certificate"],
        )
        self.assertEqual(self._counts(), (1, 1, 3))
        for document in result.documents:
            self.assertTrue(default_storage.exists(document.file_path))
            self.assertTrue(document.file_path.startswith("societies/"))

    def test_registration_audit_written_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            result = services.register_society(registration_data(), registration_files())

        self.assertEqual(len(callbacks), 1)
        entry = AuditLog.objects.get(action="SOCIETY_REGISTRATION")
        self.assertEqual(entry.society_id, result.society.id)
        self.assertEqual(entry.actor_id, result.admin.id)
        self.assertEqual(entry.record_id, str(result.society.id))
        self.assertEqual(entry.new_values["status"], "pending")

    def test_missing_bylaws_writes_nothing(self):
        with self.assertRaises(ValidationError) as ctx:
            services.register_society(
                registration_data(), registration_files(bylaws=None)
            )

        self.assertIn("bylaws", ctx.exception.details["missing"])
        self.assertEqual(self._counts(), (0, 0, 0))

    def test_missing_certificate_writes_nothing(self):
        with self.assertRaises(ValidationError):
            services.register_society(
                registration_data(), registration_files(registrationCertificate=None)
            )

        self.assertEqual(self._counts(), (0, 0, 0))

    def test_bylaws_must_be_pdf(self):
        with self.assertRaises(ValidationError) as ctx:
            services.register_society(
                registration_data(), registration_files(bylaws=png("bylaws.png"))
            )

        self.assertEqual(ctx.exception.details["field"], "bylaws")

    def test_too_many_additional_docs_rejected(self):
        extra = [pdf(f"extra-{i}.pdf") for i in range(4)]
        with self.assertRaises(ValidationError):
            services.register_society(
                registration_data(), registration_files(additionalDocs=extra)
            )

        self.assertEqual(self._counts(), (0, 0, 0))

    def test_unexpected_file_field_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            services.register_society(
                registration_data(), registration_files(avatar=png("me.png"))
            )

        self.assertEqual(ctx.exception.details["fields"], ["avatar"])

    def test_oversized_file_rejected(self):
        with self.settings(MAX_FILE_SIZE=10):
            with self.assertRaises(ValidationError) as ctx:
                services.register_society(registration_data(), registration_files())

        self.assertEqual(ctx.exception.message, "File size exceeds the maximum allowed limit")

    def test_invalid_society_type_rejected(self):
        with self.assertRaises(ValidationError):
            services.register_society(
                registration_data(society_type="bank"), registration_files()
            )

    def test_missing_text_field_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            services.register_society(
                registration_data(admin_phone=""), registration_files()
            )

        self.assertEqual(ctx.exception.details["missing"], ["admin_phone"])

    def test_invalid_date_rejected(self):
        with self.assertRaises(ValidationError):
            services.register_society(
                registration_data(establishment_date="15/01/2020"), registration_files()
            )

    def test_duplicate_registration_number_conflicts(self):
        services.register_society(
            registration_data(registration_number="RC-001"), registration_files()
        )

        with self.assertRaises(ConflictError):
            services.register_society(
                registration_data(registration_number="RC-001"), registration_files()
            )

        self.assertEqual(self._counts(), (1, 1, 2))

    def test_duplicate_admin_email_conflicts(self):
        services.register_society(
            registration_data(admin_email="ada@alpha.coop"), registration_files()
        )

        with self.assertRaises(ConflictError) as ctx:
            services.register_society(
                registration_data(admin_email="ada@alpha.coop"), registration_files()
            )

        self.assertEqual(ctx.exception.details["field"], "adminEmail")
        self.assertEqual(self._counts(), (1, 1, 2))

    def test_concurrent_duplicate_surfaces_as_conflict(self):
        services.register_society(
            registration_data(registration_number="RC-RACE"), registration_files()
        )

        original = services._registration_conflict
        checks = []

        def racing(data):
            # Second request passed the pre-check before the first one committed
            checks.append(data)
            return None if len(checks) == 1 else original(data)

        with mock.patch.object(services, "_registration_conflict", side_effect=racing):
            with self.assertRaises(ConflictError) as ctx:
                services.register_society(
                    registration_data(registration_number="RC-RACE"),
                    registration_files(),
                )

        self.assertEqual(ctx.exception.details["field"], "registrationNumber")
        self.assertEqual(len(checks), 2)
        self.assertEqual(self._counts(), (1, 1, 2))

    def test_non_duplicate_integrity_error_is_not_a_conflict(self):
        stored = []

        def broken(**kwargs):
            stored.append(kwargs["file_path"])
            raise IntegrityError("CHECK constraint failed: valid_document_type")

        with mock.patch.object(services, "add_document", side_effect=broken):
            with self.assertRaises(IntegrityError):
                services.register_society(registration_data(), registration_files())

        self.assertEqual(self._counts(), (0, 0, 0))
        self.assertEqual(len(stored), 1)
        self.assertFalse(default_storage.exists(stored[0]))

    def test_failure_mid_registration_rolls_back_rows_and_files(self):
        original = services.add_document
        stored = []

        def flaky(**kwargs):
            stored.append(kwargs["file_path"])
            if len(stored) == 2:
                raise RuntimeError("disk full")
            return original(**kwargs)

        with mock.patch.object(services, "add_document", side_effect=flaky):
            with self.assertRaises(RuntimeError):
                services.register_society(registration_data(), registration_files())

        self.assertEqual(self._counts(), (0, 0, 0))
        self.assertEqual(len(stored), 2)
        for path in stored:
            self.assertFalse(default_storage.exists(path))


class DecideApprovalTests(TempMediaMixin, TestCase):
    def setUp(self):
        self.developer = user_services.create_developer(
            email="dev@coopbase.com", password="devpass", name="Dev"
        )
        self.society = services.register_society(
            registration_data(), registration_files()
        ).society

    def test_pending_to_approved(self):
        with self.captureOnCommitCallbacks(execute=True):
            society = services.decide_approval(
                self.society.id, "approved", reason="Looks good", actor=self.developer
            )

        self.assertEqual(society.status, "approved")
        entry = AuditLog.objects.get(action="SOCIETY_APPROVAL_UPDATE")
        self.assertEqual(entry.old_values, {"status": "pending"})
        self.assertEqual(entry.new_values, {"status": "approved", "reason": "Looks good"})
        self.assertEqual(entry.actor_id, self.developer.id)

    def test_pending_to_rejected(self):
        society = services.decide_approval(self.society.id, "rejected")
        self.assertEqual(society.status, "rejected")

    def test_approving_twice_is_idempotent_and_audited_twice(self):
        with self.captureOnCommitCallbacks(execute=True):
            services.decide_approval(self.society.id, "approved", actor=self.developer)
        with self.captureOnCommitCallbacks(execute=True):
            society = services.decide_approval(
                self.society.id, "approved", actor=self.developer
            )

        self.assertEqual(society.status, "approved")
        self.assertEqual(Society.objects.count(), 1)
        self.assertEqual(
            AuditLog.objects.filter(action="SOCIETY_APPROVAL_UPDATE").count(), 2
        )

    def test_approved_cannot_flip_to_rejected(self):
        services.decide_approval(self.society.id, "approved")

        with self.assertRaises(InvalidStateError):
            services.decide_approval(self.society.id, "rejected")

        self.assertEqual(Society.objects.get(id=self.society.id).status, "approved")

    def test_rejected_cannot_flip_to_approved(self):
        services.decide_approval(self.society.id, "rejected")

        with self.assertRaises(InvalidStateError):
            services.decide_approval(self.society.id, "approved")

    def test_invalid_decision(self):
        with self.assertRaises(ValidationError):
            services.decide_approval(self.society.id, "pending")

    def test_unknown_society(self):
        with self.assertRaises(NotFoundError):
            services.decide_approval(uuid.uuid4(), "approved")

    def test_caller_instance_is_not_mutated(self):
        services.decide_approval(self.society.id, "approved")
        self.assertEqual(self.society.status, "pending")


class UploadDocumentsTests(TempMediaMixin, TestCase):
    def setUp(self):
        result = services.register_society(registration_data(), registration_files())
        self.society = result.society
        self.admin = result.admin

    def test_additional_documents_added(self):
        with self.captureOnCommitCallbacks(execute=True):
            documents = services.upload_documents(
                self.society.id,
                {"additionalDocs": [pdf("minutes.pdf"), png("photo.png")]},
                actor=self.admin,
            )

        self.assertEqual(len(documents), 2)
        self.assertEqual(services.list_documents(self.society.id).count(), 4)
        self.assertTrue(AuditLog.objects.filter(action="DOCUMENT_UPLOAD").exists())

    def test_upload_requires_additional_docs(self):
        with self.assertRaises(ValidationError):
            services.upload_documents(self.society.id, {})

    def test_upload_rejects_other_fields(self):
        with self.assertRaises(ValidationError):
            services.upload_documents(self.society.id, {"bylaws": pdf()})
