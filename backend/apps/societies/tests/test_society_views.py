"""
API tests for registration, approval queue, approval decision, detail,
document upload and statistics.
"""

import uuid
from unittest import mock

from django.db import IntegrityError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.audit.models import AuditLog
from apps.auth.services import issue_token
from apps.societies import services
from apps.societies.models import Society, SocietyDocument
from apps.societies.tests.helpers import (
    TempMediaMixin,
    pdf,
    png,
    registration_data,
    registration_files,
    registration_form,
)
from apps.users import services as user_services
from apps.users.models import User


class AuthenticatedMixin:
    def authenticate(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(user)}")


class SocietyRegistrationViewTests(TempMediaMixin, APITestCase):
    def setUp(self):
        self.url = reverse("auth:society-register")

    def test_example_registration_then_duplicate(self):
        form = registration_form(
            societyName="Alpha Co-op",
            registrationNumber="RC-001",
            societyType="credit",
            registrationCertificate=png(),
            bylaws=pdf(),
        )
        response = self.client.post(self.url, form, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        body = response.json()["data"]
        self.assertEqual(body["status"], "pending")
        self.assertEqual(len(body["documents"]), 2)
        self.assertTrue(Society.objects.filter(id=body["societyId"]).exists())

        duplicate = registration_form(registrationNumber="RC-001")
        response = self.client.post(self.url, duplicate, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json()["error"]["code"], "CONFLICT")
        self.assertEqual(Society.objects.count(), 1)
        self.assertEqual(User.objects.count(), 1)
        self.assertEqual(SocietyDocument.objects.count(), 2)

    def test_missing_certificate_returns_400(self):
        form = registration_form(registrationCertificate=None)
        response = self.client.post(self.url, form, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error"]["code"], "VALIDATION_ERROR")
        self.assertEqual(Society.objects.count(), 0)
        self.assertEqual(User.objects.count(), 0)

    def test_missing_text_fields_return_400(self):
        form = registration_form(adminEmail=None, societyName=None)
        response = self.client.post(self.url, form, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        details = response.json()["error"]["details"]
        self.assertIn("adminEmail", details)
        self.assertIn("societyName", details)

    def test_invalid_society_type_returns_400(self):
        response = self.client.post(
            self.url, registration_form(societyType="bank"), format="multipart"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invalid_email_returns_400(self):
        response = self.client.post(
            self.url, registration_form(adminEmail="not-an-email"), format="multipart"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_registration_ignores_stale_authorization_header(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer expired.token.value")
        response = self.client.post(self.url, registration_form(), format="multipart")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_duplicate_admin_email_differing_in_case_conflicts(self):
        first = self.client.post(
            self.url, registration_form(adminEmail="Admin@coop.example"), format="multipart"
        )
        second = self.client.post(
            self.url, registration_form(adminEmail="admin@coop.example"), format="multipart"
        )

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(User.objects.count(), 1)

    def test_non_duplicate_integrity_error_returns_500(self):
        with mock.patch.object(
            services, "add_document", side_effect=IntegrityError("NOT NULL constraint failed")
        ):
            response = self.client.post(self.url, registration_form(), format="multipart")

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.json()["error"]["code"], "INTERNAL_ERROR")
        self.assertEqual(Society.objects.count(), 0)

    def test_request_id_propagated(self):
        response = self.client.post(
            self.url,
            registration_form(),
            format="multipart",
            HTTP_X_REQUEST_ID="req-register-1",
        )
        self.assertEqual(response["X-Request-ID"], "req-register-1")


class ApprovalViewTests(TempMediaMixin, AuthenticatedMixin, APITestCase):
    def setUp(self):
        self.developer = user_services.create_developer(
            email="dev@coopbase.com", password="devpass", name="Dev"
        )
        result = services.register_society(registration_data(), registration_files())
        self.society = result.society
        self.admin = result.admin
        self.url = reverse("auth:society-approval", args=[self.society.id])

    def test_developer_approves(self):
        self.authenticate(self.developer)

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.put(
                self.url, {"status": "approved", "reason": "ok"}, format="json"
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["data"]["status"], "approved")
        self.assertEqual(response.json()["data"]["societyId"], str(self.society.id))
        entry = AuditLog.objects.get(action="SOCIETY_APPROVAL_UPDATE")
        self.assertEqual(entry.ip_address, "127.0.0.1")
        self.assertIsNotNone(entry.request_id)

    def test_oversized_request_id_still_audited(self):
        self.authenticate(self.developer)

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.put(
                self.url,
                {"status": "approved"},
                format="json",
                HTTP_X_REQUEST_ID="r" * 500,
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        entry = AuditLog.objects.get(action="SOCIETY_APPROVAL_UPDATE")
        self.assertEqual(entry.request_id, response["X-Request-ID"])
        self.assertLessEqual(len(entry.request_id), 64)

    def test_approving_twice_keeps_one_row_and_two_audits(self):
        self.authenticate(self.developer)

        for _ in range(2):
            with self.captureOnCommitCallbacks(execute=True):
                response = self.client.put(self.url, {"status": "approved"}, format="json")
            self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.assertEqual(Society.objects.filter(status="approved").count(), 1)
        self.assertEqual(
            AuditLog.objects.filter(action="SOCIETY_APPROVAL_UPDATE").count(), 2
        )

    def test_flip_returns_409(self):
        self.authenticate(self.developer)
        self.client.put(self.url, {"status": "approved"}, format="json")

        response = self.client.put(self.url, {"status": "rejected"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json()["error"]["code"], "INVALID_STATE")

    def test_invalid_status_returns_400(self):
        self.authenticate(self.developer)
        response = self.client.put(self.url, {"status": "maybe"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_society_returns_404(self):
        self.authenticate(self.developer)
        url = reverse("auth:society-approval", args=[uuid.uuid4()])
        response = self.client.put(url, {"status": "approved"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_without_token_returns_401(self):
        response = self.client.put(self.url, {"status": "approved"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.json()["error"]["code"], "UNAUTHORIZED")

    def test_society_admin_token_returns_403(self):
        self.authenticate(self.admin)
        response = self.client.put(self.url, {"status": "approved"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.json()["error"]["code"], "FORBIDDEN")
        self.assertEqual(Society.objects.get(id=self.society.id).status, "pending")

    def test_garbage_token_returns_401(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
        response = self.client.put(self.url, {"status": "approved"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class PendingSocietiesViewTests(TempMediaMixin, AuthenticatedMixin, APITestCase):
    def setUp(self):
        self.url = reverse("auth:pending-societies")
        self.developer = user_services.create_developer(
            email="dev@coopbase.com", password="devpass", name="Dev"
        )
        self.first = services.register_society(
            registration_data(admin_name="First Admin"),
            registration_files(additionalDocs=[pdf("minutes.pdf")]),
        )
        self.second = services.register_society(
            registration_data(admin_name="Second Admin"), registration_files()
        )
        services.decide_approval(self.second.society.id, "approved")

    def test_lists_pending_with_admin_contact_and_document_count(self):
        self.authenticate(self.developer)
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = response.json()["data"]
        self.assertEqual(len(rows), 1)
        row = rows[0]
        self.assertEqual(row["id"], str(self.first.society.id))
        self.assertEqual(row["adminName"], "First Admin")
        self.assertEqual(row["adminEmail"], self.first.admin.email)
        self.assertEqual(row["documentCount"], 3)

    def test_requires_developer(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        self.authenticate(self.first.admin)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class SocietyDetailViewTests(TempMediaMixin, AuthenticatedMixin, APITestCase):
    def setUp(self):
        result = services.register_society(registration_data(), registration_files())
        self.society = result.society
        self.admin = result.admin

    def test_detail_includes_admin_and_documents(self):
        url = reverse("auth:society-detail", args=[self.society.id])
        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()["data"]
        self.assertEqual(body["registrationNumber"], self.society.registration_number)
        self.assertEqual(body["admin"]["email"], self.admin.email)
        self.assertEqual(len(body["documents"]), 2)

    def test_detail_ignores_stale_authorization_header(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not.a.jwt")
        url = reverse("auth:society-detail", args=[self.society.id])
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_malformed_id_returns_json_404(self):
        response = self.client.get("/api/auth/society/not-a-uuid")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response["Content-Type"], "application/json")
        self.assertEqual(response.json()["error"]["code"], "NOT_FOUND")

    def test_unknown_society_returns_404(self):
        url = reverse("auth:society-detail", args=[uuid.uuid4()])
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()["error"]["code"], "NOT_FOUND")


class DocumentUploadViewTests(TempMediaMixin, AuthenticatedMixin, APITestCase):
    def setUp(self):
        result = services.register_society(registration_data(), registration_files())
        self.society = result.society
        self.admin = result.admin
        self.other = services.register_society(registration_data(), registration_files())
        self.url = reverse("auth:society-documents", args=[self.society.id])

    def test_admin_uploads_to_own_society(self):
        self.authenticate(self.admin)
        response = self.client.post(
            self.url, {"additionalDocs": [pdf("minutes.pdf")]}, format="multipart"
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.json()["data"]["documents"]), 1)
        self.assertEqual(SocietyDocument.objects.filter(society=self.society).count(), 3)

    def test_admin_of_other_society_forbidden(self):
        self.authenticate(self.other.admin)
        response = self.client.post(
            self.url, {"additionalDocs": [pdf("minutes.pdf")]}, format="multipart"
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class StatisticsViewTests(TempMediaMixin, AuthenticatedMixin, APITestCase):
    def test_counts(self):
        developer = user_services.create_developer(
            email="dev@coopbase.com", password="devpass", name="Dev"
        )
        services.register_society(registration_data(), registration_files())
        approved = services.register_society(registration_data(), registration_files())
        services.decide_approval(approved.society.id, "approved")

        self.authenticate(developer)
        response = self.client.get(reverse("auth:statistics"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        stats = response.json()["data"]
        self.assertEqual(stats["total_societies"], 2)
        self.assertEqual(stats["pending_societies"], 1)
        self.assertEqual(stats["approved_societies"], 1)
        self.assertEqual(stats["rejected_societies"], 0)
        self.assertEqual(stats["society_admin_users"], 2)
        self.assertEqual(stats["developer_users"], 1)
