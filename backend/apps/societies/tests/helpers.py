"""
Shared builders for society tests: fake uploads and registration payloads.
"""

import shutil
import tempfile
import uuid

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def pdf(name="bylaws.pdf"):
    return SimpleUploadedFile(name, PDF_BYTES, content_type="application/pdf")


def png(name="certificate.png"):
    return SimpleUploadedFile(name, PNG_BYTES, content_type="image/png")


def registration_form(**overrides):
    """Multipart body accepted by POST /api/auth/society/register."""
    suffix = uuid.uuid4().hex[:8]
    form = {
        "societyName": "Alpha Co-op",
        "registrationNumber": f"RC-{suffix}",
        "societyType": "credit",
        "establishmentDate": "2020-01-15",
        "societyAddress": "1 Market Street",
        "adminName": "Ada Admin",
        "adminEmail": f"admin-{suffix}@alpha.coop",
        "adminPhone": "+15550001111",
        "password": "s3cret-pass",
        "registrationCertificate": png(),
        "bylaws": pdf(),
    }
    form.update(overrides)
    return {k: v for k, v in form.items() if v is not None}


def registration_data(**overrides):
    """Validated service-layer input for register_society."""
    suffix = uuid.uuid4().hex[:8]
    data = {
        "society_name": "Alpha Co-op",
        "registration_number": f"RC-{suffix}",
        "society_type": "credit",
        "establishment_date": "2020-01-15",
        "society_address": "1 Market Street",
        "admin_name": "Ada Admin",
        "admin_email": f"admin-{suffix}@alpha.coop",
        "admin_phone": "+15550001111",
        "password": "s3cret-pass",
    }
    data.update(overrides)
    return data


def registration_files(**overrides):
    files = {"registrationCertificate": png(), "bylaws": pdf()}
    files.update(overrides)
    return {k: v for k, v in files.items() if v is not None}


class TempMediaMixin:
    """Point MEDIA_ROOT at a throwaway directory for the test class."""

    @classmethod
    def setUpClass(cls):
        cls._media_root = tempfile.mkdtemp(prefix="coopbase-test-")
        cls._media_override = override_settings(MEDIA_ROOT=cls._media_root)
        cls._media_override.enable()
        super().setUpClass()

    @classmethod
    def tearDownClass(cls):
        super().tearDownClass()
        cls._media_override.disable()
        shutil.rmtree(cls._media_root, ignore_errors=True)
