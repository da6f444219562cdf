#!/usr/bin/env python3
"""
FULL END-TO-END VALIDATION SCRIPT

Runs a complete flow against a running server: register a society with
documents, developer login, approve, society admin login, upload an extra
document. Validates the society ends up approved.

Requires: backend running (e.g. gunicorn -c gunicorn.conf.py core.wsgi) and
  the developer account from `python manage.py setup_coopbase`.
Usage: BASE_URL=http://localhost:3000 python backend/scripts/e2e_registration_flow.py
"""

import os
import sys
import uuid

import requests

BASE_URL = os.environ.get("BASE_URL", "http://localhost:3000")
API = f"{BASE_URL}/api"
DEVELOPER_EMAIL = os.environ.get("DEVELOPER_EMAIL", "admin@coopbase.com")
DEVELOPER_PASSWORD = os.environ.get("DEVELOPER_PASSWORD", "admin123")

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def log(msg):
    print(f"\n=== {msg} ===")


def assert_status(resp, expected):
    if resp.status_code != expected:
        print("FAILED:", resp.status_code, resp.text)
        sys.exit(1)


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


# -----------------------------
# STEP 0: HEALTH
# -----------------------------
log("Check readiness")
try:
    ready = requests.get(f"{API}/health/ready", timeout=5)
except requests.exceptions.ConnectionError:
    print(f"FAILED: server not reachable at {BASE_URL}")
    sys.exit(1)
assert_status(ready, 200)


# -----------------------------
# STEP 1: REGISTER SOCIETY
# -----------------------------
log("Register society")

suffix = uuid.uuid4().hex[:8]
admin_email = f"admin-{suffix}@e2e.coop"
admin_password = "e2e-pass-" + suffix

register = requests.post(
    f"{API}/auth/society/register",
    data={
        "societyName": f"E2E Co-op {suffix}",
        "registrationNumber": f"RC-E2E-{suffix}",
        "societyType": "credit",
        "establishmentDate": "2020-01-15",
        "societyAddress": "1 Test Street",
        "adminName": "E2E Admin",
        "adminEmail": admin_email,
        "adminPhone": "+15550009999",
        "password": admin_password,
    },
    files=[
        ("registrationCertificate", ("certificate.png", PNG_BYTES, "image/png")),
        ("bylaws", ("bylaws.pdf", PDF_BYTES, "application/pdf")),
    ],
    timeout=10,
)
assert_status(register, 201)
society_id = register.json()["data"]["societyId"]
print("Society:", society_id)


# -----------------------------
# STEP 2: PENDING LOGIN REFUSED
# -----------------------------
log("Society login before approval")
pending_login = requests.post(
    f"{API}/auth/society/login",
    json={"email": admin_email, "password": admin_password},
    timeout=10,
)
assert_status(pending_login, 403)


# -----------------------------
# STEP 3: DEVELOPER APPROVES
# -----------------------------
log("Login as developer")
dev_login = requests.post(
    f"{API}/auth/developer/login",
    json={"email": DEVELOPER_EMAIL, "password": DEVELOPER_PASSWORD},
    timeout=10,
)
assert_status(dev_login, 200)
dev_headers = bearer(dev_login.json()["data"]["token"])

pending = requests.get(f"{API}/auth/pending-societies", headers=dev_headers, timeout=10)
assert_status(pending, 200)
if society_id not in [s["id"] for s in pending.json()["data"]]:
    print("FAILED: society missing from pending queue")
    sys.exit(1)

log("Approve society")
approval = requests.put(
    f"{API}/auth/society/{society_id}/approval",
    json={"status": "approved", "reason": "e2e"},
    headers=dev_headers,
    timeout=10,
)
assert_status(approval, 200)


# -----------------------------
# STEP 4: SOCIETY ADMIN
# -----------------------------
log("Login as society admin")
society_login = requests.post(
    f"{API}/auth/society/login",
    json={"email": admin_email, "password": admin_password},
    timeout=10,
)
assert_status(society_login, 200)
admin_headers = bearer(society_login.json()["data"]["token"])

log("Upload additional document")
upload = requests.post(
    f"{API}/auth/society/{society_id}/documents",
    files=[("additionalDocs", ("minutes.pdf", PDF_BYTES, "application/pdf"))],
    headers=admin_headers,
    timeout=10,
)
assert_status(upload, 201)


# -----------------------------
# STEP 5: FINAL STATE
# -----------------------------
log("Verify final state")
detail = requests.get(f"{API}/auth/society/{society_id}", timeout=10)
assert_status(detail, 200)
society = detail.json()["data"]
if society["status"] != "approved" or len(society["documents"]) != 3:
    print("FAILED: unexpected final state:", society)
    sys.exit(1)

print("\nE2E registration flow PASSED")
