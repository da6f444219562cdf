"""
Engineering audit: Enforce service layer pattern.
Scans code and fails if society, user, document or audit rows are written
outside their service modules. Tests and migrations are not scanned.
"""

import sys
from pathlib import Path

FORBIDDEN_PATTERNS = {
    "Society.objects.create(": "apps/societies/services.py",
    "Society.objects.update(": "apps/societies/services.py",
    "SocietyDocument.objects.create(": "apps/societies/services.py",
    "User.objects.create(": "apps/users/services.py",
    "User(": "apps/users/services.py",
    "AuditLog.objects.create(": "apps/audit/services.py",
}

SKIPPED_PARTS = {"tests", "migrations", "__pycache__", ".venv", "scripts"}


def scan_file(filepath):
    """Scan Python file for forbidden patterns."""
    issues = []
    try:
        content = filepath.read_text()
    except OSError as exc:
        return [f"{filepath}: unreadable ({exc})"]

    posix = filepath.as_posix()
    for pattern, allowed_path in FORBIDDEN_PATTERNS.items():
        if posix.endswith(allowed_path):
            continue
        for lineno, line in enumerate(content.splitlines(), start=1):
            stripped = line.lstrip()
            if stripped.startswith(("class ", "#")):
                continue
            if f" {pattern}" in f" {stripped}" or f"={pattern}" in stripped:
                issues.append(f"{filepath}:{lineno}: Found {pattern}")
    return issues


def main():
    backend = Path(__file__).resolve().parent.parent
    all_issues = []

    for pyfile in backend.rglob("*.py"):
        if SKIPPED_PARTS.intersection(pyfile.relative_to(backend).parts):
            continue
        all_issues.extend(scan_file(pyfile))

    if all_issues:
        print("ERROR: Direct model writes detected outside the service layer:")
        for issue in all_issues:
            print(f"  {issue}")
        sys.exit(1)

    print("OK: No direct model writes outside service layer")


if __name__ == "__main__":
    main()
