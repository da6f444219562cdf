import time
from pathlib import Path

from django.conf import settings
from django.db import connection
from django.db.migrations.executor import MigrationExecutor
from django.utils import timezone
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView
from rest_framework.response import Response

from core.db import ping

_STARTED_AT = time.monotonic()


class LiveView(APIView):
    """Liveness probe: process is running. No DB or external deps."""

    permission_classes = [AllowAny]
    throttle_classes = []

    def get(self, request):
        return Response(
            {
                "status": "OK",
                "timestamp": timezone.now().isoformat(),
                "uptime": round(time.monotonic() - _STARTED_AT, 3),
            }
        )


class ReadyView(APIView):
    """Readiness probe: DB, migrations, upload directory."""

    permission_classes = [AllowAny]
    throttle_classes = []

    def get(self, request):
        return self._run_checks()

    def _run_checks(self):
        checks = {}

        # DB check
        try:
            checks["database"] = "ok" if ping() else "error"
        except Exception:
            checks["database"] = "error"

        # Migration consistency check
        try:
            executor = MigrationExecutor(connection)
            plan = executor.migration_plan(executor.loader.graph.leaf_nodes())
            checks["migrations"] = "ok" if not plan else "pending"
        except Exception:
            checks["migrations"] = "error"

        # Upload directory must exist (or be creatable) and be writable
        try:
            upload_root = Path(settings.MEDIA_ROOT)
            upload_root.mkdir(parents=True, exist_ok=True)
            probe = upload_root / ".ready_probe"
            probe.write_text("ok")
            probe.unlink()
            checks["uploads"] = "ok"
        except OSError:
            checks["uploads"] = "error"

        overall = "ready" if all(v == "ok" for v in checks.values()) else "not_ready"
        status_code = 200 if overall == "ready" else 503

        return Response({"status": overall, "checks": checks}, status=status_code)
