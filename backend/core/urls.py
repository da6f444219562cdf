from django.urls import include, path

from health.views import LiveView, ReadyView

urlpatterns = [
    path("api/health", LiveView.as_view(), name="health-live"),
    path("api/health/ready", ReadyView.as_view(), name="health-ready"),
    path("api/auth/", include("apps.auth.urls")),
    path("api/audit", include("apps.audit.urls")),
]

handler404 = "core.exceptions.not_found_handler"
handler500 = "core.exceptions.server_error_handler"
