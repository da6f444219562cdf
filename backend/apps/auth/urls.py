"""
URL configuration for the /api/auth surface.
"""

from django.urls import path
from apps.auth import views
from apps.societies import views as society_views

app_name = "auth"

urlpatterns = [
    path("developer/login", views.developer_login, name="developer-login"),
    path("society/login", views.society_login, name="society-login"),
    path("logout", views.logout, name="logout"),
    path("society/register", society_views.register, name="society-register"),
    path("pending-societies", society_views.pending_societies, name="pending-societies"),
    path(
        "society/<uuid:societyId>/approval",
        society_views.update_approval,
        name="society-approval",
    ),
    path(
        "society/<uuid:societyId>/documents",
        society_views.upload_documents,
        name="society-documents",
    ),
    path("society/<uuid:societyId>", society_views.society_detail, name="society-detail"),
    path("statistics", society_views.statistics, name="statistics"),
]
