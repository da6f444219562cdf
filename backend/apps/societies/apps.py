from django.apps import AppConfig


class SocietiesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.societies"
    label = "societies"
