import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings")
import django  # noqa: E402

django.setup()

from django.conf import settings  # noqa: E402

# Disable Gunicorn's default handlers (stdout/stderr); logconfig_dict replaces them
errorlog = "-"
accesslog = "-"
loglevel = "info"
capture_output = True

bind = os.environ.get("BIND", "0.0.0.0:3000")
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))

# Gunicorn applies dictConfig; Django's LOGGING replaces its handlers
logconfig_dict = settings.LOGGING


def on_starting(server):
    """Create missing tables once, in the master, before workers fork."""
    from core.db import bootstrap_on_start

    bootstrap_on_start()
