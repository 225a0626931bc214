"""WSGI entrypoint for Task Tracker (defaults to production settings)."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "task_tracker.settings.prod")

application = get_wsgi_application()
