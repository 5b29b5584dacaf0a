"""WSGI entry point for BongoExpress."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "bongoexpress.settings")

application = get_wsgi_application()
