"""
WSGI entrypoint for the widgetfolio API (gunicorn widgetfolio.wsgi).
"""

import os

from django.core.wsgi import get_wsgi_application

_existing = os.environ.get("DJANGO_SETTINGS_MODULE")
if _existing:
	os.environ["DJANGO_SETTINGS_MODULE"] = _existing.strip()
else:
	os.environ.setdefault("DJANGO_SETTINGS_MODULE", "widgetfolio.settings")

application = get_wsgi_application()
