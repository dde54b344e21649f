"""
ASGI entrypoint for the widgetfolio API.

Exposes ``application`` for ASGI servers (uvicorn, daphne).
"""

import os

from django.core.asgi import get_asgi_application

# Some hosts inject the settings module with stray whitespace
_existing = os.environ.get("DJANGO_SETTINGS_MODULE")
if _existing:
	os.environ["DJANGO_SETTINGS_MODULE"] = _existing.strip()
else:
	os.environ.setdefault("DJANGO_SETTINGS_MODULE", "widgetfolio.settings")

application = get_asgi_application()
