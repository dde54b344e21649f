import logging

from django.apps import AppConfig
from django.db import DatabaseError

logger = logging.getLogger(__name__)


class PagesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pages"

    def ready(self):  # pragma: no cover - side-effect setup
        from django.db.models.signals import post_migrate

        def _ensure_global_settings(sender, **kwargs):
            from .models import SiteSettings

            try:
                SiteSettings.objects.global_settings()
            except DatabaseError as exc:
                logger.warning("Could not create the global site settings row: %s", exc)

        post_migrate.connect(_ensure_global_settings, sender=self, dispatch_uid="pages_global_settings")
