from django.core.management.base import BaseCommand

from pages.layouts import resolve_layout
from pages.models import Layout


class Command(BaseCommand):
    help = "Ensure the global default layout exists (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete every global layout and recreate the default one.",
        )

    def handle(self, *args, **options):
        if options["reset"]:
            deleted, _ = Layout.objects.filter(user__isnull=True).delete()
            self.stdout.write(f"Removed {deleted} global layout row(s) and widgets")

        layout = resolve_layout()
        count = layout.widgets.count()
        self.stdout.write(self.style.SUCCESS(f"Global layout #{layout.pk} '{layout.name}' has {count} widget(s)."))
