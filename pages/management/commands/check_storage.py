from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from pages.exceptions import StorageObjectNotFound, StorageUnavailable
from pages.imaging import proxy_base_url, to_proxy_url
from pages.storage_backends import delete_object, media_storage, read_object, write_object

PROBE_KEY = "uploads/check/storage-probe.txt"


class Command(BaseCommand):
    help = "Print effective storage config and run a write/read/delete round trip"

    def add_arguments(self, parser):
        parser.add_argument("--skip-write", action="store_true", help="Only print configuration.")

    def handle(self, *args, **options):
        storage = media_storage()
        self.stdout.write("== Storage configuration ==")
        self.stdout.write(f"DEBUG: {settings.DEBUG}")
        self.stdout.write(f"STORAGES.default: {settings.STORAGES.get('default')}")
        self.stdout.write(f"default storage class: {type(storage).__name__}")
        self.stdout.write(f"Supabase bucket: {getattr(storage, 'bucket', '-')}")
        self.stdout.write(f"Proxy base: {proxy_base_url() or '(relative)'}")

        if options["skip_write"]:
            return

        self.stdout.write("\n== Round trip ==")
        payload = b"hello-from-check-storage"
        try:
            key = write_object(PROBE_KEY, payload, "text/plain")
            self.stdout.write(f"Saved as: {key}")
            self.stdout.write(f"Proxy URL: {to_proxy_url(key)}")
            body, content_type = read_object(key)
            if body != payload:
                raise CommandError(f"Read back {len(body)} byte(s) that differ from what was written")
            self.stdout.write(f"Read back {len(body)} byte(s) as {content_type}")
            delete_object(key)
            try:
                read_object(key)
            except StorageObjectNotFound:
                self.stdout.write("Deleted.")
            else:
                raise CommandError(f"{key} is still readable after delete")
        except StorageUnavailable as exc:
            raise CommandError(f"Storage is unavailable: {exc}") from exc
        self.stdout.write(self.style.SUCCESS("Done."))
