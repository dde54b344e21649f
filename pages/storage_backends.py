import io
import logging
import mimetypes
import secrets
import re
import time
from typing import Optional, Tuple, List

from django.conf import settings
from django.core.files.base import ContentFile, File
from django.core.files.storage import Storage, storages
from django.utils import timezone
from supabase import create_client

from .exceptions import StorageObjectNotFound, StorageUnavailable
from .imaging import to_proxy_url

logger = logging.getLogger(__name__)

UPLOAD_KINDS = ("profile", "portfolio", "widget")

_supabase_client = None


def _get_client():
    global _supabase_client  # noqa: PLW0603
    if _supabase_client is None:
        url = getattr(settings, "SUPABASE_PROJECT_URL", "") or getattr(settings, "SUPABASE_URL", "")
        key = getattr(settings, "SUPABASE_SERVICE_ROLE_KEY", None) or getattr(settings, "SUPABASE_ANON_KEY", "")
        if not url or not key:
            raise StorageUnavailable("SUPABASE_PROJECT_URL and a service or anon key must be set")
        _supabase_client = create_client(url, key)
    return _supabase_client


def _status_of(exc) -> Optional[int]:
    for attr in ("status", "status_code", "statusCode", "code"):
        value = getattr(exc, attr, None)
        try:
            return int(value)
        except (TypeError, ValueError):
            continue
    return None


def _is_not_found(exc) -> bool:
    if _status_of(exc) == 404:
        return True
    text = str(exc).lower()
    return any(marker in text for marker in ("not found", "not_found", "nosuchkey", "does not exist"))


def _item_name(item) -> str:
    if isinstance(item, dict):
        return item.get("name") or ""
    return getattr(item, "name", "") or ""


class SupabaseMediaStorage(Storage):
    """Django Storage backend for a private Supabase Storage bucket.

    Objects are never exposed through bucket URLs; ``url()`` returns the
    ``/api/images/`` proxy link instead.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.bucket: str = getattr(settings, "SUPABASE_BUCKET", "media")
        if not self.bucket:
            raise StorageUnavailable("SUPABASE_BUCKET must be set")

    def _full_path(self, name: str) -> str:
        return name.lstrip("/")

    def _bucket(self):
        return _get_client().storage.from_(self.bucket)

    def _fail(self, operation: str, path: str, exc: Exception):
        if _is_not_found(exc):
            logger.debug("Object %s not found in bucket %s", path, self.bucket)
            raise StorageObjectNotFound(path) from exc
        logger.error(
            "Storage %s failed bucket=%s key=%s error=%s status=%s message=%s",
            operation,
            self.bucket,
            path,
            exc.__class__.__name__,
            _status_of(exc),
            exc,
        )
        raise StorageUnavailable(f"{operation} {path}: {exc}") from exc

    def _open(self, name: str, mode: str = "rb") -> File:
        path = self._full_path(name)
        try:
            resp = self._bucket().download(path)
        except Exception as exc:  # noqa: BLE001
            self._fail("download", path, exc)
        data = getattr(resp, "content", None) or resp
        return File(io.BytesIO(data), name=name)

    def _save(self, name: str, content: File) -> str:
        path = self._full_path(name)
        if hasattr(content, "seek"):
            content.seek(0)
        data = content.read()
        if isinstance(data, str):
            data = data.encode("utf-8")
        ctype = (
            getattr(content, "content_type", None)
            or mimetypes.guess_type(path)[0]
            or "application/octet-stream"
        )
        try:
            self._bucket().upload(path, data, file_options={"content-type": ctype, "upsert": "true"})
        except Exception as exc:  # noqa: BLE001
            self._fail("upload", path, exc)
        return name

    def get_available_name(self, name, max_length=None):
        # Uploads are upserted, keys are already unique per upload
        return name

    def _stat(self, name: str):
        path = self._full_path(name)
        pos = path.rfind("/")
        prefix = path[:pos] if pos != -1 else ""
        target = path[pos + 1 :] if pos != -1 else path
        try:
            items = self._bucket().list(prefix or None, {"search": target})
        except Exception as exc:  # noqa: BLE001
            self._fail("list", path, exc)
        for it in items or []:
            if _item_name(it) == target:
                return it
        return None

    def exists(self, name: str) -> bool:
        return self._stat(name) is not None

    def url(self, name: str) -> str:
        return to_proxy_url(self._full_path(name))

    def delete(self, name: str) -> None:
        path = self._full_path(name)
        try:
            self._bucket().remove([path])
        except Exception as exc:  # noqa: BLE001
            self._fail("remove", path, exc)

    def size(self, name: str) -> int:
        item = self._stat(name)
        if item is None:
            raise StorageObjectNotFound(self._full_path(name))
        metadata = item.get("metadata") if isinstance(item, dict) else getattr(item, "metadata", None)
        return int((metadata or {}).get("size") or 0)

    def listdir(self, path: str) -> Tuple[List[str], List[str]]:
        prefix = self._full_path(path or "")
        try:
            items = self._bucket().list(prefix or None)
        except Exception as exc:  # noqa: BLE001
            self._fail("list", prefix, exc)
        dirs: List[str] = []
        files: List[str] = []
        for it in items or []:
            # Folders come back without an object id
            is_dir = (it.get("id") if isinstance(it, dict) else getattr(it, "id", None)) is None
            (dirs if is_dir else files).append(_item_name(it))
        return dirs, files

    def get_modified_time(self, name: str):
        return timezone.now()

    def get_created_time(self, name: str):
        return timezone.now()

    def get_accessed_time(self, name: str):
        return timezone.now()


def media_storage() -> Storage:
    return storages["default"]


def _clean_file_name(original_name: str) -> Tuple[str, str]:
    base, dot, ext = (original_name or "file").rpartition(".")
    if not dot:
        base, ext = ext, "bin"
    base = re.sub(r"[^A-Za-z0-9]", "-", base) or "file"
    ext = re.sub(r"[^A-Za-z0-9]", "", ext).lower() or "bin"
    return base, ext


def build_upload_key(kind: str, original_name: str, owner: Optional[str] = None) -> str:
    if kind not in UPLOAD_KINDS:
        raise ValueError(f"Invalid upload type. Allowed types: {', '.join(UPLOAD_KINDS)}")
    base, ext = _clean_file_name(original_name)
    file_name = f"{base}-{int(time.time() * 1000)}-{secrets.token_hex(6)}.{ext}"
    if kind == "widget" and owner:
        clean_owner = re.sub(r"[^a-zA-Z0-9_-]", "_", owner)
        return f"uploads/{kind}/{clean_owner}/{file_name}"
    return f"uploads/{kind}/{file_name}"


def read_object(key: str) -> Tuple[bytes, str]:
    """Return ``(body, content_type)`` for a stored key."""
    key = key.lstrip("/")
    storage = media_storage()
    try:
        with storage.open(key, "rb") as fh:
            body = fh.read()
    except (StorageObjectNotFound, StorageUnavailable):
        raise
    except FileNotFoundError as exc:
        logger.debug("Object %s not found", key)
        raise StorageObjectNotFound(key) from exc
    except OSError as exc:
        logger.error("Reading %s from %s failed: %s", key, type(storage).__name__, exc)
        raise StorageUnavailable(str(exc)) from exc
    content_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
    return body, content_type


def write_object(key: str, data: bytes, content_type: Optional[str] = None) -> str:
    """Write ``data`` at exactly ``key``, replacing any previous object."""
    storage = media_storage()
    content = ContentFile(data, name=key.rsplit("/", 1)[-1])
    if content_type:
        content.content_type = content_type
    try:
        if storage.exists(key):
            storage.delete(key)
        return storage.save(key, content)
    except (StorageObjectNotFound, StorageUnavailable):
        raise
    except OSError as exc:
        logger.error("Writing %s to %s failed: %s", key, type(storage).__name__, exc)
        raise StorageUnavailable(str(exc)) from exc


def store_upload(upload, kind: str, owner: Optional[str] = None) -> str:
    key = build_upload_key(kind, getattr(upload, "name", "") or "file", owner)
    if hasattr(upload, "seek"):
        upload.seek(0)
    return write_object(key, upload.read(), getattr(upload, "content_type", None))


def delete_object(key: str) -> None:
    storage = media_storage()
    try:
        storage.delete(key.lstrip("/"))
    except StorageObjectNotFound:
        logger.debug("Object %s already gone", key)
