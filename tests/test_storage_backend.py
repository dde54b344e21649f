import logging

import pytest
from django.core.files.base import ContentFile

from pages import storage_backends
from pages.exceptions import StorageObjectNotFound, StorageUnavailable
from pages.storage_backends import SupabaseMediaStorage


class StorageApiError(Exception):
    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status


class FakeBucket:
    def __init__(self, error=None, payload=b""):
        self.error = error
        self.payload = payload
        self.uploads = []

    def _maybe_raise(self):
        if self.error is not None:
            raise self.error

    def download(self, path):
        self._maybe_raise()
        return self.payload

    def upload(self, path, data, file_options=None):
        self._maybe_raise()
        self.uploads.append((path, data, file_options))

    def remove(self, paths):
        self._maybe_raise()

    def list(self, prefix=None, options=None):
        self._maybe_raise()
        return [{"name": "a.png", "id": "1", "metadata": {"size": 3}}]


class FakeClient:
    def __init__(self, bucket):
        self.bucket = bucket
        self.requested = []
        self.storage = self

    def from_(self, name):
        self.requested.append(name)
        return self.bucket


@pytest.fixture
def fake_bucket(monkeypatch):
    def install(**kwargs):
        bucket = FakeBucket(**kwargs)
        client = FakeClient(bucket)
        monkeypatch.setattr(storage_backends, "_get_client", lambda: client)
        return client

    return install


@pytest.fixture
def storage_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="pages.storage_backends")
    return caplog


def test_download_reads_from_configured_bucket(fake_bucket, settings):
    settings.SUPABASE_BUCKET = "portfolio-media"
    client = fake_bucket(payload=b"png")

    with SupabaseMediaStorage().open("/uploads/profile/a.png") as fh:
        assert fh.read() == b"png"
    assert client.requested == ["portfolio-media"]


@pytest.mark.parametrize(
    "error",
    [
        StorageApiError("Object not found"),
        StorageApiError("boom", status=404),
        StorageApiError("boom", status="404"),
    ],
)
def test_missing_object_is_benign(fake_bucket, storage_logs, error):
    fake_bucket(error=error)

    with pytest.raises(StorageObjectNotFound):
        SupabaseMediaStorage().open("config/themes/alice1.json")

    records = [r for r in storage_logs.records if r.name == "pages.storage_backends"]
    assert [r.levelno for r in records] == [logging.DEBUG]


def test_missing_object_is_also_a_file_not_found(fake_bucket):
    fake_bucket(error=StorageApiError("Object not found", status=400))
    with pytest.raises(FileNotFoundError):
        SupabaseMediaStorage().open("uploads/x.png")


def test_server_error_is_logged_with_diagnostics(fake_bucket, storage_logs, settings):
    settings.SUPABASE_BUCKET = "media"
    fake_bucket(error=StorageApiError("internal error", status=500))

    with pytest.raises(StorageUnavailable):
        SupabaseMediaStorage().open("uploads/profile/a.png")

    errors = [r for r in storage_logs.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    message = errors[0].getMessage()
    assert "download" in message
    assert "bucket=media" in message
    assert "key=uploads/profile/a.png" in message
    assert "status=500" in message
    assert "StorageApiError" in message


def test_upload_and_remove_failures_raise_unavailable(fake_bucket):
    fake_bucket(error=StorageApiError("permission denied", status=403))
    storage = SupabaseMediaStorage()

    with pytest.raises(StorageUnavailable):
        storage.save("uploads/profile/a.png", ContentFile(b"png"))
    with pytest.raises(StorageUnavailable):
        storage.delete("uploads/profile/a.png")


def test_upload_is_upserted_with_content_type(fake_bucket):
    client = fake_bucket()

    name = SupabaseMediaStorage().save("uploads/profile/a.png", ContentFile(b"png"))

    assert name == "uploads/profile/a.png"
    path, data, options = client.bucket.uploads[0]
    assert (path, data) == ("uploads/profile/a.png", b"png")
    assert options == {"content-type": "image/png", "upsert": "true"}


def test_exists_and_size_use_listing(fake_bucket):
    fake_bucket()
    storage = SupabaseMediaStorage()

    assert storage.exists("uploads/a.png")
    assert not storage.exists("uploads/b.png")
    assert storage.size("uploads/a.png") == 3
    with pytest.raises(StorageObjectNotFound):
        storage.size("uploads/b.png")


def test_url_points_at_image_proxy():
    assert SupabaseMediaStorage().url("uploads/a.png") == "http://testserver/api/images/uploads/a.png"


def test_no_local_filesystem_path():
    with pytest.raises(NotImplementedError):
        SupabaseMediaStorage().path("uploads/a.png")


def test_missing_credentials_raise_unavailable(monkeypatch, settings):
    monkeypatch.setattr(storage_backends, "_supabase_client", None)
    settings.SUPABASE_PROJECT_URL = ""
    settings.SUPABASE_URL = ""

    with pytest.raises(StorageUnavailable):
        SupabaseMediaStorage().open("uploads/a.png")
