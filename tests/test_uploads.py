import io

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from pages.exceptions import StorageUnavailable
from pages.layouts import resolve_layout
from pages.storage_backends import write_object

pytestmark = pytest.mark.django_db


def png_file(name="pic.png"):
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), (255, 0, 0)).save(buf, format="PNG")
    return SimpleUploadedFile(name, buf.getvalue(), content_type="image/png")


def test_upload_then_fetch_through_proxy(auth_client, api_client):
    resp = auth_client.post("/api/upload/profile", {"file": png_file()}, format="multipart")
    assert resp.status_code == 200
    body = resp.json()
    assert body["relativePath"].startswith("uploads/profile/pic-")
    assert body["imageUrl"] == f"http://testserver/api/images/{body['relativePath']}"
    assert (body["fileName"], body["fileType"]) == ("pic.png", "image/png")

    image = api_client.get(f"/api/images/{body['relativePath']}")
    assert image.status_code == 200
    assert image["Content-Type"] == "image/png"
    assert image["Cache-Control"] == "public, max-age=31536000, immutable"
    assert image.content.startswith(b"\x89PNG")


def test_upload_rejections(auth_client, api_client, settings):
    assert api_client.post("/api/upload/profile", {"file": png_file()}, format="multipart").status_code == 401
    assert auth_client.post("/api/upload/profile", {}, format="multipart").json()["message"] == ["No file provided"]

    text = SimpleUploadedFile("a.txt", b"hello", content_type="text/plain")
    assert auth_client.post("/api/upload/profile", {"file": text}, format="multipart").status_code == 400

    fake = SimpleUploadedFile("a.png", b"not really a png", content_type="image/png")
    assert auth_client.post("/api/upload/profile", {"file": fake}, format="multipart").status_code == 400

    assert auth_client.post("/api/upload/avatar", {"file": png_file()}, format="multipart").status_code == 400

    settings.UPLOAD_MAX_BYTES = 10
    resp = auth_client.post("/api/upload/portfolio", {"file": png_file()}, format="multipart")
    assert resp.json()["message"] == ["File size too large. Maximum size is 5MB."]


def test_widget_upload_attaches_to_callers_widget(auth_client, user):
    widget = resolve_layout(user=user).widgets.get(type="hero")
    resp = auth_client.post(
        f"/api/upload/widget?widgetId={widget.pk}", {"file": png_file("Hero.png")}, format="multipart"
    )
    assert resp.status_code == 200
    key = resp.json()["relativePath"]
    assert key.startswith("uploads/widget/Alice1/Hero-")
    widget.refresh_from_db()
    assert widget.image_url == key


def test_widget_upload_ignores_foreign_widget(client_for, other_user, user):
    widget = resolve_layout(user=user).widgets.get(type="hero")
    resp = client_for(other_user).post(
        "/api/upload/widget", {"file": png_file(), "widgetId": widget.pk}, format="multipart"
    )
    assert resp.status_code == 200
    widget.refresh_from_db()
    assert widget.image_url is None


def test_proxy_404s(api_client):
    assert api_client.get("/api/images/uploads/profile/missing.png").status_code == 404
    write_object("config/themes/alice1.json", b"{}", "application/json")
    assert api_client.get("/api/images/config/themes/alice1.json").status_code == 404


def test_proxy_refuses_dot_dot_segments(api_client):
    write_object("config/themes/alice1.json", b'{"palette": {"primary": "#000000"}}', "application/json")
    write_object("uploads/profile/a.png", b"png", "image/png")

    assert api_client.get("/api/images/uploads/../config/themes/alice1.json").status_code == 404
    assert api_client.get("/api/images/uploads/profile/../../config/themes/alice1.json").status_code == 404
    assert api_client.get("/api/images/uploads/profile/./a.png").status_code == 200


def test_proxy_storage_failure_is_500(api_client, monkeypatch):
    from pages import views

    def broken(key):
        raise StorageUnavailable("bucket down")

    monkeypatch.setattr(views, "read_object", broken)
    resp = api_client.get("/api/images/uploads/profile/a.png")
    assert resp.status_code == 500
    assert resp.json() == {"statusCode": 500, "message": "Storage is unavailable", "error": "Internal Server Error"}
