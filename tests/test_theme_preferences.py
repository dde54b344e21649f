import pytest

from pages.models import DEFAULT_COLOR_TOKENS, SiteSettings, ThemePreference

pytestmark = pytest.mark.django_db


def test_defaults_when_nothing_customised(auth_client):
    SiteSettings.objects.all().delete()
    body = auth_client.get("/api/theme/me").json()
    assert body["primaryColor"] == DEFAULT_COLOR_TOKENS["primary_color"]
    assert body["footerTextColor"] == DEFAULT_COLOR_TOKENS["footer_text_color"]
    assert body["isCustom"] is False
    assert body["updatedAt"] is None


def test_null_tokens_inherit_from_global_settings(api_client, user):
    row = SiteSettings.objects.global_settings()
    row.accent_color = "#123456"
    row.save()
    ThemePreference.objects.create(user=user, primary_color="#abcdef")

    body = api_client.get("/api/theme/ALICE1").json()
    assert body["primaryColor"] == "#abcdef"
    assert body["accentColor"] == "#123456"
    assert body["isCustom"] is True


def test_unknown_username_gets_defaults(api_client):
    body = api_client.get("/api/theme/nobody").json()
    assert body["isCustom"] is False


def test_put_validates_hex(auth_client):
    resp = auth_client.put("/api/theme", {"primaryColor": "blue"}, format="json")
    assert resp.status_code == 400
    assert resp.json()["message"] == ["primaryColor ต้องเป็นรหัสสี HEX เช่น #ffffff"]

    resp = auth_client.put("/api/theme", {"primaryColour": "#ffffff"}, format="json")
    assert resp.status_code == 400


def test_put_saves_tokens_and_accepts_alpha(auth_client, user):
    resp = auth_client.put("/api/theme", {"primaryColor": "#000000", "textColor": "#11223344"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["textColor"] == "#11223344"
    pref = ThemePreference.objects.get(user=user)
    assert pref.primary_color == "#000000"
    assert pref.background_color is None


def test_empty_put_is_a_read(auth_client, user):
    resp = auth_client.put("/api/theme", {}, format="json")
    assert resp.status_code == 200
    assert resp.json()["isCustom"] is False
    assert not ThemePreference.objects.filter(user=user).exists()


def test_put_null_resets_token_to_inherited(auth_client, user):
    row = SiteSettings.objects.global_settings()
    row.primary_color = "#123456"
    row.save()
    auth_client.put("/api/theme", {"primaryColor": "#000000", "accentColor": "#ff0000"}, format="json")

    resp = auth_client.put("/api/theme", {"primaryColor": None}, format="json")

    assert resp.status_code == 200
    assert resp.json()["primaryColor"] == "#123456"
    assert resp.json()["accentColor"] == "#ff0000"
    pref = ThemePreference.objects.get(user=user)
    assert pref.primary_color is None
    assert pref.accent_color == "#ff0000"
