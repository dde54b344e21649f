import pytest

from pages.models import DEFAULT_FOOTER_LINKS, SiteSettings

pytestmark = pytest.mark.django_db


def test_global_settings_are_created_with_defaults(api_client):
    SiteSettings.objects.all().delete()
    body = api_client.get("/api/settings").json()
    assert body["primaryColor"] == "#3b82f6"
    assert body["headerLogoText"] == "PORTFOLIO.PRO"
    assert body["footerLinks"] == DEFAULT_FOOTER_LINKS
    assert body["userId"] is None
    assert SiteSettings.objects.filter(user__isnull=True).count() == 1


def test_global_put_requires_auth(api_client, auth_client):
    assert api_client.put("/api/settings", {"primaryColor": "#000000"}, format="json").status_code == 401
    resp = auth_client.put("/api/settings", {"primaryColor": "#000000"}, format="json")
    assert resp.status_code == 200
    assert SiteSettings.objects.global_settings().primary_color == "#000000"


def test_user_settings_fall_back_to_global(api_client, auth_client, user):
    global_row = SiteSettings.objects.global_settings()
    global_row.header_logo_text = "GLOBAL"
    global_row.save()

    assert auth_client.get("/api/settings/me").json()["headerLogoText"] == "GLOBAL"
    assert api_client.get("/api/settings/Nobody").json()["headerLogoText"] == "GLOBAL"

    resp = auth_client.put("/api/settings/me", {"headerLogoText": "ALICE"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["userId"] == user.pk
    assert api_client.get(f"/api/settings/{user.username}").json()["headerLogoText"] == "ALICE"
    assert SiteSettings.objects.global_settings().header_logo_text == "GLOBAL"


def test_malformed_menu_json_falls_back_to_default(api_client):
    row = SiteSettings.objects.global_settings()
    row.header_menu_items = "{broken"
    row.footer_links = {"not": "a list"}
    row.save()

    body = api_client.get("/api/settings").json()
    assert body["headerMenuItems"]["cta"]["label"] == "จ้างงานเลย"
    assert body["footerLinks"] == DEFAULT_FOOTER_LINKS


def test_stored_json_string_is_parsed(api_client):
    row = SiteSettings.objects.global_settings()
    row.header_menu_items = '{"links": [], "cta": {"label": "Hire", "href": "/hire", "enabled": false}}'
    row.save()
    assert api_client.get("/api/settings").json()["headerMenuItems"]["cta"]["label"] == "Hire"
