import datetime

import pytest

from pages.history import record_edit
from pages.models import EditHistory

pytestmark = pytest.mark.django_db


def test_record_edit_serializes_snapshots(user):
    row = record_edit(
        user,
        "profile",
        "update",
        section="profile",
        old={"when": datetime.datetime(2024, 1, 2, 3, 4, 5)},
        new={"name": "Alice"},
        item_id=7,
    )
    row.refresh_from_db()
    assert row.old_value == {"when": "2024-01-02T03:04:05"}
    assert row.new_value == {"name": "Alice"}


def test_record_edit_never_raises(user):
    assert record_edit(user, "profile", "update", new={"bad": object()}) is None
    assert not EditHistory.objects.exists()


def test_list_is_own_newest_first_with_filters(client_for, user, other_user):
    record_edit(user, "profile", "update")
    record_edit(user, "portfolio", "create")
    record_edit(user, "portfolio", "delete")
    record_edit(other_user, "portfolio", "create")

    client = client_for(user)
    rows = client.get("/api/admin/edit-history").json()
    assert [(r["page"], r["action"]) for r in rows] == [
        ("portfolio", "delete"),
        ("portfolio", "create"),
        ("profile", "update"),
    ]
    assert len(client.get("/api/admin/edit-history?page=portfolio").json()) == 2
    assert len(client.get("/api/admin/edit-history?limit=1").json()) == 1


def test_create_requires_page_and_action(auth_client, user):
    resp = auth_client.post("/api/admin/edit-history", {"page": "profile"}, format="json")
    assert resp.status_code == 400
    assert resp.json()["message"] == ["กรุณาระบุ page และ action"]

    resp = auth_client.post(
        "/api/admin/edit-history",
        {"page": "layout", "action": "reorder", "newValue": {"order": [3, 1, 2]}},
        format="json",
    )
    assert resp.status_code == 201
    assert resp.json()["history"]["newValue"] == {"order": [3, 1, 2]}
    assert EditHistory.objects.get(user=user).action == "reorder"


def test_requires_auth(api_client):
    assert api_client.get("/api/admin/edit-history").status_code == 401
