import pytest

from pages.models import ContactMessage
from pages.tasks import notify_contact_message

pytestmark = pytest.mark.django_db


def _send(client, **overrides):
    payload = {"name": "Visitor", "email": "v@example.com", "message": "Hello there", "username": "Alice1"}
    payload.update(overrides)
    return client.post("/api/contact", payload, format="json")


def test_public_post_stores_and_notifies(api_client, user, mailoutbox):
    resp = _send(api_client)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "บันทึกข้อความเรียบร้อยแล้ว"
    assert body["data"]["isRead"] is False
    assert ContactMessage.objects.get(pk=body["data"]["id"]).recipient == user

    assert len(mailoutbox) == 1
    assert mailoutbox[0].to == [user.email]
    assert "Hello there" in mailoutbox[0].body


def test_unknown_recipient_is_404(api_client):
    resp = _send(api_client, username="Nobody")
    assert resp.status_code == 404
    assert resp.json()["message"] == "ไม่พบเจ้าของโปรไฟล์ที่ระบุ"


def test_validation_messages_are_thai(api_client, user):
    resp = _send(api_client, name="A", email="bad")
    assert resp.status_code == 400
    assert set(resp.json()["message"]) == {"ชื่อต้องมีอย่างน้อย 2 ตัวอักษร", "รูปแบบอีเมลไม่ถูกต้อง"}


def test_inbox_is_private_and_filterable(client_for, user, other_user, api_client):
    first = ContactMessage.objects.create(recipient=user, name="One", email="a@x.io", message="1")
    ContactMessage.objects.create(recipient=user, name="Two", email="b@x.io", message="2", is_read=True)
    ContactMessage.objects.create(recipient=other_user, name="Three", email="c@x.io", message="3")

    assert api_client.get("/api/contact").status_code == 401

    inbox = client_for(user).get("/api/contact").json()
    assert [m["name"] for m in inbox] == ["Two", "One"]
    unread = client_for(user).get("/api/contact?unreadOnly=true").json()
    assert [m["id"] for m in unread] == [first.pk]


def test_mark_read_and_delete_only_own(client_for, user, other_user):
    message = ContactMessage.objects.create(recipient=user, name="One", email="a@x.io", message="1")

    resp = client_for(other_user).put("/api/contact", {"id": message.pk, "isRead": True}, format="json")
    assert resp.status_code == 404
    assert resp.json()["message"] == "ไม่พบข้อความนี้หรือคุณไม่มีสิทธิ์เข้าถึง"

    resp = client_for(user).put("/api/contact", {"id": message.pk, "isRead": True}, format="json")
    assert resp.json()["isRead"] is True

    resp = client_for(other_user).delete(f"/api/contact?id={message.pk}")
    assert resp.status_code == 404
    assert resp.json()["message"] == f"ไม่พบข้อความที่ต้องการลบ (ID: {message.pk})"

    assert client_for(user).delete(f"/api/contact?id={message.pk}").status_code == 204
    assert not ContactMessage.objects.filter(pk=message.pk).exists()


def test_notification_skips_recipient_without_email(make_user, mailoutbox):
    recipient = make_user("Quiet1", email="quiet@example.com")
    recipient.email = ""
    recipient.save(update_fields=["email"])
    message = ContactMessage.objects.create(recipient=recipient, name="V", email="v@x.io", message="hi")

    assert notify_contact_message(message.pk) == "skipped"
    assert notify_contact_message(999999) == "missing"
    assert mailoutbox == []
