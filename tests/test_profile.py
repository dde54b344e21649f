import pytest

from pages.models import Education, EditHistory, Experience, PageContent, Portfolio, Skill

pytestmark = pytest.mark.django_db


@pytest.fixture
def content(user):
    return PageContent.objects.for_user(user)


def test_public_profile_without_any_content_is_empty_shape(api_client):
    resp = api_client.get("/api/profile")
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] is None
    assert body["education"]["university"]["status"] == "studying"
    assert body["skills"] == []


def test_public_profile_falls_back_to_first_content(api_client, content, make_user):
    PageContent.objects.for_user(make_user("Zed99"))
    content.name = "First"
    content.save()
    assert api_client.get("/api/profile").json()["name"] == "First"


def test_profile_put_rejects_data_uri_images(auth_client, content):
    resp = auth_client.put(
        "/api/profile",
        {"heroImage": "data:image/png;base64,AAAA", "contactImage": "uploads/profile/c.png"},
        format="json",
    )
    assert resp.status_code == 200
    content.refresh_from_db()
    assert content.hero_image is None
    assert content.contact_image == "uploads/profile/c.png"
    assert EditHistory.objects.filter(page="profile", action="update").exists()


def test_skills_replace(auth_client, content):
    Skill.objects.create(page_content=content, name="COBOL")
    resp = auth_client.put("/api/profile/skills", {"skills": ["Python", " Django ", ""]}, format="json")
    assert resp.status_code == 200
    assert auth_client.get("/api/profile/skills").json() == ["Python", "Django"]


def test_education_grouped_replace_and_profile_view(auth_client, content):
    Education.objects.create(page_content=content, type="university", field="Old", institution="Old U")
    resp = auth_client.put(
        "/api/profile/education",
        {
            "education": {
                "university": {"field": "CS", "university": "KMITL", "year": "2024", "gpa": "3.5", "status": "graduated"},
                "highschool": {"field": "Science", "school": "Triam Udom", "gpa": "3.9"},
            }
        },
        format="json",
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "อัปเดตการศึกษาสำเร็จ"
    assert content.education.count() == 2

    profile = auth_client.get("/api/profile").json()
    assert profile["education"]["university"] == {
        "field": "CS",
        "university": "KMITL",
        "year": "2024",
        "gpa": "3.5",
        "status": "graduated",
    }
    assert profile["education"]["highschool"]["school"] == "Triam Udom"


def test_education_put_without_body_is_400(auth_client, content):
    resp = auth_client.put("/api/profile/education", {}, format="json")
    assert resp.status_code == 400
    assert resp.json()["message"] == ["ไม่พบข้อมูลการศึกษา"]


def test_education_create_requires_core_fields(auth_client, content):
    resp = auth_client.post("/api/profile/education", {"type": "university"}, format="json")
    assert resp.status_code == 400
    assert resp.json()["message"] == ["กรุณากรอกประเภท สาขา และสถาบันให้ครบถ้วน"]


def test_education_single_update_checks_owner(client_for, user, other_user, content):
    row = Education.objects.create(page_content=content, type="university", field="CS", institution="KU")
    resp = client_for(other_user).put(
        "/api/profile/education/update", {"id": row.pk, "education": {"field": "Art"}}, format="json"
    )
    assert resp.status_code == 403
    assert resp.json()["message"] == "คุณไม่มีสิทธิ์แก้ไขการศึกษานี้"

    resp = client_for(user).put(
        "/api/profile/education/update", {"id": row.pk, "education": {"field": "Art"}}, format="json"
    )
    assert resp.status_code == 200
    row.refresh_from_db()
    assert row.field == "Art"


def test_experience_bulk_replace_is_scoped_to_owner(client_for, user, other_user, content):
    theirs = Experience.objects.create(page_content=PageContent.objects.for_user(other_user), title="Theirs")
    Experience.objects.create(page_content=content, title="Old job")

    resp = client_for(user).put(
        "/api/profile/experience",
        {"experiences": [{"title": "Dev", "company": "ACME"}, {"title": "Lead", "company": "ACME"}]},
        format="json",
    )
    assert resp.status_code == 200
    assert sorted(content.experiences.values_list("title", flat=True)) == ["Dev", "Lead"]
    assert Experience.objects.filter(pk=theirs.pk).exists()

    history = EditHistory.objects.get(page="experience", action="update")
    assert [row["title"] for row in history.old_value] == ["Old job"]


def test_invalid_bulk_payload_keeps_existing_rows(auth_client, content):
    Experience.objects.create(page_content=content, title="Keep me")
    resp = auth_client.put("/api/profile/experience", {"experiences": [{"company": "No title"}]}, format="json")
    assert resp.status_code == 400
    assert list(content.experiences.values_list("title", flat=True)) == ["Keep me"]


def test_portfolio_create_and_delete(auth_client, content):
    resp = auth_client.post("/api/profile/portfolio", {"title": "Site"}, format="json")
    assert resp.status_code == 400
    assert resp.json()["message"] == ["กรุณากรอกชื่อและคำอธิบายผลงาน"]

    resp = auth_client.post(
        "/api/profile/portfolio",
        {"title": "Site", "description": "A site", "image": "/uploads/portfolio/s.png"},
        format="json",
    )
    assert resp.status_code == 201
    item = resp.json()["portfolio"]
    assert item["image"] == "http://testserver/api/images/uploads/portfolio/s.png"
    assert Portfolio.objects.get(pk=item["id"]).image == "uploads/portfolio/s.png"

    resp = auth_client.delete(f"/api/profile/portfolio?id={item['id']}")
    assert resp.status_code == 200
    assert resp.json()["message"] == "ลบผลงานสำเร็จ"
    assert not Portfolio.objects.filter(pk=item["id"]).exists()


def test_portfolio_delete_errors(client_for, user, other_user, content):
    row = Portfolio.objects.create(page_content=content, title="Mine", description="x")
    intruder = client_for(other_user)

    assert intruder.delete("/api/profile/portfolio").json()["message"] == "กรุณาระบุ ID ผลงาน"
    assert intruder.delete("/api/profile/portfolio?id=999999").json()["message"] == "ไม่พบผลงานที่ต้องการลบ"
    resp = intruder.delete(f"/api/profile/portfolio?id={row.pk}")
    assert resp.status_code == 403
    assert resp.json()["message"] == "คุณไม่มีสิทธิ์ลบผลงานนี้"
    assert Portfolio.objects.filter(pk=row.pk).exists()
