from datetime import datetime, timedelta, timezone

from app.core.security import TokenManager
from app.utils.datetime_utils import DateTimeHelper

API = "/api/v1"


def iso(value: datetime) -> str:
    return value.isoformat()


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def create_payload(**overrides):
    start = now_utc() - timedelta(days=1)
    data = {
        "title": "Choir practice",
        "description": "Thursday 6pm",
        "types": ["class"],
        "target_roles": ["student", "parent"],
        "publish_from": iso(start),
        "publish_to": iso(start + timedelta(days=7)),
        "diocese_ids": ["d-north"],
        "church_ids": ["c-mark"],
        "class_ids": [],
    }
    data.update(overrides)
    return data


class TestAuth:
    def test_health_needs_no_auth(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_missing_token_is_rejected(self, client, users):
        response = client.get(f"{API}/announcements")
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Not authenticated"

    def test_garbage_token_is_rejected(self, client, users):
        response = client.get(
            f"{API}/feed/announcements", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    def test_expired_token_is_rejected(self, client, users):
        token = TokenManager.create_token("u-admin", expires_delta=timedelta(seconds=-10))
        response = client.get(
            f"{API}/announcements", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401

    def test_unknown_subject_is_rejected(self, client, users):
        token = TokenManager.create_token("u-nobody")
        response = client.get(
            f"{API}/feed/announcements", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401

    def test_non_admin_cannot_manage(self, client, users, auth_headers):
        response = client.post(
            f"{API}/announcements",
            json=create_payload(),
            headers=auth_headers(users["student"]),
        )
        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Unauthorized"

    def test_teacher_is_an_admin_role(self, client, users, auth_headers):
        response = client.get(f"{API}/announcements", headers=auth_headers(users["teacher"]))
        assert response.status_code == 200

    def test_responses_carry_request_id(self, client, users, auth_headers):
        response = client.get(
            f"{API}/announcements",
            headers={**auth_headers(users["admin"]), "X-Request-ID": "req-123"},
        )
        assert response.headers["X-Request-ID"] == "req-123"

    def test_error_body_carries_request_id(self, client, users):
        response = client.get(f"{API}/announcements", headers={"X-Request-ID": "req-401"})
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"]["request_id"] == "req-401"


class TestAdminFlow:
    def test_create_list_update_deactivate_republish(self, client, users, auth_headers):
        headers = auth_headers(users["admin"])

        created = client.post(f"{API}/announcements", json=create_payload(), headers=headers)
        assert created.status_code == 201, created.text
        body = created.json()
        announcement_id = body["id"]
        assert body["status"] == "active"
        assert body["church_ids"] == ["c-mark"]
        assert body["created_by"] == "u-admin"

        listing = client.get(f"{API}/announcements", headers=headers).json()
        assert listing["total"] == 1
        assert listing["status_counts"]["active"] == 1

        updated = client.patch(
            f"{API}/announcements/{announcement_id}",
            json={"title": "Choir practice moved", "class_ids": ["k-grade1"], "diocese_ids": ["d-north"], "church_ids": ["c-mark"]},
            headers=headers,
        )
        assert updated.status_code == 200, updated.text
        assert updated.json()["title"] == "Choir practice moved"
        assert updated.json()["class_ids"] == ["k-grade1"]

        deactivated = client.post(
            f"{API}/announcements/{announcement_id}/deactivate",
            json={"reason": "typo"},
            headers=headers,
        )
        assert deactivated.status_code == 200
        assert deactivated.json()["status"] == "deactivated"
        assert deactivated.json()["deactivated_reason"] == "typo"
        assert deactivated.json()["deactivated_by"] == "u-admin"

        only_deactivated = client.get(
            f"{API}/announcements", params={"status": "deactivated"}, headers=headers
        ).json()
        assert [item["id"] for item in only_deactivated["items"]] == [announcement_id]

        republished = client.post(
            f"{API}/announcements/{announcement_id}/republish", headers=headers
        )
        assert republished.status_code == 200, republished.text
        body = republished.json()
        assert body["status"] == "active"
        assert body["deactivated_reason"] is None
        window = (
            DateTimeHelper.parse_datetime(body["publish_to"])
            - DateTimeHelper.parse_datetime(body["publish_from"])
        )
        assert window == timedelta(days=7)

    def test_delete_is_a_soft_delete(self, client, users, auth_headers):
        headers = auth_headers(users["admin"])
        announcement_id = client.post(
            f"{API}/announcements", json=create_payload(), headers=headers
        ).json()["id"]

        response = client.delete(f"{API}/announcements/{announcement_id}", headers=headers)

        assert response.status_code == 200
        assert response.json()["is_deleted"] is True
        assert response.json()["deactivated_reason"] is None
        fetched = client.get(f"{API}/announcements/{announcement_id}", headers=headers)
        assert fetched.json()["status"] == "deactivated"

    def test_delete_keeps_earlier_reason(self, client, users, auth_headers):
        headers = auth_headers(users["admin"])
        announcement_id = client.post(
            f"{API}/announcements", json=create_payload(), headers=headers
        ).json()["id"]
        client.post(
            f"{API}/announcements/{announcement_id}/deactivate",
            json={"reason": "duplicate"},
            headers=headers,
        )

        response = client.delete(
            f"{API}/announcements/{announcement_id}", headers=auth_headers(users["teacher"])
        )

        assert response.status_code == 200
        assert response.json()["deactivated_reason"] == "duplicate"
        assert response.json()["deactivated_by"] == "u-teacher"

    def test_unknown_announcement_is_404(self, client, users, auth_headers):
        response = client.get(f"{API}/announcements/missing", headers=auth_headers(users["admin"]))
        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "NOT_FOUND"

    def test_invalid_payload_is_422(self, client, users, auth_headers):
        response = client.post(
            f"{API}/announcements",
            json=create_payload(title="", target_roles=[]),
            headers=auth_headers(users["admin"]),
        )
        assert response.status_code == 422

    def test_type_suggestions(self, client, users, auth_headers):
        headers = auth_headers(users["admin"])
        client.post(f"{API}/announcements", json=create_payload(types=["urgent", "class"]), headers=headers)

        response = client.get(f"{API}/announcements/types", headers=headers)

        assert response.json() == {"types": ["class", "urgent"]}

    def test_scope_resolve(self, client, users, auth_headers):
        response = client.post(
            f"{API}/announcements/scope/resolve",
            json={"diocese_ids": ["d-south"], "select_all": ["church"]},
            headers=auth_headers(users["admin"]),
        )

        assert response.status_code == 200
        assert response.json()["church_ids"] == ["c-paul"]
        assert response.json()["available"]["class"] == ["k-youth"]


class TestFeedEndpoints:
    def test_reader_feed_and_read_tracking(self, client, users, auth_headers):
        admin = auth_headers(users["admin"])
        student = auth_headers(users["student"])
        urgent_id = client.post(
            f"{API}/announcements", json=create_payload(title="Storm", types=["urgent"]), headers=admin
        ).json()["id"]
        client.post(
            f"{API}/announcements",
            json=create_payload(title="South only", diocese_ids=["d-south"], church_ids=[]),
            headers=admin,
        )

        feed = client.get(f"{API}/feed/announcements", headers=student).json()
        assert [item["title"] for item in feed["items"]] == ["Storm"]
        assert feed["items"][0]["display_type"] == "urgent"
        assert feed["unread_count"] == 1

        marked = client.post(
            f"{API}/feed/announcements/views",
            json={"announcement_ids": [urgent_id]},
            headers=student,
        )
        assert marked.json() == {"marked": [urgent_id]}

        count = client.get(f"{API}/feed/announcements/unread-count", headers=student)
        assert count.json() == {"unread_count": 0}

        unread = client.get(
            f"{API}/feed/announcements", params={"unread_only": "true"}, headers=student
        ).json()
        assert unread["items"] == []

    def test_feed_type_filter_accepts_comma_list(self, client, users, auth_headers):
        admin = auth_headers(users["admin"])
        client.post(f"{API}/announcements", json=create_payload(title="A", types=["urgent"]), headers=admin)
        client.post(f"{API}/announcements", json=create_payload(title="B", types=["event"]), headers=admin)
        client.post(f"{API}/announcements", json=create_payload(title="C", types=["other"]), headers=admin)

        feed = client.get(
            f"{API}/feed/announcements",
            params={"types": "urgent,event"},
            headers=auth_headers(users["student"]),
        ).json()

        assert sorted(item["title"] for item in feed["items"]) == ["A", "B"]

    def test_mark_viewed_requires_ids(self, client, users, auth_headers):
        response = client.post(
            f"{API}/feed/announcements/views",
            json={"announcement_ids": []},
            headers=auth_headers(users["student"]),
        )
        assert response.status_code == 422
