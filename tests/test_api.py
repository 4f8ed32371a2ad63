"""End-to-end tests of the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from bytecourses.api.deps import get_proposal_service
from bytecourses.main import app

from .factories import ADMIN, AUTHOR, OTHER_STUDENT, auth_headers

API = "/api"


def create_proposal(client, actor=AUTHOR, **fields):
    body = {"title": "T", "summary": "S"}
    body.update(fields)
    response = client.post(f"{API}/proposals", json=body, headers=auth_headers(actor))
    assert response.status_code == 201
    return response.json()


def act(client, proposal_id, action, actor=AUTHOR, **body):
    return client.post(
        f"{API}/proposals/{proposal_id}/actions/{action}",
        json=body or None,
        headers=auth_headers(actor),
    )


def get_proposal(client, proposal_id, actor=AUTHOR):
    return client.get(f"{API}/proposals/{proposal_id}", headers=auth_headers(actor))


def test_full_review_cycle_to_course(client):
    proposal = create_proposal(client)
    assert proposal["status"] == "draft"
    assert proposal["author_id"] == AUTHOR.id
    pid = proposal["id"]

    assert act(client, pid, "submit").status_code == 204
    assert act(client, pid, "request-changes", ADMIN, review_notes="fix X").status_code == 204

    fetched = get_proposal(client, pid).json()
    assert fetched["status"] == "changes_requested"
    assert fetched["review_notes"] == "fix X"

    response = client.patch(
        f"{API}/proposals/{pid}",
        json={"title": "T2", "summary": "S"},
        headers=auth_headers(AUTHOR),
    )
    assert response.status_code == 204

    assert act(client, pid, "submit").status_code == 204
    assert act(client, pid, "approve", ADMIN).status_code == 204
    assert get_proposal(client, pid).json()["status"] == "approved"

    first = act(client, pid, "create-course")
    assert first.status_code == 201
    course = first.json()
    assert course["status"] == "draft"
    assert course["title"] == "T2"
    assert course["proposal_id"] == pid

    second = act(client, pid, "create-course")
    assert second.status_code == 409
    assert second.json()["course_id"] == course["id"]


def test_patch_while_submitted_conflicts(client):
    proposal = create_proposal(client, title="Original")
    act(client, proposal["id"], "submit")

    response = client.patch(
        f"{API}/proposals/{proposal['id']}",
        json={"title": "Changed", "summary": "Other"},
        headers=auth_headers(AUTHOR),
    )

    assert response.status_code == 409
    assert response.json()["status"] == "submitted"
    fetched = get_proposal(client, proposal["id"]).json()
    assert (fetched["title"], fetched["summary"]) == ("Original", "S")


def test_visibility_across_lifecycle(client):
    pid = create_proposal(client)["id"]
    assert get_proposal(client, pid, ADMIN).status_code == 404
    assert get_proposal(client, pid, OTHER_STUDENT).status_code == 404

    act(client, pid, "submit")
    assert get_proposal(client, pid, ADMIN).status_code == 200

    act(client, pid, "withdraw")
    assert get_proposal(client, pid, ADMIN).status_code == 404
    assert get_proposal(client, pid).json()["status"] == "withdrawn"


def test_content_is_trimmed(client):
    proposal = create_proposal(client, title="  Rust  ", summary="\tSystems\n")

    assert proposal["title"] == "Rust"
    assert get_proposal(client, proposal["id"]).json()["summary"] == "Systems"


@pytest.mark.parametrize("body", [
    {"summary": "S"},
    {"title": "   ", "summary": "S"},
    {"title": "x" * 129, "summary": "S"},
])
def test_invalid_content_rejected(client, body):
    response = client.post(f"{API}/proposals", json=body, headers=auth_headers(AUTHOR))

    assert response.status_code == 422


def test_unknown_and_inapplicable_actions(client):
    pid = create_proposal(client)["id"]

    unknown = act(client, pid, "publish")
    assert unknown.status_code == 400

    inapplicable = act(client, pid, "withdraw")
    assert inapplicable.status_code == 409
    assert inapplicable.json()["status"] == "draft"


def test_student_cannot_review(client):
    pid = create_proposal(client)["id"]
    act(client, pid, "submit")

    assert act(client, pid, "approve", AUTHOR).status_code == 403
    assert get_proposal(client, pid).json()["status"] == "submitted"


def test_authentication_required(client):
    assert client.get(f"{API}/proposals").status_code == 401
    assert client.post(f"{API}/proposals", json={"title": "T", "summary": "S"}).status_code == 401

    response = client.get(f"{API}/proposals", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_list_proposals_by_role(client):
    draft = create_proposal(client, title="Draft")
    queued = create_proposal(client, title="Queued")
    act(client, queued["id"], "submit")
    create_proposal(client, OTHER_STUDENT, title="Theirs")

    admin_view = client.get(f"{API}/proposals", headers=auth_headers(ADMIN)).json()
    assert [p["id"] for p in admin_view] == [queued["id"]]

    author_view = client.get(f"{API}/proposals", headers=auth_headers(AUTHOR))
    assert author_view.status_code == 403
    assert author_view.json()["error_code"] == "FORBIDDEN"

    own = client.get(f"{API}/proposals/mine", headers=auth_headers(AUTHOR)).json()
    assert [p["id"] for p in own] == [draft["id"], queued["id"]]

    mine = client.get(f"{API}/proposals/mine", headers=auth_headers(OTHER_STUDENT)).json()
    assert [p["title"] for p in mine] == ["Theirs"]


def test_delete_rules(client):
    draft = create_proposal(client)
    submitted = create_proposal(client)
    act(client, submitted["id"], "submit")

    other = client.delete(f"{API}/proposals/{draft['id']}", headers=auth_headers(OTHER_STUDENT))
    assert other.status_code == 404

    locked = client.delete(f"{API}/proposals/{submitted['id']}", headers=auth_headers(AUTHOR))
    assert locked.status_code == 409

    deleted = client.delete(f"{API}/proposals/{draft['id']}", headers=auth_headers(AUTHOR))
    assert deleted.status_code == 204
    assert get_proposal(client, draft["id"]).status_code == 404


def test_course_publish_and_public_listing(client):
    pid = create_proposal(client, title="Go")["id"]
    act(client, pid, "submit")
    act(client, pid, "approve", ADMIN)
    course_id = act(client, pid, "create-course").json()["id"]

    assert client.get(f"{API}/courses/{course_id}").status_code == 404
    assert client.get(f"{API}/courses").json() == {"items": [], "total": 0}

    forbidden = client.post(f"{API}/courses/{course_id}/publish", headers=auth_headers(ADMIN))
    assert forbidden.status_code == 403

    headers = auth_headers(AUTHOR)
    assert client.post(f"{API}/courses/{course_id}/publish", headers=headers).status_code == 204
    assert client.post(f"{API}/courses/{course_id}/publish", headers=headers).status_code == 409

    listing = client.get(f"{API}/courses").json()
    assert listing["total"] == 1
    assert listing["items"][0]["title"] == "Go"
    assert client.get(f"{API}/courses/{course_id}").json()["status"] == "published"


def test_course_update_by_instructor(client):
    pid = create_proposal(client)["id"]
    act(client, pid, "submit")
    act(client, pid, "approve", ADMIN)
    course_id = act(client, pid, "create-course").json()["id"]

    response = client.patch(
        f"{API}/courses/{course_id}",
        json={"title": "Renamed", "summary": "S"},
        headers=auth_headers(AUTHOR),
    )
    assert response.status_code == 204

    fetched = client.get(f"{API}/courses/{course_id}", headers=auth_headers(AUTHOR)).json()
    assert fetched["title"] == "Renamed"


def test_health_and_metrics(client):
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "healthy"

    create_proposal(client)
    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "bytecourses_requests_total" in metrics.text


def test_review_notes_accept_short_key(client):
    pid = create_proposal(client)["id"]
    act(client, pid, "submit")

    response = act(client, pid, "request-changes", ADMIN, notes="fix X")

    assert response.status_code == 204
    fetched = get_proposal(client, pid).json()
    assert fetched["status"] == "changes_requested"
    assert fetched["review_notes"] == "fix X"
    assert fetched["reviewer_id"] == ADMIN.id


def test_unexpected_errors_return_json(client):
    def broken_service():
        raise RuntimeError("boom")

    app.dependency_overrides[get_proposal_service] = broken_service
    unsafe_client = TestClient(app, raise_server_exceptions=False)

    response = unsafe_client.get(f"{API}/proposals/mine", headers=auth_headers(AUTHOR))

    assert response.status_code == 500
    body = response.json()
    assert body["error_code"] == "INTERNAL_ERROR"
    assert body["detail"] == "Internal server error"
