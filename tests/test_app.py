# tests/test_app.py
import io
import json
from datetime import datetime
from wsgiref.util import setup_testing_defaults

import pytest

from src.app import create_app
from src.config import Settings
from src.utils.rate_limiter import SlidingWindowRateLimiter
from tests.factories import new_id


class Client:
    """WSGI 애플리케이션을 직접 호출하는 최소한의 테스트 클라이언트."""

    def __init__(self, app):
        self.app = app
        self.token = None

    def request(self, method, path, body=None, raw=None, auth=True, remote_addr="127.0.0.1"):
        payload = raw if raw is not None else (json.dumps(body).encode("utf-8") if body is not None else b"")
        environ = {
            "REQUEST_METHOD": method,
            "PATH_INFO": path,
            "REMOTE_ADDR": remote_addr,
            "CONTENT_LENGTH": str(len(payload)),
            "CONTENT_TYPE": "application/json",
            "wsgi.input": io.BytesIO(payload),
        }
        if auth and self.token:
            environ["HTTP_AUTHORIZATION"] = f"Bearer {self.token}"
        setup_testing_defaults(environ)

        captured = {}

        def start_response(status, headers):
            captured["status"] = int(status.split(" ", 1)[0])
            captured["headers"] = dict(headers)

        chunks = self.app(environ, start_response)
        data = b"".join(chunks)
        return captured["status"], (json.loads(data) if data else None), captured["headers"]

    def login(self, email="alice@example.com", password="secret"):
        self.request("POST", "/register", {"name": "Alice", "email": email, "password": password})
        _, body, _ = self.request("POST", "/login", {"email": email, "password": password})
        self.token = body["token"]


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret="test-secret", api_prefix="")


@pytest.fixture
def client(session_factory, settings) -> Client:
    return Client(create_app(session_factory, settings, SlidingWindowRateLimiter(limit=1000, window_seconds=1.0)))


@pytest.fixture
def authed(client) -> Client:
    client.login()
    return client


def create_project(client, title="Tracker"):
    status, body, _ = client.request("POST", "/projects", {"title": title, "description": "issue tracking"})
    assert status == 201
    return body


def create_ticket(client, project_id, **fields):
    body = {"title": "Bug", "description": "it breaks", "priority": "high", "projectId": project_id}
    body.update(fields)
    status, ticket, _ = client.request("POST", "/tickets", body)
    assert status == 201, ticket
    return ticket


# ===================================================================
#  인증 흐름
# ===================================================================

def test_register_login_and_project_lifecycle(client):
    """회원가입부터 프로젝트 생성, 삭제까지 기본 흐름을 테스트합니다."""
    # 회원가입 응답에는 비밀번호가 없습니다.
    status, user, _ = client.request("POST", "/register", {"name": "Alice", "email": "a@example.com", "password": "secret"})
    assert status == 201
    assert set(user) >= {"_id", "name", "email", "createdAt", "updatedAt", "tickets", "projects"}
    assert not any("password" in key for key in user)

    status, body, _ = client.request("POST", "/login", {"email": "a@example.com", "password": "secret"})
    assert status == 200
    client.token = body["token"]

    # 토큰 없이 생성하면 401
    status, body, _ = client.request("POST", "/projects", {"title": "P", "description": "D"}, auth=False)
    assert status == 401
    assert body == {
        "error": "Unauthorized",
        "message": "Authentication is required to access this resource.",
        "statusCode": 401,
    }

    status, project, _ = client.request("POST", "/projects", {"title": "P", "description": "D"})
    assert status == 201
    assert project["tickets"] == []

    status, body, _ = client.request("DELETE", f"/projects/{project['_id']}")
    assert status == 204
    assert body is None

    status, body, _ = client.request("GET", f"/projects/{project['_id']}")
    assert status == 404
    assert body["message"] == "Project not found"


def test_login_with_wrong_password_is_unauthorized(client):
    client.login()

    status, body, _ = client.request("POST", "/login", {"email": "alice@example.com", "password": "nope"})

    assert status == 401
    assert body["message"] == "Invalid credentials"


def test_duplicate_registration_conflicts(client):
    client.login()

    status, body, _ = client.request("POST", "/register", {"name": "B", "email": "alice@example.com", "password": "x"})

    assert status == 409
    assert body["error"] == "Conflict"


def test_tampered_token_is_rejected(authed):
    authed.token = authed.token[:-2] + ("aa" if not authed.token.endswith("aa") else "bb")

    status, _, _ = authed.request("POST", "/projects", {"title": "P", "description": "D"})

    assert status == 401


def test_me_returns_token_owner(authed):
    status, me, _ = authed.request("GET", "/me")

    assert status == 200
    assert me["email"] == "alice@example.com"


# ===================================================================
#  프로젝트 / 티켓
# ===================================================================

def test_list_projects_when_empty_is_not_found(client):
    status, body, _ = client.request("GET", "/projects")

    assert status == 404
    assert body["message"] == "There are no projects"


def test_update_project_bumps_updated_at(authed):
    project = create_project(authed)

    status, updated, _ = authed.request("PUT", f"/projects/{project['_id']}", {"title": "Renamed"})

    assert status == 200
    assert updated["title"] == "Renamed"
    assert updated["description"] == project["description"]
    assert updated["createdAt"] == project["createdAt"]
    assert datetime.fromisoformat(updated["updatedAt"]) > datetime.fromisoformat(updated["createdAt"])


def test_ticket_lifecycle_with_assignee(authed):
    _, me, _ = authed.request("GET", "/me")
    project = create_project(authed)

    ticket = create_ticket(authed, project["_id"], userId=me["_id"], status="closed")
    assert ticket["status"] == "open"
    assert ticket["user"]["_id"] == me["_id"]

    # 프로젝트 조회에 티켓과 담당자가 포함됩니다.
    _, view, _ = authed.request("GET", f"/projects/{project['_id']}")
    assert [t["_id"] for t in view["tickets"]] == [ticket["_id"]]
    assert view["tickets"][0]["user"]["name"] == "Alice"

    # 사용자 조회에 티켓과 프로젝트가 포함됩니다.
    _, user_view, _ = authed.request("GET", f"/users/{me['_id']}")
    assert [p["_id"] for p in user_view["projects"]] == [project["_id"]]

    # userId: null은 담당자 해제
    status, unassigned, _ = authed.request("PUT", f"/tickets/{ticket['_id']}", {"userId": None, "status": "resolved"})
    assert status == 200
    assert "userId" not in unassigned and "user" not in unassigned
    assert unassigned["status"] == "resolved"

    status, _, _ = authed.request("DELETE", f"/tickets/{ticket['_id']}")
    assert status == 204
    status, _, _ = authed.request("GET", f"/tickets/{ticket['_id']}")
    assert status == 404


def test_ticket_creation_errors(authed):
    project = create_project(authed)

    status, body, _ = authed.request("POST", "/tickets", {"title": "T", "description": "D", "priority": "urgent", "projectId": project["_id"]})
    assert (status, body["message"]) == (400, "Invalid priority level")

    status, body, _ = authed.request("POST", "/tickets", {"title": "T", "description": "D", "priority": "low", "projectId": new_id()})
    assert (status, body["message"]) == (404, "Project not found")

    status, body, _ = authed.request("POST", "/tickets", {"title": "T", "description": "D", "priority": "low", "projectId": "abc"})
    assert (status, body["message"]) == (400, "Invalid project ID")


def test_blank_user_id_is_treated_as_unassigned(authed):
    project = create_project(authed)
    ticket = create_ticket(authed, project["_id"], userId="")
    assert "userId" not in ticket

    status, edited, _ = authed.request("PUT", f"/tickets/{ticket['_id']}", {"title": "Renamed", "userId": ""})

    assert status == 200
    assert edited["title"] == "Renamed"
    assert "userId" not in edited and "user" not in edited


def test_deleting_project_deletes_its_tickets(authed):
    project = create_project(authed)
    other = create_project(authed, title="Other")
    doomed = [create_ticket(authed, project["_id"]) for _ in range(2)]
    kept = create_ticket(authed, other["_id"])

    authed.request("DELETE", f"/projects/{project['_id']}")

    for ticket in doomed:
        status, _, _ = authed.request("GET", f"/tickets/{ticket['_id']}")
        assert status == 404
    _, tickets, _ = authed.request("GET", "/tickets")
    assert [t["_id"] for t in tickets] == [kept["_id"]]


def test_deleting_user_unassigns_tickets(authed):
    _, bob, _ = authed.request("POST", "/register", {"name": "Bob", "email": "bob@example.com", "password": "pw"})
    project = create_project(authed)
    ticket = create_ticket(authed, project["_id"], userId=bob["_id"])

    status, _, _ = authed.request("DELETE", f"/users/{bob['_id']}")
    assert status == 204

    status, survivor, _ = authed.request("GET", f"/tickets/{ticket['_id']}")
    assert status == 200
    assert "userId" not in survivor


def test_project_tickets_for_unknown_project_is_empty(client):
    status, body, _ = client.request("GET", f"/projects/{new_id()}/tickets")

    assert (status, body) == (200, [])


# ===================================================================
#  공통 동작
# ===================================================================

def test_unknown_route(client):
    status, body, _ = client.request("PATCH", "/projects")

    assert status == 404
    assert body["message"] == "Route PATCH:/projects not found"


def test_malformed_json_is_bad_request(authed):
    status, body, _ = authed.request("POST", "/projects", raw=b"{not json")

    assert status == 400
    assert body["error"] == "Bad Request"


def test_health(client):
    status, body, headers = client.request("GET", "/health")

    assert status == 200
    assert body["status"] == "ok"
    assert headers["X-RateLimit-Limit"] == "1000"


def test_rate_limit_rejects_excess_requests(session_factory, settings):
    client = Client(create_app(session_factory, settings, SlidingWindowRateLimiter(limit=2, window_seconds=60)))

    client.request("GET", "/health")
    client.request("GET", "/health")
    status, body, headers = client.request("GET", "/health")

    assert status == 429
    assert body["statusCode"] == 429
    assert body["retryAfter"] >= 1
    assert headers["X-RateLimit-Remaining"] == "0"

    # 다른 클라이언트는 영향을 받지 않습니다.
    status, _, _ = client.request("GET", "/health", remote_addr="10.0.0.2")
    assert status == 200


def test_api_prefix(session_factory):
    app = create_app(session_factory, Settings(jwt_secret="test-secret", api_prefix="/api"), SlidingWindowRateLimiter(limit=1000))
    client = Client(app)

    assert client.request("GET", "/api/health")[0] == 200
    assert client.request("GET", "/health")[0] == 404
