"""
Chirper Backend: API Endpoint Tests
===================================

What:  End-to-end tests of every HTTP endpoint through the FastAPI app.
How:   HTTPX AsyncClient over ASGITransport against an app built on a
       per-test SQLite database (see conftest.test_client).

What we test:
    ✅ Status codes and bodies for each endpoint's success and failure paths
    ✅ Rejections answer with empty bodies; not-found reads answer 200 empty
    ✅ Malformed JSON, non-integer ids and out-of-range ids answer 400
    ✅ A failed commit answers 500 and leaves nothing behind
    ✅ Every response carries X-Request-ID; /health reports 503 without a database
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import dispose_engine
from app.main import create_app

EPOCH = 1669947792


async def _register(client, username="testuser1", password="password"):
    response = await client.post("/register", json={"username": username, "password": password})
    assert response.status_code == 200
    return response.json()


async def _post(client, posted_by, text="hello message"):
    response = await client.post(
        "/messages",
        json={"posted_by": posted_by, "message_text": text, "time_posted_epoch": EPOCH},
    )
    assert response.status_code == 200
    return response.json()


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_success(self, test_client):
        response = await test_client.post(
            "/register", json={"username": "user", "password": "password"}
        )

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"account_id", "username", "password"}
        assert isinstance(body["account_id"], int)
        assert body["username"] == "user"
        assert body["password"] == "password"

    @pytest.mark.asyncio
    async def test_register_assigns_fresh_ids(self, test_client):
        first = await _register(test_client, "one")
        second = await _register(test_client, "two")

        assert first["account_id"] != second["account_id"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"username": "", "password": "password"},
            {"username": "   ", "password": "password"},
            {"username": "user", "password": "pas"},
            {"username": "user", "password": "  ab  "},
        ],
    )
    async def test_register_rule_violations(self, test_client, payload):
        response = await test_client.post("/register", json=payload)

        assert response.status_code == 400
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_register_duplicate_username(self, test_client):
        await _register(test_client, "taken")

        response = await test_client.post(
            "/register", json={"username": "taken", "password": "different"}
        )

        assert response.status_code == 400
        assert response.content == b""


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, test_client):
        account = await _register(test_client, "loginuser", "password")

        response = await test_client.post(
            "/login", json={"username": "loginuser", "password": "password"}
        )

        assert response.status_code == 200
        assert response.json() == account

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, test_client):
        await _register(test_client, "loginuser", "password")

        response = await test_client.post(
            "/login", json={"username": "loginuser", "password": "Password"}
        )

        assert response.status_code == 401
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_login_unknown_username(self, test_client):
        response = await test_client.post(
            "/login", json={"username": "nobody", "password": "password"}
        )

        assert response.status_code == 401
        assert response.content == b""


class TestCreateMessage:

    @pytest.mark.asyncio
    async def test_create_success(self, test_client):
        account = await _register(test_client)

        body = await _post(test_client, account["account_id"], "my first post")

        assert set(body) == {"message_id", "posted_by", "message_text", "time_posted_epoch"}
        assert isinstance(body["message_id"], int)
        assert body["posted_by"] == account["account_id"]
        assert body["message_text"] == "my first post"
        assert body["time_posted_epoch"] == EPOCH

    @pytest.mark.asyncio
    async def test_create_255_characters_accepted(self, test_client):
        account = await _register(test_client)

        body = await _post(test_client, account["account_id"], "a" * 255)

        assert len(body["message_text"]) == 255

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "    ", "a" * 256])
    async def test_create_invalid_text(self, test_client, text):
        account = await _register(test_client)

        response = await test_client.post(
            "/messages",
            json={"posted_by": account["account_id"], "message_text": text, "time_posted_epoch": EPOCH},
        )

        assert response.status_code == 400
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_create_without_epoch_defaults_to_zero(self, test_client):
        account = await _register(test_client)

        response = await test_client.post(
            "/messages",
            json={"posted_by": account["account_id"], "message_text": "no timestamp"},
        )

        assert response.status_code == 200
        assert response.json()["time_posted_epoch"] == 0

    @pytest.mark.asyncio
    async def test_create_unknown_author(self, test_client):
        response = await test_client.post(
            "/messages",
            json={"posted_by": 999, "message_text": "orphan", "time_posted_epoch": EPOCH},
        )

        assert response.status_code == 400
        assert response.content == b""

        listing = await test_client.get("/messages")
        assert listing.json() == []


class TestReadMessages:

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/messages")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_all(self, test_client):
        account = await _register(test_client)
        first = await _post(test_client, account["account_id"], "one")
        second = await _post(test_client, account["account_id"], "two")

        response = await test_client.get("/messages")

        assert response.status_code == 200
        assert response.json() == [first, second]

    @pytest.mark.asyncio
    async def test_get_by_id(self, test_client):
        account = await _register(test_client)
        created = await _post(test_client, account["account_id"])

        response = await test_client.get(f"/messages/{created['message_id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_get_missing_is_200_empty(self, test_client):
        response = await test_client.get("/messages/100")

        assert response.status_code == 200
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_list_by_account(self, test_client):
        alice = await _register(test_client, "alice")
        bob = await _register(test_client, "bob")
        a1 = await _post(test_client, alice["account_id"], "from alice")
        await _post(test_client, bob["account_id"], "from bob")
        a2 = await _post(test_client, alice["account_id"], "alice again")

        response = await test_client.get(f"/accounts/{alice['account_id']}/messages")

        assert response.status_code == 200
        assert response.json() == [a1, a2]

    @pytest.mark.asyncio
    async def test_list_by_account_without_messages(self, test_client):
        account = await _register(test_client)

        response = await test_client.get(f"/accounts/{account['account_id']}/messages")

        assert response.status_code == 200
        assert response.json() == []


class TestDeleteMessage:

    @pytest.mark.asyncio
    async def test_delete_twice(self, test_client):
        account = await _register(test_client)
        created = await _post(test_client, account["account_id"])
        url = f"/messages/{created['message_id']}"

        first = await test_client.delete(url)
        second = await test_client.delete(url)

        assert first.status_code == 200
        assert first.json() == created
        assert second.status_code == 200
        assert second.content == b""

        after = await test_client.get(url)
        assert after.content == b""

    @pytest.mark.asyncio
    async def test_delete_never_existed(self, test_client):
        response = await test_client.delete("/messages/31337")

        assert response.status_code == 200
        assert response.content == b""


class TestUpdateMessage:

    @pytest.mark.asyncio
    async def test_update_success(self, test_client):
        account = await _register(test_client)
        created = await _post(test_client, account["account_id"], "draft")
        url = f"/messages/{created['message_id']}"

        response = await test_client.patch(url, json={"message_text": "edited"})

        assert response.status_code == 200
        assert response.json() == {**created, "message_text": "edited"}
        assert (await test_client.get(url)).json()["message_text"] == "edited"

    @pytest.mark.asyncio
    async def test_update_ignores_other_fields(self, test_client):
        account = await _register(test_client)
        created = await _post(test_client, account["account_id"], "draft")

        response = await test_client.patch(
            f"/messages/{created['message_id']}",
            json={"message_text": "edited", "posted_by": 777, "time_posted_epoch": 0},
        )

        assert response.status_code == 200
        assert response.json()["posted_by"] == account["account_id"]
        assert response.json()["time_posted_epoch"] == EPOCH

    @pytest.mark.asyncio
    async def test_update_254_accepted_255_rejected(self, test_client):
        account = await _register(test_client)
        created = await _post(test_client, account["account_id"], "draft")
        url = f"/messages/{created['message_id']}"

        accepted = await test_client.patch(url, json={"message_text": "b" * 254})
        rejected = await test_client.patch(url, json={"message_text": "c" * 255})

        assert accepted.status_code == 200
        assert len(accepted.json()["message_text"]) == 254
        assert rejected.status_code == 400
        assert rejected.content == b""

    @pytest.mark.asyncio
    async def test_update_blank_rejected(self, test_client):
        account = await _register(test_client)
        created = await _post(test_client, account["account_id"], "draft")

        response = await test_client.patch(
            f"/messages/{created['message_id']}", json={"message_text": ""}
        )

        assert response.status_code == 400
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_update_missing_message(self, test_client):
        response = await test_client.patch("/messages/555", json={"message_text": "edited"})

        assert response.status_code == 400
        assert response.content == b""


class TestMalformedRequests:

    @pytest.mark.asyncio
    async def test_non_integer_message_id(self, test_client):
        response = await test_client.get("/messages/abc")

        assert response.status_code == 400
        assert response.json()["error"] == "malformed_request"

    @pytest.mark.asyncio
    async def test_non_integer_account_id(self, test_client):
        response = await test_client.get("/accounts/abc/messages")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_json_body(self, test_client):
        response = await test_client.post(
            "/register",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "malformed_request"

    @pytest.mark.asyncio
    async def test_missing_field(self, test_client):
        response = await test_client.post("/login", json={"username": "only"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, url",
        [
            ("GET", "/messages/99999999999999999999"),
            ("DELETE", "/messages/99999999999999999999"),
            ("GET", "/messages/2147483648"),
            ("GET", "/messages/-2147483649"),
            ("GET", "/accounts/99999999999999999999/messages"),
        ],
    )
    async def test_out_of_range_path_id(self, test_client, method, url):
        response = await test_client.request(method, url)

        assert response.status_code == 400
        assert response.json()["error"] == "malformed_request"

    @pytest.mark.asyncio
    async def test_out_of_range_id_on_update(self, test_client):
        response = await test_client.patch(
            "/messages/99999999999999999999", json={"message_text": "edited"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "malformed_request"

    @pytest.mark.asyncio
    async def test_largest_integer_id_is_a_plain_miss(self, test_client):
        response = await test_client.get("/messages/2147483647")

        assert response.status_code == 200
        assert response.content == b""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"posted_by": 99999999999999999999, "message_text": "hi", "time_posted_epoch": EPOCH},
            {"posted_by": 1, "message_text": "hi", "time_posted_epoch": 2**63},
        ],
    )
    async def test_out_of_range_body_fields(self, test_client, payload):
        response = await test_client.post("/messages", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "malformed_request"


class TestCrossCutting:

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/messages")

        assert response.headers.get("X-Request-ID")

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/messages", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"


class TestStoreFailures:

    @pytest.mark.asyncio
    async def test_commit_failure_answers_500(self, test_client, monkeypatch):
        async def failing_commit(self):
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(AsyncSession, "commit", failing_commit)

        response = await test_client.post(
            "/register", json={"username": "unsaved", "password": "password"}
        )

        assert response.status_code == 500
        assert response.json()["error"] == "server_error"

        monkeypatch.undo()
        login = await test_client.post(
            "/login", json={"username": "unsaved", "password": "password"}
        )
        assert login.status_code == 401

    @pytest.mark.asyncio
    async def test_health_unhealthy_without_database(self, tmp_path):
        unreachable = Settings(
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'chirper.db'}",
            log_level="WARNING",
        )
        app = create_app(unreachable)

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health")

        await dispose_engine(app.state.engine)

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["database"] == "disconnected"
