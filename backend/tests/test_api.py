"""
TechNotes Backend — HTTP API Tests
====================================

What:  Endpoint tests through the full FastAPI stack (schemas, services,
       exception handlers, middleware) on in-memory repositories.
How:   HTTPX AsyncClient from the `test_client` fixture. DELETE bodies are sent
       with client.request("DELETE", ...) since httpx's delete() takes no body.
"""

import logging
from unittest.mock import AsyncMock

import pytest

from technotes.exceptions import StorePersistenceError


async def _create_user(client, username="alice", password="secret1", roles=None):
    response = await client.post(
        "/users",
        json={"username": username, "password": password, "roles": roles or ["Employee"]},
    )
    assert response.status_code == 200, response.text
    users = (await client.get("/users")).json()
    return next(user["id"] for user in users if user["username"] == username)


async def _delete(client, path, body):
    return await client.request("DELETE", path, json=body)


class TestValidation:
    """Missing or wrongly typed fields are 400s and persist nothing."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["username", "password", "roles"])
    async def test_create_user_missing_field(self, test_client, repos, missing):
        body = {"username": "alice", "password": "secret1", "roles": ["Employee"]}
        del body[missing]

        response = await test_client.post("/users", json=body)

        assert response.status_code == 400
        assert missing in response.json()["message"]
        assert len(repos.users) == 0

    @pytest.mark.asyncio
    async def test_create_user_empty_roles(self, test_client, repos):
        response = await test_client.post(
            "/users", json={"username": "alice", "password": "secret1", "roles": []}
        )

        assert response.status_code == 400
        assert len(repos.users) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["user", "title", "text"])
    async def test_create_note_missing_field(self, test_client, repos, missing):
        user_id = await _create_user(test_client)
        body = {"user": user_id, "title": "T1", "text": "body"}
        del body[missing]

        response = await test_client.post("/notes", json=body)

        assert response.status_code == 400
        assert response.json()["message"].startswith("All fields are required")
        assert len(repos.notes) == 0

    @pytest.mark.asyncio
    async def test_create_note_empty_title(self, test_client, repos):
        user_id = await _create_user(test_client)

        response = await test_client.post(
            "/notes", json={"user": user_id, "title": "", "text": "body"}
        )

        assert response.status_code == 400
        assert len(repos.notes) == 0

    @pytest.mark.asyncio
    async def test_update_note_completed_must_be_boolean(self, test_client, make_user, make_note):
        alice = await make_user("alice")
        note = await make_note(alice.id)

        response = await test_client.patch(
            "/notes",
            json={
                "id": str(note.id), "user": str(alice.id), "title": "T1",
                "text": "body", "completed": "true",
            },
        )

        assert response.status_code == 400
        assert "completed" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_update_user_active_must_be_boolean(self, test_client, make_user):
        alice = await make_user("alice")

        response = await test_client.patch(
            "/users",
            json={"id": str(alice.id), "username": "alice", "roles": ["Employee"], "active": 1},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_without_id(self, test_client):
        response = await _delete(test_client, "/notes", {})

        assert response.status_code == 400
        assert "id" in response.json()["message"]


class TestNotesEndpoints:

    @pytest.mark.asyncio
    async def test_list_notes_empty(self, test_client):
        response = await test_client.get("/notes")

        assert response.status_code == 400
        assert response.json()["message"] == "No notes found"

    @pytest.mark.asyncio
    async def test_duplicate_title_conflict(self, test_client):
        user_id = await _create_user(test_client)
        body = {"user": user_id, "title": "Groceries", "text": "milk"}

        first = await test_client.post("/notes", json=body)
        second = await test_client.post("/notes", json=body)

        assert first.status_code == 200
        assert first.json() == {"message": "New note Groceries created"}
        assert second.status_code == 409
        notes = (await test_client.get("/notes")).json()
        assert [note["title"] for note in notes] == ["Groceries"]

    @pytest.mark.asyncio
    async def test_rename_rules(self, test_client, make_user, make_note):
        alice = await make_user("alice")
        x = await make_note(alice.id, title="X")
        await make_note(alice.id, title="Y")
        base = {"id": str(x.id), "user": str(alice.id), "text": "body", "completed": True}

        same = await test_client.patch("/notes", json={**base, "title": "X"})
        taken = await test_client.patch("/notes", json={**base, "title": "Y"})

        assert same.status_code == 200
        assert same.json() == {"message": "'X' updated"}
        assert taken.status_code == 409
        assert taken.json()["message"] == "Duplicate note title"

    @pytest.mark.asyncio
    async def test_username_absent_for_deleted_user(self, test_client, repos, make_user, make_note):
        alice = await make_user("alice")
        await make_note(alice.id, title="Orphan")
        await repos.users.delete_one(alice)

        notes = (await test_client.get("/notes")).json()

        assert len(notes) == 1
        assert "username" not in notes[0]
        assert notes[0]["user"] == str(alice.id)

    @pytest.mark.asyncio
    async def test_delete_unknown_note(self, test_client):
        response = await _delete(
            test_client, "/notes", {"id": "00000000-0000-4000-8000-000000000000"}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Note not found"


class TestUsersEndpoints:

    @pytest.mark.asyncio
    async def test_list_users_empty(self, test_client):
        response = await test_client.get("/users")

        assert response.status_code == 400
        assert response.json()["message"] == "No users found"

    @pytest.mark.asyncio
    async def test_password_never_returned(self, test_client, repos):
        await _create_user(test_client, password="secret1")

        users = (await test_client.get("/users")).json()

        assert "password" not in users[0]
        assert "secret1" not in str(users)
        stored = await repos.users.find_one(username="alice")
        assert stored.password != "secret1"

    @pytest.mark.asyncio
    async def test_duplicate_username_conflict(self, test_client):
        await _create_user(test_client)

        response = await test_client.post(
            "/users", json={"username": "alice", "password": "x", "roles": ["Admin"]}
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Duplicate username"

    @pytest.mark.asyncio
    async def test_update_user(self, test_client):
        user_id = await _create_user(test_client)

        response = await test_client.patch(
            "/users",
            json={"id": user_id, "username": "alice.w", "roles": ["Manager"], "active": False},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "alice.w updated"}
        users = (await test_client.get("/users")).json()
        assert users[0]["roles"] == ["Manager"]
        assert users[0]["active"] is False


class TestEndToEnd:

    @pytest.mark.asyncio
    async def test_user_and_note_lifecycle(self, test_client):
        created = await test_client.post(
            "/users", json={"username": "alice", "password": "secret1", "roles": ["Employee"]}
        )
        assert created.status_code == 200
        alice_id = (await test_client.get("/users")).json()[0]["id"]

        note = await test_client.post(
            "/notes", json={"user": alice_id, "title": "T1", "text": "body"}
        )
        assert note.status_code == 200

        notes = (await test_client.get("/notes")).json()
        assert len(notes) == 1
        assert notes[0]["title"] == "T1"
        assert notes[0]["username"] == "alice"
        assert notes[0]["completed"] is False
        note_id = notes[0]["id"]

        blocked = await _delete(test_client, "/users", {"id": alice_id})
        assert blocked.status_code == 400
        assert blocked.json()["message"] == "User has assigned notes"

        deleted_note = await _delete(test_client, "/notes", {"id": note_id})
        assert deleted_note.status_code == 200
        assert deleted_note.json() == {"message": f"Note 'T1' with ID {note_id} deleted"}

        deleted_user = await _delete(test_client, "/users", {"id": alice_id})
        assert deleted_user.status_code == 200
        assert deleted_user.json() == {"message": f"Username alice with ID {alice_id} deleted"}


class TestHealthAndHeaders:

    @pytest.mark.asyncio
    async def test_health_reports_memory_store(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["store"] == "memory"
        assert body["database"] == "not_used"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-ID": "abc12345"})

        assert response.headers["X-Request-ID"] == "abc12345"
        assert response.json()["request_id"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/health")

        assert len(response.headers["X-Request-ID"]) == 8


class TestPasswordLimits:
    """bcrypt takes at most 72 bytes, so the limit is counted in UTF-8 bytes."""

    @pytest.mark.asyncio
    async def test_create_user_multibyte_password_over_limit(self, test_client, repos):
        # 40 characters, 80 bytes
        response = await test_client.post(
            "/users", json={"username": "zoe", "password": "é" * 40, "roles": ["Employee"]}
        )

        assert response.status_code == 400
        assert "password" in response.json()["message"]
        assert len(repos.users) == 0

    @pytest.mark.asyncio
    async def test_create_user_multibyte_password_at_limit(self, test_client, repos):
        response = await test_client.post(
            "/users", json={"username": "zoe", "password": "é" * 36, "roles": ["Employee"]}
        )

        assert response.status_code == 200
        assert len(repos.users) == 1

    @pytest.mark.asyncio
    async def test_update_user_multibyte_password_over_limit(self, test_client, repos, make_user):
        zoe = await make_user("zoe", password="secret1")

        response = await test_client.patch(
            "/users",
            json={
                "id": str(zoe.id), "username": "zoe", "roles": ["Employee"],
                "active": True, "password": "é" * 40,
            },
        )

        assert response.status_code == 400
        assert "password" in response.json()["message"]
        assert (await repos.users.find_by_id(zoe.id)).password == zoe.password


class TestStoreFailure:

    @pytest.mark.asyncio
    async def test_create_user_store_failure_is_generic_400(self, test_client, repos):
        repos.users.create = AsyncMock(
            side_effect=StorePersistenceError(
                message="Invalid user data received",
                context={"operation": "create", "error_type": "OperationalError"},
            )
        )

        response = await test_client.post(
            "/users", json={"username": "alice", "password": "secret1", "roles": ["Employee"]}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid user data received"
        assert body["error"] == "store_error"
        assert "details" not in body
        assert "OperationalError" not in response.text


class TestAccessLog:

    @staticmethod
    def _access_records(caplog):
        return [record for record in caplog.records if record.name == "technotes.access"]

    @pytest.mark.asyncio
    async def test_rejected_call_logs_error_code(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="technotes.access")
        await _create_user(test_client)
        caplog.clear()

        await test_client.post(
            "/users", json={"username": "alice", "password": "x", "roles": ["Admin"]}
        )

        records = self._access_records(caplog)
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert records[0].status == 409
        assert records[0].error_code == "conflict"
        assert "error=conflict" in records[0].getMessage()

    @pytest.mark.asyncio
    async def test_successful_call_has_no_error_code(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="technotes.access")

        await test_client.post(
            "/users", json={"username": "alice", "password": "secret1", "roles": ["Employee"]}
        )

        records = self._access_records(caplog)
        assert len(records) == 1
        assert records[0].levelno == logging.INFO
        assert records[0].error_code is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/health", "/openapi.json"])
    async def test_health_and_docs_paths_not_logged(self, test_client, caplog, path):
        caplog.set_level(logging.INFO, logger="technotes.access")

        await test_client.get(path)

        assert self._access_records(caplog) == []
