"""Integration tests for the HTTP surface of collection resources."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from recordgate.api.app import create_app
from recordgate.auth import ROOT_KEY_HEADER, JWTService
from recordgate.config import Settings
from recordgate.hooks import HookRegistry
from recordgate.persistence import DatabaseConfig, MemoryStore
from recordgate.resources import Collection

SECRET = "test-secret-key-for-testing-only-32chars"
ROOT_KEY = "sesame"
BUNDLED_RESOURCES = Path(__file__).resolve().parents[2] / "resources"


def make_settings(tmp_path, resources_path=BUNDLED_RESOURCES) -> Settings:
    return Settings(
        base_path=tmp_path,
        resources_path=resources_path,
        database=DatabaseConfig("memory://"),
        secret_key=SECRET,
        root_key=ROOT_KEY,
    )


def auth_header(user_id="U001"):
    return {"Authorization": f"Bearer {JWTService(SECRET).generate_token(user_id)}"}


def reject_secret(ctx):
    if ctx.data.get("title") == "secret":
        ctx.error("title", "is reserved")


def hide_owner(ctx):
    ctx.hide("owner")


def owner_only_delete(ctx):
    ctx.cancel("Only root may delete", 403)


def explode(ctx):
    raise RuntimeError("hook bug")


def flag_locked(ctx):
    if ctx.data.get("title") == "locked":
        ctx.error("title", "is locked")


@pytest.fixture(autouse=True)
def clear_hook_registry():
    HookRegistry.clear()
    yield
    HookRegistry.clear()


@pytest.fixture
def todos():
    return Collection(
        "todos",
        {
            "title": {"type": "string", "required": True},
            "done": {"type": "boolean"},
            "owner": {"type": "string"},
        },
        store=MemoryStore("todos"),
        hooks={"onPost": reject_secret, "onGet": hide_owner, "onDelete": owner_only_delete},
    )


@pytest.fixture
def client(tmp_path, todos):
    app = create_app(make_settings(tmp_path), collections=[todos])
    with TestClient(app) as client:
        yield client


def create_todo(client, **fields):
    response = client.post("/todos", json={"title": "write tests", **fields})
    assert response.status_code == 200
    return response.json()


class TestStatus:
    def test_status_lists_resources(self, client):
        response = client.get("/_status")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "resources": ["/todos"]}


class TestFind:
    def test_empty_collection(self, client):
        response = client.get("/todos")
        assert response.status_code == 200
        assert response.json() == []
        assert response.headers["content-type"].startswith("application/json")

    def test_get_hook_redacts(self, client):
        create_todo(client, owner="U001")
        records = client.get("/todos").json()
        assert len(records) == 1
        assert "owner" not in records[0]

    def test_root_sees_everything(self, client):
        create_todo(client, owner="U001")
        records = client.get("/todos", headers={ROOT_KEY_HEADER: ROOT_KEY}).json()
        assert records[0]["owner"] == "U001"

    def test_query_params_filter(self, client):
        create_todo(client, title="a")
        create_todo(client, title="b")
        records = client.get("/todos", params={"title": "b"}).json()
        assert [r["title"] for r in records] == ["b"]

    def test_find_one(self, client):
        saved = create_todo(client)
        response = client.get(f"/todos/{saved['_id']}")
        assert response.status_code == 200
        assert response.json()["_id"] == saved["_id"]

    def test_find_one_missing(self, client):
        response = client.get("/todos/missing")
        assert response.status_code == 404
        assert response.json() == {"message": "No record with id missing", "status": 404}

    def test_find_one_flagged_by_get_hook(self, tmp_path):
        flagged = Collection(
            "flagged", {"title": {"type": "string"}}, store=MemoryStore("flagged"),
            hooks={"onGet": flag_locked},
        )
        app = create_app(make_settings(tmp_path), collections=[flagged])
        with TestClient(app) as client:
            saved = client.post("/flagged", json={"title": "locked"}).json()
            response = client.get(f"/flagged/{saved['_id']}")
            listing = client.get("/flagged")
        assert response.status_code == 400
        assert response.json() == {"errors": {"title": "is locked"}}
        assert listing.status_code == 200
        assert listing.json() == [{"errors": {"title": "is locked"}}]


class TestSave:
    def test_post_inserts(self, client):
        saved = create_todo(client, done=False, admin=True)
        assert saved["title"] == "write tests"
        assert saved["done"] is False
        assert "admin" not in saved
        assert saved["_id"]

    def test_put_updates(self, client):
        saved = create_todo(client)
        response = client.put(f"/todos/{saved['_id']}", json={"title": "done", "done": True})
        assert response.status_code == 200
        assert response.json()["done"] is True

    def test_put_with_id_in_body(self, client):
        saved = create_todo(client)
        response = client.put("/todos", json={"_id": saved["_id"], "title": "renamed"})
        assert response.status_code == 200
        assert response.json()["title"] == "renamed"

    def test_put_missing_record_is_no_content(self, client):
        response = client.put("/todos/missing", json={"title": "x"})
        assert response.status_code == 204

    def test_validation_errors(self, client):
        response = client.post("/todos", json={"done": "yes"})
        assert response.status_code == 400
        assert response.json() == {"errors": {"title": "is required"}}

    def test_hook_errors(self, client):
        response = client.post("/todos", json={"title": "secret"})
        assert response.status_code == 400
        assert response.json() == {"errors": {"title": "is reserved"}}
        assert client.get("/todos").json() == []

    def test_missing_body(self, client):
        response = client.post("/todos")
        assert response.status_code == 400
        assert response.json()["message"] == "You must include an object when saving or updating."

    def test_malformed_body(self, client):
        response = client.post(
            "/todos", content=b"{not json", headers={"content-type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["status"] == 400


class TestRemove:
    def test_delete_cancelled_for_users(self, client):
        saved = create_todo(client)
        response = client.delete(f"/todos/{saved['_id']}", headers=auth_header())
        assert response.status_code == 403
        assert response.json() == {"message": "Only root may delete", "status": 403}
        assert len(client.get("/todos").json()) == 1

    def test_root_delete(self, client):
        saved = create_todo(client)
        response = client.delete(f"/todos/{saved['_id']}", headers={ROOT_KEY_HEADER: ROOT_KEY})
        assert response.status_code == 204
        assert client.get("/todos").json() == []

    def test_delete_without_id(self, client):
        response = client.delete("/todos", headers={ROOT_KEY_HEADER: ROOT_KEY})
        assert response.status_code == 400
        assert "_id" in response.json()["message"]

    def test_delete_by_query_id(self, client):
        saved = create_todo(client)
        response = client.delete(
            "/todos", params={"_id": saved["_id"]}, headers={ROOT_KEY_HEADER: ROOT_KEY}
        )
        assert response.status_code == 204


class TestFaults:
    def test_hook_fault_is_500(self, tmp_path):
        broken = Collection("broken", store=MemoryStore("broken"), hooks={"onGet": explode})
        app = create_app(make_settings(tmp_path), collections=[broken])
        with TestClient(app, raise_server_exceptions=False) as client:
            client.post("/broken", json={})
            response = client.get("/broken")
        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error", "status": 500}


class TestBundledResources:
    """The app loaded from the YAML definitions shipped with the repo."""

    @pytest.fixture
    def client(self, tmp_path):
        app = create_app(make_settings(tmp_path))
        with TestClient(app) as client:
            yield client

    def test_resources_served(self, client):
        assert client.get("/_status").json()["resources"] == ["/notes", "/todos"]

    def test_anonymous_write_rejected(self, client):
        response = client.post("/todos", json={"title": "x"})
        assert response.status_code == 401
        assert response.json()["message"] == "You must be logged in"

    def test_owner_stamped_from_token(self, client):
        response = client.post("/todos", json={"title": "x", "owner": "mallory"}, headers=auth_header())
        assert response.status_code == 200
        assert response.json()["owner"] == "U001"

    def test_notes_created_stamp(self, client):
        response = client.post("/notes", json={"body": "hello"})
        assert response.status_code == 200
        assert "created" in response.json()
