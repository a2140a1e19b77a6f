"""HTTP tests for ``/api/v1/tasks``."""

from __future__ import annotations

import pytest
from freezegun import freeze_time
from taskmanager.models.user import User

from tests.factories.task import TaskFactory
from tests.factories.user import UserFactory


def _data(resp):
    return resp.get_json()["data"]


@pytest.fixture()
def alice(api):
    user = UserFactory(email="alice@example.com")
    return user.id, api.tokens_for("alice@example.com")["access"]


@pytest.fixture()
def bob(api):
    user = UserFactory(email="bob@example.com")
    return user.id, api.tokens_for("bob@example.com")["access"]


@pytest.fixture()
def admin(api):
    user = UserFactory(email="admin@example.com", admin=True)
    return user.id, api.tokens_for("admin@example.com")["access"]


class TestCreate:
    def test_create_task(self, api, alice):
        user_id, token = alice
        resp = api.create_task(
            token,
            title="Ship release",
            description="cut the tag",
            priority="high",
            dueDate="2026-12-01T09:00:00Z",
            tags=["work", "release"],
        )
        body = resp.get_json()
        task = body["data"]["task"]

        assert resp.status_code == 201
        assert body["message"] == "Task created successfully"
        assert task["userId"] == user_id
        assert task["status"] == "pending"
        assert task["priority"] == "high"
        assert task["dueDate"].startswith("2026-12-01T09:00:00")
        assert task["tags"] == ["work", "release"]
        assert task["completedAt"] is None

    def test_requires_bearer(self, api):
        assert api.post("/tasks", json={"title": "x"}).status_code == 401

    def test_validation(self, api, alice):
        _, token = alice
        resp = api.create_task(token, title="", status="done")

        assert resp.status_code == 400
        assert {e.split(":")[0] for e in resp.get_json()["errors"]} == {"title", "status"}


class TestOwnership:
    def test_owner_reads_updates_and_deletes(self, api, alice):
        _, token = alice
        task_id = _data(api.create_task(token, title="Mine"))["task"]["id"]

        assert api.get(f"/tasks/{task_id}", token=token).status_code == 200
        upd = api.put(f"/tasks/{task_id}", token=token, json={"priority": "low"})
        assert upd.status_code == 200
        assert _data(upd)["task"]["title"] == "Mine"
        assert _data(upd)["task"]["priority"] == "low"

        assert api.delete(f"/tasks/{task_id}", token=token).status_code == 200
        assert api.get(f"/tasks/{task_id}", token=token).status_code == 404

    def test_other_user_gets_403(self, api, alice, bob):
        _, alice_token = alice
        _, bob_token = bob
        task_id = _data(api.create_task(alice_token, title="Private"))["task"]["id"]

        for method in ("get", "put", "delete"):
            kwargs = {"json": {"title": "x"}} if method == "put" else {}
            resp = getattr(api, method)(f"/tasks/{task_id}", token=bob_token, **kwargs)
            assert resp.status_code == 403
            assert resp.get_json()["success"] is False

        assert _data(api.get(f"/tasks/{task_id}", token=alice_token))["task"]["title"] == "Private"

    def test_admin_can_access_any_task(self, api, alice, admin):
        _, alice_token = alice
        _, admin_token = admin
        task_id = _data(api.create_task(alice_token, title="Audit me"))["task"]["id"]

        assert api.get(f"/tasks/{task_id}", token=admin_token).status_code == 200
        assert api.put(f"/tasks/{task_id}", token=admin_token, json={"status": "completed"}).status_code == 200
        assert api.delete(f"/tasks/{task_id}", token=admin_token).status_code == 200

    def test_unknown_task_is_404(self, api, alice):
        _, token = alice
        resp = api.get("/tasks/9999", token=token)

        assert resp.status_code == 404
        assert resp.get_json()["message"] == "Task not found"

    def test_empty_update_is_400(self, api, alice):
        _, token = alice
        task_id = _data(api.create_task(token))["task"]["id"]

        assert api.put(f"/tasks/{task_id}", token=token, json={}).status_code == 400


class TestCompletion:
    def test_completed_at_is_set_once(self, api, alice):
        _, token = alice
        task_id = _data(api.create_task(token, title="Finish"))["task"]["id"]

        done = _data(api.put(f"/tasks/{task_id}", token=token, json={"status": "completed"}))["task"]
        edited = _data(api.put(f"/tasks/{task_id}", token=token, json={"title": "Finished"}))["task"]
        again = _data(api.put(f"/tasks/{task_id}", token=token, json={"status": "completed"}))["task"]

        assert done["completedAt"] is not None
        assert edited["completedAt"] == done["completedAt"]
        assert again["completedAt"] == done["completedAt"]

    def test_reopen_keeps_completed_at(self, api, alice, session):
        user_id, token = alice
        with freeze_time("2026-05-01 09:00:00"):
            task = TaskFactory(owner=session.get(User, user_id), status="completed")
        task_id = task.id
        created = _data(api.get(f"/tasks/{task_id}", token=token))["task"]
        assert created["completedAt"].startswith("2026-05-01T09:00:00")

        reopened = _data(api.put(f"/tasks/{task_id}", token=token, json={"status": "pending"}))["task"]
        assert reopened["status"] == "pending"
        assert reopened["completedAt"] == created["completedAt"]

        redone = _data(api.put(f"/tasks/{task_id}", token=token, json={"status": "completed"}))["task"]
        assert redone["completedAt"] != created["completedAt"]


class TestListing:
    def test_pagination(self, api, alice):
        _, token = alice
        for i in range(3):
            api.create_task(token, title=f"t{i}")

        resp = api.get("/tasks?page=1&limit=2", token=token)
        data = _data(resp)

        assert resp.status_code == 200
        assert resp.get_json()["message"] == "Tasks fetched successfully"
        assert len(data["tasks"]) == 2
        assert data["pagination"] == {"total": 3, "page": 1, "limit": 2, "totalPages": 2}

    def test_only_own_tasks(self, api, alice):
        alice_id, alice_token = alice
        api.create_task(alice_token, title="alice's")
        TaskFactory(owner=UserFactory(), title="someone else's")

        tasks = _data(api.get("/tasks", token=alice_token))["tasks"]

        assert [t["title"] for t in tasks] == ["alice's"]
        assert all(t["userId"] == alice_id for t in tasks)

    def test_filters_search_and_sort(self, api, alice):
        _, token = alice
        api.create_task(token, title="Buy milk", priority="low")
        api.create_task(token, title="Milk the cow", priority="high")
        api.create_task(token, title="Walk", priority="high")

        resp = api.get("/tasks?search=MILK&sortBy=priority&order=desc", token=token)
        assert [t["title"] for t in _data(resp)["tasks"]] == ["Milk the cow", "Buy milk"]

        resp = api.get("/tasks?priority=high&sortBy=title&order=asc", token=token)
        assert [t["title"] for t in _data(resp)["tasks"]] == ["Milk the cow", "Walk"]

    def test_default_order_is_newest_first(self, api, alice):
        _, token = alice
        for title in ("first", "second", "third"):
            api.create_task(token, title=title)

        titles = [t["title"] for t in _data(api.get("/tasks", token=token))["tasks"]]
        assert titles == ["third", "second", "first"]

    @pytest.mark.parametrize("query", ["sortBy=passwordHash", "order=up", "page=0", "limit=0", "status=done"])
    def test_bad_query_is_400(self, api, alice, query):
        _, token = alice
        assert api.get(f"/tasks?{query}", token=token).status_code == 400

    def test_limit_above_max_is_capped(self, api, alice):
        _, token = alice
        assert _data(api.get("/tasks?limit=1000", token=token))["pagination"]["limit"] == 100


class TestStats:
    def test_stats_have_every_key(self, api, alice):
        _, token = alice
        api.create_task(token, status="completed", priority="high")
        api.create_task(token, status="pending", priority="high")

        resp = api.get("/tasks/stats", token=token)
        data = _data(resp)

        assert resp.status_code == 200
        assert data == {
            "total": 2,
            "byStatus": {"pending": 1, "in-progress": 0, "completed": 1},
            "byPriority": {"low": 0, "medium": 0, "high": 2},
        }


class TestAdminAll:
    def test_regular_user_is_forbidden(self, api, alice):
        _, token = alice
        resp = api.get("/tasks/admin/all", token=token)

        assert resp.status_code == 403
        assert resp.get_json()["message"] == "User role 'user' is not authorized to access this route"

    def test_admin_sees_everyone_with_owner(self, api, alice, bob, admin):
        _, alice_token = alice
        _, bob_token = bob
        _, admin_token = admin
        api.create_task(alice_token, title="a")
        api.create_task(bob_token, title="b")

        data = _data(api.get("/tasks/admin/all?sortBy=title&order=asc", token=admin_token))

        assert data["pagination"]["total"] == 2
        assert [t["owner"]["email"] for t in data["tasks"]] == ["alice@example.com", "bob@example.com"]
        assert "passwordHash" not in str(data)


def test_end_to_end_flow(api):
    """register -> login -> create -> list -> complete -> stats."""
    assert api.register("flow@example.com", name="Flow").status_code == 201
    token = api.tokens_for("flow@example.com")["access"]

    task_id = _data(api.create_task(token, title="Do the thing"))["task"]["id"]
    listed = _data(api.get("/tasks", token=token))
    assert [t["id"] for t in listed["tasks"]] == [task_id]

    done = api.put(f"/tasks/{task_id}", token=token, json={"status": "completed"})
    assert _data(done)["task"]["completedAt"] is not None

    stats = _data(api.get("/tasks/stats", token=token))
    assert stats["total"] == 1
    assert stats["byStatus"]["completed"] == 1
