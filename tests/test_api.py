from __future__ import annotations

from fastapi.testclient import TestClient

from services import auth_service


def _register(client: TestClient, email: str = "a@x.com",
              password: str = "secret1", name: str = "A"):
    return client.post(
        "/users/register",
        json={"email": email, "password": password, "name": name},
    )


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_register_and_duplicate(client: TestClient) -> None:
    first = _register(client, "a@x.com", "secret1", "A")
    assert first.status_code == 200
    body = first.json()
    assert body["user"]["email"] == "a@x.com"
    assert body["user"]["ui_color_theme"] == "blue"
    assert "password_hash" not in body["user"]
    assert auth_service.decode_token(body["token"])["ownerId"] == body["user"]["id"]

    second = _register(client, "a@x.com", "secret2", "B")
    assert second.status_code == 409
    assert second.json()["code"] == "duplicate_email"


def test_register_rejects_malformed_input(client: TestClient) -> None:
    assert _register(client, email="not-an-email").status_code == 422
    assert _register(client, password="short").status_code == 422
    assert _register(client, name="").status_code == 422


def test_update_user(client: TestClient) -> None:
    user_id = _register(client).json()["user"]["id"]

    renamed = client.patch(f"/users/{user_id}", json={"name": "Renamed"})
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Renamed"
    assert renamed.json()["email"] == "a@x.com"

    bad = client.patch(
        f"/users/{user_id}",
        json={"current_password": "nope-nope", "new_password": "secret2"},
    )
    assert bad.status_code == 401
    assert bad.json()["code"] == "invalid_credentials"

    ok = client.patch(
        f"/users/{user_id}",
        json={"current_password": "secret1", "new_password": "secret2"},
    )
    assert ok.status_code == 200

    missing = client.patch("/users/999", json={"name": "Ghost"})
    assert missing.status_code == 404


def test_task_lifecycle(client: TestClient) -> None:
    owner = _register(client).json()["user"]["id"]
    other = _register(client, "b@x.com").json()["user"]["id"]

    created = client.post(
        "/tasks/",
        json={"user_id": owner, "title": "Plan", "priority": "high",
              "due_date": "2024-05-01T09:00:00"},
    )
    assert created.status_code == 200
    task = created.json()
    assert task["completed"] is False
    assert task["priority"] == "high"

    assert client.get(f"/tasks/{task['id']}", params={"user_id": owner}).status_code == 200
    assert client.get(f"/tasks/{task['id']}", params={"user_id": other}).status_code == 404

    patched = client.patch(
        f"/tasks/{task['id']}",
        json={"user_id": owner, "completed": True, "due_date": None},
    )
    assert patched.status_code == 200
    assert patched.json()["completed"] is True
    assert patched.json()["due_date"] is None
    assert patched.json()["title"] == "Plan"

    foreign = client.delete(f"/tasks/{task['id']}", params={"user_id": other})
    assert foreign.status_code == 404

    deleted = client.delete(f"/tasks/{task['id']}", params={"user_id": owner})
    assert deleted.json() == {"success": True}
    assert client.get(f"/tasks/{task['id']}", params={"user_id": owner}).status_code == 404


def test_create_task_rejects_bad_priority(client: TestClient) -> None:
    owner = _register(client).json()["user"]["id"]

    response = client.post("/tasks/", json={"user_id": owner, "title": "X",
                                             "priority": "urgent"})

    assert response.status_code == 422


def test_list_tasks_filters_and_pages(client: TestClient) -> None:
    owner = _register(client).json()["user"]["id"]
    for i in range(1, 6):
        client.post("/tasks/", json={
            "user_id": owner,
            "title": f"T{i}",
            "due_date": f"2024-0{i}-15T00:00:00",
        })

    page = client.get("/tasks/", params={"user_id": owner, "limit": 2, "offset": 2})
    assert [t["title"] for t in page.json()] == ["T3", "T2"]

    due = client.get("/tasks/", params={"user_id": owner,
                                        "due_before": "2024-03-15T00:00:00"})
    assert [t["title"] for t in due.json()] == ["T3", "T2", "T1"]

    assert client.get("/tasks/", params={"user_id": owner, "limit": 101}).status_code == 422
    assert client.get("/tasks/", params={"user_id": owner, "limit": 0}).status_code == 422
    assert client.get("/tasks/", params={"user_id": owner, "offset": -1}).status_code == 422


def test_register_keeps_email_exactly_as_submitted(client: TestClient) -> None:
    first = _register(client, "a@x.com")
    second = _register(client, "a@X.COM")

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["user"]["email"] == "a@x.com"
    assert second.json()["user"]["email"] == "a@X.COM"


def test_update_keeps_email_exactly_as_submitted(client: TestClient) -> None:
    user_id = _register(client, "a@x.com").json()["user"]["id"]

    response = client.patch(f"/users/{user_id}", json={"email": "Mixed@Case.ORG"})

    assert response.status_code == 200
    assert response.json()["email"] == "Mixed@Case.ORG"


def test_foreign_task_is_reported_missing_not_forbidden(client: TestClient) -> None:
    owner = _register(client).json()["user"]["id"]
    other = _register(client, "b@x.com").json()["user"]["id"]
    task_id = client.post("/tasks/", json={"user_id": owner, "title": "Mine"}).json()["id"]

    responses = [
        client.get(f"/tasks/{task_id}", params={"user_id": other}),
        client.patch(f"/tasks/{task_id}", json={"user_id": other, "title": "Theirs"}),
        client.delete(f"/tasks/{task_id}", params={"user_id": other}),
    ]

    assert [r.status_code for r in responses] == [404, 404, 404]
    assert all(r.json()["code"] == "not_found" for r in responses)
    assert client.get(f"/tasks/{task_id}", params={"user_id": owner}).json()["title"] == "Mine"
