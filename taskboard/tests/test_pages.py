"""Tests for the server-rendered pages and the client script."""

import re

PASSWORDS = {"alice": "password123", "bob": "password456"}


def login(client, user):
    response = client.post(
        "/login",
        data={"username": user.username, "password": PASSWORDS[user.username]},
        follow_redirects=False,
    )
    assert response.status_code == 303


def test_index_redirects_anonymous_to_login(client):
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_index_with_stale_cookie_redirects(client):
    client.cookies.set("access_token", "expired-or-forged")

    response = client.get("/", follow_redirects=False)

    assert response.status_code == 303


def test_index_renders_cards_in_stored_order(client, store, alice, abc_tasks):
    """Test cards carry their ids and follow the persisted order."""
    a, b, c = abc_tasks
    store.apply_order(alice.id, [c.id, a.id, b.id])
    login(client, alice)

    response = client.get("/")

    assert response.status_code == 200
    rendered_ids = [int(i) for i in re.findall(r'class="task-card[^"]*" data-task-id="(\d+)"', response.text)]
    assert rendered_ids == [c.id, a.id, b.id]
    assert 'id="task-list"' in response.text
    assert "js/tasks.js" in response.text


def test_index_shows_only_own_tasks(client, store, alice, bob, abc_tasks):
    store.add_task(bob.id, "Secret of bob")
    login(client, alice)

    assert "Secret of bob" not in client.get("/").text


def test_client_script_is_served(client):
    """Test tasks.js is served and posts the full order on a moved card."""
    response = client.get("/static/js/tasks.js")

    assert response.status_code == 200
    assert "/api/v1/tasks/reorder" in response.text
    assert "evt.oldIndex === evt.newIndex" in response.text


def test_login_form_sets_cookie(client, alice):
    response = client.post("/login", data={"username": "alice", "password": "password123"}, follow_redirects=False)

    assert response.status_code == 303
    assert "access_token" in response.cookies


def test_login_form_wrong_password(client, alice):
    response = client.post("/login", data={"username": "alice", "password": "bad"})

    assert response.status_code == 401
    assert "Incorrect username or password" in response.text


def test_register_form(client):
    response = client.post("/register", data={"username": "dave", "password": "password000"})

    assert response.status_code == 200
    assert "dave" in response.text


def test_register_form_errors(client, alice):
    assert client.post("/register", data={"username": "x", "password": "y"}).status_code == 400
    assert client.post("/register", data={"username": "alice", "password": "password000"}).status_code == 409


def test_logout_form(client, alice):
    login(client, alice)

    response = client.post("/logout")

    assert response.url.path == "/login"
    assert client.get("/", follow_redirects=False).status_code == 303


def test_create_task_form(client, store, alice, abc_tasks):
    login(client, alice)

    response = client.post(
        "/tasks/new",
        data={"title": "From form", "description": ""},
        files={"image": ("pic.png", b"\x89PNG data", "image/png")},
        follow_redirects=False,
    )

    assert response.status_code == 303
    task = store.list_for_owner(alice.id)[-1]
    assert task.title == "From form"
    assert task.order == 3
    assert task.image_content_type == "image/png"


def test_create_task_form_with_image_commits_once(client, session, store, alice, monkeypatch):
    """Test the new task and its upload land in one transaction."""
    login(client, alice)
    commits = []
    real_commit = session.commit

    def counting_commit():
        commits.append(1)
        real_commit()

    monkeypatch.setattr(session, "commit", counting_commit)
    response = client.post(
        "/tasks/new",
        data={"title": "Pictured", "description": ""},
        files={"image": ("pic.png", b"\x89PNG data", "image/png")},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert len(commits) == 1
    assert store.list_for_owner(alice.id)[0].has_image


def test_create_task_form_invalid(client, store, alice):
    login(client, alice)

    response = client.post("/tasks/new", data={"title": " ", "description": ""})

    assert response.status_code == 400
    assert "Title is required" in response.text
    assert store.list_for_owner(alice.id) == []


def test_task_detail_fragment(client, store, alice, bob, alice_headers, bob_headers, abc_tasks):
    task = store.update_task(alice.id, abc_tasks[0].id, description="The details")
    store.set_image(alice.id, task.id, b"\x89PNG data", "image/png")

    response = client.get(f"/tasks/{task.id}/detail", headers=alice_headers)

    assert response.status_code == 200
    assert "The details" in response.text
    assert f"/api/v1/tasks/{task.id}/image" in response.text
    assert client.get(f"/tasks/{task.id}/detail", headers=bob_headers).status_code == 404
