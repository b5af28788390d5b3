from libris.models.user import User


def _register(client, **overrides):
    payload = {"name": "Rita Reader", "email": "Rita@Example.com", "password": "pw123"}
    payload.update(overrides)
    return client.post("/auth/register", json=payload)


def test_register_creates_member(client):
    r = _register(client)

    assert r.status_code == 201
    body = r.get_json()
    assert body["email"] == "rita@example.com"
    assert body["role"] == "member"


def test_register_ignores_requested_role(client):
    r = _register(client, role="admin")
    assert r.get_json()["role"] == "member"


def test_register_requires_fields(client):
    r = _register(client, password="")
    assert r.status_code == 400


def test_register_duplicate_email(client):
    _register(client)
    r = _register(client, email="rita@example.com")
    assert r.status_code == 400
    assert r.get_json()["message"] == "Email already registered"


def test_login_and_me(client):
    _register(client)

    r = client.post("/auth/login", json={"email": "rita@example.com", "password": "pw123"})
    assert r.status_code == 200
    token = r.get_json()["access_token"]

    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.get_json()["user"]["name"] == "Rita Reader"


def test_login_wrong_password(client):
    _register(client)
    r = client.post("/auth/login", json={"email": "rita@example.com", "password": "nope"})
    assert r.status_code == 401


def test_member_token_can_borrow(client, make_book):
    book = make_book()
    _register(client)
    token = client.post(
        "/auth/login", json={"email": "rita@example.com", "password": "pw123"}
    ).get_json()["access_token"]

    r = client.post(f"/books/{book.id}/borrow", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200


def test_create_user_command(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["create-user", "Ada", "ADA@example.com", "pw", "--role", "admin"])

    assert result.exit_code == 0
    assert "Created admin" in result.output
    assert User.query.filter_by(email="ada@example.com").one().role == "admin"


def test_create_user_command_duplicate(app, admin):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-user", "Again", admin.email, "pw"])
    assert result.exit_code != 0
    assert "Email already registered" in result.output
