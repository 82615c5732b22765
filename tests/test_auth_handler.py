from http import HTTPStatus
from types import SimpleNamespace

import pytest
from flask import Blueprint, Flask, g

from pathagar.errors import EmailExistsError, InvalidCredentialsError
from pathagar.models import User
from pathagar.web.auth_handler import (
    AuthHandler,
    register_protected_routes,
    register_public_routes,
)


def _result():
    user = User(
        id="u1",
        username="alice",
        email="alice@example.com",
        full_name="Alice",
        role="member",
        success_score=100,
    )
    return SimpleNamespace(access_token="token", refresh_token="token", user=user)


class FakeAuthService:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def register(self, username, email, password, full_name):
        self.calls.append(("register", username, email, password, full_name))
        if self.error is not None:
            raise self.error
        return _result()

    def login(self, email_or_username, password):
        self.calls.append(("login", email_or_username, password))
        if self.error is not None:
            raise self.error
        return _result()


def make_client(service, logged_in=True):
    app = Flask(__name__)
    public = Blueprint("public", __name__)
    protected = Blueprint("protected", __name__)
    handler = AuthHandler(service)
    register_public_routes(public, handler)
    register_protected_routes(protected, handler)
    app.register_blueprint(public, url_prefix="/api/v1")
    app.register_blueprint(protected, url_prefix="/api/v1")

    if logged_in:
        @app.before_request
        def _login():
            g.user_id = "user-1"
            g.user_role = "member"

    return app.test_client()


def register_body(**overrides):
    body = {
        "username": "alice",
        "email": "alice@example.com",
        "password": "password",
        "full_name": "Alice",
    }
    body.update(overrides)
    return body


def test_register_returns_tokens_and_user():
    service = FakeAuthService()
    response = make_client(service).post("/api/v1/auth/register", json=register_body())
    assert response.status_code == HTTPStatus.CREATED
    data = response.get_json()["data"]
    assert data["access_token"] == "token"
    assert data["user"] == {
        "id": "u1",
        "username": "alice",
        "email": "alice@example.com",
        "full_name": "Alice",
        "role": "member",
        "success_score": 100,
    }
    assert service.calls == [("register", "alice", "alice@example.com", "password", "Alice")]


@pytest.mark.parametrize(
    "overrides",
    [{"username": ""}, {"email": "not-an-email"}, {"password": "token"}, {"full_name": None}],
)
def test_register_validates_fields(overrides):
    service = FakeAuthService()
    response = make_client(service).post(
        "/api/v1/auth/register", json=register_body(**overrides)
    )
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert service.calls == []


def test_register_conflict():
    service = FakeAuthService(error=EmailExistsError())
    response = make_client(service).post("/api/v1/auth/register", json=register_body())
    assert response.status_code == HTTPStatus.CONFLICT
    assert response.get_json()["success"] is False


def test_login_prefers_email():
    service = FakeAuthService()
    response = make_client(service).post(
        "/api/v1/auth/login",
        json={"email": "alice@example.com", "username": "alice", "password": "password"},
    )
    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["data"]["refresh_token"] == "token"
    assert service.calls == [("login", "alice@example.com", "password")]


def test_login_falls_back_to_username():
    service = FakeAuthService()
    make_client(service).post("/api/v1/auth/login", json={"username": "alice", "password": "password"})
    assert service.calls == [("login", "alice", "password")]


def test_login_requires_password():
    service = FakeAuthService()
    response = make_client(service).post("/api/v1/auth/login", json={"username": "alice"})
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert service.calls == []


def test_login_bad_credentials_is_401():
    service = FakeAuthService(error=InvalidCredentialsError())
    response = make_client(service).post(
        "/api/v1/auth/login", json={"username": "alice", "password": "password"}
    )
    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.get_json()["error"] == str(InvalidCredentialsError())


def test_me_returns_caller():
    response = make_client(FakeAuthService()).get("/api/v1/me")
    assert response.get_json() == {"success": True, "data": {"user_id": "user-1"}}


def test_me_without_caller_is_null():
    response = make_client(FakeAuthService(), logged_in=False).get("/api/v1/me")
    assert response.get_json()["data"] == {"user_id": None}