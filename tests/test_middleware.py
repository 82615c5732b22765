import json
import logging
from types import SimpleNamespace

import pytest
from flask import Blueprint, Flask, jsonify

from pathagar.errors import InvalidTokenError
from pathagar.web.middleware import (
    allowed_origins,
    authenticate,
    get_user_id,
    get_user_role,
    install_cors,
    install_request_logger,
    require_admin,
)


class FakeAuth:
    def __init__(self, role="member"):
        self.role = role
        self.seen = []

    def validate_token(self, token):
        self.seen.append(token)
        if token != "token":
            raise InvalidTokenError()
        return SimpleNamespace(user_id="u1", role=self.role)


def _app(auth, admin=False):
    app = Flask(__name__)
    blueprint = Blueprint("api", __name__)
    blueprint.before_request(authenticate(auth))
    if admin:
        blueprint.before_request(require_admin())

    @blueprint.get("/whoami")
    def whoami():
        return jsonify(user_id=get_user_id(), role=get_user_role())

    app.register_blueprint(blueprint)
    return app


def _error(response):
    return json.loads(response.get_data(as_text=True))["error"]


def test_missing_header():
    response = _app(FakeAuth()).test_client().get("/whoami")
    assert response.status_code == 401
    assert _error(response) == "authorization header required"


@pytest.mark.parametrize("header", ["Token token", "Bearer", "Bearer token extra"])
def test_malformed_header(header):
    response = _app(FakeAuth()).test_client().get("/whoami", headers={"Authorization": header})
    assert response.status_code == 401
    assert _error(response) == "invalid authorization header format"


def test_rejected_token():
    auth = FakeAuth()
    response = _app(auth).test_client().get(
        "/whoami", headers={"Authorization": "Bearer secret"}
    )
    assert response.status_code == 401
    assert _error(response) == "invalid or expired token"
    assert auth.seen == ["secret"]


def test_valid_token_sets_caller():
    response = _app(FakeAuth()).test_client().get(
        "/whoami", headers={"Authorization": "Bearer token"}
    )
    assert response.status_code == 200
    assert response.get_json() == {"user_id": "u1", "role": "member"}


def test_admin_gate_blocks_members():
    response = _app(FakeAuth("member"), admin=True).test_client().get(
        "/whoami", headers={"Authorization": "Bearer token"}
    )
    assert response.status_code == 403
    assert _error(response) == "admin access required"


def test_admin_gate_admits_admins():
    response = _app(FakeAuth("admin"), admin=True).test_client().get(
        "/whoami", headers={"Authorization": "Bearer token"}
    )
    assert response.status_code == 200
    assert response.get_json()["role"] == "admin"


def test_allowed_origins_defaults():
    assert allowed_origins({}) == ["http://localhost:3000", "http://localhost:5173"]


def test_allowed_origins_from_environment():
    origins = allowed_origins(
        {"CORS_ALLOWED_ORIGINS": "https://a.example.com, https://b.example.com"}
    )
    assert origins[2:] == ["https://a.example.com", "https://b.example.com"]
    assert origins[:2] == allowed_origins({})


def _cors_app(monkeypatch):
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "https://app.example.com")
    app = Flask(__name__)
    install_cors(app)

    @app.get("/ping")
    def ping():
        return "pong"

    return app


def test_cors_preflight(monkeypatch):
    client = _cors_app(monkeypatch).test_client()
    response = client.options(
        "/ping",
        headers={"Origin": "https://app.example.com", "Access-Control-Request-Method": "GET"},
    )
    assert response.status_code == 204
    assert response.headers["Access-Control-Allow-Origin"] == "https://app.example.com"
    assert response.headers["Access-Control-Allow-Credentials"] == "true"
    assert "PATCH" in response.headers["Access-Control-Allow-Methods"].split(",")
    assert "Authorization" in response.headers["Access-Control-Allow-Headers"].split(",")


def test_cors_simple_request(monkeypatch):
    client = _cors_app(monkeypatch).test_client()
    response = client.get("/ping", headers={"Origin": "http://localhost:3000"})
    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"


def test_cors_rejects_unknown_origin(monkeypatch):
    client = _cors_app(monkeypatch).test_client()
    response = client.get("/ping", headers={"Origin": "https://evil.example.com"})
    assert response.status_code == 403
    assert "Access-Control-Allow-Origin" not in response.headers


def test_cors_ignores_requests_without_origin(monkeypatch):
    response = _cors_app(monkeypatch).test_client().get("/ping")
    assert response.get_data(as_text=True) == "pong"
    assert "Access-Control-Allow-Origin" not in response.headers


def test_request_logger(caplog):
    logger = logging.getLogger("pathagar.test.access")
    app = Flask(__name__)
    install_request_logger(app, logger)

    @app.get("/ping")
    def ping():
        return "pong"

    with caplog.at_level(logging.INFO, logger=logger.name):
        app.test_client().get("/ping?x=1")

    records = [r for r in caplog.records if r.name == logger.name]
    assert len(records) == 1
    assert records[0].path == "/ping"
    assert records[0].query == "x=1"
    assert records[0].status == 200
    assert records[0].method == "GET"
    assert records[0].latency_ms >= 0