"""HTTP endpoints for registration, login and the caller's identity."""

from __future__ import annotations

import enum
import logging
import re
from typing import Any, Protocol

from flask import Blueprint, Response, g, request

from .responses import bad_request, created, error_response, success

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AuthService(Protocol):
    def register(self, username: str, email: str, password: str, full_name: str) -> Any: ...

    def login(self, email_or_username: str, password: str) -> Any: ...


class _InvalidBody(ValueError):
    pass


def _read_body() -> dict:
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        raise _InvalidBody("request body must be a JSON object")
    return body


def _text(body: dict, name: str, *, required: bool = False) -> str:
    value = body.get(name)
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise _InvalidBody(f"field {name!r} must be a string")
    if required and not value:
        raise _InvalidBody(f"field {name!r} is required")
    return value


def _auth_payload(result: Any) -> dict:
    user = result.user
    role = user.role.value if isinstance(user.role, enum.Enum) else user.role
    return {
        "access_token": result.access_token,
        "refresh_token": result.refresh_token,
        "user": {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "full_name": user.full_name,
            "role": role,
            "success_score": user.success_score,
        },
    }


class AuthHandler:
    """Routes authentication requests to the auth service."""

    def __init__(self, auth_service: AuthService) -> None:
        self._service = auth_service

    def register(self) -> Response:
        """Create an account and answer with its tokens."""
        try:
            body = _read_body()
            username = _text(body, "username", required=True)
            email = _text(body, "email", required=True)
            if not _EMAIL.match(email):
                raise _InvalidBody("field 'email' must be a valid e-mail address")
            secret = _text(body, "password", required=True)
            if len(secret) < MIN_PASSWORD_LENGTH:
                raise _InvalidBody(
                    f"field 'password' must be at least {MIN_PASSWORD_LENGTH} characters"
                )
            full_name = _text(body, "full_name", required=True)
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            result = self._service.register(username, email, secret, full_name)
        except Exception as exc:
            logger.error("registration failed: %s", exc)
            return error_response(exc)
        return created(_auth_payload(result))

    def login(self) -> Response:
        """Log in by e-mail, or by username when no e-mail is given."""
        try:
            body = _read_body()
            email = _text(body, "email")
            username = _text(body, "username")
            secret = _text(body, "password", required=True)
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            result = self._service.login(email or username, secret)
        except Exception as exc:
            logger.error("login failed: %s", exc)
            return error_response(exc)
        return success(_auth_payload(result))

    def me(self) -> Response:
        return success({"user_id": g.get("user_id")})


def register_public_routes(blueprint: Blueprint, handler: AuthHandler) -> None:
    """Attach the endpoints that need no token."""
    blueprint.add_url_rule(
        "/auth/register", endpoint="auth_register", view_func=handler.register, methods=["POST"]
    )
    blueprint.add_url_rule(
        "/auth/login", endpoint="auth_login", view_func=handler.login, methods=["POST"]
    )


def register_protected_routes(blueprint: Blueprint, handler: AuthHandler) -> None:
    """Attach the endpoints that need an authenticated caller."""
    blueprint.add_url_rule("/me", endpoint="auth_me", view_func=handler.me, methods=["GET"])