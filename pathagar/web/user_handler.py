"""HTTP endpoints for member profiles, interests and the leaderboard."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from flask import Blueprint, Response, request

from ..models import User
from .middleware import get_user_id
from .responses import bad_request, error_response, success

LEADERBOARD_SIZE = 10


class UserService(Protocol):
    def get_profile(self, user_id: str) -> Any: ...

    def update_profile(self, user_id: str, user: User) -> Any: ...

    def add_interests(self, user_id: str, interests: list[str]) -> None: ...

    def get_leaderboard(self, limit: int) -> list: ...


class _InvalidBody(ValueError):
    pass


def _read_body() -> dict:
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        raise _InvalidBody("request body must be a JSON object")
    return body


def _text(body: dict, name: str) -> str:
    value = body.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _InvalidBody(f"field {name!r} must be a string")
    return value


def _coordinate(body: dict, name: str) -> Optional[float]:
    value = body.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _InvalidBody(f"field {name!r} must be a number")
    return float(value)


def _interests(body: dict) -> list[str]:
    value = body.get("interests")
    if value is None:
        raise _InvalidBody("field 'interests' is required")
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise _InvalidBody("field 'interests' must be a list of strings")
    return value


class UserHandler:
    """Routes profile requests to the user service."""

    def __init__(self, user_service: UserService) -> None:
        self._service = user_service

    def get_profile(self, user_id: str) -> Response:
        try:
            profile = self._service.get_profile(user_id)
        except Exception as exc:
            return error_response(exc)
        return success(profile)

    def update_profile(self) -> Response:
        """Replace the caller's editable profile fields."""
        caller = get_user_id()
        try:
            body = _read_body()
            user = User(
                full_name=_text(body, "full_name"),
                bio=_text(body, "bio"),
                avatar_url=_text(body, "avatar_url"),
                location_address=_text(body, "location_address"),
                location_lat=_coordinate(body, "location_lat"),
                location_lng=_coordinate(body, "location_lng"),
            )
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            updated = self._service.update_profile(caller, user)
        except Exception as exc:
            return error_response(exc)
        return success(updated)

    def add_interests(self) -> Response:
        caller = get_user_id()
        try:
            interests = _interests(_read_body())
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            self._service.add_interests(caller, interests)
        except Exception as exc:
            return error_response(exc)
        return success({"message": "interests added"})

    def get_leaderboard(self) -> Response:
        try:
            users = self._service.get_leaderboard(LEADERBOARD_SIZE)
        except Exception as exc:
            return error_response(exc)
        return success(users)


def register_routes(blueprint: Blueprint, handler: UserHandler) -> None:
    """Attach the user endpoints to a blueprint."""
    routes = [
        ("/users/<user_id>/profile", "GET", handler.get_profile),
        ("/users/profile", "PUT", handler.update_profile),
        ("/users/interests", "POST", handler.add_interests),
        ("/leaderboard", "GET", handler.get_leaderboard),
    ]
    for rule, method, view in routes:
        blueprint.add_url_rule(
            rule, endpoint=f"user_{view.__name__}", view_func=view, methods=[method]
        )