"""HTTP endpoints for member bookmarks."""

from __future__ import annotations

from typing import Any, Protocol

from flask import Blueprint, Response, request

from ..models import UserBookmark
from .middleware import get_user_id
from .responses import bad_request, created, error_response, success


class BookmarkService(Protocol):
    def create(self, bookmark: UserBookmark) -> Any: ...

    def delete(self, user_id: str, book_id: str, bookmark_type: str) -> None: ...

    def get_by_user(self, user_id: str) -> list: ...


class _InvalidBody(ValueError):
    pass


def _read_body() -> dict:
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        raise _InvalidBody("request body must be a JSON object")
    return body


def _required_text(body: dict, name: str) -> str:
    value = body.get(name)
    if value is not None and not isinstance(value, str):
        raise _InvalidBody(f"field {name!r} must be a string")
    if not value:
        raise _InvalidBody(f"field {name!r} is required")
    return value


def _priority(body: dict) -> int:
    value = body.get("priority_level")
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise _InvalidBody("field 'priority_level' must be an integer")
    return value


class BookmarkHandler:
    """Routes bookmark requests to the bookmark service."""

    def __init__(self, bookmark_service: BookmarkService) -> None:
        self._service = bookmark_service

    def create(self) -> Response:
        caller = get_user_id()
        try:
            body = _read_body()
            bookmark = UserBookmark(
                user_id=caller,
                book_id=_required_text(body, "book_id"),
                bookmark_type=_required_text(body, "bookmark_type"),
                priority_level=_priority(body),
            )
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            stored = self._service.create(bookmark)
        except Exception as exc:
            return error_response(exc)
        return created(stored)

    def delete(self, book_id: str) -> Response:
        """Remove the caller's bookmark of the type given in ?type=."""
        caller = get_user_id()
        bookmark_type = request.args.get("type", "")
        if not bookmark_type:
            return bad_request("bookmark type is required")
        try:
            self._service.delete(caller, book_id, bookmark_type)
        except Exception as exc:
            return error_response(exc)
        return success({"message": "bookmark deleted"})

    def get_by_user(self) -> Response:
        try:
            bookmarks = self._service.get_by_user(get_user_id())
        except Exception as exc:
            return error_response(exc)
        return success(bookmarks)


def register_routes(blueprint: Blueprint, handler: BookmarkHandler) -> None:
    """Attach the bookmark endpoints to a blueprint."""
    routes = [
        ("/bookmarks", "POST", handler.create),
        ("/bookmarks/<book_id>", "DELETE", handler.delete),
        ("/bookmarks", "GET", handler.get_by_user),
    ]
    for rule, method, view in routes:
        blueprint.add_url_rule(
            rule, endpoint=f"bookmark_{view.__name__}", view_func=view, methods=[method]
        )