"""HTTP endpoints for reading ideas and votes on them."""

from __future__ import annotations

from typing import Any, Protocol

from flask import Blueprint, Response, request

from ..models import ReadingIdea, VoteType
from .middleware import get_user_id
from .responses import bad_request, created, error_response, success


class IdeaService(Protocol):
    def create(self, idea: ReadingIdea) -> Any: ...

    def get_by_book(self, book_id: str) -> list: ...

    def vote(self, idea_id: str, user_id: str, vote_type: VoteType) -> None: ...


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


class IdeaHandler:
    """Routes reading-idea requests to the idea service."""

    def __init__(self, idea_service: IdeaService) -> None:
        self._service = idea_service

    def create(self) -> Response:
        caller = get_user_id()
        try:
            body = _read_body()
            idea = ReadingIdea(
                book_id=_required_text(body, "book_id"),
                user_id=caller,
                title=_required_text(body, "title"),
                content=_required_text(body, "content"),
            )
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            stored = self._service.create(idea)
        except Exception as exc:
            return error_response(exc)
        return created(stored)

    def get_by_book(self, book_id: str) -> Response:
        try:
            ideas = self._service.get_by_book(book_id)
        except Exception as exc:
            return error_response(exc)
        return success(ideas)

    def vote(self, idea_id: str) -> Response:
        """Vote on an idea: ?type=down is a downvote, anything else an upvote."""
        caller = get_user_id()
        vote_type = VoteType.DOWN if request.args.get("type") == "down" else VoteType.UP
        try:
            self._service.vote(idea_id, caller, vote_type)
        except Exception as exc:
            return error_response(exc)
        return success({"message": "vote recorded"})


def register_routes(blueprint: Blueprint, handler: IdeaHandler) -> None:
    """Attach the idea endpoints to a blueprint."""
    routes = [
        ("/ideas", "POST", handler.create),
        ("/ideas/book/<book_id>", "GET", handler.get_by_book),
        ("/ideas/<idea_id>/vote", "POST", handler.vote),
    ]
    for rule, method, view in routes:
        blueprint.add_url_rule(
            rule, endpoint=f"idea_{view.__name__}", view_func=view, methods=[method]
        )