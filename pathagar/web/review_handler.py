"""HTTP endpoints for reviews members leave about each other."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from flask import Blueprint, Response, request

from ..models import UserReview
from .middleware import get_user_id
from .responses import bad_request, created, error_response, success


class ReviewService(Protocol):
    def create(self, review: UserReview) -> Any: ...

    def get_by_user(self, user_id: str) -> list: ...

    def get_by_book(self, book_id: str) -> list: ...


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


def _rating(body: dict, name: str) -> Optional[int]:
    value = body.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise _InvalidBody(f"field {name!r} must be an integer")
    return value


class ReviewHandler:
    """Routes review requests to the review service."""

    def __init__(self, review_service: ReviewService) -> None:
        self._service = review_service

    def create(self) -> Response:
        """Record a review written by the caller."""
        caller = get_user_id()
        try:
            body = _read_body()
            book_id = _text(body, "book_id")
            review = UserReview(
                reviewer_id=caller,
                reviewee_id=_text(body, "reviewee_id", required=True),
                book_id=book_id or None,
                behavior_rating=_rating(body, "behavior_rating"),
                book_condition_rating=_rating(body, "book_condition_rating"),
                communication_rating=_rating(body, "communication_rating"),
                comment=_text(body, "comment"),
            )
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            stored = self._service.create(review)
        except Exception as exc:
            return error_response(exc)
        return created(stored)

    def get_by_user(self, user_id: str) -> Response:
        try:
            reviews = self._service.get_by_user(user_id)
        except Exception as exc:
            return error_response(exc)
        return success(reviews)

    def get_by_book(self, book_id: str) -> Response:
        try:
            reviews = self._service.get_by_book(book_id)
        except Exception as exc:
            return error_response(exc)
        return success(reviews)


def register_routes(blueprint: Blueprint, handler: ReviewHandler) -> None:
    """Attach the review endpoints to a blueprint."""
    routes = [
        ("/reviews", "POST", handler.create),
        ("/users/<user_id>/reviews", "GET", handler.get_by_user),
        ("/books/<book_id>/reviews", "GET", handler.get_by_book),
    ]
    for rule, method, view in routes:
        blueprint.add_url_rule(
            rule, endpoint=f"review_{view.__name__}", view_func=view, methods=[method]
        )