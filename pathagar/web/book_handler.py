"""HTTP endpoints for the book catalogue, requests, returns and reading history."""

from __future__ import annotations

import enum
from typing import Any, Optional, Protocol

from flask import Blueprint, Response, request

from ..models import Book
from .middleware import get_user_id
from .responses import bad_request, created, error_response, success

MAX_BATCH_SIZE = 100
DEFAULT_READING_DAYS = 14
PAGE_SIZE = 50


class BookService(Protocol):
    def create(self, book: Book) -> Any: ...

    def batch_create(self, books: list[Book]) -> Any: ...

    def get_by_id(self, book_id: str) -> Any: ...

    def list(self, limit: int, offset: int) -> list: ...

    def search(self, query: str, limit: int, offset: int) -> list: ...

    def update(self, book_id: str, book: Book) -> Any: ...

    def delete(self, book_id: str) -> None: ...

    def request_book(self, book_id: str, user_id: str) -> Any: ...

    def get_user_requests(self, user_id: str) -> list: ...

    def check_book_requested(self, book_id: str, user_id: str) -> bool: ...

    def cancel_request(self, book_id: str, user_id: str) -> None: ...

    def return_book(self, book_id: str, user_id: str) -> None: ...

    def get_reading_history(self, user_id: str) -> list: ...

    def get_books_on_hold(self, user_id: str) -> list: ...


class _InvalidBody(ValueError):
    pass


def _text(body: dict, name: str, *, required: bool = False) -> str:
    value = body.get(name)
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise _InvalidBody(f"field {name!r} must be a string")
    if required and not value:
        raise _InvalidBody(f"field {name!r} is required")
    return value


def _string_list(body: dict, name: str) -> list[str]:
    value = body.get(name)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise _InvalidBody(f"field {name!r} must be a list of strings")
    return value


def _reading_days(body: dict) -> int:
    value = body.get("max_reading_days")
    if value is None:
        return DEFAULT_READING_DAYS
    if isinstance(value, bool) or not isinstance(value, int):
        raise _InvalidBody("field 'max_reading_days' must be an integer")
    return value if value > 0 else DEFAULT_READING_DAYS


def _book_fields(body: Any) -> dict:
    if not isinstance(body, dict):
        raise _InvalidBody("request body must be a JSON object")
    return {
        "title": _text(body, "title", required=True),
        "author": _text(body, "author", required=True),
        "isbn": _text(body, "isbn"),
        "cover_url": _text(body, "cover_url"),
        "description": _text(body, "description"),
        "category": _text(body, "category"),
        "tags": _string_list(body, "tags"),
        "topics": _string_list(body, "topics"),
        "physical_code": _text(body, "physical_code", required=True),
    }


def _new_book(body: Any, owner: str) -> Book:
    fields = _book_fields(body)
    return Book(**fields, max_reading_days=_reading_days(body), created_by=owner)


def _status_text(status: Any) -> str:
    return status.value if isinstance(status, enum.Enum) else str(status)


class BookHandler:
    """Routes catalogue requests to the book service."""

    def __init__(self, book_service: BookService) -> None:
        self._service = book_service

    def create(self) -> Response:
        """Add one book owned by the caller; reading days default to 14."""
        caller = get_user_id()
        try:
            book = _new_book(request.get_json(force=True, silent=True), caller)
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            stored = self._service.create(book)
        except Exception as exc:
            return error_response(exc)
        return created(stored)

    def batch_create(self) -> Response:
        """Add up to MAX_BATCH_SIZE books from a JSON array."""
        caller = get_user_id()
        body = request.get_json(force=True, silent=True)
        if not isinstance(body, list):
            return bad_request("request body must be a JSON array")
        try:
            books = [_new_book(item, caller) for item in body]
        except _InvalidBody as exc:
            return bad_request(str(exc))
        if not books:
            return bad_request("batch request cannot be empty")
        if len(books) > MAX_BATCH_SIZE:
            return bad_request(f"batch size exceeds maximum limit of {MAX_BATCH_SIZE}")
        try:
            stored = self._service.batch_create(books)
        except Exception as exc:
            return error_response(exc)
        return created(stored)

    def get_by_id(self, book_id: str) -> Response:
        try:
            book = self._service.get_by_id(book_id)
        except Exception as exc:
            return error_response(exc)
        return success(book)

    def list(self) -> Response:
        """Search with ?search=, or list the first page filtered by ?status=."""
        search = request.args.get("search", "")
        status = request.args.get("status", "")
        try:
            if search:
                books = self._service.search(search, PAGE_SIZE, 0)
            else:
                books = self._service.list(PAGE_SIZE, 0)
        except Exception as exc:
            return error_response(exc)
        if status and not search:
            books = [book for book in books if _status_text(book.status) == status]
        return success(books)

    def update(self, book_id: str) -> Response:
        try:
            book = Book(**_book_fields(request.get_json(force=True, silent=True)))
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            updated = self._service.update(book_id, book)
        except Exception as exc:
            return error_response(exc)
        return success(updated)

    def delete(self, book_id: str) -> Response:
        try:
            self._service.delete(book_id)
        except Exception as exc:
            return error_response(exc)
        return success({"message": "book deleted"})

    def request_book(self, book_id: str) -> Response:
        try:
            stored = self._service.request_book(book_id, get_user_id())
        except Exception as exc:
            return error_response(exc)
        return created(stored)

    def get_user_requests(self) -> Response:
        try:
            requests = self._service.get_user_requests(get_user_id())
        except Exception as exc:
            return error_response(exc)
        return success(requests)

    def check_book_requested(self, book_id: str) -> Response:
        try:
            requested = self._service.check_book_requested(book_id, get_user_id())
        except Exception as exc:
            return error_response(exc)
        return success({"requested": requested})

    def cancel_request(self, book_id: str) -> Response:
        try:
            self._service.cancel_request(book_id, get_user_id())
        except Exception as exc:
            return error_response(exc)
        return success({"message": "request cancelled"})

    def return_book(self, book_id: str) -> Response:
        try:
            self._service.return_book(book_id, get_user_id())
        except Exception as exc:
            return error_response(exc)
        return success({"message": "book returned successfully"})

    def get_reading_history(self) -> Response:
        try:
            history = self._service.get_reading_history(get_user_id())
        except Exception as exc:
            return error_response(exc)
        return success(history)

    def get_books_on_hold(self) -> Response:
        try:
            books = self._service.get_books_on_hold(get_user_id())
        except Exception as exc:
            return error_response(exc)
        return success(books)


def register_routes(blueprint: Blueprint, handler: BookHandler) -> None:
    """Attach the book endpoints to a blueprint."""
    routes: list[tuple[str, str, Any, Optional[str]]] = [
        ("/books", "GET", handler.list, None),
        ("/books/<book_id>", "GET", handler.get_by_id, None),
        ("/books", "POST", handler.create, None),
        ("/books/<book_id>", "PATCH", handler.update, None),
        ("/books/<book_id>", "DELETE", handler.delete, None),
        ("/books/<book_id>/request", "POST", handler.request_book, None),
        ("/books/<book_id>/request", "DELETE", handler.cancel_request, None),
        ("/books/<book_id>/requested", "GET", handler.check_book_requested, None),
        ("/books/<book_id>/return", "POST", handler.return_book, None),
        ("/books/batch", "POST", handler.batch_create, None),
        ("/my-requests", "GET", handler.get_user_requests, None),
        ("/my-reading-history", "GET", handler.get_reading_history, None),
        ("/my-books-on-hold", "GET", handler.get_books_on_hold, None),
    ]
    for rule, method, view, _ in routes:
        blueprint.add_url_rule(
            rule, endpoint=f"book_{view.__name__}", view_func=view, methods=[method]
        )