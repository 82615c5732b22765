"""HTTP endpoints for library administration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from flask import Blueprint, Response, request

from .responses import bad_request, error_response, success

PAGE_SIZE = 100


@dataclass(frozen=True)
class BookFilters:
    """Optional criteria for the admin book listing; empty means no filter."""

    search: str = ""
    category: str = ""
    status: str = ""


class AdminService(Protocol):
    def get_pending_requests(self, limit: int, offset: int) -> list: ...

    def approve_book_request(self, request_id: str, due_date: str) -> None: ...

    def reject_book_request(self, request_id: str, reason: str) -> None: ...

    def get_requests_by_book(self, book_id: str) -> list: ...

    def get_all_users(self, limit: int, offset: int) -> list: ...

    def adjust_success_score(self, user_id: str, amount: int, reason: str) -> None: ...

    def update_user_role(self, user_id: str, role: str) -> None: ...

    def get_system_stats(self) -> Any: ...

    def get_audit_logs(self, limit: int, offset: int) -> list: ...

    def get_all_books(self, limit: int, offset: int, filters: BookFilters) -> list: ...

    def update_book_status(self, book_id: str, status: str) -> None: ...


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


def _nonzero_int(body: dict, name: str) -> int:
    value = body.get(name)
    if value is None:
        raise _InvalidBody(f"field {name!r} is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise _InvalidBody(f"field {name!r} must be an integer")
    if value == 0:
        raise _InvalidBody(f"field {name!r} is required")
    return value


class AdminHandler:
    """Routes administrative requests to the admin service."""

    def __init__(self, admin_service: AdminService) -> None:
        self._service = admin_service

    def get_pending_requests(self) -> Response:
        try:
            requests = self._service.get_pending_requests(PAGE_SIZE, 0)
        except Exception as exc:
            return error_response(exc)
        return success(requests)

    def approve_book_request(self, request_id: str) -> Response:
        try:
            due_date = _text(_read_body(), "due_date", required=True)
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            self._service.approve_book_request(request_id, due_date)
        except Exception as exc:
            return error_response(exc)
        return success({"message": "request approved"})

    def reject_book_request(self, request_id: str) -> Response:
        try:
            reason = _text(_read_body(), "reason")
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            self._service.reject_book_request(request_id, reason)
        except Exception as exc:
            return error_response(exc)
        return success({"message": "request rejected"})

    def get_requests_by_book(self, book_id: str) -> Response:
        try:
            requests = self._service.get_requests_by_book(book_id)
        except Exception as exc:
            return error_response(exc)
        return success(requests)

    def get_all_users(self) -> Response:
        try:
            users = self._service.get_all_users(PAGE_SIZE, 0)
        except Exception as exc:
            return error_response(exc)
        return success(users)

    def adjust_success_score(self, user_id: str) -> Response:
        """Add a non-zero amount to a member's score, giving a reason."""
        try:
            body = _read_body()
            amount = _nonzero_int(body, "amount")
            reason = _text(body, "reason", required=True)
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            self._service.adjust_success_score(user_id, amount, reason)
        except Exception as exc:
            return error_response(exc)
        return success({"message": "success score adjusted"})

    def update_user_role(self, user_id: str) -> Response:
        try:
            role = _text(_read_body(), "role", required=True)
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            self._service.update_user_role(user_id, role)
        except Exception as exc:
            return error_response(exc)
        return success({"message": "user role updated"})

    def get_system_stats(self) -> Response:
        try:
            stats = self._service.get_system_stats()
        except Exception as exc:
            return error_response(exc)
        return success(stats)

    def get_audit_logs(self) -> Response:
        try:
            logs = self._service.get_audit_logs(PAGE_SIZE, 0)
        except Exception as exc:
            return error_response(exc)
        return success(logs)

    def get_all_books(self) -> Response:
        """List books filtered by ?search=, ?category= and ?status=."""
        filters = BookFilters(
            search=request.args.get("search", ""),
            category=request.args.get("category", ""),
            status=request.args.get("status", ""),
        )
        try:
            books = self._service.get_all_books(PAGE_SIZE, 0, filters)
        except Exception as exc:
            return error_response(exc)
        return success(books)

    def update_book_status(self, book_id: str) -> Response:
        try:
            status = _text(_read_body(), "status", required=True)
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            self._service.update_book_status(book_id, status)
        except Exception as exc:
            return error_response(exc)
        return success({"message": "book status updated"})


def register_routes(blueprint: Blueprint, handler: AdminHandler) -> None:
    """Attach the admin endpoints, under /admin, to a blueprint."""
    routes = [
        ("/stats", "GET", handler.get_system_stats),
        ("/audit-logs", "GET", handler.get_audit_logs),
        ("/requests/pending", "GET", handler.get_pending_requests),
        ("/requests/<request_id>/approve", "POST", handler.approve_book_request),
        ("/requests/<request_id>/reject", "POST", handler.reject_book_request),
        ("/books/<book_id>/requests", "GET", handler.get_requests_by_book),
        ("/users", "GET", handler.get_all_users),
        ("/users/<user_id>/score", "POST", handler.adjust_success_score),
        ("/users/<user_id>/role", "PUT", handler.update_user_role),
        ("/books", "GET", handler.get_all_books),
        ("/books/<book_id>/status", "PUT", handler.update_book_status),
    ]
    for rule, method, view in routes:
        blueprint.add_url_rule(
            f"/admin{rule}",
            endpoint=f"admin_{view.__name__}",
            view_func=view,
            methods=[method],
        )