"""HTTP endpoints for donations of books and money."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from flask import Blueprint, Response, request

from ..models import Donation
from .middleware import get_user_id
from .responses import bad_request, created, error_response, success

PAGE_SIZE = 50


class DonationService(Protocol):
    def create(self, donation: Donation) -> Any: ...

    def list(self, limit: int, offset: int) -> list: ...


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


def _amount(body: dict) -> Optional[float]:
    value = body.get("amount")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _InvalidBody("field 'amount' must be a number")
    return float(value)


def _flag(body: dict, name: str) -> bool:
    value = body.get(name)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise _InvalidBody(f"field {name!r} must be a boolean")
    return value


class DonationHandler:
    """Routes donation requests to the donation service."""

    def __init__(self, donation_service: DonationService) -> None:
        self._service = donation_service

    def create(self) -> Response:
        caller = get_user_id()
        try:
            body = _read_body()
            book_id = _text(body, "book_id")
            donation = Donation(
                donor_id=caller,
                donation_type=_text(body, "donation_type", required=True),
                book_id=book_id or None,
                amount=_amount(body),
                currency=_text(body, "currency"),
                message=_text(body, "message"),
                is_public=_flag(body, "is_public"),
            )
        except _InvalidBody as exc:
            return bad_request(str(exc))
        try:
            stored = self._service.create(donation)
        except Exception as exc:
            return error_response(exc)
        return created(stored)

    def list(self) -> Response:
        try:
            donations = self._service.list(PAGE_SIZE, 0)
        except Exception as exc:
            return error_response(exc)
        return success(donations)


def register_routes(blueprint: Blueprint, handler: DonationHandler) -> None:
    """Attach the donation endpoints to a blueprint."""
    blueprint.add_url_rule(
        "/donations", endpoint="donation_create", view_func=handler.create, methods=["POST"]
    )
    blueprint.add_url_rule(
        "/donations", endpoint="donation_list", view_func=handler.list, methods=["GET"]
    )