"""JSON envelopes for API responses."""

from __future__ import annotations

import json
import logging
from http import HTTPStatus
from typing import Any

from flask import Response

from ..errors import LibraryError, http_status
from ..models import to_jsonable

logger = logging.getLogger(__name__)


def _json(status: int, body: dict) -> Response:
    return Response(
        json.dumps(to_jsonable(body)), status=int(status), mimetype="application/json"
    )


def success(data: Any) -> Response:
    """200 with the data wrapped in a success envelope."""
    return _json(HTTPStatus.OK, {"success": True, "data": data})


def created(data: Any) -> Response:
    """201 with the data wrapped in a success envelope."""
    return _json(HTTPStatus.CREATED, {"success": True, "data": data})


def error_response(error: BaseException) -> Response:
    """Failure envelope whose status follows the domain error; others are hidden as 500."""
    if isinstance(error, LibraryError):
        message = str(error)
    else:
        logger.error("Internal Server Error: %s", error)
        message = "internal server error"
    return _json(http_status(error), {"success": False, "error": message})


def bad_request(message: str) -> Response:
    return _json(HTTPStatus.BAD_REQUEST, {"success": False, "error": message})


def unauthorized(message: str) -> Response:
    return _json(HTTPStatus.UNAUTHORIZED, {"success": False, "error": message})


def not_found(message: str) -> Response:
    return _json(HTTPStatus.NOT_FOUND, {"success": False, "error": message})