"""Request hooks: token authentication, admin gate, CORS and access logging."""

from __future__ import annotations

import enum
import logging
import os
import time
from http import HTTPStatus
from typing import Any, Callable, Mapping, Optional, Protocol

from flask import Flask, Response, g, request

_DEFAULT_ORIGINS = ("http://localhost:3000", "http://localhost:5173")
_ALLOW_METHODS = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
_ALLOW_HEADERS = "Origin,Content-Type,Authorization"
_MAX_AGE_SECONDS = 12 * 60 * 60


class AuthService(Protocol):
    def validate_token(self, token: str) -> Any: ...


def _error(status: HTTPStatus, message: str) -> Response:
    return Response(
        f'{{"error": "{message}"}}', status=int(status), mimetype="application/json"
    )


def authenticate(auth_service: AuthService) -> Callable[[], Optional[Response]]:
    """Before-request hook that requires a valid bearer token.

    On success the caller's id and role are kept on flask.g; otherwise the
    request is answered with 401.
    """
    log = logging.getLogger(__name__)

    def hook() -> Optional[Response]:
        header = request.headers.get("Authorization", "")
        if not header:
            return _error(HTTPStatus.UNAUTHORIZED, "authorization header required")

        parts = header.split(" ")
        if len(parts) != 2 or parts[0] != "Bearer":
            return _error(HTTPStatus.UNAUTHORIZED, "invalid authorization header format")

        try:
            claims = auth_service.validate_token(parts[1])
        except Exception as exc:
            log.warning("invalid token: %s", exc)
            return _error(HTTPStatus.UNAUTHORIZED, "invalid or expired token")

        role = claims.role
        g.user_id = claims.user_id
        g.user_role = role.value if isinstance(role, enum.Enum) else role
        return None

    return hook


def get_user_id() -> str:
    """Id of the authenticated caller; raises AttributeError if there is none."""
    return g.user_id


def get_user_role() -> str:
    """Role of the authenticated caller; raises AttributeError if there is none."""
    return g.user_role


def require_admin() -> Callable[[], Optional[Response]]:
    """Before-request hook that lets only admins through."""

    def hook() -> Optional[Response]:
        if g.get("user_role") != "admin":
            return _error(HTTPStatus.FORBIDDEN, "admin access required")
        return None

    return hook


def allowed_origins(environ: Mapping[str, str]) -> list[str]:
    """Default dev origins plus the comma-separated CORS_ALLOWED_ORIGINS."""
    origins = list(_DEFAULT_ORIGINS)
    custom = environ.get("CORS_ALLOWED_ORIGINS", "")
    if custom:
        origins.extend(origin.strip() for origin in custom.split(","))
    return origins


def install_cors(app: Flask) -> None:
    """Answer preflights and add CORS headers for the allowed origins."""
    origins = frozenset(allowed_origins(os.environ))

    def is_same_origin(origin: str) -> bool:
        return origin in (f"http://{request.host}", f"https://{request.host}")

    @app.before_request
    def _cors_check() -> Optional[Response]:
        origin = request.headers.get("Origin")
        if not origin or is_same_origin(origin):
            return None
        if origin not in origins:
            return Response(status=int(HTTPStatus.FORBIDDEN))
        if request.method == "OPTIONS":
            response = Response(status=int(HTTPStatus.NO_CONTENT))
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Access-Control-Allow-Methods"] = _ALLOW_METHODS
            response.headers["Access-Control-Allow-Headers"] = _ALLOW_HEADERS
            response.headers["Access-Control-Max-Age"] = str(_MAX_AGE_SECONDS)
            for name in ("Origin", "Access-Control-Request-Method", "Access-Control-Request-Headers"):
                response.vary.add(name)
            return response
        return None

    @app.after_request
    def _cors_headers(response: Response) -> Response:
        origin = request.headers.get("Origin")
        if origin and origin in origins and request.method != "OPTIONS":
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.vary.add("Origin")
        return response


def install_request_logger(app: Flask, logger: logging.Logger) -> None:
    """Log method, path, query, status, latency and client address of each request."""

    @app.before_request
    def _start_timer() -> None:
        g._request_started = time.perf_counter()

    @app.after_request
    def _log_request(response: Response) -> Response:
        started = g.get("_request_started", time.perf_counter())
        latency_ms = (time.perf_counter() - started) * 1000
        query = request.query_string.decode("latin-1")
        logger.info(
            "request %s %s query=%s status=%d latency=%.3fms ip=%s",
            request.method,
            request.path,
            query,
            response.status_code,
            latency_ms,
            request.remote_addr,
            extra={
                "method": request.method,
                "path": request.path,
                "query": query,
                "status": response.status_code,
                "latency_ms": latency_ms,
                "ip": request.remote_addr,
            },
        )
        return response