"""HTTP endpoints for handing books from one reader to the next."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from flask import Blueprint, Response, g, request

from .responses import bad_request, created, error_response, success

logger = logging.getLogger(__name__)


class HandoverService(Protocol):
    def mark_book_completed(self, user_id: str, book_id: str) -> None: ...

    def mark_book_delivered(self, user_id: str, book_id: str) -> None: ...

    def get_active_handover_thread(self, book_id: str) -> Optional[Any]: ...

    def get_user_handover_threads(self, user_id: str) -> list: ...

    def post_handover_message(self, thread_id: str, user_id: str, message: str) -> None: ...

    def get_handover_messages(self, thread_id: str) -> list: ...

    def get_reading_history_extended(self, book_id: str, user_id: str) -> Any: ...


def _caller() -> str:
    return g.get("user_id", "")


class HandoverHandler:
    """Routes handover actions to the handover service."""

    def __init__(self, handover_service: HandoverService) -> None:
        self._service = handover_service

    def mark_book_completed(self, book_id: str) -> Response:
        """POST /books/<id>/complete: the holder has finished reading."""
        try:
            self._service.mark_book_completed(_caller(), book_id)
        except Exception as exc:
            logger.error("failed to mark book completed: %s", exc)
            return error_response(exc)
        return success({"message": "Book marked as completed"})

    def mark_book_delivered(self, book_id: str) -> Response:
        """POST /books/<id>/delivered: the next reader has received the book."""
        try:
            self._service.mark_book_delivered(_caller(), book_id)
        except Exception as exc:
            logger.error("failed to mark book delivered: %s", exc)
            return error_response(exc)
        return success({"message": "Book marked as delivered"})

    def get_active_handover_thread(self, book_id: str) -> Response:
        """GET /books/<id>/handover: the open thread, or null."""
        try:
            thread = self._service.get_active_handover_thread(book_id)
        except Exception as exc:
            logger.error("failed to get handover thread: %s", exc)
            return error_response(RuntimeError("failed to get handover thread"))
        return success(thread)

    def get_user_handover_threads(self) -> Response:
        """GET /handover/threads: threads the caller takes part in."""
        try:
            threads = self._service.get_user_handover_threads(_caller())
        except Exception as exc:
            logger.error("failed to get user handover threads: %s", exc)
            return error_response(RuntimeError("failed to get handover threads"))
        return success(threads)

    def post_handover_message(self, thread_id: str) -> Response:
        """POST /handover/threads/<id>/messages with a JSON body holding "message"."""
        body = request.get_json(silent=True)
        message = body.get("message") if isinstance(body, dict) else None
        if not isinstance(message, str) or not message:
            return bad_request("Invalid request")
        try:
            self._service.post_handover_message(thread_id, _caller(), message)
        except Exception as exc:
            logger.error("failed to post handover message: %s", exc)
            return error_response(exc)
        return created({"message": "Message posted"})

    def get_handover_messages(self, thread_id: str) -> Response:
        """GET /handover/threads/<id>/messages."""
        try:
            messages = self._service.get_handover_messages(thread_id)
        except Exception as exc:
            logger.error("failed to get handover messages: %s", exc)
            return error_response(RuntimeError("failed to get messages"))
        return success(messages)

    def get_reading_history_extended(self, book_id: str) -> Response:
        """GET /books/<id>/reading-status for the current holder."""
        try:
            history = self._service.get_reading_history_extended(book_id, _caller())
        except Exception as exc:
            logger.error("failed to get reading history: %s", exc)
            return error_response(exc)
        return success(history)


def register_routes(blueprint: Blueprint, handler: HandoverHandler) -> None:
    """Attach the handover endpoints to a blueprint."""
    routes = [
        ("/books/<book_id>/complete", "POST", handler.mark_book_completed),
        ("/books/<book_id>/delivered", "POST", handler.mark_book_delivered),
        ("/books/<book_id>/handover", "GET", handler.get_active_handover_thread),
        ("/books/<book_id>/reading-status", "GET", handler.get_reading_history_extended),
        ("/handover/threads", "GET", handler.get_user_handover_threads),
        ("/handover/threads/<thread_id>/messages", "POST", handler.post_handover_message),
        ("/handover/threads/<thread_id>/messages", "GET", handler.get_handover_messages),
    ]
    for rule, method, view in routes:
        blueprint.add_url_rule(
            rule, endpoint=f"handover_{view.__name__}", view_func=view, methods=[method]
        )