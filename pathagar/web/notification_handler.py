"""HTTP endpoints for a member's notifications."""

from __future__ import annotations

from typing import Protocol

from flask import Blueprint, Response

from .middleware import get_user_id
from .responses import error_response, success

NOTIFICATION_LIMIT = 50


class NotificationService(Protocol):
    def get_user_notifications(self, user_id: str, limit: int) -> list: ...

    def mark_as_read(self, notification_id: str) -> None: ...

    def mark_all_as_read(self, user_id: str) -> None: ...


class NotificationHandler:
    """Routes notification requests to the notification service."""

    def __init__(self, notification_service: NotificationService) -> None:
        self._service = notification_service

    def get_user_notifications(self) -> Response:
        try:
            notifications = self._service.get_user_notifications(
                get_user_id(), NOTIFICATION_LIMIT
            )
        except Exception as exc:
            return error_response(exc)
        return success(notifications)

    def mark_as_read(self, notification_id: str) -> Response:
        try:
            self._service.mark_as_read(notification_id)
        except Exception as exc:
            return error_response(exc)
        return success({"message": "notification marked as read"})

    def mark_all_as_read(self) -> Response:
        try:
            self._service.mark_all_as_read(get_user_id())
        except Exception as exc:
            return error_response(exc)
        return success({"message": "all notifications marked as read"})


def register_routes(blueprint: Blueprint, handler: NotificationHandler) -> None:
    """Attach the notification endpoints to a blueprint."""
    routes = [
        ("/notifications", "GET", handler.get_user_notifications),
        ("/notifications/<notification_id>/read", "PUT", handler.mark_as_read),
        ("/notifications/read-all", "PUT", handler.mark_all_as_read),
    ]
    for rule, method, view in routes:
        blueprint.add_url_rule(
            rule, endpoint=f"notification_{view.__name__}", view_func=view, methods=[method]
        )