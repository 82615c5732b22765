"""Storage of member notifications."""

from __future__ import annotations

import sqlite3

from ..models import Notification
from .schema import _from_db_time, _now


class NotificationRepository:
    """Reads and writes rows of the notifications table."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def create(self, user_id: str, notif_type: str, title: str, message: str, link: str) -> None:
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO notifications (user_id, type, title, message, link, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user_id, notif_type, title, message, link, _now()),
            )

    def get_by_user_id(self, user_id: str, limit: int) -> list[Notification]:
        """A member's notifications, newest first, at most limit of them."""
        rows = self._conn.execute(
            """
            SELECT id, user_id, type, title, message, COALESCE(link, ''), is_read, created_at
            FROM notifications
            WHERE user_id = ?
            ORDER BY created_at DESC
            LIMIT ?
            """,
            (user_id, limit),
        )
        return [
            Notification(
                id=notification_id,
                user_id=owner,
                type=notif_type,
                title=title,
                message=message,
                link=link,
                is_read=bool(is_read),
                created_at=_from_db_time(created_at),
            )
            for notification_id, owner, notif_type, title, message, link, is_read, created_at in rows
        ]

    def mark_as_read(self, notification_id: str) -> None:
        with self._conn:
            self._conn.execute(
                "UPDATE notifications SET is_read = 1 WHERE id = ?", (notification_id,)
            )

    def mark_all_as_read(self, user_id: str) -> None:
        with self._conn:
            self._conn.execute(
                "UPDATE notifications SET is_read = 1 WHERE user_id = ?", (user_id,)
            )