"""Storage of member bookmarks."""

from __future__ import annotations

import sqlite3

from ..models import Book, UserBookmark
from .schema import _from_db_time, _to_db_time


class BookmarkRepository:
    """Reads and writes rows of the user_bookmarks table."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def create(self, bookmark: UserBookmark) -> None:
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO user_bookmarks (id, user_id, book_id, bookmark_type,
                                            priority_level, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    bookmark.id, bookmark.user_id, bookmark.book_id, bookmark.bookmark_type,
                    bookmark.priority_level, _to_db_time(bookmark.created_at),
                ),
            )

    def delete(self, user_id: str, book_id: str, bookmark_type: str) -> None:
        with self._conn:
            self._conn.execute(
                """
                DELETE FROM user_bookmarks
                WHERE user_id = ? AND book_id = ? AND bookmark_type = ?
                """,
                (user_id, book_id, bookmark_type),
            )

    def find_by_user_id(self, user_id: str) -> list[UserBookmark]:
        """A member's bookmarks, newest first, each with its book."""
        rows = self._conn.execute(
            """
            SELECT ub.id, ub.user_id, ub.book_id, ub.bookmark_type, ub.priority_level,
                   ub.created_at,
                   b.id, b.title, b.author, COALESCE(b.cover_url, ''),
                   COALESCE(b.category, ''), b.status, COALESCE(b.average_rating, 0)
            FROM user_bookmarks ub
            LEFT JOIN books b ON ub.book_id = b.id
            WHERE ub.user_id = ?
            ORDER BY ub.created_at DESC
            """,
            (user_id,),
        )
        return [
            UserBookmark(
                id=bookmark_id,
                user_id=owner,
                book_id=book_id,
                bookmark_type=bookmark_type,
                priority_level=priority_level or 0,
                created_at=_from_db_time(created_at),
                book=Book(
                    id=joined_id or "",
                    title=title or "",
                    author=author or "",
                    cover_url=cover_url,
                    category=category,
                    status=status or "",
                    average_rating=float(rating),
                ),
            )
            for (
                bookmark_id, owner, book_id, bookmark_type, priority_level, created_at,
                joined_id, title, author, cover_url, category, status, rating,
            ) in rows
        ]