"""Storage of books, book requests and reading history."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from typing import Iterable, Optional

from ..errors import AlreadyExistsError, NotFoundError
from ..models import Book, BookRequest, ReadingHistory
from .schema import _from_db_time, _now, _to_db_time

_FULL_COLUMNS = """
    b.id, b.title, b.author, COALESCE(b.isbn, ''), COALESCE(b.cover_url, ''),
    COALESCE(b.description, ''), COALESCE(b.category, ''),
    COALESCE(b.tags, '[]'), COALESCE(b.topics, '[]'),
    COALESCE(b.physical_code, ''), b.status, COALESCE(b.max_reading_days, 14),
    b.current_holder_id, COALESCE(b.is_donated, 0), COALESCE(b.total_reads, 0),
    COALESCE(b.average_rating, 0), b.created_at, b.updated_at
"""

_SUMMARY_COLUMNS = """
    id, title, author, COALESCE(cover_url, ''), COALESCE(category, ''),
    status, COALESCE(average_rating, 0), created_at
"""

_REQUEST_COLUMNS = """
    br.id, br.book_id, br.user_id, br.status, br.priority_score,
    br.interest_match_score, br.distance_km, br.requested_at, br.processed_at, br.due_date
"""

_INSERT_BOOK = """
    INSERT INTO books (id, title, author, isbn, cover_url, description, category,
                       tags, topics, physical_code, status, max_reading_days,
                       created_by, created_at, updated_at)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def _encode_list(values: Optional[Iterable[str]]) -> str:
    return json.dumps(list(values or []))


def _decode_list(text: Optional[str]) -> list[str]:
    return list(json.loads(text or "[]"))


def _insert_params(book: Book) -> tuple:
    return (
        book.id, book.title, book.author, book.isbn, book.cover_url, book.description,
        book.category, _encode_list(book.tags), _encode_list(book.topics),
        book.physical_code, book.status, book.max_reading_days, book.created_by,
        _to_db_time(book.created_at), _to_db_time(book.updated_at),
    )


def _raise_if_duplicate(exc: sqlite3.IntegrityError) -> None:
    if "UNIQUE constraint failed" in str(exc):
        raise AlreadyExistsError(str(exc)) from exc


def _book_from_full_row(row: tuple) -> Book:
    (
        book_id, title, author, isbn, cover_url, description, category, tags, topics,
        physical_code, status, max_reading_days, current_holder_id, is_donated,
        total_reads, average_rating, created_at, updated_at,
    ) = row
    return Book(
        id=book_id,
        title=title,
        author=author,
        isbn=isbn,
        cover_url=cover_url,
        description=description,
        category=category,
        tags=_decode_list(tags),
        topics=_decode_list(topics),
        physical_code=physical_code,
        status=status,
        max_reading_days=max_reading_days,
        current_holder_id=current_holder_id,
        is_donated=bool(is_donated),
        total_reads=total_reads,
        average_rating=float(average_rating),
        created_at=_from_db_time(created_at),
        updated_at=_from_db_time(updated_at),
    )


def _book_from_summary_row(row: tuple) -> Book:
    book_id, title, author, cover_url, category, status, average_rating, created_at = row
    return Book(
        id=book_id,
        title=title,
        author=author,
        cover_url=cover_url,
        category=category,
        status=status,
        average_rating=float(average_rating),
        created_at=_from_db_time(created_at),
    )


def _request_from_row(row: tuple) -> BookRequest:
    (
        request_id, book_id, user_id, status, priority_score, interest_match_score,
        distance_km, requested_at, processed_at, due_date,
    ) = row
    return BookRequest(
        id=request_id,
        book_id=book_id,
        user_id=user_id,
        status=status,
        priority_score=float(priority_score or 0),
        interest_match_score=float(interest_match_score or 0),
        distance_km=distance_km,
        requested_at=_from_db_time(requested_at),
        processed_at=_from_db_time(processed_at),
        due_date=_from_db_time(due_date),
    )


class BookRepository:
    """Reads and writes books and the records that hang off them."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def create(self, book: Book) -> None:
        """Insert a book; a duplicate id or physical code raises AlreadyExistsError."""
        try:
            with self._conn:
                self._conn.execute(_INSERT_BOOK, _insert_params(book))
        except sqlite3.IntegrityError as exc:
            _raise_if_duplicate(exc)
            raise

    def find_by_id(self, book_id: str) -> Book:
        row = self._conn.execute(
            f"SELECT {_FULL_COLUMNS} FROM books b WHERE b.id = ?", (book_id,)
        ).fetchone()
        if row is None:
            raise NotFoundError()
        return _book_from_full_row(row)

    def list(self, limit: int, offset: int) -> list[Book]:
        """Books newest first, one page of them."""
        rows = self._conn.execute(
            """
            SELECT id, title, author, current_holder_id, COALESCE(cover_url, ''),
                   COALESCE(category, ''), status, COALESCE(average_rating, 0),
                   created_by, donated_by, created_at
            FROM books
            ORDER BY created_at DESC
            LIMIT ? OFFSET ?
            """,
            (limit, offset),
        )
        return [
            Book(
                id=book_id,
                title=title,
                author=author,
                current_holder_id=holder,
                cover_url=cover_url,
                category=category,
                status=status,
                average_rating=float(average_rating),
                created_by=created_by,
                donated_by=donated_by,
                created_at=_from_db_time(created_at),
            )
            for (
                book_id, title, author, holder, cover_url, category, status,
                average_rating, created_by, donated_by, created_at,
            ) in rows
        ]

    def update(self, book_id: str, book: Book) -> None:
        with self._conn:
            self._conn.execute(
                """
                UPDATE books SET title = ?, author = ?, isbn = ?, cover_url = ?,
                       description = ?, category = ?, tags = ?, topics = ?,
                       status = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    book.title, book.author, book.isbn, book.cover_url, book.description,
                    book.category, _encode_list(book.tags), _encode_list(book.topics),
                    book.status, _to_db_time(book.updated_at), book_id,
                ),
            )

    def delete(self, book_id: str) -> None:
        with self._conn:
            self._conn.execute("DELETE FROM books WHERE id = ?", (book_id,))

    def create_request(self, request: BookRequest) -> None:
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO book_requests (id, book_id, user_id, status, priority_score,
                                           interest_match_score, distance_km, requested_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    request.id, request.book_id, request.user_id, request.status,
                    request.priority_score, request.interest_match_score,
                    request.distance_km, _to_db_time(request.requested_at),
                ),
            )

    def find_requests_by_user_id(self, user_id: str) -> list[BookRequest]:
        """A member's pending requests, newest first, each with its book."""
        rows = self._conn.execute(
            f"""
            SELECT {_REQUEST_COLUMNS},
                   b.id, b.title, b.author, COALESCE(b.cover_url, ''),
                   COALESCE(b.category, ''), b.status, COALESCE(b.average_rating, 0)
            FROM book_requests br
            LEFT JOIN books b ON br.book_id = b.id
            WHERE br.user_id = ? AND br.status = 'pending'
            ORDER BY br.requested_at DESC
            """,
            (user_id,),
        )
        requests = []
        for row in rows:
            request = _request_from_row(row[:10])
            book_id, title, author, cover_url, category, status, rating = row[10:]
            request.book = Book(
                id=book_id or "",
                title=title or "",
                author=author or "",
                cover_url=cover_url,
                category=category,
                status=status or "",
                average_rating=float(rating),
            )
            requests.append(request)
        return requests

    def find_request_by_book_and_user(self, book_id: str, user_id: str) -> Optional[BookRequest]:
        """The member's pending request for the book, or None."""
        row = self._conn.execute(
            f"""
            SELECT {_REQUEST_COLUMNS}
            FROM book_requests br
            WHERE br.book_id = ? AND br.user_id = ? AND br.status = 'pending'
            LIMIT 1
            """,
            (book_id, user_id),
        ).fetchone()
        return None if row is None else _request_from_row(row)

    def cancel_request(self, book_id: str, user_id: str) -> None:
        """Delete the pending request; NotFoundError if there was none."""
        with self._conn:
            cursor = self._conn.execute(
                """
                DELETE FROM book_requests
                WHERE book_id = ? AND user_id = ? AND status = 'pending'
                """,
                (book_id, user_id),
            )
        if cursor.rowcount == 0:
            raise NotFoundError()

    def search(self, query: str, limit: int, offset: int) -> list[Book]:
        """Books whose title, author or category contain the query, case-insensitively."""
        pattern = f"%{query}%"
        rows = self._conn.execute(
            f"""
            SELECT {_SUMMARY_COLUMNS}
            FROM books
            WHERE title LIKE :p OR author LIKE :p OR category LIKE :p
               OR EXISTS (SELECT 1 FROM json_each(COALESCE(books.tags, '[]')) WHERE value = :p)
               OR EXISTS (SELECT 1 FROM json_each(COALESCE(books.topics, '[]')) WHERE value = :p)
            ORDER BY created_at DESC
            LIMIT :limit OFFSET :offset
            """,
            {"p": pattern, "limit": limit, "offset": offset},
        )
        return [_book_from_summary_row(row) for row in rows]

    def filter_by_status(self, status: str, limit: int, offset: int) -> list[Book]:
        rows = self._conn.execute(
            f"""
            SELECT {_SUMMARY_COLUMNS}
            FROM books
            WHERE status = ?
            ORDER BY created_at DESC
            LIMIT ? OFFSET ?
            """,
            (status, limit, offset),
        )
        return [_book_from_summary_row(row) for row in rows]

    def return_book(self, book_id: str) -> None:
        """Make the book available again and clear its holder."""
        with self._conn:
            self._conn.execute(
                """
                UPDATE books SET status = 'available', current_holder_id = NULL, updated_at = ?
                WHERE id = ?
                """,
                (_now(), book_id),
            )

    def complete_reading_history(self, book_id: str, user_id: str) -> None:
        """Close the reader's open history entry, recording whole days read."""
        now = datetime.now(timezone.utc)
        stamp = now.isoformat()
        with self._conn:
            open_entries = self._conn.execute(
                """
                SELECT id, start_date FROM reading_history
                WHERE book_id = ? AND reader_id = ? AND end_date IS NULL
                """,
                (book_id, user_id),
            ).fetchall()
            for history_id, start_date in open_entries:
                started = _from_db_time(start_date)
                days = (now - started).days if started is not None else None
                self._conn.execute(
                    """
                    UPDATE reading_history
                    SET end_date = ?, duration_days = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (stamp, days, stamp, history_id),
                )

    def get_reading_history_by_user(self, user_id: str) -> list[ReadingHistory]:
        """Everything a member has read, most recently started first."""
        rows = self._conn.execute(
            """
            SELECT rh.id, rh.book_id, rh.reader_id, rh.start_date, rh.end_date,
                   rh.duration_days, COALESCE(rh.notes, ''), rh.rating, COALESCE(rh.review, ''),
                   rh.due_date, rh.is_completed, rh.delivery_status,
                   b.title, b.author, COALESCE(b.cover_url, '')
            FROM reading_history rh
            LEFT JOIN books b ON rh.book_id = b.id
            WHERE rh.reader_id = ?
            ORDER BY rh.start_date DESC
            """,
            (user_id,),
        )
        return [
            ReadingHistory(
                id=history_id,
                book_id=book_id,
                reader_id=reader_id,
                start_date=_from_db_time(start_date),
                end_date=_from_db_time(end_date),
                duration_days=duration_days,
                notes=notes,
                rating=rating,
                review=review,
                due_date=_from_db_time(due_date),
                is_completed=bool(is_completed),
                delivery_status=delivery_status or "",
                book=Book(title=title or "", author=author or "", cover_url=cover_url),
            )
            for (
                history_id, book_id, reader_id, start_date, end_date, duration_days,
                notes, rating, review, due_date, is_completed, delivery_status,
                title, author, cover_url,
            ) in rows
        ]

    def get_books_on_hold_by_user(self, user_id: str) -> list[Book]:
        """Books on hold for the member, most recently updated first."""
        rows = self._conn.execute(
            f"""
            SELECT {_FULL_COLUMNS}
            FROM books b
            WHERE b.status = 'on_hold' AND b.current_holder_id = ?
            ORDER BY b.updated_at DESC
            """,
            (user_id,),
        )
        return [_book_from_full_row(row) for row in rows]

    def batch_create(self, books: Iterable[Book]) -> None:
        """Insert all books in one transaction; nothing is kept if one fails."""
        try:
            with self._conn:
                self._conn.executemany(_INSERT_BOOK, [_insert_params(book) for book in books])
        except sqlite3.IntegrityError as exc:
            _raise_if_duplicate(exc)
            raise