import sqlite3

import pytest

from pathagar.repository.schema import create_schema

EXPECTED_TABLES = {
    "users",
    "user_interests",
    "success_score_history",
    "books",
    "book_requests",
    "reading_history",
    "user_bookmarks",
    "donations",
    "reading_ideas",
    "idea_votes",
    "notifications",
    "user_reviews",
}


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    yield connection
    connection.close()


def _tables(conn):
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    return {name for (name,) in rows}


def test_creates_all_tables(conn):
    create_schema(conn)
    assert EXPECTED_TABLES <= _tables(conn)


def test_create_schema_is_idempotent(conn):
    create_schema(conn)
    conn.execute(
        "INSERT INTO notifications (user_id, type, title, message) VALUES ('u', 't', 'x', 'y')"
    )
    conn.commit()
    create_schema(conn)
    count = conn.execute("SELECT COUNT(*) FROM notifications").fetchone()[0]
    assert count == 1
    assert EXPECTED_TABLES <= _tables(conn)


def test_generated_ids_are_distinct(conn):
    create_schema(conn)
    for _ in range(3):
        conn.execute(
            "INSERT INTO notifications (user_id, type, title, message) VALUES ('u', 't', 'x', 'y')"
        )
    ids = [row[0] for row in conn.execute("SELECT id FROM notifications")]
    assert len(set(ids)) == 3
    assert all(ids)


def test_user_defaults(conn):
    create_schema(conn)
    conn.execute(
        "INSERT INTO users (id, username, email, password_hash, full_name) "
        "VALUES ('u1', 'reader', 'reader@example.com', 'hash', 'Reader')"
    )
    role, score = conn.execute("SELECT role, success_score FROM users").fetchone()
    assert role == "member"
    assert score == 100


def test_usernames_are_unique(conn):
    create_schema(conn)
    insert = (
        "INSERT INTO users (id, username, email, password_hash, full_name) "
        "VALUES (?, 'reader', ?, 'hash', 'Reader')"
    )
    conn.execute(insert, ("u1", "a@example.com"))
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(insert, ("u2", "b@example.com"))