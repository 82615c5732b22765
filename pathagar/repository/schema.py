"""Relational schema of the library database and shared column codecs."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Optional

_NEW_ID = "(lower(hex(randomblob(16))))"

_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY DEFAULT {_NEW_ID},
    username TEXT NOT NULL UNIQUE,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    full_name TEXT NOT NULL,
    role TEXT NOT NULL DEFAULT 'member',
    avatar_url TEXT,
    bio TEXT,
    location_lat REAL,
    location_lng REAL,
    location_address TEXT,
    success_score INTEGER DEFAULT 100,
    books_shared INTEGER DEFAULT 0,
    books_received INTEGER DEFAULT 0,
    reviews_received INTEGER DEFAULT 0,
    ideas_posted INTEGER DEFAULT 0,
    total_upvotes INTEGER DEFAULT 0,
    total_downvotes INTEGER DEFAULT 0,
    is_donor INTEGER DEFAULT 0,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS user_interests (
    user_id TEXT NOT NULL,
    interest TEXT NOT NULL,
    weight REAL NOT NULL DEFAULT 1.0,
    PRIMARY KEY (user_id, interest)
);

CREATE TABLE IF NOT EXISTS success_score_history (
    id TEXT PRIMARY KEY DEFAULT {_NEW_ID},
    user_id TEXT NOT NULL,
    change_amount INTEGER NOT NULL,
    reason TEXT NOT NULL,
    reference_type TEXT,
    reference_id TEXT,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS books (
    id TEXT PRIMARY KEY DEFAULT {_NEW_ID},
    title TEXT NOT NULL,
    author TEXT NOT NULL,
    isbn TEXT,
    cover_url TEXT,
    description TEXT,
    category TEXT,
    tags TEXT DEFAULT '[]',
    topics TEXT DEFAULT '[]',
    physical_code TEXT UNIQUE,
    status TEXT NOT NULL DEFAULT 'available',
    max_reading_days INTEGER DEFAULT 14,
    current_holder_id TEXT,
    created_by TEXT,
    donated_by TEXT,
    is_donated INTEGER DEFAULT 0,
    total_reads INTEGER DEFAULT 0,
    average_rating REAL DEFAULT 0,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS book_requests (
    id TEXT PRIMARY KEY DEFAULT {_NEW_ID},
    book_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    priority_score REAL DEFAULT 0,
    interest_match_score REAL DEFAULT 0,
    distance_km REAL,
    requested_at TEXT,
    processed_at TEXT,
    due_date TEXT
);

CREATE TABLE IF NOT EXISTS reading_history (
    id TEXT PRIMARY KEY DEFAULT {_NEW_ID},
    book_id TEXT NOT NULL,
    reader_id TEXT NOT NULL,
    start_date TEXT,
    end_date TEXT,
    duration_days INTEGER,
    notes TEXT,
    rating INTEGER,
    review TEXT,
    due_date TEXT,
    is_completed INTEGER DEFAULT 0,
    completed_at TEXT,
    next_reader_id TEXT,
    delivery_status TEXT,
    marked_delivered_at TEXT,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS user_bookmarks (
    id TEXT PRIMARY KEY DEFAULT {_NEW_ID},
    user_id TEXT NOT NULL,
    book_id TEXT NOT NULL,
    bookmark_type TEXT NOT NULL,
    priority_level INTEGER DEFAULT 0,
    created_at TEXT,
    UNIQUE (user_id, book_id, bookmark_type)
);

CREATE TABLE IF NOT EXISTS donations (
    id TEXT PRIMARY KEY DEFAULT {_NEW_ID},
    donor_id TEXT NOT NULL,
    donation_type TEXT NOT NULL,
    book_id TEXT,
    amount REAL,
    currency TEXT,
    message TEXT,
    is_public INTEGER DEFAULT 0,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS reading_ideas (
    id TEXT PRIMARY KEY DEFAULT {_NEW_ID},
    book_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    upvotes INTEGER DEFAULT 0,
    downvotes INTEGER DEFAULT 0,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS idea_votes (
    id TEXT PRIMARY KEY DEFAULT {_NEW_ID},
    idea_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    vote_type TEXT NOT NULL,
    created_at TEXT,
    UNIQUE (idea_id, user_id)
);

CREATE TABLE IF NOT EXISTS notifications (
    id TEXT PRIMARY KEY DEFAULT {_NEW_ID},
    user_id TEXT NOT NULL,
    type TEXT NOT NULL,
    title TEXT NOT NULL,
    message TEXT NOT NULL,
    link TEXT,
    is_read INTEGER NOT NULL DEFAULT 0,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS user_reviews (
    id TEXT PRIMARY KEY DEFAULT {_NEW_ID},
    reviewer_id TEXT NOT NULL,
    reviewee_id TEXT NOT NULL,
    book_id TEXT,
    behavior_rating INTEGER,
    book_condition_rating INTEGER,
    communication_rating INTEGER,
    comment TEXT,
    created_at TEXT
);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create every table the repositories use; safe to call repeatedly."""
    conn.executescript(_SCHEMA)


def _to_db_time(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _from_db_time(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()