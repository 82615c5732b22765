import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from pathagar.models import Book, UserBookmark
from pathagar.repository.book_repository import BookRepository
from pathagar.repository.bookmark_repository import BookmarkRepository
from pathagar.repository.schema import create_schema

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    create_schema(connection)
    BookRepository(connection).create(
        Book(id="b1", title="Dune", author="Herbert", physical_code="PC-1", created_at=BASE)
    )
    yield connection
    connection.close()


@pytest.fixture
def repo(conn):
    return BookmarkRepository(conn)


def test_create_and_find_with_book(repo):
    repo.create(
        UserBookmark(
            id="m1", user_id="u1", book_id="b1", bookmark_type="wishlist",
            priority_level=2, created_at=BASE,
        )
    )
    bookmarks = repo.find_by_user_id("u1")
    assert len(bookmarks) == 1
    assert bookmarks[0].bookmark_type == "wishlist"
    assert bookmarks[0].priority_level == 2
    assert bookmarks[0].created_at == BASE
    assert bookmarks[0].book.title == "Dune"
    assert bookmarks[0].book.author == "Herbert"


def test_find_orders_newest_first(repo):
    repo.create(UserBookmark(id="m1", user_id="u1", book_id="b1", bookmark_type="a", created_at=BASE))
    repo.create(
        UserBookmark(
            id="m2", user_id="u1", book_id="b1", bookmark_type="b",
            created_at=BASE + timedelta(days=1),
        )
    )
    assert [bookmark.id for bookmark in repo.find_by_user_id("u1")] == ["m2", "m1"]
    assert repo.find_by_user_id("u2") == []


def test_delete_only_matching_type(repo):
    repo.create(UserBookmark(id="m1", user_id="u1", book_id="b1", bookmark_type="a", created_at=BASE))
    repo.create(UserBookmark(id="m2", user_id="u1", book_id="b1", bookmark_type="b", created_at=BASE))
    repo.delete("u1", "b1", "a")
    assert [bookmark.id for bookmark in repo.find_by_user_id("u1")] == ["m2"]


def test_duplicate_bookmark_rejected(repo):
    repo.create(UserBookmark(id="m1", user_id="u1", book_id="b1", bookmark_type="a", created_at=BASE))
    with pytest.raises(sqlite3.IntegrityError):
        repo.create(
            UserBookmark(id="m2", user_id="u1", book_id="b1", bookmark_type="a", created_at=BASE)
        )