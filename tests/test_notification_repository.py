import sqlite3

import pytest

from pathagar.repository.notification_repository import NotificationRepository
from pathagar.repository.schema import create_schema


@pytest.fixture
def conn():
    connection = sqlite3.connect(":memory:")
    create_schema(connection)
    yield connection
    connection.close()


@pytest.fixture
def repo(conn):
    return NotificationRepository(conn)


def test_create_and_read_back(repo):
    repo.create("u1", "review_received", "New review", "Someone reviewed you", "/users/u1")
    (note,) = repo.get_by_user_id("u1", 50)
    assert note.user_id == "u1"
    assert note.type == "review_received"
    assert note.title == "New review"
    assert note.message == "Someone reviewed you"
    assert note.link == "/users/u1"
    assert note.is_read is False
    assert note.id
    assert note.created_at is not None and note.created_at.tzinfo is not None


def test_limit_and_owner_filter(repo):
    for index in range(4):
        repo.create("u1", "info", f"t{index}", "m", "")
    repo.create("u2", "info", "other", "m", "")
    assert len(repo.get_by_user_id("u1", 2)) == 2
    assert len(repo.get_by_user_id("u1", 50)) == 4
    assert [n.title for n in repo.get_by_user_id("u2", 50)] == ["other"]


def test_null_link_reads_as_empty(repo, conn):
    conn.execute(
        "INSERT INTO notifications (user_id, type, title, message) VALUES ('u1', 'info', 't', 'm')"
    )
    conn.commit()
    assert repo.get_by_user_id("u1", 10)[0].link == ""


def test_mark_as_read_touches_only_one(repo):
    repo.create("u1", "info", "a", "m", "")
    repo.create("u1", "info", "b", "m", "")
    target = repo.get_by_user_id("u1", 10)[0]
    repo.mark_as_read(target.id)
    states = {n.id: n.is_read for n in repo.get_by_user_id("u1", 10)}
    assert states[target.id] is True
    assert sum(states.values()) == 1


def test_mark_all_as_read_scoped_to_user(repo):
    repo.create("u1", "info", "a", "m", "")
    repo.create("u1", "info", "b", "m", "")
    repo.create("u2", "info", "c", "m", "")
    repo.mark_all_as_read("u1")
    assert all(n.is_read for n in repo.get_by_user_id("u1", 10))
    assert not any(n.is_read for n in repo.get_by_user_id("u2", 10))