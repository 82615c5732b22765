"""Domain records shared by the services, repositories and web layer."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

# Fields carrying this metadata never leave the process in a response body.
_HIDDEN = {"serialize": False}


class VoteType(str, enum.Enum):
    """Direction of a vote on a reading idea."""

    UP = "up"
    DOWN = "down"


@dataclass
class User:
    """A library member."""

    id: str = ""
    username: str = ""
    email: str = ""
    password_hash: str = field(default="", repr=False, metadata=_HIDDEN)
    full_name: str = ""
    role: str = "member"
    avatar_url: str = ""
    bio: str = ""
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    location_address: str = ""
    success_score: int = 100
    books_shared: int = 0
    books_received: int = 0
    reviews_received: int = 0
    ideas_posted: int = 0
    total_upvotes: int = 0
    total_downvotes: int = 0
    is_donor: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Book:
    """A physical book circulating between members."""

    id: str = ""
    title: str = ""
    author: str = ""
    isbn: str = ""
    cover_url: str = ""
    description: str = ""
    category: str = ""
    tags: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)
    physical_code: str = ""
    status: str = "available"
    max_reading_days: int = 14
    current_holder_id: Optional[str] = None
    created_by: Optional[str] = None
    donated_by: Optional[str] = None
    is_donated: bool = False
    total_reads: int = 0
    average_rating: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class BookRequest:
    """A member's request to read a book next."""

    id: str = ""
    book_id: str = ""
    user_id: str = ""
    status: str = "pending"
    priority_score: float = 0.0
    interest_match_score: float = 0.0
    distance_km: Optional[float] = None
    requested_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    book: Optional[Book] = None
    user: Optional[User] = None


@dataclass
class ReadingHistory:
    """One reader's period holding a book."""

    id: str = ""
    book_id: str = ""
    reader_id: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    duration_days: Optional[int] = None
    notes: str = ""
    rating: Optional[int] = None
    review: str = ""
    due_date: Optional[datetime] = None
    is_completed: bool = False
    delivery_status: str = ""
    book: Optional[Book] = None
    reader: Optional[User] = None


@dataclass
class UserBookmark:
    """A book a member has marked for later."""

    id: str = ""
    user_id: str = ""
    book_id: str = ""
    bookmark_type: str = ""
    priority_level: int = 0
    created_at: Optional[datetime] = None
    book: Optional[Book] = None


@dataclass
class Donation:
    """A book or money donation."""

    id: str = ""
    donor_id: str = ""
    donation_type: str = ""
    book_id: Optional[str] = None
    amount: Optional[float] = None
    currency: str = ""
    message: str = ""
    is_public: bool = False
    created_at: Optional[datetime] = None


@dataclass
class ReadingIdea:
    """An idea a reader posted about a book."""

    id: str = ""
    book_id: str = ""
    user_id: str = ""
    title: str = ""
    content: str = ""
    upvotes: int = 0
    downvotes: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[User] = None


@dataclass
class IdeaVote:
    """A member's vote on a reading idea."""

    id: str = ""
    idea_id: str = ""
    user_id: str = ""
    vote_type: VoteType = VoteType.UP
    created_at: Optional[datetime] = None


@dataclass
class Notification:
    """A message shown to a member."""

    id: str = ""
    user_id: str = ""
    type: str = ""
    title: str = ""
    message: str = ""
    link: str = ""
    is_read: bool = False
    created_at: Optional[datetime] = None


@dataclass
class UserReview:
    """A review one member leaves about another."""

    id: str = ""
    reviewer_id: str = ""
    reviewee_id: str = ""
    book_id: Optional[str] = None
    behavior_rating: Optional[int] = None
    book_condition_rating: Optional[int] = None
    communication_rating: Optional[int] = None
    comment: str = ""
    created_at: Optional[datetime] = None
    reviewer: Optional[User] = None


def to_jsonable(value: Any) -> Any:
    """Turn records, enums and timestamps into plain JSON-ready values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if f.metadata.get("serialize", True)
        }
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in value]
    return value