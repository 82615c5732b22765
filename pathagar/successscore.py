"""Success-score bookkeeping for member actions."""

from __future__ import annotations

from typing import Optional, Protocol

SCORE_RETURN_ON_TIME = 10
SCORE_RETURN_LATE = -15
SCORE_POSITIVE_REVIEW = 5
SCORE_NEGATIVE_REVIEW = -10
SCORE_IDEA_POSTED = 3
SCORE_IDEA_UPVOTE = 1
SCORE_IDEA_DOWNVOTE = -1
SCORE_LOST_BOOK = -50
SCORE_BOOK_DONATED = 20
SCORE_MONEY_DONATED = 10


class ScoreRepo(Protocol):
    def update_score(
        self,
        user_id: str,
        change: int,
        reason: str,
        ref_type: str,
        ref_id: Optional[str],
    ) -> None: ...


class SuccessScoreService:
    """Applies fixed score changes for events in the library."""

    def __init__(self, score_repo: ScoreRepo) -> None:
        self._repo = score_repo

    def process_idea_posted(self, user_id: str, idea_id: str) -> None:
        self._repo.update_score(user_id, SCORE_IDEA_POSTED, "Posted reading idea", "idea", idea_id)

    def process_idea_upvote(self, user_id: str, idea_id: str) -> None:
        self._repo.update_score(user_id, SCORE_IDEA_UPVOTE, "Idea received upvote", "idea", idea_id)

    def process_idea_downvote(self, user_id: str, idea_id: str) -> None:
        self._repo.update_score(
            user_id, SCORE_IDEA_DOWNVOTE, "Idea received downvote", "idea", idea_id
        )

    def process_positive_review(self, user_id: str, review_id: str) -> None:
        self._repo.update_score(
            user_id, SCORE_POSITIVE_REVIEW, "Received positive review", "review", review_id
        )

    def process_negative_review(self, user_id: str, review_id: str) -> None:
        self._repo.update_score(
            user_id, SCORE_NEGATIVE_REVIEW, "Received negative review", "review", review_id
        )

    def process_book_donation(self, user_id: str, donation_id: str) -> None:
        self._repo.update_score(user_id, SCORE_BOOK_DONATED, "Donated book", "donation", donation_id)

    def process_money_donation(self, user_id: str, donation_id: str) -> None:
        self._repo.update_score(
            user_id, SCORE_MONEY_DONATED, "Made financial contribution", "donation", donation_id
        )

    def process_return_on_time(self, user_id: str, book_id: str) -> None:
        self._repo.update_score(
            user_id, SCORE_RETURN_ON_TIME, "Returned book on time", "book", book_id
        )

    def process_return_late(self, user_id: str, book_id: str) -> None:
        self._repo.update_score(user_id, SCORE_RETURN_LATE, "Returned book late", "book", book_id)

    def process_lost_book(self, user_id: str, book_id: str) -> None:
        self._repo.update_score(user_id, SCORE_LOST_BOOK, "Lost book", "book", book_id)

    def adjust_score(
        self,
        user_id: str,
        amount: int,
        reason: str,
        ref_type: str,
        ref_id: Optional[str],
    ) -> None:
        self._repo.update_score(user_id, amount, reason, ref_type, ref_id)