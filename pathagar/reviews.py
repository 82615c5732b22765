"""Member reviews and their effect on success scores."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Protocol

from .models import UserReview

logger = logging.getLogger(__name__)


class ReviewRepo(Protocol):
    def create(self, review: UserReview) -> None: ...

    def find_by_user_id(self, user_id: str) -> list[UserReview]: ...

    def find_by_book_id(self, book_id: str) -> list[UserReview]: ...


class ScoreService(Protocol):
    def process_positive_review(self, user_id: str, review_id: str) -> None: ...

    def process_negative_review(self, user_id: str, review_id: str) -> None: ...


class NotificationService(Protocol):
    def notify_review_received(self, user_id: str, reviewer_name: str) -> None: ...


class ReviewService:
    """Creates and lists reviews between members."""

    def __init__(
        self,
        review_repo: ReviewRepo,
        score_service: ScoreService,
        notification_service: NotificationService,
    ) -> None:
        self._repo = review_repo
        self._scores = score_service
        self._notifications = notification_service

    def create(self, review: UserReview) -> UserReview:
        """Store a review and reward or penalise the reviewee by its average rating."""
        review.id = str(uuid.uuid4())
        review.created_at = datetime.now(timezone.utc)

        try:
            self._repo.create(review)
        except Exception:
            logger.exception("failed to create review")
            raise

        ratings = [
            rating
            for rating in (
                review.behavior_rating,
                review.book_condition_rating,
                review.communication_rating,
            )
            if rating is not None
        ]
        if ratings:
            average = int(sum(ratings) / len(ratings))
            if average >= 4:
                try:
                    self._scores.process_positive_review(review.reviewee_id, review.id)
                except Exception as exc:
                    logger.warning("failed to update success score for positive review: %s", exc)
            elif average < 3:
                try:
                    self._scores.process_negative_review(review.reviewee_id, review.id)
                except Exception as exc:
                    logger.warning("failed to update success score for negative review: %s", exc)

        logger.info("review created successfully: %s", review.id)
        return review

    def get_by_user(self, user_id: str) -> list[UserReview]:
        try:
            return self._repo.find_by_user_id(user_id)
        except Exception:
            logger.exception("failed to get reviews for user %s", user_id)
            raise

    def get_by_book(self, book_id: str) -> list[UserReview]:
        try:
            return self._repo.find_by_book_id(book_id)
        except Exception:
            logger.exception("failed to get reviews by book %s", book_id)
            raise