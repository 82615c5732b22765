"""Member profiles, interests and the leaderboard."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Protocol

from .models import User

logger = logging.getLogger(__name__)


class UserRepo(Protocol):
    def find_by_id(self, user_id: str) -> User: ...

    def update(self, user_id: str, user: User) -> None: ...

    def add_interests(self, user_id: str, interests: list[str]) -> None: ...

    def get_top_users(self, limit: int) -> list[User]: ...


class UserService:
    """Reads and updates member profiles."""

    def __init__(self, user_repo: UserRepo) -> None:
        self._repo = user_repo

    def get_profile(self, user_id: str) -> User:
        try:
            return self._repo.find_by_id(user_id)
        except Exception:
            logger.exception("failed to get user profile %s", user_id)
            raise

    def update_profile(self, user_id: str, user: User) -> User:
        """Stamp the update time, store the profile and return it."""
        user.updated_at = datetime.now(timezone.utc)
        try:
            self._repo.update(user_id, user)
        except Exception:
            logger.exception("failed to update user profile %s", user_id)
            raise
        logger.info("user profile updated: %s", user_id)
        return user

    def add_interests(self, user_id: str, interests: list[str]) -> None:
        try:
            self._repo.add_interests(user_id, interests)
        except Exception:
            logger.exception("failed to add interests for %s", user_id)
            raise
        logger.info("interests added: %s", user_id)

    def get_leaderboard(self, limit: int) -> list[User]:
        try:
            return self._repo.get_top_users(limit)
        except Exception:
            logger.exception("failed to get leaderboard")
            raise