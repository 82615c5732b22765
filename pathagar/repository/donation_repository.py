"""Storage of donations."""

from __future__ import annotations

import sqlite3

from ..models import Donation
from .schema import _from_db_time, _to_db_time


class DonationRepository:
    """Reads and writes rows of the donations table."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def create(self, donation: Donation) -> None:
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO donations (id, donor_id, donation_type, book_id, amount,
                                       currency, message, is_public, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    donation.id, donation.donor_id, donation.donation_type,
                    donation.book_id, donation.amount, donation.currency,
                    donation.message, int(donation.is_public),
                    _to_db_time(donation.created_at),
                ),
            )

    def list(self, limit: int, offset: int) -> list[Donation]:
        """Public donations, newest first, one page of them."""
        rows = self._conn.execute(
            """
            SELECT id, donor_id, donation_type, book_id, amount,
                   COALESCE(currency, ''), COALESCE(message, ''), is_public, created_at
            FROM donations
            WHERE is_public = 1
            ORDER BY created_at DESC
            LIMIT ? OFFSET ?
            """,
            (limit, offset),
        )
        return [
            Donation(
                id=donation_id,
                donor_id=donor_id,
                donation_type=donation_type,
                book_id=book_id,
                amount=amount,
                currency=currency,
                message=message,
                is_public=bool(is_public),
                created_at=_from_db_time(created_at),
            )
            for (
                donation_id, donor_id, donation_type, book_id, amount,
                currency, message, is_public, created_at,
            ) in rows
        ]