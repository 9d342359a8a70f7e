"""Repository functions for the quote_attempts table.

Attempts are written once per scored recall and never mutated.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog

from quotememory.db.database import get_db

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Attempt:
    """A scored recall trial against a quote."""

    attempt_id: str
    quote_id: str
    owner_id: str
    recalled_text: str
    accuracy: int
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "attempt_id": self.attempt_id,
            "quote_id": self.quote_id,
            "owner_id": self.owner_id,
            "recalled_text": self.recalled_text,
            "accuracy": self.accuracy,
            "created_at": self.created_at,
        }


def insert_attempt(
    quote_id: str,
    owner_id: str,
    recalled_text: str,
    accuracy: int,
) -> Attempt:
    """Insert an attempt record.

    Args:
        quote_id: Quote the recall was scored against
        owner_id: Owning user
        recalled_text: Raw recalled text, stored as typed
        accuracy: Integer percentage 0-100

    Returns:
        The created Attempt

    Raises:
        ValueError: If accuracy is outside 0-100
        sqlite3.Error: On storage failure
    """
    if not 0 <= accuracy <= 100:
        raise ValueError(f"Accuracy out of range: {accuracy}")

    attempt = Attempt(
        attempt_id=str(uuid.uuid4()),
        quote_id=quote_id,
        owner_id=owner_id,
        recalled_text=recalled_text,
        accuracy=accuracy,
        created_at=datetime.now(timezone.utc).isoformat(),
    )

    with get_db() as conn:
        conn.execute(
            """
            INSERT INTO quote_attempts (
                attempt_id, quote_id, owner_id, recalled_text, accuracy, created_at
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                attempt.attempt_id,
                attempt.quote_id,
                attempt.owner_id,
                attempt.recalled_text,
                attempt.accuracy,
                attempt.created_at,
            ),
        )

    logger.debug(
        "attempts.inserted",
        attempt_id=attempt.attempt_id,
        quote_id=quote_id,
        accuracy=accuracy,
    )
    return attempt


def list_attempts(owner_id: str, quote_id: str | None = None) -> list[Attempt]:
    """Get attempts of an owner, newest first, optionally for one quote."""
    query = "SELECT * FROM quote_attempts WHERE owner_id = ?"
    params: tuple[str, ...] = (owner_id,)
    if quote_id is not None:
        query += " AND quote_id = ?"
        params = (owner_id, quote_id)
    query += " ORDER BY created_at DESC, rowid DESC"

    with get_db() as conn:
        rows = conn.execute(query, params).fetchall()

    return [_row_to_attempt(row) for row in rows]


def count_attempts(owner_id: str) -> int:
    """Count attempts recorded for owner_id."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT COUNT(*) FROM quote_attempts WHERE owner_id = ?", (owner_id,)
        ).fetchone()
    return int(row[0])


def _row_to_attempt(row) -> Attempt:
    """Convert database row to Attempt."""
    return Attempt(
        attempt_id=row["attempt_id"],
        quote_id=row["quote_id"],
        owner_id=row["owner_id"],
        recalled_text=row["recalled_text"],
        accuracy=row["accuracy"],
        created_at=row["created_at"],
    )
