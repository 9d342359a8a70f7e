"""Repository functions for the quotes table.

Provides create, list and delete operations. Quotes have no edit path.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog

from quotememory.db.database import get_db

logger = structlog.get_logger(__name__)


class QuoteValidationError(Exception):
    """Raised when a quote is missing required fields."""

    pass


@dataclass(frozen=True)
class Quote:
    """Quote record from database."""

    quote_id: str
    owner_id: str
    text: str
    author: str | None
    category: str | None
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "quote_id": self.quote_id,
            "owner_id": self.owner_id,
            "text": self.text,
            "author": self.author,
            "category": self.category,
            "created_at": self.created_at,
        }


def _clean_optional(value: str | None) -> str | None:
    """Trim an optional field, mapping blank values to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def insert_quote(
    owner_id: str,
    text: str,
    author: str | None = None,
    category: str | None = None,
) -> Quote:
    """Insert a new quote.

    Args:
        owner_id: Owning user
        text: Quote text (required, trimmed)
        author: Optional author
        category: Optional category

    Returns:
        The created Quote

    Raises:
        QuoteValidationError: If text is empty after trimming
    """
    text = (text or "").strip()
    if not text:
        raise QuoteValidationError("Please enter a quote")

    quote = Quote(
        quote_id=str(uuid.uuid4()),
        owner_id=owner_id,
        text=text,
        author=_clean_optional(author),
        category=_clean_optional(category),
        created_at=datetime.now(timezone.utc).isoformat(),
    )

    with get_db() as conn:
        conn.execute(
            """
            INSERT INTO quotes (quote_id, owner_id, text, author, category, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                quote.quote_id,
                quote.owner_id,
                quote.text,
                quote.author,
                quote.category,
                quote.created_at,
            ),
        )

    logger.debug("quotes.inserted", quote_id=quote.quote_id, owner_id=owner_id)
    return quote


def list_quotes(owner_id: str) -> list[Quote]:
    """Get all quotes of an owner, newest first."""
    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT * FROM quotes
            WHERE owner_id = ?
            ORDER BY created_at DESC, rowid DESC
            """,
            (owner_id,),
        ).fetchall()

    return [_row_to_quote(row) for row in rows]


def get_quote(quote_id: str, owner_id: str) -> Quote | None:
    """Get a quote by ID, scoped to its owner.

    Returns:
        Quote if found and owned by owner_id, None otherwise
    """
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM quotes WHERE quote_id = ? AND owner_id = ?",
            (quote_id, owner_id),
        ).fetchone()

    if row is None:
        return None

    return _row_to_quote(row)


def delete_quote(quote_id: str, owner_id: str) -> bool:
    """Delete a quote owned by owner_id.

    Attempts recorded against the quote are kept.

    Returns:
        True if deleted, False if not found
    """
    with get_db() as conn:
        cursor = conn.execute(
            "DELETE FROM quotes WHERE quote_id = ? AND owner_id = ?",
            (quote_id, owner_id),
        )

    deleted = cursor.rowcount > 0
    if deleted:
        logger.debug("quotes.deleted", quote_id=quote_id, owner_id=owner_id)

    return deleted


def count_quotes(owner_id: str) -> int:
    """Count quotes owned by owner_id."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT COUNT(*) FROM quotes WHERE owner_id = ?", (owner_id,)
        ).fetchone()
    return int(row[0])


def _row_to_quote(row) -> Quote:
    """Convert database row to Quote."""
    return Quote(
        quote_id=row["quote_id"],
        owner_id=row["owner_id"],
        text=row["text"],
        author=row["author"],
        category=row["category"],
        created_at=row["created_at"],
    )
