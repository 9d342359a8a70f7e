"""SQLite database connection and schema management.

Provides connection management and schema initialization for the quote store.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

from quotememory.config.app_config import load_app_config

logger = structlog.get_logger(__name__)

# Current database path (module-level, set by init_db)
_db_path: Path | None = None


def _default_db_path() -> Path:
    return load_app_config().storage.resolve_db_path()


def init_db(db_path: Path | None = None) -> None:
    """Initialize database with schema.

    Creates the database file and all required tables if they don't exist.

    Args:
        db_path: Path to database file. Defaults to the configured path.
    """
    global _db_path
    _db_path = db_path or _default_db_path()

    # Ensure directory exists
    _db_path.parent.mkdir(parents=True, exist_ok=True)

    with get_db() as conn:
        _create_schema(conn)

    logger.info("database.initialized", path=str(_db_path))


def get_db_path() -> Path:
    """Get the active database path."""
    return _db_path or _default_db_path()


@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Get database connection as context manager.

    Yields:
        SQLite connection with row factory set to sqlite3.Row

    Example:
        with get_db() as conn:
            cursor = conn.execute("SELECT * FROM quotes")
            rows = cursor.fetchall()
    """
    db_path = get_db_path()

    # Ensure directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row

    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create database schema.

    Uses IF NOT EXISTS for idempotency.
    """
    conn.executescript(
        """
        -- quotes: one row per stored quote, owned by a single user
        CREATE TABLE IF NOT EXISTS quotes (
            quote_id TEXT PRIMARY KEY,
            owner_id TEXT NOT NULL,
            text TEXT NOT NULL CHECK(length(trim(text)) > 0),
            author TEXT,
            category TEXT,
            created_at TEXT NOT NULL
        );

        -- quote_attempts: practice history, kept when a quote is deleted
        CREATE TABLE IF NOT EXISTS quote_attempts (
            attempt_id TEXT PRIMARY KEY,
            quote_id TEXT NOT NULL,
            owner_id TEXT NOT NULL,
            recalled_text TEXT NOT NULL,
            accuracy INTEGER NOT NULL CHECK(accuracy BETWEEN 0 AND 100),
            created_at TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_quotes_owner ON quotes(owner_id, created_at);
        CREATE INDEX IF NOT EXISTS idx_attempts_owner ON quote_attempts(owner_id);
        CREATE INDEX IF NOT EXISTS idx_attempts_quote ON quote_attempts(quote_id);
        """
    )


def reset_db() -> None:
    """Forget the active database path (for testing)."""
    global _db_path
    _db_path = None
