"""Database module for SQLite persistence.

Provides:
- Database connection management
- Schema initialization
- Repository functions for quotes and quote_attempts
- SqliteQuoteStore, the store used by practice sessions
"""

from quotememory.db.database import get_db, init_db

__all__ = ["get_db", "init_db"]
