"""Quote store collaborator consumed by the session engine.

The engine never talks to SQLite directly; it receives a QuoteStore.
"""

from __future__ import annotations

from typing import Protocol

from quotememory.db import attempts_repository, quotes_repository
from quotememory.db.attempts_repository import Attempt
from quotememory.db.quotes_repository import Quote


class QuoteStore(Protocol):
    """Read/write contract for quotes and attempts."""

    def list_quotes(self, owner_id: str) -> list[Quote]: ...

    def insert_attempt(
        self,
        quote_id: str,
        owner_id: str,
        recalled_text: str,
        accuracy: int,
    ) -> Attempt: ...

    def insert_quote(
        self,
        owner_id: str,
        text: str,
        author: str | None = None,
        category: str | None = None,
    ) -> Quote: ...

    def delete_quote(self, quote_id: str, owner_id: str) -> bool: ...


class SqliteQuoteStore:
    """QuoteStore backed by the SQLite repositories."""

    def list_quotes(self, owner_id: str) -> list[Quote]:
        return quotes_repository.list_quotes(owner_id)

    def insert_attempt(
        self,
        quote_id: str,
        owner_id: str,
        recalled_text: str,
        accuracy: int,
    ) -> Attempt:
        return attempts_repository.insert_attempt(
            quote_id=quote_id,
            owner_id=owner_id,
            recalled_text=recalled_text,
            accuracy=accuracy,
        )

    def insert_quote(
        self,
        owner_id: str,
        text: str,
        author: str | None = None,
        category: str | None = None,
    ) -> Quote:
        return quotes_repository.insert_quote(
            owner_id=owner_id, text=text, author=author, category=category
        )

    def delete_quote(self, quote_id: str, owner_id: str) -> bool:
        return quotes_repository.delete_quote(quote_id, owner_id)
