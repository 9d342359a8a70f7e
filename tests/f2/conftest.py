"""Fixtures for F2 tests - Scoring and Session Engine."""

from dataclasses import dataclass, field

import pytest

from quotememory.core.session_engine import MemorizationSession
from quotememory.db.attempts_repository import Attempt
from quotememory.db.quotes_repository import Quote


def make_quote(quote_id: str, text: str, author: str | None = None) -> Quote:
    return Quote(
        quote_id=quote_id,
        owner_id="alice",
        text=text,
        author=author,
        category=None,
        created_at="2026-10-01T12:00:00+00:00",
    )


@dataclass
class FakeStore:
    """In-memory QuoteStore with switchable failures."""

    quotes: list[Quote] = field(default_factory=list)
    attempts: list[Attempt] = field(default_factory=list)
    fail_list: bool = False
    fail_insert: bool = False
    list_calls: list[str] = field(default_factory=list)

    def list_quotes(self, owner_id: str) -> list[Quote]:
        self.list_calls.append(owner_id)
        if self.fail_list:
            raise ConnectionError("store unavailable")
        return [q for q in self.quotes if q.owner_id == owner_id]

    def insert_attempt(self, quote_id, owner_id, recalled_text, accuracy) -> Attempt:
        if self.fail_insert:
            raise ConnectionError("store unavailable")
        attempt = Attempt(
            attempt_id=f"att-{len(self.attempts) + 1}",
            quote_id=quote_id,
            owner_id=owner_id,
            recalled_text=recalled_text,
            accuracy=accuracy,
            created_at="2026-10-01T12:00:10+00:00",
        )
        self.attempts.append(attempt)
        return attempt

    def insert_quote(self, owner_id, text, author=None, category=None) -> Quote:
        quote = make_quote(f"q{len(self.quotes) + 1}", text, author)
        self.quotes.append(quote)
        return quote

    def delete_quote(self, quote_id, owner_id) -> bool:
        before = len(self.quotes)
        self.quotes = [q for q in self.quotes if q.quote_id != quote_id]
        return len(self.quotes) < before


@pytest.fixture
def store() -> FakeStore:
    """Store holding two of alice's quotes."""
    return FakeStore(
        quotes=[
            make_quote("q1", "one two three four", author="Counter"),
            make_quote("q2", "The quick brown fox"),
        ]
    )


@pytest.fixture
def session(store) -> MemorizationSession:
    """Session with manual ticking and quotes loaded."""
    s = MemorizationSession(
        owner_id="alice",
        store=store,
        memorize_seconds=10,
        tick_seconds=1.0,
        autostart_countdown=False,
    )
    s.load_quotes()
    return s
