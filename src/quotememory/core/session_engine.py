"""Memorization session engine.

Drives one practice round for one user:

    Selecting -> Memorizing -> Typing -> Results
        ^            |           |         |
        +------------+-----------+---------+   reset()
                                           |
                     Memorizing <----------+   retry()

Each state is its own frozen dataclass carrying only the data that state
needs. While Memorizing, a single asyncio task counts down once per tick
and moves the session to Typing when it reaches zero. Leaving Memorizing
for any reason cancels that task.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, ClassVar, Union

import structlog

from quotememory.config.app_config import load_app_config
from quotememory.core.scoring import calculate_accuracy, summarize_score
from quotememory.db.quotes_repository import Quote
from quotememory.db.store import QuoteStore

logger = structlog.get_logger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load quotes"
SAVE_FAILED_MESSAGE = "Your attempt could not be saved"


# =============================================================================
# ERRORS
# =============================================================================


class SessionError(Exception):
    """Base error for practice session actions."""

    pass


class InvalidTransitionError(SessionError):
    """Action not allowed in the current phase."""

    def __init__(self, action: str, phase: "PracticePhase"):
        self.action = action
        self.phase = phase
        super().__init__(f"Cannot {action} while {phase.name.lower()}")


class EmptyRecallError(SessionError):
    """Submission with no recalled words."""

    pass


class QuoteNotFoundError(SessionError):
    """Selected quote is not among the owner's loaded quotes."""

    def __init__(self, quote_id: str):
        self.quote_id = quote_id
        super().__init__(f"Quote '{quote_id}' not found")


# =============================================================================
# STATES
# =============================================================================


class PracticePhase(Enum):
    """Phases of a practice round."""

    SELECTING = auto()
    MEMORIZING = auto()
    TYPING = auto()
    RESULTS = auto()


@dataclass(frozen=True)
class Selecting:
    """Choosing a quote. error holds a transient load failure message."""

    quotes: tuple[Quote, ...] = ()
    error: str | None = None

    phase: ClassVar[PracticePhase] = PracticePhase.SELECTING


@dataclass(frozen=True)
class Memorizing:
    """Quote on screen while the countdown runs."""

    quote: Quote
    time_left: int

    phase: ClassVar[PracticePhase] = PracticePhase.MEMORIZING


@dataclass(frozen=True)
class Typing:
    """Quote hidden; user types it from memory."""

    quote: Quote
    recall_text: str = ""

    phase: ClassVar[PracticePhase] = PracticePhase.TYPING


@dataclass(frozen=True)
class Results:
    """Scored recall. warning is set when the attempt could not be saved."""

    quote: Quote
    recall_text: str
    accuracy: int
    attempt_id: str | None = None
    warning: str | None = None

    phase: ClassVar[PracticePhase] = PracticePhase.RESULTS


SessionState = Union[Selecting, Memorizing, Typing, Results]


# =============================================================================
# ENGINE
# =============================================================================


@dataclass
class MemorizationSession:
    """One user's practice round.

    Args:
        owner_id: User the session belongs to; all store calls use it
        store: Quote/attempt collaborator
        memorize_seconds: Countdown length (defaults to config)
        tick_seconds: Seconds per countdown step (defaults to config)
        autostart_countdown: Spawn the countdown task on entering
            Memorizing. Requires a running event loop. When False the
            caller drives the countdown with tick().
    """

    owner_id: str
    store: QuoteStore
    memorize_seconds: int | None = None
    tick_seconds: float | None = None
    autostart_countdown: bool = True
    session_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])

    _state: SessionState = field(default_factory=Selecting, init=False, repr=False)
    _quotes: tuple[Quote, ...] = field(default=(), init=False, repr=False)
    _countdown_task: asyncio.Task[None] | None = field(
        default=None, init=False, repr=False
    )

    def __post_init__(self):
        practice = load_app_config().practice
        if self.memorize_seconds is None:
            self.memorize_seconds = practice.memorize_seconds
        if self.tick_seconds is None:
            self.tick_seconds = practice.tick_seconds
        if self.memorize_seconds < 1:
            raise ValueError("memorize_seconds must be at least 1")

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> PracticePhase:
        return self._state.phase

    @property
    def quotes(self) -> tuple[Quote, ...]:
        return self._quotes

    @property
    def selected_quote(self) -> Quote | None:
        return getattr(self._state, "quote", None)

    @property
    def time_left(self) -> int | None:
        if isinstance(self._state, Memorizing):
            return self._state.time_left
        return None

    @property
    def recall_text(self) -> str:
        return getattr(self._state, "recall_text", "")

    @property
    def accuracy(self) -> int | None:
        if isinstance(self._state, Results):
            return self._state.accuracy
        return None

    @property
    def countdown_active(self) -> bool:
        return self._countdown_task is not None and not self._countdown_task.done()

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def load_quotes(self) -> tuple[Quote, ...]:
        """Fetch the owner's quotes.

        A store failure leaves an empty list and, when Selecting, a
        transient error on the state.
        """
        error: str | None = None
        try:
            self._quotes = tuple(self.store.list_quotes(self.owner_id))
        except Exception as e:
            logger.warning(
                "practice.load_failed",
                session_id=self.session_id,
                owner_id=self.owner_id,
                error=str(e),
            )
            self._quotes = ()
            error = LOAD_FAILED_MESSAGE

        if isinstance(self._state, Selecting):
            self._set_state(Selecting(quotes=self._quotes, error=error))

        logger.debug(
            "practice.quotes_loaded",
            session_id=self.session_id,
            count=len(self._quotes),
        )
        return self._quotes

    def select(self, quote_id: str) -> Memorizing:
        """Pick a loaded quote and start memorizing it."""
        self._require(Selecting, "select a quote")

        quote = next((q for q in self._quotes if q.quote_id == quote_id), None)
        if quote is None:
            raise QuoteNotFoundError(quote_id)

        return self._begin_memorizing(quote)

    def tick(self) -> SessionState:
        """Advance the countdown by one step.

        Does nothing outside Memorizing. Reaching zero moves to Typing.
        """
        state = self._state
        if not isinstance(state, Memorizing):
            return state

        time_left = state.time_left - 1
        if time_left <= 0:
            logger.debug("practice.countdown_finished", session_id=self.session_id)
            self._set_state(Typing(quote=state.quote))
        else:
            self._set_state(Memorizing(quote=state.quote, time_left=time_left))
        return self._state

    def update_recall(self, text: str) -> Typing:
        """Replace the recall buffer."""
        state = self._require(Typing, "type a recall")
        self._set_state(Typing(quote=state.quote, recall_text=text))
        return self._state

    def submit(self) -> Results:
        """Score the recall buffer and record the attempt.

        The attempt write is best effort: a failure is logged and kept as
        a warning on Results.

        Raises:
            InvalidTransitionError: If not Typing
            EmptyRecallError: If the recall buffer has no words
        """
        state = self._require(Typing, "submit")
        if not state.recall_text.strip():
            raise EmptyRecallError("Type the quote before submitting")

        accuracy = calculate_accuracy(state.quote.text, state.recall_text)

        attempt_id: str | None = None
        warning: str | None = None
        try:
            attempt = self.store.insert_attempt(
                quote_id=state.quote.quote_id,
                owner_id=self.owner_id,
                recalled_text=state.recall_text,
                accuracy=accuracy,
            )
            attempt_id = attempt.attempt_id
        except Exception as e:
            logger.warning(
                "practice.attempt_save_failed",
                session_id=self.session_id,
                quote_id=state.quote.quote_id,
                error=str(e),
            )
            warning = SAVE_FAILED_MESSAGE

        self._set_state(
            Results(
                quote=state.quote,
                recall_text=state.recall_text,
                accuracy=accuracy,
                attempt_id=attempt_id,
                warning=warning,
            )
        )
        logger.info(
            "practice.submitted",
            session_id=self.session_id,
            quote_id=state.quote.quote_id,
            accuracy=accuracy,
            saved=attempt_id is not None,
        )
        return self._state

    def retry(self) -> Memorizing:
        """Memorize the same quote again."""
        state = self._require(Results, "retry")
        return self._begin_memorizing(state.quote)

    def reset(self) -> Selecting:
        """Drop the round and go back to quote selection.

        Allowed from any phase. Stored quotes and attempts are untouched.
        """
        self._set_state(Selecting(quotes=self._quotes))
        logger.debug("practice.reset", session_id=self.session_id)
        return self._state

    def close(self) -> None:
        """Stop any running countdown."""
        self._cancel_countdown()

    async def wait_for_countdown(self) -> PracticePhase:
        """Wait until the current countdown task finishes or is cancelled."""
        task = self._countdown_task
        if task is not None:
            await asyncio.wait({task})
        return self.phase

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require(self, state_type: type, action: str) -> Any:
        if not isinstance(self._state, state_type):
            raise InvalidTransitionError(action, self.phase)
        return self._state

    def _begin_memorizing(self, quote: Quote) -> Memorizing:
        # Fail before changing state when there is no loop to run the timer
        loop = asyncio.get_running_loop() if self.autostart_countdown else None

        self._set_state(Memorizing(quote=quote, time_left=self.memorize_seconds))
        if loop is not None:
            self._countdown_task = loop.create_task(self._run_countdown())
        logger.info(
            "practice.memorizing",
            session_id=self.session_id,
            quote_id=quote.quote_id,
            seconds=self.memorize_seconds,
        )
        return self._state

    def _set_state(self, new_state: SessionState) -> None:
        # Every exit from Memorizing goes through here; a tick stays in it
        if isinstance(self._state, Memorizing) and not isinstance(new_state, Memorizing):
            self._cancel_countdown()
        self._state = new_state

    def _cancel_countdown(self) -> None:
        task = self._countdown_task
        self._countdown_task = None
        if task is None or task.done():
            return
        # The countdown itself ends the phase on its last tick
        if task is not _current_task():
            task.cancel()

    async def _run_countdown(self) -> None:
        me = asyncio.current_task()
        try:
            while self._countdown_task is me and isinstance(self._state, Memorizing):
                await asyncio.sleep(self.tick_seconds)
                if self._countdown_task is not me:
                    break
                self.tick()
        except asyncio.CancelledError:
            logger.debug("practice.countdown_cancelled", session_id=self.session_id)
            raise

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        state = self._state
        result: dict[str, Any] = {
            "session_id": self.session_id,
            "owner_id": self.owner_id,
            "phase": state.phase.name.lower(),
            "memorize_seconds": self.memorize_seconds,
            "quotes": [q.to_dict() for q in self._quotes],
            "quote": None,
            "time_left": None,
            "recall_text": "",
            "accuracy": None,
            "result": None,
            "error": None,
            "warning": None,
        }

        if isinstance(state, Selecting):
            result["error"] = state.error
        elif isinstance(state, Memorizing):
            result["quote"] = state.quote.to_dict()
            result["time_left"] = state.time_left
        elif isinstance(state, Typing):
            # Only the author is shown while typing
            result["quote"] = {
                "quote_id": state.quote.quote_id,
                "author": state.quote.author,
            }
            result["recall_text"] = state.recall_text
        elif isinstance(state, Results):
            summary = summarize_score(state.accuracy)
            result["quote"] = state.quote.to_dict()
            result["recall_text"] = state.recall_text
            result["accuracy"] = state.accuracy
            result["result"] = {
                "band": summary.band,
                "feedback": summary.feedback,
                "attempt_id": state.attempt_id,
            }
            result["warning"] = state.warning

        return result


def _current_task() -> asyncio.Task[Any] | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        # No running loop
        return None
