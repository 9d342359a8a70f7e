"""Tests for the memorization session state machine (F2).

The countdown is driven manually with tick(); see test_countdown.py for
the asyncio timer.
"""

import pytest

from quotememory.core.session_engine import (
    LOAD_FAILED_MESSAGE,
    SAVE_FAILED_MESSAGE,
    EmptyRecallError,
    InvalidTransitionError,
    MemorizationSession,
    Memorizing,
    PracticePhase,
    QuoteNotFoundError,
    Results,
    Selecting,
    Typing,
)


def _to_typing(session, quote_id="q1"):
    session.select(quote_id)
    for _ in range(session.memorize_seconds):
        session.tick()
    assert session.phase is PracticePhase.TYPING


def _to_results(session, recall="one two nine four"):
    _to_typing(session)
    session.update_recall(recall)
    return session.submit()


class TestLoadQuotes:
    """Tests for the Selecting entry action."""

    def test_new_session_is_selecting(self, store):
        s = MemorizationSession("alice", store, autostart_countdown=False)
        assert s.phase is PracticePhase.SELECTING
        assert s.selected_quote is None

    def test_load_uses_owner(self, session, store):
        """Quotes are listed for the session's owner."""
        assert store.list_calls == ["alice"]
        assert [q.quote_id for q in session.quotes] == ["q1", "q2"]
        assert session.state.quotes == session.quotes

    def test_load_failure_leaves_empty_selecting(self, store):
        """A failed load is reported, not raised."""
        store.fail_list = True
        s = MemorizationSession("alice", store, autostart_countdown=False)

        quotes = s.load_quotes()

        assert quotes == ()
        assert isinstance(s.state, Selecting)
        assert s.state.error == LOAD_FAILED_MESSAGE

    def test_load_outside_selecting_keeps_phase(self, session):
        session.select("q1")
        session.load_quotes()
        assert session.phase is PracticePhase.MEMORIZING


class TestSelect:
    """Tests for choosing a quote."""

    def test_select_starts_memorizing(self, session):
        state = session.select("q2")

        assert isinstance(state, Memorizing)
        assert state.quote.quote_id == "q2"
        assert state.time_left == 10
        assert session.recall_text == ""
        assert session.accuracy is None

    def test_select_unknown_quote(self, session):
        with pytest.raises(QuoteNotFoundError):
            session.select("nope")
        assert session.phase is PracticePhase.SELECTING

    def test_select_outside_selecting(self, session):
        session.select("q1")
        with pytest.raises(InvalidTransitionError):
            session.select("q2")

    def test_custom_duration(self, store):
        s = MemorizationSession(
            "alice", store, memorize_seconds=3, autostart_countdown=False
        )
        s.load_quotes()
        assert s.select("q1").time_left == 3

    def test_duration_must_be_positive(self, store):
        with pytest.raises(ValueError):
            MemorizationSession("alice", store, memorize_seconds=0)


class TestCountdown:
    """Tests for tick-driven countdown."""

    def test_tick_decrements_by_one(self, session):
        session.select("q1")
        session.tick()
        assert session.time_left == 9

    def test_reaching_zero_moves_to_typing(self, session):
        session.select("q1")
        for _ in range(9):
            session.tick()
        assert session.phase is PracticePhase.MEMORIZING
        assert session.time_left == 1

        state = session.tick()

        assert isinstance(state, Typing)
        assert state.recall_text == ""
        assert session.time_left is None

    def test_extra_ticks_after_zero_are_ignored(self, session):
        """Typing stays Typing regardless of late ticks."""
        _to_typing(session)
        session.update_recall("one two")
        for _ in range(5):
            session.tick()
        assert session.phase is PracticePhase.TYPING
        assert session.recall_text == "one two"

    def test_tick_in_selecting_is_noop(self, session):
        assert isinstance(session.tick(), Selecting)


class TestTypingAndSubmit:
    """Tests for recall capture and scoring."""

    def test_update_recall_only_while_typing(self, session):
        session.select("q1")
        with pytest.raises(InvalidTransitionError):
            session.update_recall("too early")

    def test_submit_scores_and_records(self, session, store):
        results = _to_results(session, "one two nine four")

        assert isinstance(results, Results)
        assert results.accuracy == 75
        assert results.warning is None
        assert results.attempt_id == "att-1"
        assert len(store.attempts) == 1
        attempt = store.attempts[0]
        assert attempt.quote_id == "q1"
        assert attempt.owner_id == "alice"
        assert attempt.recalled_text == "one two nine four"
        assert attempt.accuracy == 75

    def test_recall_text_stored_raw(self, session, store):
        _to_results(session, "  One TWO three four ")
        assert store.attempts[0].recalled_text == "  One TWO three four "
        assert store.attempts[0].accuracy == 100

    @pytest.mark.parametrize("recall", ["", "   ", "\n\t "])
    def test_empty_recall_rejected(self, session, store, recall):
        """No transition and no attempt for a blank recall."""
        _to_typing(session)
        session.update_recall(recall)

        with pytest.raises(EmptyRecallError):
            session.submit()

        assert session.phase is PracticePhase.TYPING
        assert store.attempts == []

    def test_submit_outside_typing(self, session):
        session.select("q1")
        with pytest.raises(InvalidTransitionError):
            session.submit()

    def test_failed_save_still_shows_results(self, session, store):
        """A store failure becomes a warning on Results."""
        store.fail_insert = True

        results = _to_results(session, "one two three four")

        assert session.phase is PracticePhase.RESULTS
        assert results.accuracy == 100
        assert results.attempt_id is None
        assert results.warning == SAVE_FAILED_MESSAGE

    def test_accuracy_depends_only_on_texts(self, store):
        """Two sessions with the same inputs score the same."""
        scores = []
        for _ in range(2):
            s = MemorizationSession("alice", store, autostart_countdown=False)
            s.load_quotes()
            scores.append(_to_results(s, "one two three").accuracy)
        assert scores == [75, 75]


class TestRetryAndReset:
    """Tests for leaving Results and resetting."""

    def test_retry_restarts_same_quote(self, session):
        _to_results(session)

        state = session.retry()

        assert isinstance(state, Memorizing)
        assert state.quote.quote_id == "q1"
        assert state.time_left == 10
        assert session.accuracy is None
        assert session.recall_text == ""

    def test_retry_outside_results(self, session):
        _to_typing(session)
        with pytest.raises(InvalidTransitionError):
            session.retry()

    @pytest.mark.parametrize("phase", ["memorizing", "typing", "results"])
    def test_reset_from_any_phase(self, session, phase):
        session.select("q1")
        if phase in ("typing", "results"):
            for _ in range(10):
                session.tick()
            session.update_recall("one two")
        if phase == "results":
            session.submit()

        state = session.reset()

        assert isinstance(state, Selecting)
        assert session.selected_quote is None
        assert session.recall_text == ""
        assert session.accuracy is None
        assert session.time_left is None

    def test_reset_keeps_loaded_quotes(self, session):
        session.select("q1")
        session.reset()
        assert [q.quote_id for q in session.state.quotes] == ["q1", "q2"]

    def test_reset_keeps_attempts(self, session, store):
        _to_results(session)
        session.reset()
        assert len(store.attempts) == 1

    def test_select_after_reset(self, session):
        _to_results(session)
        session.reset()
        assert session.select("q2").quote.quote_id == "q2"


class TestSnapshot:
    """Tests for to_dict()."""

    def test_memorizing_shows_text(self, session):
        session.select("q1")
        data = session.to_dict()
        assert data["phase"] == "memorizing"
        assert data["quote"]["text"] == "one two three four"
        assert data["time_left"] == 10

    def test_typing_hides_text(self, session):
        _to_typing(session)
        data = session.to_dict()
        assert data["phase"] == "typing"
        assert "text" not in data["quote"]
        assert data["quote"]["author"] == "Counter"

    def test_results_has_feedback(self, session):
        _to_results(session, "one two nine four")
        data = session.to_dict()
        assert data["phase"] == "results"
        assert data["accuracy"] == 75
        assert data["result"]["band"] == "good"
        assert data["result"]["feedback"] == "Good job!"
