"""Practice session endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from quotememory.core.session_engine import (
    EmptyRecallError,
    InvalidTransitionError,
    MemorizationSession,
    QuoteNotFoundError,
)
from quotememory.web.dependencies import get_owner_id
from quotememory.web.schemas import (
    PracticeSessionResponse,
    RecallRequest,
    SelectQuoteRequest,
)
from quotememory.web.sessions import get_session_manager

router = APIRouter(prefix="/api/practice", tags=["practice"])


async def _get_session_or_404(session_id: str, owner_id: str) -> MemorizationSession:
    session = await get_session_manager().get_session(session_id, owner_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Practice session '{session_id}' not found",
        )
    return session


def _snapshot(session: MemorizationSession) -> PracticeSessionResponse:
    return PracticeSessionResponse(**session.to_dict())


@router.post("", response_model=PracticeSessionResponse, status_code=status.HTTP_201_CREATED)
async def start_practice(owner_id: str = Depends(get_owner_id)) -> PracticeSessionResponse:
    """Start a practice session with the current user's quotes."""
    session = await get_session_manager().create_session(owner_id)
    return _snapshot(session)


@router.get("/{session_id}", response_model=PracticeSessionResponse)
async def get_practice(
    session_id: str, owner_id: str = Depends(get_owner_id)
) -> PracticeSessionResponse:
    """Get the current state of a practice session."""
    return _snapshot(await _get_session_or_404(session_id, owner_id))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def end_practice(session_id: str, owner_id: str = Depends(get_owner_id)) -> None:
    """End a practice session."""
    if not await get_session_manager().end_session(session_id, owner_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Practice session '{session_id}' not found",
        )


@router.post("/{session_id}/select", response_model=PracticeSessionResponse)
async def select_quote(
    session_id: str,
    request: SelectQuoteRequest,
    owner_id: str = Depends(get_owner_id),
) -> PracticeSessionResponse:
    """Pick a quote and start the memorization countdown."""
    session = await _get_session_or_404(session_id, owner_id)
    try:
        session.select(request.quote_id)
    except QuoteNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return _snapshot(session)


@router.put("/{session_id}/recall", response_model=PracticeSessionResponse)
async def update_recall(
    session_id: str,
    request: RecallRequest,
    owner_id: str = Depends(get_owner_id),
) -> PracticeSessionResponse:
    """Replace the recall buffer while typing."""
    session = await _get_session_or_404(session_id, owner_id)
    try:
        session.update_recall(request.text)
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return _snapshot(session)


@router.post("/{session_id}/submit", response_model=PracticeSessionResponse)
async def submit_recall(
    session_id: str, owner_id: str = Depends(get_owner_id)
) -> PracticeSessionResponse:
    """Score the recall and record the attempt.

    An attempt that could not be saved is reported in `warning`; the
    results are returned either way.
    """
    session = await _get_session_or_404(session_id, owner_id)
    try:
        session.submit()
    except EmptyRecallError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return _snapshot(session)


@router.post("/{session_id}/retry", response_model=PracticeSessionResponse)
async def retry_quote(
    session_id: str, owner_id: str = Depends(get_owner_id)
) -> PracticeSessionResponse:
    """Memorize the same quote again."""
    session = await _get_session_or_404(session_id, owner_id)
    try:
        session.retry()
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return _snapshot(session)


@router.post("/{session_id}/reset", response_model=PracticeSessionResponse)
async def reset_practice(
    session_id: str, owner_id: str = Depends(get_owner_id)
) -> PracticeSessionResponse:
    """Go back to quote selection, reloading the quote list."""
    session = await _get_session_or_404(session_id, owner_id)
    session.reset()
    session.load_quotes()
    return _snapshot(session)
