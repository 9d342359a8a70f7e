"""Request dependencies for Web API."""

from fastapi import Header, HTTPException, status

from quotememory.db.store import QuoteStore
from quotememory.web.sessions import get_session_manager

OWNER_HEADER = "X-User-Id"


async def get_owner_id(
    x_user_id: str | None = Header(default=None, alias=OWNER_HEADER),
) -> str:
    """Current user, as forwarded by the authenticating proxy."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {OWNER_HEADER} header",
        )
    return x_user_id.strip()


def get_quote_store() -> QuoteStore:
    """Store shared with the practice sessions."""
    return get_session_manager().store
