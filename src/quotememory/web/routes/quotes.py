"""Quote endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from quotememory.db.quotes_repository import Quote, QuoteValidationError
from quotememory.db.store import QuoteStore
from quotememory.web.dependencies import get_owner_id, get_quote_store
from quotememory.web.schemas import QuoteCreate, QuoteListResponse, QuoteResponse

router = APIRouter(prefix="/api/quotes", tags=["quotes"])


def _to_response(quote: Quote) -> QuoteResponse:
    return QuoteResponse(
        quote_id=quote.quote_id,
        text=quote.text,
        author=quote.author,
        category=quote.category,
        created_at=quote.created_at,
    )


@router.get("", response_model=QuoteListResponse)
async def list_quotes(
    owner_id: str = Depends(get_owner_id),
    store: QuoteStore = Depends(get_quote_store),
) -> QuoteListResponse:
    """List the current user's quotes, newest first."""
    quotes = [_to_response(q) for q in store.list_quotes(owner_id)]
    return QuoteListResponse(quotes=quotes, count=len(quotes))


@router.post("", response_model=QuoteResponse, status_code=status.HTTP_201_CREATED)
async def create_quote(
    quote_data: QuoteCreate,
    owner_id: str = Depends(get_owner_id),
    store: QuoteStore = Depends(get_quote_store),
) -> QuoteResponse:
    """Create a new quote."""
    try:
        quote = store.insert_quote(
            owner_id=owner_id,
            text=quote_data.text,
            author=quote_data.author,
            category=quote_data.category,
        )
    except QuoteValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return _to_response(quote)


@router.delete("/{quote_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quote(
    quote_id: str,
    owner_id: str = Depends(get_owner_id),
    store: QuoteStore = Depends(get_quote_store),
) -> None:
    """Delete one of the current user's quotes."""
    if not store.delete_quote(quote_id, owner_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Quote '{quote_id}' not found",
        )
