"""Pydantic schemas for Web API.

Serialization models for Quote, Practice session, and Subscription panel.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# QUOTE SCHEMAS
# =============================================================================


class QuoteCreate(BaseModel):
    """Request body for creating a quote."""

    text: str = Field(..., min_length=1, max_length=5000)
    author: str | None = Field(default=None, max_length=200)
    category: str | None = Field(default=None, max_length=100)


class QuoteResponse(BaseModel):
    """Response for a quote."""

    quote_id: str
    text: str
    author: str | None = None
    category: str | None = None
    created_at: str


class QuoteListResponse(BaseModel):
    """Response for list of quotes."""

    quotes: list[QuoteResponse]
    count: int


# =============================================================================
# PRACTICE SCHEMAS
# =============================================================================


class SelectQuoteRequest(BaseModel):
    """Request to pick a quote to memorize."""

    quote_id: str


class RecallRequest(BaseModel):
    """Request to replace the recall buffer."""

    text: str = Field(..., max_length=5000)


class PracticeResult(BaseModel):
    """Scored outcome shown on the results screen."""

    band: str
    feedback: str
    attempt_id: str | None = None


class PracticeSessionResponse(BaseModel):
    """Snapshot of a practice session."""

    session_id: str
    owner_id: str
    phase: str  # selecting | memorizing | typing | results
    memorize_seconds: int
    quotes: list[QuoteResponse] = Field(default_factory=list)
    quote: dict[str, Any] | None = None
    time_left: int | None = None
    recall_text: str = ""
    accuracy: int | None = None
    result: PracticeResult | None = None
    error: str | None = None
    warning: str | None = None


# =============================================================================
# SUBSCRIPTION SCHEMAS
# =============================================================================


class PlanResponse(BaseModel):
    """Response for a subscription plan."""

    id: str
    product: str
    amount: int
    currency: str
    interval: str
    interval_count: int
    active: bool
    price: str
    billing_period: str
    features: list[str]


class PlanListResponse(BaseModel):
    """Response for the plan catalog."""

    plans: list[PlanResponse]
    count: int
    error: str | None = None


class UserStatsResponse(BaseModel):
    """Usage counters for the current user."""

    quote_count: int
    practice_count: int
    current_plan: str


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
