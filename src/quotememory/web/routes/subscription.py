"""Subscription panel endpoints."""

from fastapi import APIRouter, Depends

from quotememory.core.subscription import get_user_stats, load_plans
from quotememory.web.dependencies import get_owner_id
from quotememory.web.schemas import PlanListResponse, PlanResponse, UserStatsResponse

router = APIRouter(prefix="/api/subscription", tags=["subscription"])


@router.get("/plans", response_model=PlanListResponse)
async def list_plans() -> PlanListResponse:
    """List available plans with formatted prices and features."""
    listing = load_plans()
    plans = [PlanResponse(**p.to_dict()) for p in listing.plans]
    return PlanListResponse(plans=plans, count=len(plans), error=listing.error)


@router.get("/stats", response_model=UserStatsResponse)
async def user_stats(owner_id: str = Depends(get_owner_id)) -> UserStatsResponse:
    """Quote and practice counts for the current user."""
    stats = get_user_stats(owner_id)
    return UserStatsResponse(
        quote_count=stats.quote_count,
        practice_count=stats.practice_count,
        current_plan=stats.current_plan,
    )
