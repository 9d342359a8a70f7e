"""Subscription panel.

Plan catalog loading, price formatting, feature lists per plan tier,
and per-user usage statistics. Checkout is handled by the payment
provider and is not part of this module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

from quotememory.config.app_config import load_app_config
from quotememory.db.attempts_repository import count_attempts
from quotememory.db.quotes_repository import count_quotes

logger = structlog.get_logger(__name__)

PLANS_LOAD_FAILED_MESSAGE = "Failed to load plans. Please try again later."
CURRENT_PLAN = "Free"

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}

# Currencies whose amounts have no minor unit
ZERO_DECIMAL_CURRENCIES = frozenset({"JPY", "KRW"})

BASIC_FEATURES: list[str] = [
    "Store up to 50 quotes",
    "Basic memory challenges",
    "Progress tracking",
    "Community support",
]

PRO_FEATURES: list[str] = [
    *BASIC_FEATURES,
    "Unlimited quotes",
    "Advanced analytics",
    "Custom categories & tags",
    "Export progress reports",
    "Priority support",
]

ENTERPRISE_FEATURES: list[str] = [
    *PRO_FEATURES,
    "Team collaboration",
    "Custom quote collections",
    "API access",
    "Dedicated support",
    "Advanced integrations",
]


@dataclass
class Plan:
    """A subscription plan offered in the panel."""

    id: str
    product: str
    amount: int
    currency: str
    interval: str = "month"
    interval_count: int = 1
    active: bool = True

    @property
    def price(self) -> str:
        return format_currency(self.amount, self.currency)

    @property
    def features(self) -> list[str]:
        return get_plan_features(self.product)

    @property
    def billing_period(self) -> str:
        """Billing label, e.g. "per month" or "Every 3 months"."""
        if self.interval_count == 1:
            return f"per {self.interval}"
        return f"Every {self.interval_count} {self.interval}s"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "id": self.id,
            "product": self.product,
            "amount": self.amount,
            "currency": self.currency,
            "interval": self.interval,
            "interval_count": self.interval_count,
            "active": self.active,
            "price": self.price,
            "billing_period": self.billing_period,
            "features": self.features,
        }


@dataclass
class PlanListing:
    """Result of loading the plan catalog."""

    plans: list[Plan] = field(default_factory=list)
    error: str | None = None


@dataclass
class UserStats:
    """Usage counters shown above the plans."""

    quote_count: int
    practice_count: int
    current_plan: str = CURRENT_PLAN


def format_currency(amount: int, currency: str) -> str:
    """Format an amount given in the currency's minor units.

    Examples:
        format_currency(999, "usd") -> "$9.99"
        format_currency(123456, "EUR") -> "€1,234.56"
        format_currency(999, "jpy") -> "¥999"
    """
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    sign = "-" if amount < 0 else ""
    if code in ZERO_DECIMAL_CURRENCIES:
        return f"{sign}{symbol}{abs(amount):,}"
    return f"{sign}{symbol}{abs(amount) / 100:,.2f}"


def get_plan_features(plan_name: str) -> list[str]:
    """Feature list for a plan, chosen by tier keyword in its name."""
    if "PRO" in plan_name:
        return list(PRO_FEATURES)
    if "ENTERPRISE" in plan_name:
        return list(ENTERPRISE_FEATURES)
    return list(BASIC_FEATURES)


def _parse_plan(data: dict[str, Any]) -> Plan:
    return Plan(
        id=str(data["id"]),
        product=str(data.get("product", "")),
        amount=int(data["amount"]),
        currency=str(data.get("currency", "usd")),
        interval=str(data.get("interval", "month")),
        interval_count=int(data.get("interval_count", 1)),
        active=bool(data.get("active", True)),
    )


def load_plans(plans_file: Path | None = None) -> PlanListing:
    """Load active plans from the catalog file.

    Args:
        plans_file: YAML catalog. Defaults to data/config/plans.yaml

    Returns:
        PlanListing; on any read or parse failure, no plans and an error
        message for the panel.
    """
    if plans_file is None:
        plans_file = load_app_config().plans_file

    try:
        data = yaml.safe_load(plans_file.read_text(encoding="utf-8")) or {}
        plans = [_parse_plan(p) for p in data.get("plans", [])]
    except (OSError, yaml.YAMLError, KeyError, TypeError, ValueError) as e:
        logger.warning("plans.load_failed", path=str(plans_file), error=str(e))
        return PlanListing(plans=[], error=PLANS_LOAD_FAILED_MESSAGE)

    active = [p for p in plans if p.active]
    logger.debug("plans.loaded", path=str(plans_file), count=len(active))
    return PlanListing(plans=active)


def get_user_stats(owner_id: str) -> UserStats:
    """Count the owner's quotes and practice attempts."""
    return UserStats(
        quote_count=count_quotes(owner_id),
        practice_count=count_attempts(owner_id),
    )
