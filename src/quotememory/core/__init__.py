"""Core business logic.

Modules:
- scoring: positional word accuracy and result bands
- session_engine: memorize/type/score state machine with countdown
- subscription: plan catalog, price formatting, usage stats
"""

__all__ = [
    "scoring",
    "session_engine",
    "subscription",
]
