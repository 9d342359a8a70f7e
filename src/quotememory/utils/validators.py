"""Data validation helpers.

Quote IDs are UUID4 strings; on the command line a unique prefix is enough.

Functions:
- resolve_quote_id(prefix, candidates) -> str: Resolve prefix to unique quote_id
- short_id(quote_id) -> str: Display form of a quote_id
"""

SHORT_ID_LENGTH = 8


class AmbiguousQuoteIdError(Exception):
    """Raised when a quote_id prefix matches multiple quotes."""

    def __init__(self, prefix: str, candidates: list[str]):
        self.prefix = prefix
        self.candidates = candidates
        super().__init__(
            f"Prefix '{prefix}' is ambiguous. Candidates:\n"
            + "\n".join(f"  - {c}" for c in candidates)
        )


class QuoteIdNotFoundError(Exception):
    """Raised when no quote matches the given prefix."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        super().__init__(f"No quote found with prefix '{prefix}'")


def resolve_quote_id(prefix: str, candidates: list[str]) -> str:
    """Resolve a quote_id prefix to a unique full quote_id.

    Args:
        prefix: Partial or full quote_id (e.g., "3f2a" or a full UUID)
        candidates: List of the owner's quote_ids

    Returns:
        The unique matching quote_id

    Raises:
        QuoteIdNotFoundError: If no candidates match the prefix
        AmbiguousQuoteIdError: If multiple candidates match the prefix
    """
    prefix = prefix.strip()

    # Exact match first
    if prefix in candidates:
        return prefix

    matches = [c for c in candidates if prefix and c.startswith(prefix)]

    if len(matches) == 0:
        raise QuoteIdNotFoundError(prefix)
    elif len(matches) == 1:
        return matches[0]
    else:
        raise AmbiguousQuoteIdError(prefix, matches)


def short_id(quote_id: str) -> str:
    """Shorten a quote_id for display."""
    return quote_id[:SHORT_ID_LENGTH]
