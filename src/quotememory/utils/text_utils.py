"""Text processing utilities.

Display helpers shared by the CLI and the API.
"""

PREVIEW_LENGTH = 100


def truncate(text: str, limit: int = PREVIEW_LENGTH) -> str:
    """Cut text to limit characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def format_attribution(author: str | None) -> str:
    """Author line shown under a quote, empty when there is no author."""
    if not author:
        return ""
    return f"— {author}"
