"""Command-line interface for QuoteMemory."""
