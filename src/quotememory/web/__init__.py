"""Web API for QuoteMemory."""
