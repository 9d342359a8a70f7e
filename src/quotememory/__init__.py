"""QuoteMemory: store quotes and practice recalling them."""

__version__ = "0.1.0"
