"""
Football News - RSS aggregation, classification and deduplication.

This package fetches football RSS feeds concurrently, tags each item with a
category and trust rating, collapses near-duplicate stories into one
representative article and caches the result per category.

Main entry points are NewsService and the CLI via `football-news fetch`.

Example:
    $ football-news fetch --category transfer
"""

__all__ = ["__version__", "NewsCategory", "NewsService", "build_service", "load_config"]
__version__ = "0.1.0"

from .config import load_config
from .core.types import NewsCategory
from .service import NewsService, build_service
