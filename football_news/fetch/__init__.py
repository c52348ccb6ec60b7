"""
Feed fetching and parsing.

This package handles concurrent HTTP fetching of RSS feeds and parsing
them into RawItem objects.
"""

from .errors import FeedError, FeedNetworkError, FeedParseError, InvalidFeedURL
from .fetcher import FeedFetcher, FeedResult, validate_url
from .parser import clean_text, parse_feed

__all__ = [
    "FeedError",
    "FeedFetcher",
    "FeedNetworkError",
    "FeedParseError",
    "FeedResult",
    "InvalidFeedURL",
    "clean_text",
    "parse_feed",
    "validate_url",
]
