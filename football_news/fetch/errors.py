"""Per-source fetch failures. None of these reach callers of the news service."""

from __future__ import annotations


class FeedError(Exception):
    """Base class for failures confined to a single feed."""

    kind = "unknown"


class InvalidFeedURL(FeedError):
    kind = "invalid_url"


class FeedNetworkError(FeedError):
    kind = "network_error"


class FeedParseError(FeedError):
    kind = "parse_error"
