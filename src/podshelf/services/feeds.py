"""RSS feed fetching for podcast episode aggregation.

Retrieves a remote podcast feed over HTTP and maps it into ``Feed`` and
``FeedItem`` objects, including the iTunes extension fields.
"""

from __future__ import annotations

import calendar
import logging
from datetime import UTC, datetime
from time import struct_time
from typing import Any

import feedparser
import httpx

from podshelf.core.errors import FetchError, ValidationError
from podshelf.core.models import Feed, FeedItem

logger = logging.getLogger(__name__)

# Default timeout for feed requests (in seconds)
DEFAULT_TIMEOUT = 30.0


def _to_iso_date(time_struct: struct_time | None) -> str | None:
    """Normalize a feedparser UTC time struct to an ISO-8601 string."""
    if not time_struct:
        return None
    try:
        return datetime.fromtimestamp(calendar.timegm(time_struct), tz=UTC).isoformat()
    except (ValueError, OverflowError, OSError):
        return None


def _extract_audio_url(entry: Any) -> str | None:
    """Return the first audio enclosure, falling back to any enclosure."""
    enclosures = entry.get("enclosures", [])
    for enclosure in enclosures:
        if enclosure.get("type", "").startswith("audio/"):
            href = enclosure.get("href") or enclosure.get("url")
            if href:
                return str(href)

    for enclosure in enclosures:
        href = enclosure.get("href") or enclosure.get("url")
        if href:
            return str(href)

    return None


def _extract_image(node: Any) -> str | None:
    image = node.get("image")
    if not image:
        return None
    if isinstance(image, str):
        return image
    href = image.get("href") or image.get("url")
    return str(href) if href else None


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _parse_item(entry: Any) -> FeedItem:
    content = entry.get("content") or []
    content_value = content[0].get("value") if content else None

    return FeedItem(
        title=str(entry.get("title", "Untitled")),
        link=_optional_str(entry.get("link")),
        audio_url=_extract_audio_url(entry),
        content=_optional_str(content_value),
        summary=_optional_str(entry.get("summary")),
        iso_date=_to_iso_date(entry.get("published_parsed") or entry.get("updated_parsed")),
        pub_date=_optional_str(entry.get("published") or entry.get("updated")),
        image_url=_extract_image(entry),
        duration=_optional_str(entry.get("itunes_duration")),
        explicit=_optional_str(entry.get("itunes_explicit")),
        episode_type=_optional_str(entry.get("itunes_episodetype")),
        season=_optional_str(entry.get("itunes_season")),
        itunes_episode=_optional_str(entry.get("itunes_episode")),
    )


def parse_feed_content(content: str, feed_url: str = "") -> Feed:
    """
    Parse RSS/Atom text into a Feed.

    Args:
        content: Raw feed document
        feed_url: URL the document was retrieved from

    Returns:
        Parsed Feed

    Raises:
        FetchError: If the document is not a usable feed
    """
    parsed = feedparser.parse(content)

    # feedparser sets bozo for feeds that are technically malformed but
    # usually still parseable; only fail when nothing usable came out.
    if parsed.bozo and not parsed.entries and not parsed.feed.get("title"):
        raise FetchError(f"Invalid RSS feed: {parsed.bozo_exception}")

    channel = parsed.feed

    return Feed(
        url=feed_url,
        title=str(channel.get("title", "Unknown Podcast")),
        description=_optional_str(channel.get("subtitle") or channel.get("description")),
        author=_optional_str(channel.get("author") or channel.get("itunes_author")),
        link=_optional_str(channel.get("link")),
        image_url=_extract_image(channel),
        items=[_parse_item(entry) for entry in parsed.entries],
    )


class FeedService:
    """Fetches and parses remote podcast feeds."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        """Initialize the feed service."""
        self.timeout = timeout

    def fetch(self, feed_url: str) -> Feed:
        """
        Fetch and parse a podcast feed.

        Args:
            feed_url: URL of the podcast RSS feed

        Returns:
            Parsed Feed with all of its items

        Raises:
            ValidationError: If the URL is empty
            FetchError: If the feed is unreachable or cannot be parsed
        """
        if not feed_url or not feed_url.strip():
            raise ValidationError("URL parameter is required")

        feed_url = feed_url.strip()

        try:
            with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                response = client.get(feed_url)
                response.raise_for_status()
                content = response.text

        except httpx.TimeoutException as e:
            raise FetchError(f"RSS feed request timed out after {self.timeout} seconds") from e

        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"RSS feed returned error status {e.response.status_code}"
            ) from e

        except httpx.HTTPError as e:
            raise FetchError(f"Failed to connect to RSS feed: {e}") from e

        feed = parse_feed_content(content, feed_url)
        logger.debug("Fetched %s: %r with %d items", feed_url, feed.title, len(feed.items))
        return feed
