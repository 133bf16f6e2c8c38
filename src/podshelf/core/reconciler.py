"""Merging of live feed episodes with catalog missing episodes.

The live feed is authoritative: a catalog entry is only added when its
episode number is not already present in the feed. Episode numbers on both
sides come from the same title rule, so they can be compared directly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

from podshelf.core.errors import CatalogUnavailable
from podshelf.core.models import (
    CatalogEntry,
    EpisodeRecord,
    EpisodeSource,
    FeedItem,
)
from podshelf.core.titles import parse_podcast_title, parse_title

logger = logging.getLogger(__name__)

CatalogLookup = Callable[[str, str], Sequence[CatalogEntry]]

# Sort tiers: dated records first, then records with unreadable date text,
# then records with no date at all.
_DATED, _UNREADABLE_DATE, _UNDATED = 0, 1, 2


def parse_date(value: str | None) -> datetime | None:
    """Parse an ISO-8601 or RFC 822 date string into an aware datetime.

    Returns None when the value is empty or cannot be parsed.
    """
    if not value or not value.strip():
        return None

    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _as_aware(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def episode_from_feed_item(
    item: FeedItem,
    podcast_title: str,
    feed_image: str | None,
) -> EpisodeRecord:
    """Build a feed-sourced record, deriving the episode number from the title."""
    date_text = item.iso_date or item.pub_date
    image_url = item.image_url or feed_image

    return EpisodeRecord(
        title=item.title,
        link=item.link,
        audio_url=item.audio_url,
        description=item.content or item.summary,
        image_url=image_url,
        publish_date=parse_date(date_text),
        date_text=date_text,
        episode_number=parse_title(item.title).episode_number,
        podcast_title=podcast_title,
        podcast_image=image_url,
        source=EpisodeSource.FEED,
        duration=item.duration,
        explicit=item.explicit,
        episode_type=item.episode_type,
        season=item.season,
    )


def episode_from_catalog_entry(
    entry: CatalogEntry,
    podcast_title: str,
    feed_image: str | None,
) -> EpisodeRecord:
    """Build a catalog-sourced record in the same shape as feed records."""
    publish_date = _as_aware(entry.publish_date)

    return EpisodeRecord(
        title=entry.title,
        link=entry.url,
        audio_url=entry.audio_url,
        description=entry.description,
        image_url=entry.image_url or feed_image,
        publish_date=publish_date,
        date_text=publish_date.isoformat() if publish_date else None,
        episode_number=entry.episode_number,
        podcast_title=podcast_title,
        podcast_image=feed_image,
        source=EpisodeSource.CATALOG,
    )


def _sort_key(record: EpisodeRecord) -> tuple[int, float]:
    if record.publish_date is not None:
        # Negated timestamp gives newest-first within an ascending sort.
        return _DATED, -record.publish_date.timestamp()
    if record.date_text:
        return _UNREADABLE_DATE, 0.0
    return _UNDATED, 0.0


def sort_episodes(records: Iterable[EpisodeRecord]) -> list[EpisodeRecord]:
    """Sort newest first; undated records keep their relative order at the end."""
    return sorted(records, key=_sort_key)


def missing_from_feed(
    entries: Iterable[CatalogEntry],
    feed_numbers: set[int],
) -> list[CatalogEntry]:
    """Catalog entries whose episode number the feed does not already carry."""
    return [entry for entry in entries if entry.episode_number not in feed_numbers]


def reconcile(
    feed_title: str,
    feed_items: Sequence[FeedItem],
    feed_image: str | None,
    catalog_lookup: CatalogLookup | None,
) -> list[EpisodeRecord]:
    """
    Merge a feed's episodes with the catalog's missing episodes.

    Args:
        feed_title: Title of the podcast feed
        feed_items: Parsed feed items
        feed_image: Podcast-level artwork URL
        catalog_lookup: Callable taking (podcast_name, base_name) and returning
            catalog entries, or None to skip the catalog entirely

    Returns:
        Feed and catalog episodes, newest first. When the catalog cannot be
        reached the feed episodes alone are returned.
    """
    records = [episode_from_feed_item(item, feed_title, feed_image) for item in feed_items]
    feed_numbers = {r.episode_number for r in records if r.episode_number is not None}

    identity = parse_podcast_title(feed_title)
    if catalog_lookup is None or not identity.base_podcast_name:
        return sort_episodes(records)

    try:
        candidates = catalog_lookup(identity.podcast_name or "", identity.base_podcast_name)
    except CatalogUnavailable as e:
        logger.warning("Catalog unavailable for %r, returning feed episodes only: %s", feed_title, e)
        return sort_episodes(records)

    missing = missing_from_feed(candidates, feed_numbers)
    logger.info(
        "Feed %r: %d feed episodes, %d catalog candidates, %d added",
        feed_title,
        len(records),
        len(candidates),
        len(missing),
    )

    records.extend(episode_from_catalog_entry(entry, feed_title, feed_image) for entry in missing)
    return sort_episodes(records)
