"""Data models for podshelf."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class EpisodeSource(str, Enum):
    """Where a reconciled episode came from."""

    FEED = "feed"
    CATALOG = "catalog"


@dataclass(frozen=True)
class TitleParts:
    """Identity derived from a free-text title."""

    podcast_name: str | None = None
    base_podcast_name: str | None = None
    episode_number: int | None = None


@dataclass
class FeedItem:
    """A single item of a parsed RSS/Atom feed."""

    title: str
    link: str | None = None
    audio_url: str | None = None
    content: str | None = None
    summary: str | None = None
    iso_date: str | None = None  # normalized from the parsed publish date
    pub_date: str | None = None  # raw text as found in the feed
    image_url: str | None = None
    duration: str | None = None
    explicit: str | None = None
    episode_type: str | None = None
    season: str | None = None
    itunes_episode: str | None = None  # untrusted, never used for matching


@dataclass
class Feed:
    """A parsed podcast feed."""

    url: str
    title: str
    description: str | None = None
    author: str | None = None
    link: str | None = None
    image_url: str | None = None  # channel <image> or <itunes:image>
    items: list[FeedItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "author": self.author,
            "link": self.link,
            "imageUrl": self.image_url,
            "items": [
                {
                    "title": item.title,
                    "link": item.link,
                    "audioUrl": item.audio_url,
                    "content": item.content,
                    "summary": item.summary,
                    "isoDate": item.iso_date,
                    "pubDate": item.pub_date,
                    "imageUrl": item.image_url,
                    "duration": item.duration,
                    "explicit": item.explicit,
                    "episodeType": item.episode_type,
                    "season": item.season,
                }
                for item in self.items
            ],
        }


@dataclass(frozen=True)
class CatalogEntry:
    """Snapshot of a stored missing episode."""

    title: str
    url: str
    audio_url: str
    id: int | None = None
    image_url: str | None = None
    description: str | None = None
    filename: str | None = None
    publish_date: datetime | None = None
    episode_number: int | None = None
    podcast_name: str | None = None
    base_podcast_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "audio_url": self.audio_url,
            "image_url": self.image_url,
            "description": self.description,
            "filename": self.filename,
            "publish_date": self.publish_date.isoformat() if self.publish_date else None,
            "episodeNumber": self.episode_number,
            "podcastName": self.podcast_name,
            "basePodcastName": self.base_podcast_name,
        }


@dataclass
class EpisodeRecord:
    """A normalized episode in a reconciled list."""

    title: str
    link: str | None
    audio_url: str | None
    description: str | None
    image_url: str | None
    publish_date: datetime | None
    date_text: str | None
    episode_number: int | None
    podcast_title: str
    podcast_image: str | None
    source: EpisodeSource
    duration: str | None = None
    explicit: str | None = None
    episode_type: str | None = None
    season: str | None = None

    @property
    def from_catalog(self) -> bool:
        return self.source is EpisodeSource.CATALOG

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON shape served by the API."""
        if self.publish_date is not None:
            publish_date = self.publish_date.isoformat()
        else:
            publish_date = self.date_text

        return {
            "title": self.title,
            "link": self.link,
            "audioUrl": self.audio_url,
            "description": self.description,
            "imageUrl": self.image_url,
            "publishDate": publish_date,
            "episodeNumber": self.episode_number,
            "podcastTitle": self.podcast_title,
            "podcastImage": self.podcast_image,
            "source": self.source.value,
            "isMissingEpisode": self.from_catalog,
            "duration": self.duration,
            "explicit": self.explicit,
            "episodeType": self.episode_type,
            "season": self.season,
        }


@dataclass
class BatchReport:
    """Partial-success summary of a batch operation over catalog entries."""

    action: str
    total_count: int = 0
    processed_count: int = 0
    errors: list[dict[str, str | None]] = field(default_factory=list)
    # Per-entry failures are listed in errors and do not clear this flag.
    success: bool = True

    @property
    def message(self) -> str:
        return f"{self.action} {self.processed_count} episodes out of {self.total_count} total"

    def add_error(self, title: str | None, error: str) -> None:
        self.errors.append({"title": title, "error": error})

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "processedCount": self.processed_count,
            "totalCount": self.total_count,
            "errors": self.errors,
        }
