"""Pytest fixtures for podshelf tests."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from podshelf.core.config import Config, DatabaseConfig, LoggingConfig, ServerConfig
from podshelf.core.models import CatalogEntry, FeedItem
from podshelf.db.database import Database
from podshelf.services.catalog import CatalogService


@pytest.fixture
def database(tmp_path: Path) -> Database:
    """Create an initialized SQLite database in a temporary directory."""
    db = Database(f"sqlite:///{tmp_path / 'podshelf.db'}")
    db.init()
    yield db
    db.dispose()


@pytest.fixture
def catalog(database: Database) -> CatalogService:
    return CatalogService(database)


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Create a configuration pointing at temporary paths."""
    return Config(
        server=ServerConfig(allowed_origin="https://app.example.com"),
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'podshelf.db'}"),
        logging=LoggingConfig(file=str(tmp_path / "logs" / "podshelf.log")),
    )


@pytest.fixture
def sample_feed_items() -> list[FeedItem]:
    """Feed items for episodes 30 and 31 plus an unnumbered bonus."""
    return [
        FeedItem(
            title="99Vidas 31 - Sonic | 99Vidas Podcast",
            link="https://example.com/31",
            audio_url="https://example.com/31.mp3",
            iso_date="2024-03-20T10:00:00+00:00",
            pub_date="Wed, 20 Mar 2024 10:00:00 GMT",
        ),
        FeedItem(
            title="99Vidas 30 - Mega Man",
            link="https://example.com/30",
            audio_url="https://example.com/30.mp3",
            image_url="https://example.com/30.jpg",
            iso_date="2024-03-13T10:00:00+00:00",
            pub_date="Wed, 13 Mar 2024 10:00:00 GMT",
        ),
        FeedItem(
            title="Bonus: Listener mail",
            audio_url="https://example.com/bonus.mp3",
        ),
    ]


@pytest.fixture
def sample_catalog_entries() -> list[CatalogEntry]:
    """Catalog entries: 30 duplicates the feed, 21 and 22 are missing from it."""
    return [
        CatalogEntry(
            id=1,
            title="99Vidas 21 - Alex Kidd e seus jogos | 99Vidas Podcast",
            url="https://archive.example.com/21",
            audio_url="https://archive.example.com/21.mp3",
            publish_date=datetime(2020, 5, 1, tzinfo=UTC),
            episode_number=21,
            podcast_name="99Vidas",
            base_podcast_name="99Vidas",
        ),
        CatalogEntry(
            id=2,
            title="99Vidas 22 - Street Fighter",
            url="https://archive.example.com/22",
            audio_url="https://archive.example.com/22.mp3",
            image_url="https://archive.example.com/22.jpg",
            publish_date=datetime(2020, 5, 8, tzinfo=UTC),
            episode_number=22,
            podcast_name="99Vidas",
            base_podcast_name="99Vidas",
        ),
        CatalogEntry(
            id=3,
            title="99Vidas 30 - Mega Man (archived)",
            url="https://archive.example.com/30",
            audio_url="https://archive.example.com/30.mp3",
            publish_date=datetime(2024, 3, 13, tzinfo=UTC),
            episode_number=30,
            podcast_name="99Vidas",
            base_podcast_name="99Vidas",
        ),
    ]


@pytest.fixture
def import_records() -> list[dict]:
    """Raw records as found in an episodes metadata file."""
    return [
        {
            "title": "99Vidas 21 - Alex Kidd e seus jogos | 99Vidas Podcast",
            "url": "https://archive.example.com/21",
            "audio_url": "https://archive.example.com/21.mp3",
            "image_url": "https://archive.example.com/21.jpg",
            "description": "Alex Kidd",
            "publish_date": "2020-05-01T12:00:00Z",
        },
        {
            "title": "99Vidas 22 - Street Fighter",
            "url": "https://archive.example.com/22",
            "audio_url": "https://archive.example.com/22.mp3",
            "publish_date": "Fri, 08 May 2020 12:00:00 +0000",
        },
        {
            "title": "Jogabilidade 5 - Zelda",
            "url": "https://archive.example.com/j5",
            "audio_url": "https://archive.example.com/j5.mp3",
        },
    ]


@pytest.fixture
def sample_rss_feed() -> str:
    """RSS feed for a podcast whose catalog has older missing episodes."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <title>99Vidas</title>
    <link>https://example.com</link>
    <description>Games podcast</description>
    <itunes:author>99Vidas</itunes:author>
    <itunes:image href="https://example.com/cover.jpg"/>
    <item>
      <title>99Vidas 31 - Sonic</title>
      <link>https://example.com/31</link>
      <pubDate>Wed, 20 Mar 2024 10:00:00 GMT</pubDate>
      <enclosure url="https://example.com/31.mp3" type="audio/mpeg" length="1000000"/>
      <itunes:duration>1:02:03</itunes:duration>
      <itunes:episode>9999</itunes:episode>
      <itunes:explicit>no</itunes:explicit>
    </item>
    <item>
      <title>99Vidas 30 - Mega Man</title>
      <link>https://example.com/30</link>
      <pubDate>Wed, 13 Mar 2024 10:00:00 GMT</pubDate>
      <enclosure url="https://example.com/30.mp3" type="audio/mpeg" length="1000000"/>
      <itunes:image href="https://example.com/30.jpg"/>
    </item>
  </channel>
</rss>"""
