"""Tests for RSS feed fetching and parsing."""

import time

import httpx
import pytest
import respx

from podshelf.core.errors import FetchError, ValidationError
from podshelf.services.feeds import (
    FeedService,
    _extract_audio_url,
    _to_iso_date,
    parse_feed_content,
)

FEED_URL = "https://example.com/99vidas.xml"

EMPTY_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Quiet Podcast</title>
  </channel>
</rss>"""


class TestParseFeedContent:
    """Tests for mapping feed documents to Feed objects."""

    def test_channel_fields(self, sample_rss_feed):
        feed = parse_feed_content(sample_rss_feed, FEED_URL)

        assert feed.url == FEED_URL
        assert feed.title == "99Vidas"
        assert feed.description == "Games podcast"
        assert feed.author == "99Vidas"
        assert feed.link == "https://example.com"
        assert feed.image_url == "https://example.com/cover.jpg"
        assert len(feed.items) == 2

    def test_item_fields(self, sample_rss_feed):
        item = parse_feed_content(sample_rss_feed, FEED_URL).items[0]

        assert item.title == "99Vidas 31 - Sonic"
        assert item.link == "https://example.com/31"
        assert item.audio_url == "https://example.com/31.mp3"
        assert item.iso_date == "2024-03-20T10:00:00+00:00"
        assert item.pub_date == "Wed, 20 Mar 2024 10:00:00 GMT"
        assert item.duration == "1:02:03"
        assert item.image_url is None

    def test_item_image(self, sample_rss_feed):
        item = parse_feed_content(sample_rss_feed, FEED_URL).items[1]

        assert item.image_url == "https://example.com/30.jpg"

    def test_feed_without_items(self):
        feed = parse_feed_content(EMPTY_FEED)

        assert feed.title == "Quiet Podcast"
        assert feed.items == []
        assert feed.image_url is None

    def test_to_dict_uses_camel_case(self, sample_rss_feed):
        data = parse_feed_content(sample_rss_feed, FEED_URL).to_dict()

        assert data["imageUrl"] == "https://example.com/cover.jpg"
        assert data["items"][0]["audioUrl"] == "https://example.com/31.mp3"
        assert data["items"][0]["isoDate"] == "2024-03-20T10:00:00+00:00"


class TestHelpers:
    """Tests for feed parsing helpers."""

    def test_to_iso_date(self):
        parsed = time.strptime("2024-03-20 10:00:00", "%Y-%m-%d %H:%M:%S")

        assert _to_iso_date(parsed) == "2024-03-20T10:00:00+00:00"

    def test_to_iso_date_none(self):
        assert _to_iso_date(None) is None

    def test_audio_enclosure_preferred(self):
        entry = {
            "enclosures": [
                {"href": "https://example.com/cover.jpg", "type": "image/jpeg"},
                {"href": "https://example.com/ep.mp3", "type": "audio/mpeg"},
            ]
        }

        assert _extract_audio_url(entry) == "https://example.com/ep.mp3"

    def test_any_enclosure_as_fallback(self):
        entry = {"enclosures": [{"href": "https://example.com/ep.bin", "type": ""}]}

        assert _extract_audio_url(entry) == "https://example.com/ep.bin"

    def test_no_enclosures(self):
        assert _extract_audio_url({}) is None


class TestFeedService:
    """Tests for fetching feeds over HTTP."""

    @respx.mock
    def test_fetch(self, sample_rss_feed):
        respx.get(FEED_URL).mock(return_value=httpx.Response(200, text=sample_rss_feed))

        feed = FeedService().fetch(FEED_URL)

        assert feed.title == "99Vidas"
        assert len(feed.items) == 2

    @respx.mock
    def test_fetch_strips_url(self, sample_rss_feed):
        route = respx.get(FEED_URL).mock(return_value=httpx.Response(200, text=sample_rss_feed))

        FeedService().fetch(f"  {FEED_URL}  ")

        assert route.called

    @pytest.mark.parametrize("url", ["", "   "])
    def test_blank_url(self, url):
        with pytest.raises(ValidationError, match="URL parameter is required"):
            FeedService().fetch(url)

    @respx.mock
    def test_http_error_status(self):
        respx.get(FEED_URL).mock(return_value=httpx.Response(404))

        with pytest.raises(FetchError, match="404"):
            FeedService().fetch(FEED_URL)

    @respx.mock
    def test_connection_error(self):
        respx.get(FEED_URL).mock(side_effect=httpx.ConnectError("Connection refused"))

        with pytest.raises(FetchError, match="Failed to connect"):
            FeedService().fetch(FEED_URL)

    @respx.mock
    def test_timeout(self):
        respx.get(FEED_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(FetchError, match="timed out after 5.0 seconds"):
            FeedService(timeout=5.0).fetch(FEED_URL)
