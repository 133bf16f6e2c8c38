"""Episode aggregation: live feed plus catalog missing episodes."""

from podshelf.core.models import EpisodeRecord, Feed
from podshelf.core.reconciler import reconcile
from podshelf.services.catalog import CatalogService
from podshelf.services.feeds import FeedService


class EpisodeService:
    """Serves a podcast's complete episode list."""

    def __init__(
        self,
        feed_service: FeedService,
        catalog_service: CatalogService | None = None,
    ) -> None:
        """
        Initialize the episode service.

        Args:
            feed_service: Fetcher for remote feeds
            catalog_service: Missing-episode catalog, or None for feed-only lists
        """
        self.feed_service = feed_service
        self.catalog_service = catalog_service

    def get_podcast(self, feed_url: str) -> Feed:
        """Fetch a feed as published, without catalog supplements."""
        return self.feed_service.fetch(feed_url)

    def get_episodes(self, feed_url: str) -> list[EpisodeRecord]:
        """
        Fetch a feed and merge in the catalog's missing episodes.

        Raises:
            ValidationError: If the URL is empty
            FetchError: If the feed cannot be fetched or parsed
        """
        feed = self.feed_service.fetch(feed_url)
        lookup = self.catalog_service.find_candidates if self.catalog_service else None
        return reconcile(feed.title, feed.items, feed.image_url, lookup)
