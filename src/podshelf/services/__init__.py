"""Service modules for podshelf."""

from podshelf.services.auth import Authenticator
from podshelf.services.catalog import CatalogService
from podshelf.services.episodes import EpisodeService
from podshelf.services.feeds import FeedService, parse_feed_content
from podshelf.services.subscriptions import SubscriptionService

__all__ = [
    "Authenticator",
    "CatalogService",
    "EpisodeService",
    "FeedService",
    "SubscriptionService",
    "parse_feed_content",
]
