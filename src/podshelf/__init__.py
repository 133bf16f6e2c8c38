"""podshelf - podcast subscriptions with curated missing episodes."""

__version__ = "0.1.0"
