"""Core modules for podshelf."""

from podshelf.core.config import (
    Config,
    DatabaseConfig,
    FeedsConfig,
    LoggingConfig,
    ServerConfig,
    get_config,
    load_config,
)
from podshelf.core.errors import (
    CatalogUnavailable,
    ConfigError,
    DuplicateKeyError,
    FetchError,
    NotFoundError,
    PodshelfError,
    Unauthorized,
    ValidationError,
)
from podshelf.core.reconciler import reconcile, sort_episodes
from podshelf.core.titles import parse_podcast_title, parse_title

__all__ = [
    "CatalogUnavailable",
    "Config",
    "ConfigError",
    "DatabaseConfig",
    "DuplicateKeyError",
    "FeedsConfig",
    "FetchError",
    "LoggingConfig",
    "NotFoundError",
    "PodshelfError",
    "ServerConfig",
    "Unauthorized",
    "ValidationError",
    "get_config",
    "load_config",
    "parse_podcast_title",
    "parse_title",
    "reconcile",
    "sort_episodes",
]
