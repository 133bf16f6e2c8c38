"""Custom exceptions for podshelf."""


class PodshelfError(Exception):
    """Base exception for all podshelf errors."""

    pass


class ConfigError(PodshelfError):
    """Configuration-related errors."""

    pass


class ValidationError(PodshelfError):
    """Missing or malformed caller input."""

    pass


class FetchError(PodshelfError):
    """Feed unreachable or unparseable."""

    pass


class CatalogUnavailable(PodshelfError):
    """The missing-episode catalog could not be queried."""

    pass


class DuplicateKeyError(PodshelfError):
    """A record with the same natural key already exists."""

    pass


class NotFoundError(PodshelfError):
    """Requested record does not exist."""

    pass


class Unauthorized(PodshelfError):
    """Missing or invalid credentials."""

    pass
