"""Database package for podshelf."""

from podshelf.db.database import Database, create_db_engine
from podshelf.db.models import Base, MissingEpisode, Subscription, User

__all__ = ["Base", "Database", "MissingEpisode", "Subscription", "User", "create_db_engine"]
