"""
SQLAlchemy ORM models for podshelf.

Models:
    MissingEpisode: Curated episode that is absent from its podcast's live feed
    Subscription: A user's subscription to a podcast feed
    User: Account owning subscriptions, identified by an API token
"""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from podshelf.core.models import CatalogEntry

Base = declarative_base()


class MissingEpisode(Base):
    """
    Manually curated episode missing from a live feed.

    ``title`` is the natural key: importing a title that already exists is a
    no-op. ``episode_number``, ``podcast_name`` and ``base_podcast_name`` are
    derived from the title by the title parser and kept in sync by the
    catalog maintenance passes.
    """

    __tablename__ = "missing_episodes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(500), nullable=False, unique=True)
    url = Column(String(2048), nullable=False)
    audio_url = Column(String(2048), nullable=False)
    image_url = Column(String(2048), nullable=True)
    description = Column(Text, nullable=True)
    filename = Column(String(500), nullable=True)
    publish_date = Column(DateTime(timezone=True), nullable=True)
    episode_number = Column(Integer, nullable=True, index=True)
    podcast_name = Column(String(255), nullable=True, index=True)
    base_podcast_name = Column(String(255), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    def to_entry(self) -> CatalogEntry:
        """Detach the row into a plain catalog entry."""
        return CatalogEntry(
            id=self.id,
            title=self.title,
            url=self.url,
            audio_url=self.audio_url,
            image_url=self.image_url,
            description=self.description,
            filename=self.filename,
            publish_date=self.publish_date,
            episode_number=self.episode_number,
            podcast_name=self.podcast_name,
            base_podcast_name=self.base_podcast_name,
        )

    def __repr__(self):
        return f"<MissingEpisode(id={self.id}, title='{self.title}', episode_number={self.episode_number})>"


class User(Base):
    """Account whose API token authenticates subscription requests."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    api_token = Column(String(128), nullable=False, unique=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"


class Subscription(Base):
    """A user's subscription to a podcast feed, unique per (user, url)."""

    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    url = Column(String(2048), nullable=False)
    title = Column(String(500), nullable=False)
    author = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    image_url = Column(String(2048), nullable=True)
    added_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (UniqueConstraint("user_id", "url", name="uq_subscription_user_url"),)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "url": self.url,
            "title": self.title,
            "author": self.author,
            "description": self.description,
            "imageUrl": self.image_url,
            "addedAt": self.added_at.isoformat() if self.added_at else None,
        }

    def __repr__(self):
        return f"<Subscription(id={self.id}, user_id={self.user_id}, url='{self.url}')>"
