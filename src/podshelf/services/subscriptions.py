"""Per-user podcast subscriptions."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from podshelf.core.errors import DuplicateKeyError, ValidationError
from podshelf.db.database import Database
from podshelf.db.models import Subscription

logger = logging.getLogger(__name__)


class SubscriptionService:
    """CRUD over a user's subscriptions."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def list_for_user(self, user_id: int) -> list[dict[str, Any]]:
        """Return the user's subscriptions, oldest first."""
        with self.database.session() as session:
            rows = session.scalars(
                select(Subscription)
                .where(Subscription.user_id == user_id)
                .order_by(Subscription.added_at, Subscription.id)
            )
            return [row.to_dict() for row in rows]

    def subscribe(
        self,
        user_id: int,
        url: str | None,
        title: str | None,
        author: str | None = None,
        description: str | None = None,
        image_url: str | None = None,
    ) -> dict[str, Any]:
        """
        Subscribe a user to a feed.

        Raises:
            ValidationError: If url or title is missing
            DuplicateKeyError: If the user is already subscribed to the url
        """
        url = (url or "").strip()
        title = (title or "").strip()
        if not url or not title:
            raise ValidationError("URL and title are required")

        with self.database.session() as session:
            existing = session.scalar(
                select(Subscription.id).where(
                    Subscription.user_id == user_id, Subscription.url == url
                )
            )
            if existing is not None:
                raise DuplicateKeyError("Already subscribed to this feed")

            subscription = Subscription(
                user_id=user_id,
                url=url,
                title=title,
                author=author,
                description=description,
                image_url=image_url,
                added_at=datetime.now(UTC),
            )
            session.add(subscription)
            try:
                session.commit()
            except IntegrityError as e:
                # The unique (user_id, url) constraint caught a concurrent subscribe.
                session.rollback()
                raise DuplicateKeyError("Already subscribed to this feed") from e

            logger.info("User %s subscribed to %s", user_id, url)
            return subscription.to_dict()

    def unsubscribe(self, subscription_id: int, user_id: int) -> bool:
        """Delete one of the user's subscriptions. Returns False if it was not found."""
        with self.database.session() as session:
            result = session.execute(
                delete(Subscription).where(
                    Subscription.id == subscription_id, Subscription.user_id == user_id
                )
            )
            session.commit()

        deleted = result.rowcount > 0
        if deleted:
            logger.info("User %s removed subscription %s", user_id, subscription_id)
        return deleted
