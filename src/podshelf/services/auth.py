"""Bearer-token authentication."""

import secrets

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from podshelf.core.errors import DuplicateKeyError, Unauthorized, ValidationError
from podshelf.db.database import Database
from podshelf.db.models import User

BEARER_PREFIX = "Bearer "


class Authenticator:
    """Resolves request credentials to a user id."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def authenticate(self, authorization: str | None) -> int:
        """
        Resolve an Authorization header value to a user id.

        Raises:
            Unauthorized: If the header is missing, malformed or the token is unknown
        """
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            raise Unauthorized("Authentication required")

        token = authorization[len(BEARER_PREFIX) :].strip()
        if not token:
            raise Unauthorized("Authentication required")

        with self.database.session() as session:
            user_id = session.scalar(select(User.id).where(User.api_token == token))

        if user_id is None:
            raise Unauthorized("Invalid token")
        return user_id

    def create_user(self, username: str, email: str) -> tuple[int, str]:
        """
        Create a user and issue its API token.

        Returns:
            (user id, token)

        Raises:
            ValidationError: If username or email is blank
            DuplicateKeyError: If the username or email is taken
        """
        username = (username or "").strip()
        email = (email or "").strip()
        if not username or not email:
            raise ValidationError("Username and email are required")

        token = secrets.token_urlsafe(32)
        with self.database.session() as session:
            user = User(username=username, email=email, api_token=token)
            session.add(user)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateKeyError("Username or email already registered") from e
            return user.id, token
