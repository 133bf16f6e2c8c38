"""Request helpers shared by the API blueprints."""

from functools import wraps

from flask import current_app, g, request

from podshelf.api import EXTENSION_KEY, Services


def services() -> Services:
    """Return the services of the current application."""
    return current_app.extensions[EXTENSION_KEY]


def require_user(func):
    """Authenticate the request and expose the user id as ``g.user_id``."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        g.user_id = services().authenticator.authenticate(request.headers.get("Authorization"))
        return func(*args, **kwargs)

    return wrapper
