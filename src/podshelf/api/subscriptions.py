"""Subscription routes; every route requires a bearer token."""

from flask import Blueprint, g, jsonify, request

from podshelf.api.context import require_user, services
from podshelf.core.errors import NotFoundError

bp = Blueprint("subscriptions", __name__, url_prefix="/api/subscriptions")


@bp.get("")
@require_user
def list_subscriptions():
    return jsonify(services().subscriptions.list_for_user(g.user_id))


@bp.post("")
@require_user
def subscribe():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    subscription = services().subscriptions.subscribe(
        g.user_id,
        url=payload.get("url"),
        title=payload.get("title"),
        author=payload.get("author"),
        description=payload.get("description"),
        image_url=payload.get("imageUrl"),
    )
    return jsonify(subscription), 201


@bp.delete("/<int:subscription_id>")
@require_user
def unsubscribe(subscription_id: int):
    if not services().subscriptions.unsubscribe(subscription_id, g.user_id):
        raise NotFoundError("Subscription not found")
    return "", 204
