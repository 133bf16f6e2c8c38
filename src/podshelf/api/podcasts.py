"""Podcast feed routes."""

from flask import Blueprint, jsonify, request

from podshelf.api.context import services

bp = Blueprint("podcasts", __name__, url_prefix="/api/podcasts")


@bp.get("")
def get_podcast():
    """Return a feed's metadata and items as published."""
    feed = services().episodes.get_podcast(request.args.get("url", ""))
    return jsonify(feed.to_dict())


@bp.get("/episodes")
def get_episodes():
    """Return the feed's episodes merged with catalog missing episodes."""
    episodes = services().episodes.get_episodes(request.args.get("url", ""))
    return jsonify([episode.to_dict() for episode in episodes])
