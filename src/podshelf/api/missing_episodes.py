"""Missing-episode catalog routes."""

from flask import Blueprint, jsonify, request

from podshelf.api.context import services
from podshelf.core.errors import ValidationError
from podshelf.core.titles import base_name

bp = Blueprint("missing_episodes", __name__, url_prefix="/api/missing-episodes")


def _required_name() -> str:
    name = request.args.get("name", "").strip()
    if not name:
        raise ValidationError("Podcast name parameter is required")
    return name


def _parse_numbers(raw: str | None) -> list[int] | None:
    if not raw:
        return None
    try:
        return [int(part.strip()) for part in raw.split(",") if part.strip()]
    except ValueError as e:
        raise ValidationError(f"Episode numbers must be integers: {raw}") from e


@bp.post("/import")
def import_episodes():
    """Import a JSON array of missing-episode records."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, list):
        raise ValidationError("Request body must be a JSON array of episodes")

    report = services().catalog.import_records(payload)
    body = report.to_dict()
    body["importedCount"] = report.processed_count
    return jsonify(body)


@bp.get("")
def find_by_name():
    """Entries whose podcast name matches, optionally limited to episode numbers."""
    numbers = _parse_numbers(request.args.get("numbers"))
    entries = services().catalog.find_by_name(_required_name(), numbers)
    return jsonify([entry.to_dict() for entry in entries])


@bp.get("/all")
def find_all():
    """Every entry that loosely matches the podcast name or its first word."""
    name = _required_name()
    entries = services().catalog.find_candidates(name, base_name(name) or name)
    return jsonify([entry.to_dict() for entry in entries])


@bp.get("/debug/list-all")
def list_all():
    return jsonify(services().catalog.list_grouped())


@bp.post("/update-episode-numbers")
def update_episode_numbers():
    """Re-derive episode numbers and podcast names from stored titles."""
    return jsonify(services().catalog.rederive_fields().to_dict())


@bp.post("/update-base-names")
def update_base_names():
    return jsonify(services().catalog.backfill_base_names().to_dict())
