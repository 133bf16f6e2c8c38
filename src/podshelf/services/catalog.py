"""Missing-episode catalog: lookup, import and maintenance.

The catalog holds manually curated episodes that are absent from their
podcast's live feed. Lookups are deliberately permissive; false positives
are removed later by the reconciler's episode-number dedup.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from podshelf.core.errors import CatalogUnavailable, ValidationError
from podshelf.core.models import BatchReport, CatalogEntry
from podshelf.core.reconciler import parse_date
from podshelf.core.titles import base_name, parse_title
from podshelf.db.database import Database
from podshelf.db.models import MissingEpisode

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "url", "audio_url")
OPTIONAL_FIELDS = ("image_url", "description", "filename")

UNKNOWN_PODCAST = "Unknown"

_ORDERING = (MissingEpisode.episode_number.asc().nulls_first(), MissingEpisode.title.asc())


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_publish_date(value: Any) -> datetime | None:
    """Parse an import record's publish date; empty values mean no date."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    parsed = value if isinstance(value, datetime) else parse_date(str(value))
    if parsed is None:
        raise ValueError(f"Invalid publish_date: {value!r}")
    # Stored as UTC; SQLite drops the offset.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC)
    return parsed


class CatalogService:
    """Queries and maintains the missing-episode catalog."""

    def __init__(self, database: Database) -> None:
        self.database = database

    # Lookup

    def _select(self, statement) -> list[CatalogEntry]:
        try:
            with self.database.session() as session:
                return [row.to_entry() for row in session.scalars(statement)]
        except SQLAlchemyError as e:
            raise CatalogUnavailable(f"Catalog query failed: {e}") from e

    def find_candidates(self, podcast_name: str, base: str) -> list[CatalogEntry]:
        """
        Find catalog entries that may belong to a podcast.

        An entry matches when its podcast name contains ``podcast_name``, or
        its base podcast name contains ``base``, or its title contains
        ``base`` (all case-insensitive, literal substrings).

        Args:
            podcast_name: Derived podcast name
            base: Derived base (first token) podcast name

        Returns:
            Entries ordered by episode number, entries without a number first

        Raises:
            CatalogUnavailable: If the database cannot be queried
        """
        podcast_name = (podcast_name or "").strip()
        base = (base or "").strip()

        conditions = []
        if podcast_name:
            conditions.append(MissingEpisode.podcast_name.icontains(podcast_name, autoescape=True))
        if base:
            conditions.append(MissingEpisode.base_podcast_name.icontains(base, autoescape=True))
            conditions.append(MissingEpisode.title.icontains(base, autoescape=True))

        if not conditions:
            return []

        entries = self._select(select(MissingEpisode).where(or_(*conditions)).order_by(*_ORDERING))
        logger.debug("Found %d catalog candidates for %r / %r", len(entries), podcast_name, base)
        return entries

    def find_by_name(self, name: str, numbers: Iterable[int] | None = None) -> list[CatalogEntry]:
        """Entries whose podcast name contains ``name``, optionally limited to episode numbers."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Podcast name parameter is required")

        statement = select(MissingEpisode).where(
            MissingEpisode.podcast_name.icontains(name, autoescape=True)
        )
        if numbers is not None:
            statement = statement.where(MissingEpisode.episode_number.in_(list(numbers)))

        return self._select(statement.order_by(*_ORDERING))

    def list_grouped(self) -> dict[str, Any]:
        """All entries grouped by podcast name."""
        entries = self._select(
            select(MissingEpisode).order_by(
                MissingEpisode.podcast_name.asc().nulls_first(), *_ORDERING
            )
        )

        grouped: dict[str, list[dict[str, Any]]] = {}
        for entry in entries:
            grouped.setdefault(entry.podcast_name or UNKNOWN_PODCAST, []).append(
                {
                    "id": entry.id,
                    "title": entry.title,
                    "episodeNumber": entry.episode_number,
                    "publish_date": entry.publish_date.isoformat() if entry.publish_date else None,
                }
            )

        return {
            "totalCount": len(entries),
            "podcasts": len(grouped),
            "episodes": grouped,
        }

    # Import

    def _import_one(self, record: dict[str, Any]) -> bool:
        """Insert one raw record. Returns False when its title already exists."""
        title = _clean(record.get("title"))

        with self.database.session() as session:
            if title is not None:
                exists = session.scalar(
                    select(MissingEpisode.id).where(MissingEpisode.title == title)
                )
                if exists is not None:
                    return False

            missing = [name for name in REQUIRED_FIELDS if not _clean(record.get(name))]
            if missing:
                raise ValidationError(f"Missing required field(s): {', '.join(missing)}")

            parts = parse_title(title)
            session.add(
                MissingEpisode(
                    title=title,
                    url=_clean(record["url"]),
                    audio_url=_clean(record["audio_url"]),
                    publish_date=_parse_publish_date(record.get("publish_date")),
                    episode_number=parts.episode_number,
                    podcast_name=parts.podcast_name,
                    base_podcast_name=parts.base_podcast_name,
                    **{name: _clean(record.get(name)) for name in OPTIONAL_FIELDS},
                )
            )
            try:
                session.commit()
            except IntegrityError:
                # Another import inserted the same title first.
                session.rollback()
                logger.info("Catalog entry %r was inserted concurrently, skipping", title)
                return False

        return True

    def import_records(self, records: Iterable[Any]) -> BatchReport:
        """
        Import raw missing-episode records, skipping titles already present.

        Args:
            records: Dicts with title, url, audio_url and optional image_url,
                description, filename, publish_date

        Returns:
            BatchReport whose processed_count is the number of new entries
        """
        report = BatchReport(action="Imported")

        for record in records:
            report.total_count += 1
            if not isinstance(record, dict):
                report.add_error(None, "Record must be a JSON object")
                continue

            try:
                if self._import_one(record):
                    report.processed_count += 1
            except (ValidationError, ValueError, SQLAlchemyError) as e:
                logger.warning("Failed to import %r: %s", record.get("title"), e)
                report.add_error(_clean(record.get("title")), str(e))

        logger.info(report.message)
        return report

    def import_file(self, path: Path) -> BatchReport:
        """Import records from a JSON file holding an array of records."""
        if not path.exists():
            raise ValidationError(f"Episodes metadata file not found: {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in episodes file: {e}") from e

        if not isinstance(data, list):
            raise ValidationError(f"Episodes data is not an array, got {type(data).__name__}")

        logger.info("Reading episodes from %s", path)
        return self.import_records(data)

    # Maintenance

    def _update_all(self, action: str, update) -> BatchReport:
        """Apply ``update`` to every stored entry, committing changed ones individually."""
        report = BatchReport(action=action)

        try:
            with self.database.session() as session:
                rows = list(session.scalars(select(MissingEpisode).order_by(MissingEpisode.id)))
                report.total_count = len(rows)

                for row in rows:
                    title = row.title
                    try:
                        if update(row):
                            session.commit()
                            report.processed_count += 1
                    except SQLAlchemyError as e:
                        session.rollback()
                        logger.warning("Failed to update %r: %s", title, e)
                        report.add_error(title, str(e))
        except SQLAlchemyError as e:
            raise CatalogUnavailable(f"Catalog maintenance failed: {e}") from e

        logger.info(report.message)
        return report

    def rederive_fields(self) -> BatchReport:
        """
        Re-run title parsing over every entry.

        Updates episode_number, podcast_name and base_podcast_name wherever the
        title yields a value that differs from the stored one. Stored values
        are never replaced by None.
        """

        def update(row: MissingEpisode) -> bool:
            parts = parse_title(row.title)
            changed = False
            for attr in ("episode_number", "podcast_name", "base_podcast_name"):
                value = getattr(parts, attr)
                if value is not None and getattr(row, attr) != value:
                    setattr(row, attr, value)
                    changed = True
            return changed

        return self._update_all("Updated", update)

    def backfill_base_names(self) -> BatchReport:
        """Fill in missing base podcast names, and podcast names from titles."""

        def update(row: MissingEpisode) -> bool:
            changed = False
            if not row.base_podcast_name and row.podcast_name:
                row.base_podcast_name = base_name(row.podcast_name)
                changed = True

            if not row.podcast_name:
                parts = parse_title(row.title)
                if parts.podcast_name:
                    row.podcast_name = parts.podcast_name
                    row.base_podcast_name = parts.base_podcast_name
                    changed = True
            return changed

        return self._update_all("Updated", update)
