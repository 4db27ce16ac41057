"""Repository for athlete data access.

Provides the coach roster, single-athlete lookup and explicit profile edits.
Athletes are never deleted in-flow.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from loguru import logger

from speedform.athletes.models import PROFILE_FIELDS, Athlete, slugify
from speedform.storage.base import ATHLETES, Storage


class AthleteNotFound(LookupError):
    """Raised when no athlete row matches an id."""


class AthleteRepository:
    """Repository for athlete data access."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    def list_roster(self) -> list[Athlete]:
        """Return every athlete, ordered by name."""
        rows = self._storage.query(ATHLETES, order="name.asc")
        return [Athlete.model_validate(row) for row in rows]

    def get(self, athlete_id: int | str) -> Athlete:
        rows = self._storage.query(ATHLETES, {"id": athlete_id})
        if not rows:
            raise AthleteNotFound(f"Athlete {athlete_id} not found")
        return Athlete.model_validate(rows[0])

    def create(self, athlete: Athlete) -> Athlete:
        """Insert a new athlete at onboarding.

        A slug is derived from the name when none is given.
        """
        if not athlete.slug:
            athlete = athlete.model_copy(update={"slug": slugify(athlete.name)})
        row = self._storage.insert(ATHLETES, athlete.to_row())
        created = Athlete.model_validate(row)
        logger.info(f"Onboarded athlete {created.name} (id={created.id})")
        return created

    def update_profile(self, athlete_id: int | str, **fields: Any) -> Athlete:
        """Apply an explicit profile edit.

        Raises:
            ValueError: If a field is not part of the editable profile
        """
        unknown = sorted(set(fields) - PROFILE_FIELDS)
        if unknown:
            raise ValueError(f"Not editable profile fields: {', '.join(unknown)}")
        current = self.get(athlete_id)
        updated = Athlete.model_validate({**current.model_dump(), **fields})
        changes = {name: getattr(updated, name) for name in fields}
        row = self._storage.patch(ATHLETES, athlete_id, changes)
        logger.info(f"Updated profile of athlete {athlete_id}: {sorted(changes)}")
        return Athlete.model_validate(row)

    def set_public(self, athlete_id: int | str, is_public: bool) -> Athlete:
        """Publish or unpublish an athlete's dashboard."""
        published_at = datetime.now(UTC).isoformat() if is_public else None
        row = self._storage.patch(
            ATHLETES,
            athlete_id,
            {"is_public": is_public, "published_at": published_at},
        )
        logger.info(f"Athlete {athlete_id} is_public={is_public}")
        return Athlete.model_validate(row)
