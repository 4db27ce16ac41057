"""Application state for one interactive session.

A single serializable value owned by AppController. The week list is held
as a WeekCollection and travels as its athlete id plus plain rows when
dumped to JSON, so an empty collection survives a round trip.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, PlainValidator

from speedform.athletes.models import Athlete
from speedform.users.models import User
from speedform.weeks.collection import WeekCollection
from speedform.weeks.models import WeekRecord


class View(StrEnum):
    LOGIN = "login"
    COACH_DASHBOARD = "coach_dashboard"
    ATHLETE_PORTAL = "athlete_portal"
    ATHLETE_DETAIL = "athlete_detail"


def _to_collection(value: Any) -> WeekCollection | None:
    if value is None or isinstance(value, WeekCollection):
        return value
    if not isinstance(value, dict) or "athlete_id" not in value:
        raise ValueError("weeks must be an object with athlete_id and weeks")
    rows = value.get("weeks") or []
    weeks = [w if isinstance(w, WeekRecord) else WeekRecord.model_validate(w) for w in rows]
    return WeekCollection(value["athlete_id"], weeks)


def _from_collection(value: WeekCollection | None) -> dict[str, Any] | None:
    # An empty collection still names its athlete.
    if value is None:
        return None
    return {"athlete_id": value.athlete_id, "weeks": value.to_rows()}


WeekCollectionField = Annotated[
    WeekCollection | None,
    PlainValidator(_to_collection),
    PlainSerializer(_from_collection, return_type=Any),
]


class AppState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    view: View = View.LOGIN
    current_user: User | None = None
    athletes: list[Athlete] = Field(default_factory=list)
    selected_athlete: Athlete | None = None
    weeks: WeekCollectionField = None

    def require_weeks(self) -> WeekCollection:
        if self.weeks is None:
            raise RuntimeError("No athlete weeks are loaded")
        return self.weeks
