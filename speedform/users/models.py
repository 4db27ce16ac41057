from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Role(StrEnum):
    COACH = "coach"
    ATHLETE = "athlete"


class User(BaseModel):
    """A login credential, optionally linked to one athlete."""

    model_config = ConfigDict(extra="ignore")

    id: int | str | None = None
    email: str
    role: Role = Role.ATHLETE
    athlete_id: int | str | None = None
    # Never serialized back out of the sign-in service.
    password_hash: str | None = Field(default=None, exclude=True, repr=False)

    @property
    def is_coach(self) -> bool:
        return self.role == Role.COACH
