"""Root conftest for all tests.

Shared fixtures: an in-memory store, a fixed clock, and coach/athlete users.
"""

from datetime import UTC, date, datetime

import pytest
from loguru import logger

from speedform.core.password import hash_password
from speedform.storage.base import ATHLETES, USERS
from speedform.storage.memory import InMemoryStorage
from speedform.users.models import Role, User
from speedform.weeks.collection import WeekCollection
from speedform.weeks.lifecycle import WeekLifecycleManager
from speedform.weeks.models import WeekRecord, WeekStatus

ATHLETE_ID = 1


@pytest.fixture
def today() -> date:
    """Today's date for testing."""
    return date(2026, 10, 14)  # Wednesday


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 10, 17, 18, 30, tzinfo=UTC)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def manager(storage, today, now) -> WeekLifecycleManager:
    return WeekLifecycleManager(storage, today=lambda: today, now=lambda: now)


@pytest.fixture
def coach() -> User:
    return User(id=100, email="coach@example.com", role=Role.COACH)


@pytest.fixture
def athlete_user() -> User:
    return User(id=200, email="runner@example.com", role=Role.ATHLETE, athlete_id=ATHLETE_ID)


@pytest.fixture
def empty_weeks() -> WeekCollection:
    return WeekCollection(ATHLETE_ID)


def make_week(sequence: int, status: WeekStatus = WeekStatus.COMPLETED, **fields) -> WeekRecord:
    """Build a week for athlete 1 with id = 10 * sequence."""
    return WeekRecord(
        id=10 * sequence,
        athlete_id=ATHLETE_ID,
        sequence=sequence,
        status=status,
        **fields,
    )


def seed_weeks(storage: InMemoryStorage, weeks: list[WeekRecord]) -> WeekCollection:
    """Persist weeks and return them as a loaded collection."""
    for week in weeks:
        storage.insert("weekly_data", week.to_row())
    return WeekCollection(ATHLETE_ID, weeks)


@pytest.fixture
def week_factory():
    return make_week


@pytest.fixture
def seed(storage):
    """Seed the shared in-memory store: seed([week, ...]) -> WeekCollection."""
    return lambda weeks: seed_weeks(storage, weeks)


@pytest.fixture(scope="session")
def password_hash() -> str:
    return hash_password("s3cret-pass")


@pytest.fixture
def seeded_storage(password_hash) -> InMemoryStorage:
    """Store with one coach, two athletes and one athlete login."""
    return InMemoryStorage(
        {
            ATHLETES: [
                {
                    "id": 1,
                    "name": "Maya Lopez",
                    "slug": "maya-lopez",
                    "baseline_vo2": 48.0,
                    "current_vo2": 50.0,
                    "target_vo2": 58.0,
                    "hrv_low": 55.0,
                    "hrv_high": 75.0,
                    "is_public": False,
                },
                {"id": 2, "name": "Ben Carter", "slug": "ben-carter", "is_public": True},
            ],
            USERS: [
                {"id": 100, "email": "coach@example.com", "password_hash": password_hash, "role": "coach"},
                {
                    "id": 200,
                    "email": "maya@example.com",
                    "password_hash": password_hash,
                    "role": "athlete",
                    "athlete_id": 1,
                },
            ],
        }
    )


@pytest.fixture
def log_messages():
    """Warnings and above emitted through loguru during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)
