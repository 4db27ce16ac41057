"""Tests for the week lifecycle manager.

Tests cover:
- First week / next week creation and the no-op when a week is active
- Single active week across create/complete sequences
- Gapless sequences
- Field writes, coercion, permissions and completed-week locking
- Completion rollover and the double-completion guard
- Deletion and lazy repair
- Storage failures propagating to the caller
"""

from datetime import date

import pytest

from speedform.storage.errors import StorageFailure
from speedform.weeks.collection import WeekCollection
from speedform.weeks.errors import (
    InvalidField,
    InvalidMeasurementValue,
    NoActiveWeek,
    PermissionDenied,
    WeekLocked,
    WeekNotFound,
)
from speedform.weeks.lifecycle import WeekLifecycleManager
from speedform.weeks.models import WeekStatus


def _active_count(weeks: WeekCollection) -> int:
    return sum(1 for w in weeks if w.status == WeekStatus.ACTIVE)


class TestEnsureActiveWeek:
    def test_creates_first_week(self, manager, storage, empty_weeks):
        week = manager.ensure_active_week(1, empty_weeks)

        assert week.sequence == 1
        assert week.status == WeekStatus.ACTIVE
        assert week.start_date == date(2026, 10, 11)  # Sunday
        assert week.end_date == date(2026, 10, 17)  # Saturday
        assert week.total_volume == 0
        assert week.id is not None
        assert storage.query("weekly_data", {"athlete_id": 1}) == [week.to_row()]
        assert empty_weeks.active == week

    def test_creates_next_sequence_when_none_active(self, manager, seed, week_factory):
        weeks = seed([week_factory(1), week_factory(2), week_factory(3)])

        week = manager.ensure_active_week(1, weeks)

        assert week.sequence == 4
        assert week.status == WeekStatus.ACTIVE
        assert week.total_volume == 0
        assert [w.sequence for w in weeks] == [1, 2, 3, 4]

    def test_noop_when_active_exists(self, manager, storage, seed, week_factory):
        weeks = seed([week_factory(1), week_factory(2, WeekStatus.ACTIVE)])

        week = manager.ensure_active_week(1, weeks)

        assert week.sequence == 2
        assert len(storage.query("weekly_data")) == 2

    def test_second_call_does_not_insert_again(self, manager, storage, empty_weeks):
        first = manager.ensure_active_week(1, empty_weeks)
        second = manager.ensure_active_week(1, empty_weeks)

        assert first == second
        assert len(storage.query("weekly_data")) == 1

    def test_rejects_collection_of_other_athlete(self, manager, empty_weeks):
        with pytest.raises(ValueError):
            manager.ensure_active_week(2, empty_weeks)


class TestUpdateMeasurement:
    def test_persists_single_field(self, manager, storage, empty_weeks, athlete_user):
        week = manager.ensure_active_week(1, empty_weeks)

        updated = manager.update_measurement(empty_weeks, week.id, "vo2_max", 52.5, athlete_user)

        assert updated.vo2_max == 52.5
        assert empty_weeks.active.vo2_max == 52.5
        assert storage.query("weekly_data", {"id": week.id})[0]["vo2_max"] == 52.5

    def test_numeric_text_is_parsed(self, manager, storage, empty_weeks, athlete_user):
        week = manager.ensure_active_week(1, empty_weeks)

        updated = manager.update_measurement(empty_weeks, week.id, "resting_hr", "48", athlete_user)

        assert updated.resting_hr == 48
        assert storage.query("weekly_data", {"id": week.id})[0]["resting_hr"] == 48

    def test_empty_text_clears_number(self, manager, empty_weeks, athlete_user):
        week = manager.ensure_active_week(1, empty_weeks)
        manager.update_measurement(empty_weeks, week.id, "hrv", 62, athlete_user)

        updated = manager.update_measurement(empty_weeks, week.id, "hrv", "", athlete_user)

        assert updated.hrv is None

    def test_no_range_validation(self, manager, empty_weeks, athlete_user):
        week = manager.ensure_active_week(1, empty_weeks)

        updated = manager.update_measurement(empty_weeks, week.id, "sleep_quality", 42, athlete_user)

        assert updated.sleep_quality == 42

    def test_text_fields(self, manager, empty_weeks, athlete_user):
        week = manager.ensure_active_week(1, empty_weeks)

        updated = manager.update_measurement(
            empty_weeks, week.id, "threshold_workout", "3 x 2mi @ T", athlete_user
        )

        assert updated.threshold_workout == "3 x 2mi @ T"

    def test_unknown_field_rejected(self, manager, storage, empty_weeks, athlete_user):
        week = manager.ensure_active_week(1, empty_weeks)

        with pytest.raises(InvalidField):
            manager.update_measurement(empty_weeks, week.id, "favorite_color", "blue", athlete_user)

    @pytest.mark.parametrize("field_name", ["status", "week_num", "athlete_id", "id"])
    def test_lifecycle_columns_are_not_measurements(self, manager, empty_weeks, coach, field_name):
        week = manager.ensure_active_week(1, empty_weeks)

        with pytest.raises(InvalidField):
            manager.update_measurement(empty_weeks, week.id, field_name, "completed", coach)

    def test_uncoercible_value_rejected(self, manager, storage, empty_weeks, athlete_user):
        week = manager.ensure_active_week(1, empty_weeks)

        with pytest.raises(InvalidMeasurementValue):
            manager.update_measurement(empty_weeks, week.id, "vo2_max", "fast", athlete_user)

        assert storage.query("weekly_data", {"id": week.id})[0]["vo2_max"] is None

    def test_non_coach_cannot_write_coach_notes(self, manager, storage, seed, week_factory, athlete_user):
        weeks = seed([week_factory(1, WeekStatus.ACTIVE, coach_notes="keep easy days easy")])

        with pytest.raises(PermissionDenied):
            manager.update_measurement(weeks, 10, "coach_notes", "x", athlete_user)

        assert storage.query("weekly_data", {"id": 10})[0]["coach_notes"] == "keep easy days easy"
        assert weeks.active.coach_notes == "keep easy days easy"

    def test_coach_writes_coach_notes(self, manager, seed, week_factory, coach):
        weeks = seed([week_factory(1, WeekStatus.ACTIVE)])

        updated = manager.update_measurement(weeks, 10, "coach_notes", "great week", coach)

        assert updated.coach_notes == "great week"

    def test_completed_week_is_locked(self, manager, seed, week_factory, coach):
        weeks = seed([week_factory(1), week_factory(2, WeekStatus.ACTIVE)])

        with pytest.raises(WeekLocked):
            manager.update_measurement(weeks, 10, "vo2_max", 55, coach)

    def test_locked_write_is_logged(self, manager, seed, week_factory, coach, log_messages):
        weeks = seed([week_factory(1), week_factory(2, WeekStatus.ACTIVE)])

        with pytest.raises(WeekLocked):
            manager.update_measurement(weeks, 10, "vo2_max", 55, coach)

        assert any("Week 1 is completed" in m for m in log_messages)

    def test_coach_notes_editable_on_completed_week(self, manager, seed, week_factory, coach):
        weeks = seed([week_factory(1), week_factory(2, WeekStatus.ACTIVE)])

        updated = manager.update_measurement(weeks, 10, "coach_notes", "solid block", coach)

        assert updated.coach_notes == "solid block"
        assert updated.status == WeekStatus.COMPLETED

    def test_unknown_week(self, manager, empty_weeks, athlete_user):
        manager.ensure_active_week(1, empty_weeks)

        with pytest.raises(WeekNotFound):
            manager.update_measurement(empty_weeks, 999, "vo2_max", 50, athlete_user)


class TestCompleteWeek:
    def test_completes_and_rolls_over(self, manager, storage, seed, week_factory, now):
        weeks = seed(
            [
                week_factory(1),
                week_factory(2),
                week_factory(3, WeekStatus.ACTIVE, vo2_max=51, resting_hr=48, total_volume=32),
            ]
        )
        week = weeks.active
        assert manager.validate_for_completion(week, weeks).valid

        result = manager.complete_week(weeks, week)

        assert result.completed_week.status == WeekStatus.COMPLETED
        assert result.completed_week.completed_at == now
        assert result.next_week.sequence == 4
        assert result.next_week.status == WeekStatus.ACTIVE
        stored = storage.query("weekly_data", {"id": 30})[0]
        assert stored["status"] == "completed"
        assert stored["completed_at"] == now.isoformat()
        assert weeks.active == result.next_week

    def test_double_completion_rejected(self, manager, storage, seed, week_factory):
        weeks = seed([week_factory(1, WeekStatus.ACTIVE, vo2_max=50, resting_hr=50, total_volume=20)])
        week = weeks.active
        manager.complete_week(weeks, week)

        with pytest.raises(NoActiveWeek):
            manager.complete_week(weeks, week)

        assert [w.sequence for w in weeks] == [1, 2]
        assert len(storage.query("weekly_data")) == 2

    def test_invariant_holds_over_many_cycles(self, manager, empty_weeks):
        for _ in range(6):
            week = manager.ensure_active_week(1, empty_weeks)
            assert _active_count(empty_weeks) == 1
            manager.complete_week(empty_weeks, week)
            assert _active_count(empty_weeks) == 1

        sequences = sorted(w.sequence for w in empty_weeks)
        assert sequences == list(range(1, len(sequences) + 1))


class TestDeleteWeek:
    def test_delete_completed_week(self, manager, storage, seed, week_factory):
        weeks = seed([week_factory(1), week_factory(2, WeekStatus.ACTIVE)])

        manager.delete_week(weeks, 10)

        assert [w.sequence for w in weeks] == [2]
        assert storage.query("weekly_data", {"id": 10}) == []

    def test_delete_active_week_leaves_none_until_next_ensure(self, manager, seed, week_factory):
        weeks = seed([week_factory(1), week_factory(2, WeekStatus.ACTIVE)])

        manager.delete_week(weeks, 20)

        assert weeks.active is None
        repaired = manager.ensure_active_week(1, weeks)
        assert repaired.sequence == 2
        assert _active_count(weeks) == 1


class _FailingStorage:
    def query(self, collection, filters=None, order=None):
        return []

    def insert(self, collection, record):
        raise StorageFailure("insert", collection, "connection reset")

    def patch(self, collection, record_id, fields):
        raise StorageFailure("patch", collection, "timeout")

    def delete(self, collection, record_id):
        raise StorageFailure("delete", collection, "timeout")


class TestStorageFailures:
    def test_failed_insert_leaves_collection_untouched(self, today):
        manager = WeekLifecycleManager(_FailingStorage(), today=lambda: today)
        weeks = WeekCollection(1)

        with pytest.raises(StorageFailure):
            manager.ensure_active_week(1, weeks)

        assert len(weeks) == 0

    def test_failed_patch_keeps_in_memory_value(self, today, week_factory, athlete_user):
        manager = WeekLifecycleManager(_FailingStorage(), today=lambda: today)
        weeks = WeekCollection(1, [week_factory(1, WeekStatus.ACTIVE, vo2_max=50)])

        with pytest.raises(StorageFailure):
            manager.update_measurement(weeks, 10, "vo2_max", 51, athlete_user)

        assert weeks.active.vo2_max == 50
