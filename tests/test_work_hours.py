"""Tests for the work-hours clock."""

import pytest
from datetime import datetime

from moldplan.core.models import SchedulingSettings
from moldplan.engine.work_hours import WorkHoursClock
from moldplan.exceptions import SchedulingConfigError


class TestAdjustToWorkHours:

    @pytest.mark.parametrize(
        "given, expected",
        [
            (datetime(2024, 1, 8, 5, 0), datetime(2024, 1, 8, 6, 0)),
            (datetime(2024, 1, 8, 6, 0), datetime(2024, 1, 8, 6, 0)),
            (datetime(2024, 1, 8, 10, 30), datetime(2024, 1, 8, 10, 30)),
            (datetime(2024, 1, 8, 22, 0), datetime(2024, 1, 9, 6, 0)),
            (datetime(2024, 1, 8, 23, 45), datetime(2024, 1, 9, 6, 0)),
            (datetime(2024, 1, 31, 22, 0), datetime(2024, 2, 1, 6, 0)),
        ],
    )
    def test_moves_into_window(self, clock, given, expected):
        assert clock.adjust_to_work_hours(given) == expected

    def test_idempotent(self, clock):
        once = clock.adjust_to_work_hours(datetime(2024, 1, 8, 23, 0))
        assert clock.adjust_to_work_hours(once) == once


class TestWindow:

    def test_minutes_until_day_end(self, clock):
        assert clock.work_minutes_per_day == 960
        assert clock.minutes_until_day_end(datetime(2024, 1, 8, 6, 0)) == 960
        assert clock.minutes_until_day_end(datetime(2024, 1, 8, 21, 30)) == 30

    def test_is_within_work_hours(self, clock):
        assert clock.is_within_work_hours(datetime(2024, 1, 8, 6, 0), datetime(2024, 1, 8, 22, 0))
        assert not clock.is_within_work_hours(datetime(2024, 1, 8, 5, 0), datetime(2024, 1, 8, 7, 0))
        assert not clock.is_within_work_hours(datetime(2024, 1, 8, 21, 0), datetime(2024, 1, 9, 7, 0))

    def test_from_settings(self):
        clock = WorkHoursClock.from_settings(SchedulingSettings(work_start_hour=7, work_hours_per_day=8))
        assert clock.work_start_hour == 7
        assert clock.work_end_hour == 15


class TestInvalidWindow:

    @pytest.mark.parametrize("hours", [0, -4])
    def test_non_positive_work_day(self, hours):
        with pytest.raises(SchedulingConfigError):
            WorkHoursClock.from_settings(SchedulingSettings(work_hours_per_day=hours))

    def test_empty_window(self):
        with pytest.raises(SchedulingConfigError):
            WorkHoursClock(10, 10)

    def test_explicit_window_past_midnight(self):
        with pytest.raises(SchedulingConfigError):
            WorkHoursClock(6, 25)


class TestLongWorkDay:

    def test_derived_window_cut_at_midnight(self):
        settings = SchedulingSettings(work_hours_per_day=20)
        clock = WorkHoursClock.from_settings(settings)

        assert clock.work_end_hour == 24
        assert settings.work_end_hour == 24
        assert clock.work_minutes_per_day == 1080

    def test_late_start_cut_at_midnight(self):
        clock = WorkHoursClock.from_settings(SchedulingSettings(work_start_hour=20, work_hours_per_day=8))
        assert (clock.work_start_hour, clock.work_end_hour) == (20, 24)

    def test_midnight_rolls_to_next_opening(self):
        clock = WorkHoursClock.from_settings(SchedulingSettings(work_hours_per_day=24))

        assert clock.day_end(datetime(2024, 1, 8, 12, 0)) == datetime(2024, 1, 9, 0, 0)
        assert clock.adjust_to_work_hours(datetime(2024, 1, 9, 0, 0)) == datetime(2024, 1, 9, 6, 0)
        assert clock.adjust_to_work_hours(datetime(2024, 1, 8, 23, 59)) == datetime(2024, 1, 8, 23, 59)
