"""
Work-hours clock

Pure time arithmetic over the daily work window (default 06:00-22:00).
Times are naive local wall-clock times; no timezone conversion is performed.
"""

from datetime import datetime, time, timedelta

from moldplan.constants import HOURS_PER_DAY, WORK_END_HOUR, WORK_START_HOUR
from moldplan.core.models import SchedulingSettings
from moldplan.exceptions import SchedulingConfigError


class WorkHoursClock:
    """
    Knows the daily work window and moves timestamps into it

    Attributes:
        work_start_hour: Hour the window opens
        work_end_hour: Hour the window closes (exclusive, at most 24)
    """

    def __init__(self, work_start_hour: float = WORK_START_HOUR, work_end_hour: float = WORK_END_HOUR):
        if not (0 <= work_start_hour < HOURS_PER_DAY):
            raise SchedulingConfigError(f"Work start hour must be in [0, 24), got {work_start_hour}")
        if work_end_hour <= work_start_hour:
            raise SchedulingConfigError(
                f"Work day is empty: window {work_start_hour}:00-{work_end_hour}:00"
            )
        if work_end_hour > HOURS_PER_DAY:
            raise SchedulingConfigError(
                f"Work window {work_start_hour}:00-{work_end_hour}:00 crosses midnight"
            )
        self.work_start_hour = work_start_hour
        self.work_end_hour = work_end_hour

    @classmethod
    def from_settings(cls, settings: SchedulingSettings) -> "WorkHoursClock":
        """
        Build the clock from settings: the window opens at ``work_start_hour``
        and lasts ``work_hours_per_day`` hours, cut off at midnight

        Raises:
            SchedulingConfigError: if the work day is zero or negative length
        """
        if settings.work_hours_per_day <= 0:
            raise SchedulingConfigError(
                f"work_hours_per_day must be positive, got {settings.work_hours_per_day}"
            )
        work_end_hour = min(HOURS_PER_DAY, settings.work_start_hour + settings.work_hours_per_day)
        return cls(settings.work_start_hour, work_end_hour)

    @property
    def work_minutes_per_day(self) -> float:
        return (self.work_end_hour - self.work_start_hour) * 60

    def day_start(self, t: datetime) -> datetime:
        return datetime.combine(t.date(), time.min) + timedelta(hours=self.work_start_hour)

    def day_end(self, t: datetime) -> datetime:
        return datetime.combine(t.date(), time.min) + timedelta(hours=self.work_end_hour)

    def adjust_to_work_hours(self, t: datetime) -> datetime:
        """
        Move a timestamp into the work window

        Before the window opens: same day at the start hour. At or after the
        window closes: next day at the start hour. Otherwise unchanged.
        Idempotent.
        """
        if t < self.day_start(t):
            return self.day_start(t)
        if t >= self.day_end(t):
            return self.day_start(t + timedelta(days=1))
        return t

    def minutes_until_day_end(self, t: datetime) -> float:
        return (self.day_end(t) - t).total_seconds() / 60

    def is_within_work_hours(self, start: datetime, end: datetime) -> bool:
        """True if [start, end) lies inside a single day's work window"""
        return self.day_start(start) <= start < self.day_end(start) and end <= self.day_end(start)

    def __repr__(self) -> str:
        return f"WorkHoursClock(work_start_hour={self.work_start_hour}, work_end_hour={self.work_end_hour})"
