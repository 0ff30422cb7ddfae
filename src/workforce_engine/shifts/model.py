from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import day_of_week
from ..core.enums import Recurrence


@dataclass(frozen=True)
class Shift:
    """A scheduled block of work for one staff member.

    RECURRING shifts repeat every week on ``day_of_week`` (0 = Sunday);
    ONE_TIME shifts happen only on ``specific_date``.
    """

    shift_id: int
    tenant_id: int
    staff_id: int
    shift_name: str
    start_time: time
    end_time: time
    recurrence: Recurrence
    day_of_week: Optional[int] = None
    specific_date: Optional[date] = None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence == Recurrence.RECURRING

    def applies_on(self, work_date: date) -> bool:
        if self.is_recurring:
            return self.day_of_week == day_of_week(work_date)
        return self.specific_date == work_date

    def scheduled_start_on(self, work_date: date) -> datetime:
        # One-time shifts keep their own absolute timestamp.
        return datetime.combine(self._anchor(work_date), self.start_time)

    def scheduled_end_on(self, work_date: date) -> datetime:
        return datetime.combine(self._anchor(work_date), self.end_time)

    def _anchor(self, work_date: date) -> date:
        if self.is_recurring or self.specific_date is None:
            return work_date
        return self.specific_date

    def to_dict(self) -> dict:
        return {
            "shift_id": self.shift_id,
            "staff_id": self.staff_id,
            "shift_name": self.shift_name,
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "recurrence": self.recurrence.value,
            "day_of_week": self.day_of_week,
            "specific_date": self.specific_date.isoformat() if self.specific_date else None,
        }
