# src/habithub/models.py
import datetime as dt
import uuid
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from habithub.config import DEFAULT_COLOR


class Weekday(str, Enum):
    SUN = "Sun"
    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"


# canonical ordering used everywhere a week is laid out
DAYS_ORDER = [d.value for d in Weekday]


class CamelModel(BaseModel):
    """snake_case in Python and in storage rows, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")

    def to_row(self) -> dict:
        return self.model_dump(mode="json")


# -------------------------------
# COMPLETION
# -------------------------------
class Completion(BaseModel):
    """One flag per weekday, all seven always present."""

    model_config = ConfigDict(alias_generator=str.capitalize, populate_by_name=True)

    sun: bool = False
    mon: bool = False
    tue: bool = False
    wed: bool = False
    thu: bool = False
    fri: bool = False
    sat: bool = False

    def get(self, day: Weekday) -> bool:
        return getattr(self, Weekday(day).value.lower())

    def set(self, day: Weekday, value: bool):
        setattr(self, Weekday(day).value.lower(), bool(value))

    def flip(self, day: Weekday) -> bool:
        value = not self.get(day)
        self.set(day, value)
        return value


# -------------------------------
# HABITS
# -------------------------------
class Habit(CamelModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str
    scheduled_days: List[Weekday]
    is_active: bool = True
    is_compulsory: bool = False
    color: str = DEFAULT_COLOR
    created_at: Optional[dt.datetime] = None


class WeekHabitEntry(CamelModel):
    """Snapshot of a habit embedded in a week."""

    habit_id: str
    title: str
    scheduled_days: List[Weekday]
    is_compulsory: bool = False
    color: str = DEFAULT_COLOR
    completion: Completion = Field(default_factory=Completion)

    @classmethod
    def from_habit(cls, habit: Habit) -> "WeekHabitEntry":
        return cls(
            habit_id=habit.id,
            title=habit.title,
            scheduled_days=list(habit.scheduled_days),
            is_compulsory=habit.is_compulsory,
            color=habit.color or DEFAULT_COLOR,
        )

    def refresh_from(self, habit: Habit):
        # completion is kept as is
        self.title = habit.title
        self.scheduled_days = list(habit.scheduled_days)
        self.is_compulsory = habit.is_compulsory
        self.color = habit.color or DEFAULT_COLOR

    def is_scheduled(self, day: Weekday) -> bool:
        return Weekday(day) in self.scheduled_days


# -------------------------------
# WEEKS
# -------------------------------
class Week(CamelModel):
    week_id: str
    week_start: dt.datetime
    week_end: dt.datetime
    habits: List[WeekHabitEntry] = Field(default_factory=list)
    progress: int = Field(default=0, ge=0, le=100)
    is_current: bool = False
    created_at: Optional[dt.datetime] = None

    def find_entry(self, habit_id: str) -> Optional[WeekHabitEntry]:
        for entry in self.habits:
            if entry.habit_id == habit_id:
                return entry
        return None

    def covers(self, day: dt.date) -> bool:
        return self.week_start.date() <= day <= self.week_end.date()

    def date_of(self, day: Weekday) -> dt.date:
        return self.week_start.date() + dt.timedelta(days=DAYS_ORDER.index(Weekday(day).value))

    def habits_document(self) -> List[dict]:
        return [entry.to_row() for entry in self.habits]


# -------------------------------
# VIEWS
# -------------------------------
class CalendarDay(CamelModel):
    day: int
    full_date: dt.date
    day_name: Weekday
    is_current_month: bool
    is_today: bool


class CalendarCell(CalendarDay):
    has_habits: bool = False
    completed_count: int = 0
    total_count: int = 0
    is_complete: bool = False


class DateInfo(CamelModel):
    date: dt.date
    day_name: Weekday
    day_index: int
    week_id: str
    week_start: dt.date
    week_end: dt.date


class DateHabit(CamelModel):
    habit_id: str
    title: str
    is_compulsory: bool
    color: str
    completed: bool
    scheduled_days: List[Weekday]


class DateView(CamelModel):
    day_name: Weekday
    habits: List[DateHabit] = Field(default_factory=list)
    completed_count: int = 0
    total_count: int = 0
    progress: int = 0


class ToggleResult(CamelModel):
    habit_id: str
    day: Weekday
    completed: bool
    progress: int
