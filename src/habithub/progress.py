# src/habithub/progress.py
"""Scheduled-vs-completed counting for weeks, single dates and month grids."""
import math
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Tuple

from habithub.models import (
    DAYS_ORDER,
    CalendarCell,
    CalendarDay,
    DateHabit,
    DateView,
    Week,
    Weekday,
)


def percent(completed: int, total: int) -> int:
    """Integer percentage rounded half up; 0 when nothing is scheduled."""
    if total <= 0:
        return 0
    return int(math.floor(100 * completed / total + 0.5))


def week_counts(week: Week) -> Tuple[int, int]:
    total_scheduled = 0
    total_completed = 0
    for entry in week.habits:
        for day in entry.scheduled_days:
            total_scheduled += 1
            if entry.completion.get(day):
                total_completed += 1
    return total_completed, total_scheduled


def compute_progress(week: Week) -> int:
    completed, scheduled = week_counts(week)
    return percent(completed, scheduled)


def date_view(week: Week, day: Weekday) -> DateView:
    """Habits of ``week`` scheduled on ``day`` with their completion."""
    day = Weekday(day)
    habits = [
        DateHabit(
            habit_id=entry.habit_id,
            title=entry.title,
            is_compulsory=entry.is_compulsory,
            color=entry.color,
            completed=entry.completion.get(day),
            scheduled_days=list(entry.scheduled_days),
        )
        for entry in week.habits
        if entry.is_scheduled(day)
    ]
    completed = sum(1 for h in habits if h.completed)
    return DateView(
        day_name=day,
        habits=habits,
        completed_count=completed,
        total_count=len(habits),
        progress=percent(completed, len(habits)),
    )


def _date_counts(weeks: Iterable[Week]) -> Dict[date, List[int]]:
    counts: Dict[date, List[int]] = defaultdict(lambda: [0, 0])
    for week in weeks:
        for name in DAYS_ORDER:
            day = Weekday(name)
            slot = counts[week.date_of(day)]
            for entry in week.habits:
                if entry.is_scheduled(day):
                    slot[1] += 1
                    if entry.completion.get(day):
                        slot[0] += 1
    return counts


def calendar_overlay(weeks: Iterable[Week], grid: List[List[CalendarDay]]) -> List[List[CalendarCell]]:
    """Attach completed/total counts from ``weeks`` to every cell of a month grid."""
    counts = _date_counts(weeks)
    overlaid = []
    for row in grid:
        cells = []
        for cell in row:
            completed, total = counts.get(cell.full_date, (0, 0))
            cells.append(
                CalendarCell(
                    **cell.model_dump(),
                    has_habits=total > 0,
                    completed_count=completed,
                    total_count=total,
                    is_complete=total > 0 and completed == total,
                )
            )
        overlaid.append(cells)
    return overlaid


def average_progress(weeks: Iterable[Week]) -> int:
    values = [w.progress for w in weeks]
    if not values:
        return 0
    return percent(sum(values), 100 * len(values))
