# src/habithub/toggle.py
import logging

from habithub import dates
from habithub.errors import InvalidOperation, NotFound
from habithub.models import ToggleResult
from habithub.progress import compute_progress
from habithub.weeks import get_current_week, save_week, week_lock

logger = logging.getLogger(__name__)


def toggle(store, habit_id: str, day: str) -> ToggleResult:
    """Flip one day's completion of a habit in the current week.

    Applying the same toggle twice restores the original state, so a blind
    retry after an unacknowledged success inverts the result.
    """
    weekday = dates.parse_weekday(day)

    with week_lock:
        week = get_current_week(store)
        if week is None:
            raise NotFound("No current week found")

        entry = week.find_entry(habit_id)
        if entry is None:
            raise NotFound("Habit not found in current week")

        if not entry.is_scheduled(weekday):
            raise InvalidOperation("Habit is not scheduled for this day")

        completed = entry.completion.flip(weekday)
        week.progress = compute_progress(week)
        save_week(store, week)

    logger.info(
        "Toggled %s on %s in %s -> %s (progress %d%%)",
        habit_id, weekday.value, week.week_id, completed, week.progress,
    )
    return ToggleResult(habit_id=habit_id, day=weekday, completed=completed, progress=week.progress)
