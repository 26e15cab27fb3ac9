# src/habithub/weeks.py
"""Week lifecycle: creating tracking periods and keeping the current one in
step with the habit catalog.

The current week is never cached; it is whatever week the store flags with
``is_current``. Exactly one week may exist per ``week_id``, which the store
enforces with a uniqueness constraint.
"""
import logging
import threading
from datetime import date
from typing import Optional

from habithub import dates
from habithub.errors import DuplicateKey, StorageFailure
from habithub.models import Habit, Week, WeekHabitEntry
from habithub.progress import compute_progress

logger = logging.getLogger(__name__)

# serializes read-modify-write of a week's habit entries within this process
week_lock = threading.RLock()


def get_current_week(store) -> Optional[Week]:
    row = store.get_current_week()
    return Week.model_validate(row) if row else None


def get_week(store, week_id: str) -> Optional[Week]:
    row = store.get_week(week_id)
    return Week.model_validate(row) if row else None


def save_week(store, week: Week):
    store.save_week(week.week_id, week.habits_document(), week.progress)


def build_week(habits, today: date) -> Week:
    """Fresh current week for ``today`` with one entry per habit, nothing completed."""
    return Week(
        week_id=dates.week_id(today),
        week_start=dates.week_start(today),
        week_end=dates.week_end(today),
        habits=[WeekHabitEntry.from_habit(h) for h in habits],
        progress=0,
        is_current=True,
        created_at=dates.now(),
    )


def ensure_current_week(store, today: Optional[date] = None) -> Week:
    """Return the week containing ``today``, creating it if needed.

    Safe to call repeatedly and concurrently: losing an insert race falls
    back to the winner's week. An existing week is returned as is, except
    that a demotion left unfinished by an earlier call is completed.
    """
    today = today or dates.current_date()
    week_id = dates.week_id(today)

    # held through the rollover so catalog propagation lands in the new week
    with week_lock:
        existing = get_week(store, week_id)
        if existing is not None:
            logger.debug("Week %s already exists", week_id)
            if existing.is_current and store.count_weeks(is_current=True) > 1:
                logger.warning("Finishing demotion of weeks older than %s", week_id)
                store.demote_weeks(except_week_id=week_id)
            return existing

        habits = [Habit.model_validate(row) for row in store.list_habits(active_only=True, newest_first=False)]
        week = build_week(habits, today)

        try:
            store.insert_week(week.to_row())
        except DuplicateKey:
            logger.warning("Week %s was created concurrently, reading it back", week_id)
            existing = get_week(store, week_id)
            if existing is None:
                raise StorageFailure(f"Week starting {week.week_start.date()} exists under another id")
            return existing

        # the new week is already current, so readers never see zero current weeks
        store.demote_weeks(except_week_id=week_id)

    logger.info("Created new week %s with %d habits", week_id, len(week.habits))
    return week


# -------------------------------
# CATALOG PROPAGATION
# -------------------------------
def on_habit_created(store, habit: Habit) -> Optional[Week]:
    with week_lock:
        week = get_current_week(store)
        if week is None:
            return None
        if week.find_entry(habit.id) is None:
            week.habits.append(WeekHabitEntry.from_habit(habit))
        week.progress = compute_progress(week)
        save_week(store, week)
    logger.info("Added habit %s to week %s", habit.id, week.week_id)
    return week


def on_habit_updated(store, habit: Habit) -> Optional[Week]:
    """Refresh the current week's snapshot of ``habit``.

    Deactivation drops the entry like a soft delete; reactivation of a habit
    missing from the week adds a fresh entry.
    """
    if not habit.is_active:
        return on_habit_removed(store, habit.id)

    with week_lock:
        week = get_current_week(store)
        if week is None:
            return None
        entry = week.find_entry(habit.id)
        if entry is None:
            week.habits.append(WeekHabitEntry.from_habit(habit))
        else:
            entry.refresh_from(habit)
        week.progress = compute_progress(week)
        save_week(store, week)
    logger.info("Refreshed habit %s in week %s", habit.id, week.week_id)
    return week


def on_habit_removed(store, habit_id: str) -> Optional[Week]:
    with week_lock:
        week = get_current_week(store)
        if week is None:
            return None
        remaining = [e for e in week.habits if e.habit_id != habit_id]
        if len(remaining) == len(week.habits):
            return week
        week.habits = remaining
        week.progress = compute_progress(week)
        save_week(store, week)
    logger.info("Removed habit %s from week %s", habit_id, week.week_id)
    return week
