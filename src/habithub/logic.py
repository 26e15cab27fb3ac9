# src/habithub/logic.py
import logging
from typing import List

from habithub import config, dates, weeks
from habithub.errors import InvalidInput, NotFound
from habithub.models import DAYS_ORDER, Habit

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "scheduled_days", "is_active", "is_compulsory", "color")


# -------------------------------
# VALIDATION
# -------------------------------
def clean_title(title) -> str:
    if not isinstance(title, str) or not title.strip():
        raise InvalidInput("Habit title is required")
    title = title.strip()
    if len(title) > config.TITLE_MAX_LENGTH:
        raise InvalidInput(f"Title cannot exceed {config.TITLE_MAX_LENGTH} characters")
    return title


def clean_days(days) -> List[str]:
    """Deduplicate and order scheduled days canonically (Sun first)."""
    if not days or isinstance(days, str):
        raise InvalidInput("At least one scheduled day is required")
    parsed = {dates.parse_weekday(d).value for d in days}
    return sorted(parsed, key=DAYS_ORDER.index)


def clean_color(color) -> str:
    if isinstance(color, str) and color.strip():
        return color.strip()
    return config.DEFAULT_COLOR


# -------------------------------
# HABIT OPERATIONS
# -------------------------------
def add_new_habit(store, title: str, scheduled_days, is_compulsory: bool = False, color: str = None) -> Habit:
    """Create a habit and add it to the current week."""
    habit = Habit(
        title=clean_title(title),
        scheduled_days=clean_days(scheduled_days),
        is_compulsory=bool(is_compulsory),
        color=clean_color(color),
        created_at=dates.now(),
    )
    store.insert_habit(habit.to_row())
    logger.info("Created habit %s (%s)", habit.id, habit.title)
    weeks.on_habit_created(store, habit)
    return habit


def list_habits(store, active_only: bool = True) -> List[Habit]:
    """Habits, newest first."""
    return [Habit.model_validate(row) for row in store.list_habits(active_only=active_only)]


def get_habit(store, habit_id: str) -> Habit:
    row = store.get_habit(habit_id)
    if row is None:
        raise NotFound("Habit not found")
    return Habit.model_validate(row)


def update_habit(store, habit_id: str, **fields) -> Habit:
    """Apply the given fields; None values are left unchanged."""
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise InvalidInput(f"Cannot update: {', '.join(sorted(unknown))}")

    changes = {}
    if fields.get("title") is not None:
        changes["title"] = clean_title(fields["title"])
    if fields.get("scheduled_days") is not None:
        changes["scheduled_days"] = clean_days(fields["scheduled_days"])
    if fields.get("is_active") is not None:
        changes["is_active"] = bool(fields["is_active"])
    if fields.get("is_compulsory") is not None:
        changes["is_compulsory"] = bool(fields["is_compulsory"])
    if fields.get("color") is not None:
        changes["color"] = clean_color(fields["color"])

    if not changes:
        return get_habit(store, habit_id)

    row = store.update_habit(habit_id, changes)
    if row is None:
        raise NotFound("Habit not found")
    habit = Habit.model_validate(row)
    logger.info("Updated habit %s: %s", habit_id, ", ".join(sorted(changes)))
    weeks.on_habit_updated(store, habit)
    return habit


def remove_habit(store, habit_id: str) -> Habit:
    """Soft delete: the habit stays in past weeks but leaves the current one."""
    row = store.update_habit(habit_id, {"is_active": False})
    if row is None:
        raise NotFound("Habit not found")
    logger.info("Deactivated habit %s", habit_id)
    weeks.on_habit_removed(store, habit_id)
    return Habit.model_validate(row)
