# src/habithub/db.py
"""Document storage for habits and weeks.

Both backends expose the same methods and exchange plain dict rows keyed
by snake_case column names. Weeks embed their habit entries as a JSON
list (``jsonb`` in Supabase).
"""
import copy
import functools
import logging
import threading
from datetime import datetime

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from habithub import config
from habithub.errors import DuplicateKey, StorageFailure

logger = logging.getLogger(__name__)

HABITS = "habits"
WEEKS = "weeks"

UNIQUE_VIOLATION = "23505"


def storage_call(func):
    """Translate client errors into the domain taxonomy."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise DuplicateKey(exc.message or "Duplicate key") from exc
            logger.error("Supabase rejected %s: %s", func.__name__, exc.message)
            raise StorageFailure(f"Storage error in {func.__name__}") from exc
        except httpx.HTTPError as exc:
            logger.error("Supabase unreachable during %s: %s", func.__name__, exc)
            raise StorageFailure("Storage unavailable") from exc

    return wrapper


# -------------------------------
# SUPABASE
# -------------------------------
class SupabaseStore:
    def __init__(self, client: Client):
        self.client = client

    # ---- habits ----
    @storage_call
    def insert_habit(self, row: dict) -> dict:
        resp = self.client.table(HABITS).insert(row).execute()
        return resp.data[0] if resp.data else row

    @storage_call
    def get_habit(self, habit_id: str):
        resp = self.client.table(HABITS).select("*").eq("id", habit_id).limit(1).execute()
        return resp.data[0] if resp.data else None

    @storage_call
    def list_habits(self, active_only: bool = True, newest_first: bool = True):
        query = self.client.table(HABITS).select("*")
        if active_only:
            query = query.eq("is_active", True)
        resp = query.order("created_at", desc=newest_first).execute()
        return resp.data or []

    @storage_call
    def update_habit(self, habit_id: str, fields: dict):
        resp = self.client.table(HABITS).update(fields).eq("id", habit_id).execute()
        return resp.data[0] if resp.data else None

    @storage_call
    def count_habits(self, active_only: bool = True) -> int:
        query = self.client.table(HABITS).select("id", count="exact")
        if active_only:
            query = query.eq("is_active", True)
        return query.execute().count or 0

    # ---- weeks ----
    @storage_call
    def get_week(self, week_id: str):
        resp = self.client.table(WEEKS).select("*").eq("week_id", week_id).limit(1).execute()
        return resp.data[0] if resp.data else None

    @storage_call
    def get_current_week(self):
        resp = (
            self.client.table(WEEKS)
            .select("*")
            .eq("is_current", True)
            .order("week_start", desc=True)
            .limit(1)
            .execute()
        )
        return resp.data[0] if resp.data else None

    @storage_call
    def insert_week(self, row: dict) -> dict:
        resp = self.client.table(WEEKS).insert(row).execute()
        return resp.data[0] if resp.data else row

    @storage_call
    def demote_weeks(self, except_week_id: str):
        self.client.table(WEEKS).update({"is_current": False}).eq("is_current", True).neq(
            "week_id", except_week_id
        ).execute()

    @storage_call
    def save_week(self, week_id: str, habits: list, progress: int):
        self.client.table(WEEKS).update({"habits": habits, "progress": progress}).eq("week_id", week_id).execute()

    @storage_call
    def list_weeks(self, is_current=None, skip: int = 0, limit=None):
        query = self.client.table(WEEKS).select("*")
        if is_current is not None:
            query = query.eq("is_current", is_current)
        query = query.order("week_start", desc=True)
        if limit is not None:
            query = query.range(skip, skip + limit - 1)
        return query.execute().data or []

    @storage_call
    def count_weeks(self, is_current=None) -> int:
        query = self.client.table(WEEKS).select("week_id", count="exact")
        if is_current is not None:
            query = query.eq("is_current", is_current)
        return query.execute().count or 0

    @storage_call
    def weeks_between(self, first: datetime, last: datetime):
        """Weeks overlapping the closed range [first, last]."""
        resp = (
            self.client.table(WEEKS)
            .select("*")
            .lte("week_start", last.isoformat())
            .gte("week_end", first.isoformat())
            .order("week_start")
            .execute()
        )
        return resp.data or []


# -------------------------------
# IN-MEMORY
# -------------------------------
def _ts(value) -> datetime:
    return value if isinstance(value, datetime) else datetime.fromisoformat(value)


class MemoryStore:
    """Process-local backend with the same uniqueness rules as the SQL schema."""

    def __init__(self):
        self._lock = threading.Lock()
        self._habits = []
        self._weeks = []

    # ---- habits ----
    def insert_habit(self, row: dict) -> dict:
        with self._lock:
            if any(h["id"] == row["id"] for h in self._habits):
                raise DuplicateKey(f"Habit {row['id']} already exists")
            self._habits.append(copy.deepcopy(row))
            return copy.deepcopy(row)

    def get_habit(self, habit_id: str):
        with self._lock:
            for h in self._habits:
                if h["id"] == habit_id:
                    return copy.deepcopy(h)
        return None

    def list_habits(self, active_only: bool = True, newest_first: bool = True):
        with self._lock:
            rows = [copy.deepcopy(h) for h in self._habits if h.get("is_active", True) or not active_only]
        if newest_first:
            rows.reverse()
        return rows

    def update_habit(self, habit_id: str, fields: dict):
        with self._lock:
            for h in self._habits:
                if h["id"] == habit_id:
                    h.update(copy.deepcopy(fields))
                    return copy.deepcopy(h)
        return None

    def count_habits(self, active_only: bool = True) -> int:
        return len(self.list_habits(active_only=active_only))

    # ---- weeks ----
    def _find_week(self, week_id: str):
        for w in self._weeks:
            if w["week_id"] == week_id:
                return w
        return None

    def get_week(self, week_id: str):
        with self._lock:
            week = self._find_week(week_id)
            return copy.deepcopy(week) if week else None

    def get_current_week(self):
        with self._lock:
            current = [w for w in self._weeks if w.get("is_current")]
            if not current:
                return None
            return copy.deepcopy(max(current, key=lambda w: _ts(w["week_start"])))

    def insert_week(self, row: dict) -> dict:
        with self._lock:
            for w in self._weeks:
                if w["week_id"] == row["week_id"]:
                    raise DuplicateKey(f"Week {row['week_id']} already exists")
                if _ts(w["week_start"]) == _ts(row["week_start"]):
                    raise DuplicateKey(f"A week starting {row['week_start']} already exists")
            self._weeks.append(copy.deepcopy(row))
            return copy.deepcopy(row)

    def demote_weeks(self, except_week_id: str):
        with self._lock:
            for w in self._weeks:
                if w["week_id"] != except_week_id:
                    w["is_current"] = False

    def save_week(self, week_id: str, habits: list, progress: int):
        with self._lock:
            week = self._find_week(week_id)
            if week is None:
                raise StorageFailure(f"Week {week_id} vanished before save")
            week["habits"] = copy.deepcopy(habits)
            week["progress"] = progress

    def list_weeks(self, is_current=None, skip: int = 0, limit=None):
        with self._lock:
            rows = [copy.deepcopy(w) for w in self._weeks if is_current is None or bool(w.get("is_current")) == is_current]
        rows.sort(key=lambda w: _ts(w["week_start"]), reverse=True)
        end = None if limit is None else skip + limit
        return rows[skip:end]

    def count_weeks(self, is_current=None) -> int:
        return len(self.list_weeks(is_current=is_current))

    def weeks_between(self, first: datetime, last: datetime):
        with self._lock:
            rows = [
                copy.deepcopy(w)
                for w in self._weeks
                if _ts(w["week_start"]) <= last and _ts(w["week_end"]) >= first
            ]
        rows.sort(key=lambda w: _ts(w["week_start"]))
        return rows


# -------------------------------
# FACTORY
# -------------------------------
@functools.lru_cache(maxsize=1)
def get_store():
    """Process-wide store selected by HABITHUB_STORE."""
    if config.STORE_BACKEND == "memory":
        logger.info("Using in-memory store")
        return MemoryStore()
    if not config.SUPABASE_URL or not config.SUPABASE_KEY:
        raise StorageFailure("SUPABASE_URL and SUPABASE_KEY must be set")
    client: Client = create_client(config.SUPABASE_URL, config.SUPABASE_KEY)
    logger.info("Connected to Supabase at %s", config.SUPABASE_URL)
    return SupabaseStore(client)
