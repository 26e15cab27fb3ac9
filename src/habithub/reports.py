# src/habithub/reports.py
"""Read-side payloads for the HTTP surface."""
import calendar
import datetime as dt

from habithub import config, dates, progress, weeks
from habithub.errors import InvalidInput, NotFound
from habithub.models import DAYS_ORDER, Week


def week_summary(week: Week) -> dict:
    data = week.to_api()
    return {
        "weekId": week.week_id,
        "weekStart": data["weekStart"],
        "weekEnd": data["weekEnd"],
        "weekRange": dates.format_week_range(week.week_start, week.week_end),
        "habits": data["habits"],
        "progress": week.progress,
    }


# -------------------------------
# CURRENT WEEK
# -------------------------------
def current_week_view(store) -> dict:
    """Current week, created on the spot if the periodic trigger has not run yet."""
    week = weeks.ensure_current_week(store)
    return {
        **week_summary(week),
        "today": dates.today_name(),
        "todayDate": dates.current_date().isoformat(),
        "weekDates": dates.week_dates(week.week_start),
        "isCurrent": week.is_current,
        "daysOrder": DAYS_ORDER,
    }


# -------------------------------
# HISTORY
# -------------------------------
def week_history(store, skip: int = 0, limit: int = config.HISTORY_PAGE_SIZE) -> dict:
    if skip < 0:
        raise InvalidInput("skip must be zero or positive")
    if limit < 1:
        raise InvalidInput("limit must be positive")

    rows = store.list_weeks(is_current=False, skip=skip, limit=limit)
    total = store.count_weeks(is_current=False)
    return {
        "weeks": [week_summary(Week.model_validate(row)) for row in rows],
        "total": total,
        "hasMore": skip + len(rows) < total,
    }


def week_view(store, week_id: str) -> dict:
    week = weeks.get_week(store, week_id)
    if week is None:
        raise NotFound("Week not found")
    return {**week_summary(week), "isCurrent": week.is_current, "daysOrder": DAYS_ORDER}


def week_stats(store) -> dict:
    all_weeks = [Week.model_validate(row) for row in store.list_weeks()]
    current = weeks.get_current_week(store)
    recent = all_weeks[: config.STATS_WEEKS]
    return {
        "totalWeeks": len(all_weeks),
        "avgProgress": progress.average_progress(all_weeks),
        "totalHabits": store.count_habits(active_only=True),
        "currentProgress": current.progress if current else 0,
        "weeklyProgress": [
            {
                "weekId": w.week_id,
                "progress": w.progress,
                "weekRange": dates.format_week_range(w.week_start, w.week_end),
            }
            for w in reversed(recent)
        ],
    }


# -------------------------------
# CALENDAR / DATES
# -------------------------------
def calendar_view(store, year: int, month: int) -> dict:
    grid = dates.calendar_month(year, month)
    first = dt.datetime.combine(grid[0][0].full_date, dt.time.min)
    last = dt.datetime.combine(grid[-1][-1].full_date, dates.END_OF_DAY)
    covering = [Week.model_validate(row) for row in store.weeks_between(first, last)]
    cells = progress.calendar_overlay(covering, grid)
    return {
        "year": year,
        "month": month,
        "monthName": calendar.month_name[month],
        "weeks": [[cell.to_api() for cell in row] for row in cells],
        "today": dates.current_date().isoformat(),
        "currentDay": dates.today_name(),
    }


def habits_for_date(store, value: str) -> dict:
    info = dates.date_info(value)
    week = weeks.get_week(store, info.week_id)
    base = {"date": info.date.isoformat(), "dayName": info.day_name.value, "weekId": info.week_id}

    if week is None:
        return {
            **base,
            "habits": [],
            "completedCount": 0,
            "totalCount": 0,
            "progress": 0,
            "isCurrentWeek": False,
            "message": "No data available for this date",
        }

    view = progress.date_view(week, info.day_name).to_api()
    return {
        **base,
        "weekRange": dates.format_week_range(week.week_start, week.week_end),
        "habits": view["habits"],
        "completedCount": view["completedCount"],
        "totalCount": view["totalCount"],
        "progress": view["progress"],
        "isCurrentWeek": week.is_current,
    }
