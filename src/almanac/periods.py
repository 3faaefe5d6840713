"""Period boundaries and calendar stepping.

Every function returns a new datetime in the same timezone as its input.
Month lengths and leap years are left to datetime and relativedelta.
"""

from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

# datetime.weekday() numbering: Monday=0 ... Sunday=6
_WEEK_START_DAYS = {
    "monday": 0,
    "sunday": 6,
}

# Week start used when the setting is "locale" (the date library's default locale)
LOCALE_WEEK_START = "sunday"

_VIEW_STEPS = {
    "year": relativedelta(years=1),
    "quarter": relativedelta(months=3),
    "week": relativedelta(weeks=1),
    "month": relativedelta(months=1),
}


def resolve_week_start(week_start: str) -> str:
    """Map a week_start setting to a concrete day name ("sunday" or "monday")."""
    if week_start == "locale":
        return LOCALE_WEEK_START
    if week_start not in _WEEK_START_DAYS:
        raise ValueError(f"Unknown week start: {week_start}")
    return week_start


def start_of_day(d: datetime) -> datetime:
    return d.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(d: datetime, week_start: str = "locale") -> datetime:
    """Get the first day of the week containing d.

    Args:
        d: Any instant
        week_start: "sunday", "monday" or "locale"

    Returns:
        Midnight of the first day of that week
    """
    first_weekday = _WEEK_START_DAYS[resolve_week_start(week_start)]
    days_back = (d.weekday() - first_weekday) % 7
    return start_of_day(d) - timedelta(days=days_back)


def end_of_week(d: datetime, week_start: str = "locale") -> datetime:
    """Get the last instant of the week containing d."""
    last_day = start_of_week(d, week_start) + timedelta(days=6)
    return last_day.replace(hour=23, minute=59, second=59, microsecond=999999)


def start_of_month(d: datetime) -> datetime:
    return start_of_day(d).replace(day=1)


def start_of_quarter(d: datetime) -> datetime:
    """Get the first day of the quarter containing d (Jan, Apr, Jul or Oct 1st)."""
    quarter_index = (d.month - 1) // 3
    return start_of_day(d).replace(month=quarter_index * 3 + 1, day=1)


def start_of_year(d: datetime) -> datetime:
    return start_of_day(d).replace(month=1, day=1)


def quarter_of(d: datetime) -> int:
    """Quarter number 1-4."""
    return (d.month - 1) // 3 + 1


def start_of_period(d: datetime, kind: str, week_start: str = "locale") -> datetime:
    """Dispatch to the boundary resolver for a period kind.

    Accepts both period kinds ("weekly") and view modes ("week").
    Daily notes resolve to the start of the day.
    """
    if kind in ("daily", "day"):
        return start_of_day(d)
    if kind in ("weekly", "week"):
        return start_of_week(d, week_start)
    if kind in ("monthly", "month"):
        return start_of_month(d)
    if kind in ("quarterly", "quarter"):
        return start_of_quarter(d)
    if kind in ("yearly", "year"):
        return start_of_year(d)
    raise ValueError(f"Unknown period: {kind}")


def shift(d: datetime, view_mode: str, steps: int = 1) -> datetime:
    """Move d by a number of navigation steps for a view mode.

    year: 1 year, quarter: 3 months, week: 1 week, anything else: 1 month.
    End-of-month days are clamped (Jan 31 + 1 month = Feb 28/29).
    """
    step = _VIEW_STEPS.get(view_mode, _VIEW_STEPS["month"])
    return d + step * steps


def week_year(d: datetime, week_start: str = "locale") -> int:
    """Year that owns the locale week containing d.

    Week 1 is the week that contains January 1st, so a week straddling
    the new year belongs to the later year.
    """
    return (start_of_week(d, week_start) + timedelta(days=6)).year


def week_of_year(d: datetime, week_start: str = "locale") -> int:
    """Locale week number (1-based) of d."""
    week_begin = start_of_week(d, week_start)
    year = week_year(d, week_start)
    first_week = start_of_week(week_begin.replace(year=year, month=1, day=1), week_start)
    return (week_begin.date() - first_week.date()).days // 7 + 1
