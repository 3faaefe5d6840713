"""Moment-style date pattern rendering.

Note formats are stored in the token syntax used by Markdown vault tools
("YYYY-MM-DD", "YYYY-[W]ww", "YYYY-[Q]Q"), which strftime cannot express
(quarters, locale weeks, bracket literals). Unknown characters pass
through unchanged; patterns are never validated.
"""

import re
from datetime import datetime

from .periods import quarter_of, week_of_year, week_year

_TOKEN_RE = re.compile(
    r"\[([^\[\]]*)\]"
    r"|(YYYY|YY|gggg|GGGG|Qo|Q|MMMM|MMM|Mo|MM|M|DDDD|DDD|Do|DD|D"
    r"|dddd|ddd|dd|do|d|E|wo|ww|w|Wo|WW|W|HH|H|hh|h|mm|m|ss|s|A|a)"
)

_MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
_DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def ordinal(n: int) -> str:
    """English ordinal: 1st, 2nd, 3rd, 4th, 11th, 22nd."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _render_token(token: str, d: datetime, week_start: str) -> str:
    # Sunday=0 ... Saturday=6, like the host date library
    day_index = d.isoweekday() % 7
    hour12 = d.hour % 12 or 12

    if token == "YYYY":
        return f"{d.year:04d}"
    if token == "YY":
        return f"{d.year % 100:02d}"
    if token == "gggg":
        return f"{week_year(d, week_start):04d}"
    if token == "GGGG":
        return f"{d.isocalendar()[0]:04d}"
    if token == "Q":
        return str(quarter_of(d))
    if token == "Qo":
        return ordinal(quarter_of(d))
    if token == "MMMM":
        return _MONTH_NAMES[d.month - 1]
    if token == "MMM":
        return _MONTH_NAMES[d.month - 1][:3]
    if token == "MM":
        return f"{d.month:02d}"
    if token == "Mo":
        return ordinal(d.month)
    if token == "M":
        return str(d.month)
    if token == "DDDD":
        return f"{d.timetuple().tm_yday:03d}"
    if token == "DDD":
        return str(d.timetuple().tm_yday)
    if token == "DD":
        return f"{d.day:02d}"
    if token == "Do":
        return ordinal(d.day)
    if token == "D":
        return str(d.day)
    if token == "dddd":
        return _DAY_NAMES[d.weekday()]
    if token == "ddd":
        return _DAY_NAMES[d.weekday()][:3]
    if token == "dd":
        return _DAY_NAMES[d.weekday()][:2]
    if token == "do":
        return ordinal(day_index)
    if token == "d":
        return str(day_index)
    if token == "E":
        return str(d.isoweekday())
    if token == "ww":
        return f"{week_of_year(d, week_start):02d}"
    if token == "wo":
        return ordinal(week_of_year(d, week_start))
    if token == "w":
        return str(week_of_year(d, week_start))
    if token == "WW":
        return f"{d.isocalendar()[1]:02d}"
    if token == "Wo":
        return ordinal(d.isocalendar()[1])
    if token == "W":
        return str(d.isocalendar()[1])
    if token == "HH":
        return f"{d.hour:02d}"
    if token == "H":
        return str(d.hour)
    if token == "hh":
        return f"{hour12:02d}"
    if token == "h":
        return str(hour12)
    if token == "mm":
        return f"{d.minute:02d}"
    if token == "m":
        return str(d.minute)
    if token == "ss":
        return f"{d.second:02d}"
    if token == "s":
        return str(d.second)
    if token == "A":
        return "PM" if d.hour >= 12 else "AM"
    if token == "a":
        return "pm" if d.hour >= 12 else "am"
    return token


def format_date(d: datetime, pattern: str, week_start: str = "locale") -> str:
    """Render d with a moment-style pattern.

    Args:
        d: Instant to render
        pattern: Pattern such as "YYYY-MM-DD" or "YYYY-[W]ww"; text in
            square brackets is emitted literally
        week_start: Week convention for the locale week tokens (w, ww, gggg)

    Returns:
        Rendered string
    """

    def _replace(match: re.Match) -> str:
        literal, token = match.group(1), match.group(2)
        if literal is not None:
            return literal
        return _render_token(token, d, week_start)

    return _TOKEN_RE.sub(_replace, pattern)
