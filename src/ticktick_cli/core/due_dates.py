"""Due-date recognition in task titles - pure logic, no I/O.

`extract_due_date` scans a title for one date expression, removes it, and
returns the cleaned title plus the date. Recognizers are tried in order at
each token position; the first match wins and ends the scan:

    1. "next week"                -> Monday of the following week
    2. month name sequences       -> "feb 1", "feb 1st 2027", "jan 2029"
    3. numeric dates              -> "2026-03-01", "6/01", "6/1/27", "6-1-2027"
    4. relative words             -> "today", "tomorrow", "fri", "friday"

Tokens starting with #, ~ or ! are markers and never read as dates.
"""

import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Callable

MARKER_PREFIXES = ("#", "~", "!")

MONTHS: dict[str, int] = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

# Monday = 0, matching date.weekday()
WEEKDAYS: dict[str, int] = {
    "mon": 0, "monday": 0,
    "tue": 1, "tues": 1, "tuesday": 1,
    "wed": 2, "wednesday": 2,
    "thu": 3, "thurs": 3, "thursday": 3,
    "fri": 4, "friday": 4,
    "sat": 5, "saturday": 5,
    "sun": 6, "sunday": 6,
}

_EDGE_PUNCTUATION = re.compile(r"^[^A-Za-z0-9/-]+|[^A-Za-z0-9/-]+$")
_ORDINAL_SUFFIXES = ("st", "nd", "rd", "th")

# (tokens, index, today) -> (tokens consumed, date) or None
DateMatcher = Callable[[list[str], int, date], tuple[int, date] | None]


def normalize_date_token(token: str) -> str:
    """Trim surrounding punctuation (keeping / and -) and lowercase."""
    return _EDGE_PUNCTUATION.sub("", token).lower()


def _parse_int(text: str) -> int | None:
    if not text or not (text.isascii() and text.isdigit()):
        return None
    return int(text)


def _make_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def infer_year_for_month_day(month: int, day: int, today: date) -> date | None:
    """
    Place a month/day on the calendar relative to `today`.

    This year if the date is today or later, otherwise next year.
    """
    this_year = _make_date(today.year, month, day)
    if this_year is None:
        return None
    if this_year >= today:
        return this_year
    return _make_date(today.year + 1, month, day)


def parse_year_token(token: str) -> int | None:
    """Two-digit years are 20xx, four-digit years are literal."""
    year = _parse_int(token)
    if year is None:
        return None
    match len(token):
        case 2:
            return 2000 + year
        case 4:
            return year
        case _:
            return None


def parse_day_token(token: str) -> int | None:
    """Day of month with an optional ordinal suffix ("3", "3rd")."""
    for suffix in _ORDINAL_SUFFIXES:
        if token.endswith(suffix):
            token = token[: -len(suffix)]
            break
    day = _parse_int(token)
    if day is None or not 1 <= day <= 31:
        return None
    return day


def parse_month_token(token: str) -> int | None:
    return MONTHS.get(token)


def parse_weekday_token(token: str) -> int | None:
    return WEEKDAYS.get(token)


def next_or_same_weekday(today: date, weekday: int) -> date:
    """The next date falling on `weekday`, counting today."""
    offset = (weekday - today.weekday()) % 7
    return today + timedelta(days=offset)


def start_of_week(today: date) -> date:
    """Monday of the week containing `today`."""
    return today - timedelta(days=today.weekday())


def start_of_next_week(today: date) -> date:
    return start_of_week(today) + timedelta(days=7)


def parse_numeric_date_token(token: str, today: date) -> date | None:
    """
    Parse a single numeric date token.

    Accepts ISO "YYYY-MM-DD", month/day ("6/01", year inferred) and
    month/day/year with "/" or "-" separators ("6/1/27", "6-1-2027").
    """
    try:
        return datetime.strptime(token, "%Y-%m-%d").date()
    except ValueError:
        pass

    if "/" in token:
        separator = "/"
    elif token.count("-") == 2:
        separator = "-"
    else:
        return None

    parts = token.split(separator)
    if len(parts) not in (2, 3):
        return None

    month = _parse_int(parts[0])
    day = _parse_int(parts[1])
    if month is None or day is None:
        return None

    if len(parts) == 2:
        return infer_year_for_month_day(month, day, today)

    year = parse_year_token(parts[2])
    if year is None:
        return None
    return _make_date(year, month, day)


# ============== Matchers ==============


def match_next_week(tokens: list[str], index: int, today: date) -> tuple[int, date] | None:
    if normalize_date_token(tokens[index]) != "next":
        return None
    if index + 1 >= len(tokens) or normalize_date_token(tokens[index + 1]) != "week":
        return None
    return 2, start_of_next_week(today)


def match_month_sequence(tokens: list[str], index: int, today: date) -> tuple[int, date] | None:
    month = parse_month_token(normalize_date_token(tokens[index]))
    if month is None or index + 1 >= len(tokens):
        return None

    second = normalize_date_token(tokens[index + 1])

    # "jan 2029" means the first of that month
    year = parse_year_token(second)
    if year is not None:
        first = _make_date(year, month, 1)
        return (2, first) if first else None

    day = parse_day_token(second)
    if day is None:
        return None

    if index + 2 < len(tokens):
        year = parse_year_token(normalize_date_token(tokens[index + 2]))
        if year is not None:
            explicit = _make_date(year, month, day)
            return (3, explicit) if explicit else None

    inferred = infer_year_for_month_day(month, day, today)
    return (2, inferred) if inferred else None


def match_numeric_date(tokens: list[str], index: int, today: date) -> tuple[int, date] | None:
    parsed = parse_numeric_date_token(normalize_date_token(tokens[index]), today)
    return (1, parsed) if parsed else None


def match_relative_day(tokens: list[str], index: int, today: date) -> tuple[int, date] | None:
    word = normalize_date_token(tokens[index])
    if word == "today":
        return 1, today
    if word == "tomorrow":
        return 1, today + timedelta(days=1)
    weekday = parse_weekday_token(word)
    if weekday is None:
        return None
    return 1, next_or_same_weekday(today, weekday)


DATE_MATCHERS: list[DateMatcher] = [
    match_next_week,
    match_month_sequence,
    match_numeric_date,
    match_relative_day,
]


def extract_due_date(
    raw: str,
    today: date,
    matchers: list[DateMatcher] | None = None,
) -> tuple[str, date | None]:
    """
    Find the first date expression in `raw`.

    Returns (title without the expression, date). When nothing matches the
    title is `raw` stripped and the date is None. The title may be empty;
    callers decide whether that is an error.
    """
    matchers = DATE_MATCHERS if matchers is None else matchers
    tokens = raw.split()

    for index, token in enumerate(tokens):
        if token.startswith(MARKER_PREFIXES):
            continue
        if not normalize_date_token(token):
            continue

        for matcher in matchers:
            result = matcher(tokens, index, today)
            if result is None:
                continue
            consumed, found = result
            remaining = tokens[:index] + tokens[index + consumed :]
            return " ".join(remaining), found

    return raw.strip(), None


def format_due_date(value: date, tz: tzinfo | None = None) -> str | None:
    """
    Render `value` as TickTick expects: local midnight converted to UTC,
    e.g. "2026-02-20T05:00:00.000+0000".

    `tz` defaults to the system local zone. Ambiguous midnights resolve to
    the earlier instant (fold=0).
    """
    try:
        local_midnight = datetime.combine(value, time.min)
        if tz is None:
            local_dt = local_midnight.astimezone()
        else:
            local_dt = local_midnight.replace(tzinfo=tz)
        utc_dt = local_dt.astimezone(timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None

    millis = utc_dt.microsecond // 1000
    return f"{utc_dt:%Y-%m-%dT%H:%M:%S}.{millis:03d}+0000"
