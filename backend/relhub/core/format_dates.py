"""Date Handling — timestamp parsing, calendar-day arithmetic, and display labels.

Invariants:
    - parse_timestamp never raises: malformed or empty input yields None
    - Naive datetimes are read as UTC
    - "Today" is the calendar day of `now` in `now`'s timezone
    - Every label function returns a marked fallback instead of raising

Design Decisions:
    - Calendar-day comparisons (overdue cutoff, 7-day windows) go through
      start_of_day / calendar_days_between; ordering uses full timestamps
    - Month and weekday names are constants, not strftime, so labels do not
      depend on the process locale
"""

from datetime import datetime, time, timezone

UNKNOWN_LABEL = "unknown"
NO_DATE_LABEL = "No date"
NO_OPEN_TASKS_LABEL = "No open tasks"

_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
_WEEKDAYS = (
    "Monday", "Tuesday", "Wednesday", "Thursday",
    "Friday", "Saturday", "Sunday",
)

_MINUTES_IN_DAY = 1440
_MINUTES_IN_MONTH = 43_200
_MINUTES_IN_TWO_MONTHS = 86_400


# ─── Parsing & conversion ───────────────────────────────────────

def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 string (or pass through a datetime). None when unparseable."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


def as_aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def to_local(dt: datetime, now: datetime) -> datetime:
    """Express `dt` in the timezone of `now`."""
    return as_aware(dt).astimezone(as_aware(now).tzinfo)


def to_iso(dt: datetime) -> str:
    """Serialize as UTC with millisecond precision and a Z suffix."""
    utc = as_aware(dt).astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def timestamp_value(value: object) -> float | None:
    """Epoch seconds for sorting, or None when unparseable."""
    parsed = parse_timestamp(value)
    return as_aware(parsed).timestamp() if parsed else None


def start_of_day(now: datetime) -> datetime:
    """Midnight of `now`'s calendar day, in `now`'s timezone."""
    aware = as_aware(now)
    return datetime.combine(aware.date(), time.min, tzinfo=aware.tzinfo)


def calendar_days_between(later: datetime, earlier: datetime, now: datetime) -> int:
    """Signed number of calendar-day boundaries from `earlier` to `later`."""
    return (to_local(later, now).date() - to_local(earlier, now).date()).days


# ─── Formatting ─────────────────────────────────────────────────

def _clock(dt: datetime, spaced: bool = True) -> str:
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d}{' ' if spaced else ''}{meridiem}"


def format_relative(dt: datetime, now: datetime) -> str:
    """'today at 3:04 PM', 'last Monday at ...', or MM/DD/YYYY beyond a week."""
    local = to_local(dt, now)
    diff = calendar_days_between(dt, now, now)
    clock = _clock(local)
    weekday = _WEEKDAYS[local.weekday()]
    if diff < -6 or diff > 6:
        return f"{local.month:02d}/{local.day:02d}/{local.year:04d}"
    if diff < -1:
        return f"last {weekday} at {clock}"
    if diff == -1:
        return f"yesterday at {clock}"
    if diff == 0:
        return f"today at {clock}"
    if diff == 1:
        return f"tomorrow at {clock}"
    return f"{weekday} at {clock}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_distance(dt: datetime, now: datetime) -> str:
    """Human distance with direction: 'in 3 days', '2 hours ago'."""
    seconds = (as_aware(dt) - as_aware(now)).total_seconds()
    minutes = round(abs(seconds) / 60)

    if minutes == 0:
        text = "less than a minute"
    elif minutes < 45:
        text = _plural(minutes, "minute")
    elif minutes < 90:
        text = "about 1 hour"
    elif minutes < _MINUTES_IN_DAY:
        text = f"about {_plural(round(minutes / 60), 'hour')}"
    elif minutes < 2520:
        text = "1 day"
    elif minutes < _MINUTES_IN_MONTH:
        text = _plural(round(minutes / _MINUTES_IN_DAY), "day")
    elif minutes < _MINUTES_IN_TWO_MONTHS:
        text = f"about {_plural(round(minutes / _MINUTES_IN_MONTH), 'month')}"
    elif minutes < _MINUTES_IN_MONTH * 12:
        text = _plural(minutes // _MINUTES_IN_MONTH, "month")
    else:
        text = f"about {_plural(minutes // (_MINUTES_IN_DAY * 365), 'year')}"

    return f"in {text}" if seconds > 0 else f"{text} ago"


def format_timeline_stamp(dt: datetime, now: datetime) -> str:
    """'Mon, Jan 1 • 3:04PM' in `now`'s timezone."""
    local = to_local(dt, now)
    weekday = _WEEKDAYS[local.weekday()][:3]
    return f"{weekday}, {_MONTHS[local.month - 1]} {local.day} • {_clock(local, spaced=False)}"


def format_due_stamp(dt: datetime, now: datetime) -> str:
    """'Jan 1, 2024 at 3:04PM' in `now`'s timezone."""
    local = to_local(dt, now)
    return (
        f"{_MONTHS[local.month - 1]} {local.day}, {local.year} "
        f"at {_clock(local, spaced=False)}"
    )


# ─── Labels over raw stored strings ─────────────────────────────

def last_touch_label(value: str, now: datetime) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return UNKNOWN_LABEL
    return format_relative(parsed, now)


def due_badge_label(value: str, now: datetime) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return NO_DATE_LABEL
    return f"Task due {format_relative(parsed, now)}"


def due_distance_label(value: str, now: datetime) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return NO_DATE_LABEL
    return f"due {format_distance(parsed, now)}"


def stamp_label(value: str, now: datetime, *, timeline: bool) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return NO_DATE_LABEL
    if timeline:
        return format_timeline_stamp(parsed, now)
    return format_due_stamp(parsed, now)
