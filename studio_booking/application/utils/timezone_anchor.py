from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 60 * MS_PER_MINUTE
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

DateLike = date | datetime | str


def to_civil_date(value: DateLike, zone: ZoneInfo) -> date:
    """Resolve a date-like value to the calendar date it names in ``zone``.

    Strings are read as ``YYYY-MM-DD`` (anything after a ``T`` is ignored),
    aware datetimes are converted into the zone first and naive ones are
    taken at face value.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(zone).date()
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip().split("T", 1)[0]
    return date.fromisoformat(text)


def to_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        raise ValueError("Naive datetime cannot be anchored to an instant")
    delta = moment - EPOCH
    return delta.days * 86_400_000 + delta.seconds * 1000 + delta.microseconds // 1000


def from_millis(instant: int, zone: tzinfo) -> datetime:
    return (EPOCH + timedelta(milliseconds=instant)).astimezone(zone)


def civil_to_millis(day: date, minute_of_day: int, zone: ZoneInfo) -> int:
    """Instant of ``minute_of_day`` local wall-clock time on ``day``.

    A minute of 1440 is the following midnight. Wall times skipped by a DST
    gap resolve with the offset in force before the transition.
    """
    local = datetime.combine(day, time()) + timedelta(minutes=minute_of_day)
    return to_millis(local.replace(tzinfo=zone))


def start_of_civil_day(value: DateLike, zone: ZoneInfo) -> int:
    return civil_to_millis(to_civil_date(value, zone), 0, zone)


def offset_minutes(instant: int, zone: ZoneInfo) -> int:
    offset = from_millis(instant, zone).utcoffset() or timedelta(0)
    return int(offset.total_seconds()) // 60


def align_to_next_whole_hour(instant: int, zone: ZoneInfo) -> int:
    """Round up to the next local hour boundary; exact boundaries are kept."""
    shift = offset_minutes(instant, zone) * MS_PER_MINUTE
    local = instant + shift
    aligned_local = -(-local // MS_PER_HOUR) * MS_PER_HOUR
    return aligned_local - shift


def format_local(moment: datetime, zone: ZoneInfo) -> str:
    """Human label such as ``Monday, Oct 19, 2026, 5:00 PM``."""
    local = moment.astimezone(zone)
    return f"{local:%A, %b} {local.day}, {local.year}, {format_clock(local, zone)}"


def parse_instant(text: str) -> int:
    """Epoch milliseconds of an RFC 3339 timestamp that carries an offset."""
    moment = datetime.fromisoformat(str(text).strip().replace("Z", "+00:00"))
    return to_millis(moment)


def now_millis() -> int:
    return to_millis(datetime.now(timezone.utc))


def format_clock(moment: datetime, zone: ZoneInfo) -> str:
    local = moment.astimezone(zone)
    hour = local.hour % 12 or 12
    return f"{hour}:{local:%M} {'AM' if local.hour < 12 else 'PM'}"
