"""Wall-clock helpers: browser-local "now" and the sleep-start follow policy."""

from datetime import datetime, time

from remcyclealarm.compute import MINUTES_PER_DAY, normalize_minutes

NOW_POLL_SECONDS = 15  # How often the page re-reads the clock
FOLLOW_TOLERANCE_MINUTES = 1


def minutes_from_time(value: time) -> int:
    """Minutes since midnight for a wall-clock time (seconds are dropped)."""
    return value.hour * 60 + value.minute


def time_from_minutes(total_minutes: float) -> time:
    """Wall-clock time for a minute count, wrapping into a single day."""
    hours, minutes = divmod(normalize_minutes(total_minutes), 60)
    return time(hours, minutes)


def local_now_minutes(utc_now: datetime, tz_offset_minutes: int) -> int:
    """Return the browser's current minute of the day.

    Args:
        utc_now: Current UTC time (naive or aware; only hour/minute are read).
        tz_offset_minutes: Browser offset as reported by
            ``Date.getTimezoneOffset()``, i.e. UTC minus local
            (-540 for UTC+9, 300 for UTC-5).

    Returns:
        Minutes since local midnight, in [0, 1440).
    """
    return normalize_minutes(minutes_from_time(utc_now.time()) - tz_offset_minutes)


def server_tz_offset_minutes(now: datetime | None = None) -> int:
    """Server-local offset in the same UTC-minus-local convention as the browser."""
    now = now or datetime.now().astimezone()
    offset = now.utcoffset()
    if offset is None:
        return 0
    return -int(offset.total_seconds() // 60)


def follow_now(
    sleep_start: int, now: int, tolerance: int = FOLLOW_TOLERANCE_MINUTES
) -> int:
    """Decide the sleep start after the clock ticks over to `now`.

    A sleep start within `tolerance` minutes of now (measured around the
    clock, so 23:59 is next to 00:00) keeps tracking it; anything else is
    a choice the user made and is kept.
    """
    drift = abs(normalize_minutes(sleep_start) - normalize_minutes(now))
    drift = min(drift, MINUTES_PER_DAY - drift)
    return normalize_minutes(now) if drift <= tolerance else sleep_start
