"""Sleep-cycle computation layer: candidate wake times, window selection and time labels."""

import math

from remcyclealarm.models import CalculatorInput, SleepCycleSuggestion

MINUTES_PER_DAY = 1440
CYCLE_LENGTH_MINUTES = 90  # One full REM cycle
MAX_CYCLES = 10  # Caps the displayed options; not derived from input
WINDOW_SIZE = 3


def _round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (round() would go to even)."""
    return math.floor(value + 0.5)


def normalize_minutes(total_minutes: float) -> int:
    """Wrap any minute count into [0, 1440).

    Python's % already returns a non-negative result for a positive modulus,
    so negative offsets wrap to the previous day without a second pass.
    """
    return _round_half_up(total_minutes) % MINUTES_PER_DAY


def duration_minutes(minutes: float) -> int:
    """Round a duration to whole minutes and clamp it at zero."""
    return max(0, _round_half_up(minutes))


def clock_label(total_minutes: float) -> str:
    """Render minutes since midnight as a zero-padded 24-hour "HH:MM" label.

    Out-of-range values wrap, so -30 is "23:30" and 1440 is "00:00".
    """
    hours, minutes = divmod(normalize_minutes(total_minutes), 60)
    return f"{hours:02d}:{minutes:02d}"


def duration_label(minutes: float) -> str:
    """Render a duration as "45m", "2h" or "7h 30m". Negative input renders as "0m"."""
    hours, rest = divmod(duration_minutes(minutes), 60)
    if hours == 0:
        return f"{rest}m"
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h {rest}m"


def enumerate_candidates(query: CalculatorInput) -> list[SleepCycleSuggestion]:
    """Build one suggestion per cycle count, 1 through MAX_CYCLES, in ascending order.

    Args:
        query: Sleep start, fall-asleep latency and minimum sleep.

    Returns:
        Exactly MAX_CYCLES suggestions, one per cycle count.
    """
    latency = duration_minutes(query.fall_asleep_latency)
    min_required: float = query.minimum_sleep_hours * 60
    # Huge finite hours overflow to +/-inf; compare against that unrounded
    if math.isfinite(min_required):
        min_required = _round_half_up(min_required)

    candidates: list[SleepCycleSuggestion] = []
    for n in range(1, MAX_CYCLES + 1):
        total_sleep = n * CYCLE_LENGTH_MINUTES
        since_start = total_sleep + latency
        candidates.append(
            SleepCycleSuggestion(
                cycle_count=n,
                wake_time=normalize_minutes(query.sleep_start + since_start),
                total_sleep_minutes=total_sleep,
                minutes_since_sleep_start=since_start,
                meets_minimum=since_start >= min_required,
            )
        )
    return candidates


def select_window(
    candidates: list[SleepCycleSuggestion],
) -> list[SleepCycleSuggestion]:
    """Pick the suggestions to display from the full candidate list.

    Starts at the first candidate that meets the minimum and takes up to
    WINDOW_SIZE from there. When none meets it, the last WINDOW_SIZE
    candidates (the longest available) are returned instead, so the result
    is never empty.
    """
    first_meet = next(
        (i for i, c in enumerate(candidates) if c.meets_minimum), None
    )
    if first_meet is None:
        return candidates[-WINDOW_SIZE:]
    return candidates[first_meet : first_meet + WINDOW_SIZE]


def compute_suggestions(query: CalculatorInput) -> list[SleepCycleSuggestion]:
    """Top-level entry point: takes a CalculatorInput and returns the suggestions to show.

    Pure function with no I/O or state; call it again whenever any input changes.

    Args:
        query: User input (sleep start, latency, minimum sleep hours).

    Returns:
        One to three suggestions with contiguous, ascending cycle counts.
    """
    return select_window(enumerate_candidates(query))
