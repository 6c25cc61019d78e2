import pytest

from remcyclealarm.compute import (
    MAX_CYCLES,
    clock_label,
    compute_suggestions,
    duration_label,
    enumerate_candidates,
    normalize_minutes,
    select_window,
)
from remcyclealarm.models import CalculatorInput


def _query(sleep_start=0, latency=0, hours=0.0):
    return CalculatorInput(
        sleep_start=sleep_start,
        fall_asleep_latency=latency,
        minimum_sleep_hours=hours,
    )


class TestClockLabel:
    @pytest.mark.parametrize(
        "minutes, expected",
        [
            (0, "00:00"),
            (-30, "23:30"),
            (1440, "00:00"),
            (1439, "23:59"),
            (345, "05:45"),
            (-1440 * 3 + 61, "01:01"),
        ],
    )
    def test_known_labels(self, minutes, expected):
        assert clock_label(minutes) == expected

    def test_periodic_over_whole_days(self):
        for x in (-1500, -30, 0, 7, 719, 1439, 2000):
            for k in (-3, -1, 1, 5):
                assert clock_label(x) == clock_label(x + 1440 * k)

    def test_fractional_minutes_round(self):
        assert clock_label(59.6) == "01:00"
        assert clock_label(0.4) == "00:00"


class TestDurationLabel:
    @pytest.mark.parametrize(
        "minutes, expected",
        [
            (0, "0m"),
            (45, "45m"),
            (60, "1h"),
            (90, "1h 30m"),
            (540, "9h"),
            (-5, "0m"),
            (89.5, "1h 30m"),
            (0.4, "0m"),
        ],
    )
    def test_labels(self, minutes, expected):
        assert duration_label(minutes) == expected


def test_normalize_minutes_wraps_negative():
    assert normalize_minutes(-1) == 1439
    assert normalize_minutes(1440 + 5) == 5


def test_enumerate_candidates_produces_every_cycle_count():
    candidates = enumerate_candidates(_query(sleep_start=60, latency=5, hours=3))
    assert [c.cycle_count for c in candidates] == list(range(1, MAX_CYCLES + 1))
    first = candidates[0]
    assert first.total_sleep_minutes == 90
    assert first.minutes_since_sleep_start == 95
    assert first.wake_time == 155
    assert first.meets_minimum is False
    # 2 cycles + 5 min = 185 >= 180
    assert candidates[1].meets_minimum is True


def test_end_to_end_evening_example():
    suggestions = compute_suggestions(_query(sleep_start=22 * 60 + 30, latency=15, hours=6))

    assert [s.cycle_count for s in suggestions] == [4, 5, 6]
    assert [s.minutes_since_sleep_start for s in suggestions] == [375, 465, 555]
    assert [clock_label(s.wake_time) for s in suggestions] == ["04:45", "06:15", "07:45"]
    assert [duration_label(s.total_sleep_minutes) for s in suggestions] == [
        "6h",
        "7h 30m",
        "9h",
    ]
    assert all(s.meets_minimum for s in suggestions)


def test_zero_minimum_starts_at_one_cycle():
    suggestions = compute_suggestions(_query(sleep_start=600, latency=30, hours=0))
    assert suggestions[0].cycle_count == 1
    assert suggestions[0].meets_minimum is True
    assert len(suggestions) == 3


def test_unreachable_minimum_returns_longest_three():
    # 10 cycles + 30 min = 930 min < 16h
    suggestions = compute_suggestions(_query(sleep_start=0, latency=30, hours=16))
    assert [s.cycle_count for s in suggestions] == [8, 9, 10]
    assert not any(s.meets_minimum for s in suggestions)


def test_window_shrinks_near_the_cycle_cap():
    # 810 min is met first at 9 cycles
    suggestions = compute_suggestions(_query(hours=13.5))
    assert [s.cycle_count for s in suggestions] == [9, 10]

    # 900 min is met only at 10 cycles
    suggestions = compute_suggestions(_query(hours=15))
    assert [s.cycle_count for s in suggestions] == [10]
    assert suggestions[0].meets_minimum is True

    suggestions = compute_suggestions(_query(hours=15.5))
    assert [s.cycle_count for s in suggestions] == [8, 9, 10]


def test_latency_counts_towards_minimum():
    # 4 cycles alone (360) miss 6.5h (390); with 30 min latency they meet it
    without = compute_suggestions(_query(latency=0, hours=6.5))
    with_latency = compute_suggestions(_query(latency=30, hours=6.5))
    assert without[0].cycle_count == 5
    assert with_latency[0].cycle_count == 4


def test_fractional_minimum_is_rounded():
    # 6.25h = 375 min; 4 cycles + 15 = 375 meets exactly
    suggestions = compute_suggestions(_query(latency=15, hours=6.25))
    assert suggestions[0].cycle_count == 4
    assert suggestions[0].minutes_since_sleep_start == 375


def test_out_of_range_inputs_normalize():
    negative_start = compute_suggestions(_query(sleep_start=-60, latency=0, hours=0))
    assert clock_label(negative_start[0].wake_time) == "00:30"

    late_start = compute_suggestions(_query(sleep_start=1440 * 2 + 600, latency=0, hours=0))
    assert clock_label(late_start[0].wake_time) == "11:30"

    negative_latency = compute_suggestions(_query(latency=-45, hours=0))
    assert negative_latency[0].minutes_since_sleep_start == 90


@pytest.mark.parametrize("latency", [0, 5, 15, 30, 200])
@pytest.mark.parametrize("hours", [0, 0.5, 3, 6, 7.5, 9, 12, 14, 15, 24])
def test_window_is_small_ordered_and_contiguous(latency, hours):
    suggestions = compute_suggestions(_query(sleep_start=1380, latency=latency, hours=hours))
    assert 1 <= len(suggestions) <= 3
    counts = [s.cycle_count for s in suggestions]
    assert counts == list(range(counts[0], counts[0] + len(counts)))
    for s in suggestions:
        assert 0 <= s.wake_time < 1440
        assert s.total_sleep_minutes == s.cycle_count * 90


def test_select_window_keeps_unmet_tail_order():
    candidates = enumerate_candidates(_query(hours=100))
    assert select_window(candidates) == candidates[-3:]


def test_overflowing_minimum_returns_longest_three():
    # 1e307 hours is finite but overflows to inf once converted to minutes
    suggestions = compute_suggestions(_query(hours=1e307))
    assert [s.cycle_count for s in suggestions] == [8, 9, 10]
    assert not any(s.meets_minimum for s in suggestions)


def test_overflowing_negative_minimum_is_always_met():
    suggestions = compute_suggestions(_query(hours=-1e307))
    assert [s.cycle_count for s in suggestions] == [1, 2, 3]
    assert all(s.meets_minimum for s in suggestions)
