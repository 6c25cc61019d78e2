"""Data model definitions. Explicit boundaries between input, compute and render layers."""

from dataclasses import dataclass
from typing import Literal

FortuneSource = Literal["primary", "proxy", "fallback"]


@dataclass(frozen=True)
class CalculatorInput:
    """Raw user input. Normalized by the calculator, not here."""

    sleep_start: int  # Minutes since local midnight (0-1439)
    fall_asleep_latency: float  # Minutes between lying down and falling asleep
    minimum_sleep_hours: float  # Lower bound on sleep (UI: 0-12h, 0.5h steps)


@dataclass(frozen=True)
class SleepCycleSuggestion:
    """A single candidate wake time. Input to the results renderer."""

    cycle_count: int  # Number of full 90-minute cycles (>= 1)
    wake_time: int  # Minutes since local midnight, in [0, 1440)
    total_sleep_minutes: int  # cycle_count * 90
    minutes_since_sleep_start: int  # total_sleep_minutes + fall-asleep latency
    meets_minimum: bool  # minutes_since_sleep_start >= minimum sleep


@dataclass(frozen=True)
class Fortune:
    """Decorative fortune text and where it came from."""

    text: str
    source: FortuneSource  # "primary" | "proxy" | "fallback"
