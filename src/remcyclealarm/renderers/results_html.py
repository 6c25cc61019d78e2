"""HTML renderer for the calculated-alarms list.

Produces a markup fragment for st.markdown(unsafe_allow_html=True). Styling
comes from the page-level CSS injected by app.py (.alarm-item, .pill, ...).
Each row links to an iOS Shortcuts deep link that sets the alarm.
"""

from __future__ import annotations

import html
import os
from urllib.parse import quote

from remcyclealarm.compute import CYCLE_LENGTH_MINUTES, clock_label, duration_label
from remcyclealarm.models import SleepCycleSuggestion

_DEFAULT_SHORTCUT_NAME = "remcalc"
_SHORTCUT_SCHEME = "shortcuts"


def default_shortcut_name() -> str:
    return os.environ.get("SHORTCUT_NAME", _DEFAULT_SHORTCUT_NAME)


def shortcut_url(
    wake_time: int,
    name: str = _DEFAULT_SHORTCUT_NAME,
    scheme: str = _SHORTCUT_SCHEME,
) -> str:
    """Deep link that runs the alarm shortcut with "HH:MM" as its input.

    Both query values are percent-encoded with no safe characters, so
    "07:15" becomes "07%3A15".
    """
    return (
        f"{scheme}://run-shortcut?name={quote(name, safe='')}"
        f"&input={quote(clock_label(wake_time), safe='')}"
    )


def _render_item(suggestion: SleepCycleSuggestion, shortcut_name: str) -> str:
    wake = html.escape(clock_label(suggestion.wake_time))
    meta = f"{suggestion.cycle_count} × {CYCLE_LENGTH_MINUTES}m cycles"
    if not suggestion.meets_minimum:
        meta += " · below minimum"
    link = html.escape(shortcut_url(suggestion.wake_time, name=shortcut_name))
    duration = html.escape(duration_label(suggestion.total_sleep_minutes))
    item_class = "alarm-item" if suggestion.meets_minimum else "alarm-item short"
    return (
        f"<div class='{item_class}'>"
        f"<div><div class='alarm-time'>{wake}</div>"
        f"<div class='alarm-meta'>{html.escape(meta)}</div></div>"
        f"<div class='alarm-actions'>"
        f"<span class='pill pill-darkblue'>{duration}</span>"
        f"<a class='pill pill-blue' href='{link}'>Set ⏰</a>"
        f"</div></div>"
    )


def render_results_html(
    suggestions: list[SleepCycleSuggestion],
    shortcut_name: str | None = None,
) -> str:
    """Return the markup for the calculated-alarms list.

    Args:
        suggestions: Output of compute_suggestions, in display order.
        shortcut_name: Shortcut to run from the "Set ⏰" links.
            Defaults to SHORTCUT_NAME (remcalc).

    Returns:
        HTML string, one row per suggestion.
    """
    name = shortcut_name or default_shortcut_name()
    rows = "".join(_render_item(s, name) for s in suggestions)
    return f"<div class='alarm-list'>{rows}</div>"
