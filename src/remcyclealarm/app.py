"""REM Cycle Alarm: Streamlit app for wake-up times aligned to 90-minute sleep cycles."""

import datetime
import html
import logging

import streamlit as st
from dotenv import load_dotenv
from streamlit_js_eval import streamlit_js_eval

load_dotenv()

from remcyclealarm.clock import (  # noqa: E402
    NOW_POLL_SECONDS,
    follow_now,
    local_now_minutes,
    minutes_from_time,
    server_tz_offset_minutes,
    time_from_minutes,
)
from remcyclealarm.compute import compute_suggestions  # noqa: E402
from remcyclealarm.fortune import fetch_fortune  # noqa: E402
from remcyclealarm.logsetup import configure_logging  # noqa: E402
from remcyclealarm.models import CalculatorInput  # noqa: E402
from remcyclealarm.renderers.results_html import render_results_html  # noqa: E402

configure_logging()
logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="REM Cycle Alarm",
    page_icon="⏰",
    layout="centered",
    initial_sidebar_state="collapsed",
)

_FALL_ASLEEP_OPTIONS = (0, 5, 15, 30)
_DEFAULT_FALL_ASLEEP = 15
_DEFAULT_MIN_SLEEP_HOURS = 6.0
_SHORTCUT_INSTALL_URL = "https://www.icloud.com/shortcuts/c03903c8fe4746a8aa17ec99340fa663"


def _now_minutes() -> int:
    """Browser-local minute of the day; server offset until the browser reports its own."""
    offset = st.session_state.get("tz_offset")
    if offset is None:
        offset = server_tz_offset_minutes()
    return local_now_minutes(datetime.datetime.now(datetime.timezone.utc), offset)


# --- Session state initialization ---
if "sleep_start" not in st.session_state:
    st.session_state.sleep_start = time_from_minutes(_now_minutes())
if "last_now" not in st.session_state:
    st.session_state.last_now = _now_minutes()
if "fall_asleep" not in st.session_state:
    st.session_state.fall_asleep = _DEFAULT_FALL_ASLEEP
if "min_sleep_hours" not in st.session_state:
    st.session_state.min_sleep_hours = _DEFAULT_MIN_SLEEP_HOURS
if "fortune" not in st.session_state:
    st.session_state.fortune = None

# --- Timezone detection (browser-first via streamlit-js-eval) ---
# getTimezoneOffset() is read once and cached in session_state. The first
# run gets None back; the rerun triggered by streamlit_js_eval fills it in.
# A sleep start that was still tracking the server clock moves to the
# browser clock at that point.
if "tz_offset" not in st.session_state:
    _browser_offset: int | None = streamlit_js_eval(
        js_expressions="new Date().getTimezoneOffset()", key="_tz_detect", height=0
    )
    if _browser_offset is not None:
        _server_now = _now_minutes()
        _current = minutes_from_time(st.session_state.sleep_start)
        st.session_state.tz_offset = int(_browser_offset)
        if follow_now(_current, _server_now) == _server_now:
            st.session_state.sleep_start = time_from_minutes(_now_minutes())
        st.session_state.last_now = _now_minutes()
        logger.debug("browser tz offset %s", _browser_offset)

# --- Dark theme CSS (static) ---
st.markdown(
    """
    <style>
    /* Hide streamlit_js_eval invisible iframe */
    iframe[src*="streamlit_js_eval"] { display: none !important; }
    /* Full background */
    html, body, [data-testid="stAppViewContainer"], [data-testid="stMain"] {
        background-color: #0a1930 !important;
        color: #ffffff;
    }
    /* Hide header/toolbar */
    [data-testid="stHeader"], [data-testid="stToolbar"] {
        display: none !important;
    }
    [data-testid="stMainBlockContainer"] {
        padding-top: 1.5rem !important;
        max-width: 560px !important;
    }
    /* Cards */
    [data-testid="stVerticalBlockBorderWrapper"] {
        background-color: rgba(16, 42, 67, 0.95) !important;
        border: 1px solid rgba(255,255,255,0.08) !important;
        border-radius: 14px !important;
    }
    .title { font-size: 1.6rem; font-weight: 700; color: #ffffff; }
    .subtitle { color: #9fb3c8; font-size: 0.9rem; line-height: 1.5; }
    .muted { color: #9fb3c8; }
    /* Inputs */
    [data-testid="stTimeInput"] input {
        background-color: rgba(255,255,255,0.06) !important;
        color: #ffffff !important;
        border-radius: 14px !important;
    }
    /* Buttons */
    [data-testid="stButton"] button {
        background-color: rgba(63, 169, 245, 0.15) !important;
        color: #3fa9f5 !important;
        border: 1px solid rgba(63, 169, 245, 0.6) !important;
        border-radius: 10px !important;
        font-weight: 600;
        white-space: nowrap !important;
    }
    [data-testid="stButton"] button:hover {
        background-color: rgba(63, 169, 245, 0.3) !important;
    }
    /* Labels */
    label, [data-testid="stWidgetLabel"] p {
        color: #9fb3c8 !important;
        font-size: 0.85rem !important;
    }
    /* Results list */
    .results-title { font-size: 1.1rem; font-weight: 600; color: #ffffff; margin-bottom: 0.4rem; }
    .alarm-list { display: flex; flex-direction: column; gap: 0.5rem; }
    .alarm-item {
        display: flex;
        justify-content: space-between;
        align-items: center;
        padding: 0.7rem 0.9rem;
        border-radius: 12px;
        background: rgba(255,255,255,0.04);
        border: 1px solid rgba(255,255,255,0.06);
    }
    .alarm-item.short { opacity: 0.7; }
    .alarm-time { font-size: 1.6rem; font-weight: 700; color: #ffffff; letter-spacing: 0.02em; }
    .alarm-meta { color: #9fb3c8; font-size: 0.8rem; }
    .alarm-actions { display: flex; gap: 8px; align-items: center; }
    .pill {
        padding: 0.25rem 0.7rem;
        border-radius: 999px;
        font-size: 0.85rem;
        font-weight: 600;
        text-decoration: none !important;
        white-space: nowrap;
    }
    .pill-darkblue { background: #102a43; color: #9fb3c8; border: 1px solid rgba(255,255,255,0.1); }
    .pill-blue { background: #3fa9f5; color: #0a1930 !important; }
    /* Fortune */
    .fortune-text { color: #d9e2ec; font-style: italic; line-height: 1.7; text-align: center; }
    .fortune-text.muted { color: #9fb3c8; }
    </style>
    """,
    unsafe_allow_html=True,
)


# --- Callbacks ---
def _set_sleep_start_now() -> None:
    st.session_state.sleep_start = time_from_minutes(_now_minutes())


def _reset_inputs() -> None:
    st.session_state.fall_asleep = _DEFAULT_FALL_ASLEEP
    st.session_state.min_sleep_hours = _DEFAULT_MIN_SLEEP_HOURS


def _refresh_fortune() -> None:
    st.session_state.fortune = None


@st.dialog("Enable Shortcut Alarms")
def _shortcut_info() -> None:
    st.markdown(
        f"""
        1. Install the [remcalc Shortcut]({_SHORTCUT_INSTALL_URL})
        2. In iOS: go to **Settings → Shortcuts → Allow Untrusted Shortcuts**
        3. After that, the ⏰ buttons here will open your Clock app and set alarms.
        """
    )


# --- Header ---
head_col, reset_col, info_col = st.columns([6, 2, 1], vertical_alignment="center")
with head_col:
    st.markdown(
        "<div class='title'>REM Cycle Alarm</div>"
        "<div class='subtitle'>Pick your sleep start, add time to fall asleep, set a minimum, "
        "and get alarm times aligned to 90-minute cycles.</div>",
        unsafe_allow_html=True,
    )
with reset_col:
    st.button("Reset", key="reset_btn", on_click=_reset_inputs, use_container_width=True)
with info_col:
    if st.button("ℹ️", key="shortcut_info_btn", help="How to install the Shortcut"):
        _shortcut_info()


# --- Calculator panel (reruns on its own to keep "now" fresh) ---
@st.fragment(run_every=NOW_POLL_SECONDS)
def _calculator_panel() -> None:
    now = _now_minutes()
    if now != st.session_state.last_now:
        st.session_state.last_now = now
        if st.session_state.sleep_start is not None:
            current = minutes_from_time(st.session_state.sleep_start)
            followed = follow_now(current, now)
            if followed != current:
                st.session_state.sleep_start = time_from_minutes(followed)

    with st.container(border=True):
        time_col, now_col = st.columns([3, 2], vertical_alignment="bottom")
        with time_col:
            st.time_input("Sleep start", key="sleep_start", step=60)
        with now_col:
            st.button(
                "Set to now",
                key="now_btn",
                on_click=_set_sleep_start_now,
                use_container_width=True,
            )

    with st.container(border=True):
        st.radio(
            "Time to fall asleep",
            options=_FALL_ASLEEP_OPTIONS,
            key="fall_asleep",
            horizontal=True,
            format_func=lambda m: f"{m} min",
        )

    with st.container(border=True):
        st.slider(
            "Minimum sleep",
            min_value=0.0,
            max_value=12.0,
            step=0.5,
            key="min_sleep_hours",
            format="%.1fh",
        )

    sleep_start = st.session_state.sleep_start or time_from_minutes(now)
    suggestions = compute_suggestions(
        CalculatorInput(
            sleep_start=minutes_from_time(sleep_start),
            fall_asleep_latency=st.session_state.fall_asleep,
            minimum_sleep_hours=st.session_state.min_sleep_hours,
        )
    )

    with st.container(border=True):
        st.markdown(
            "<div class='results-title'>Calculated alarms</div>"
            + render_results_html(suggestions),
            unsafe_allow_html=True,
        )


_calculator_panel()

# --- Fortune cookie ---
# Rendered last so a slow fortune API never delays the alarms above.
with st.container(border=True):
    fortune_placeholder = st.empty()
    if st.session_state.fortune is None:
        fortune_placeholder.markdown(
            "<div class='fortune-text muted'>Loading a fortune…</div>",
            unsafe_allow_html=True,
        )
        st.session_state.fortune = fetch_fortune()
    fortune_placeholder.markdown(
        f"<div class='fortune-text'>“{html.escape(st.session_state.fortune.text)}”</div>",
        unsafe_allow_html=True,
    )
    st.button("↻ Another fortune", key="fortune_btn", on_click=_refresh_fortune)
