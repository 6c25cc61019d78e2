"""Fortune cookie text from a public API, with a CORS proxy and a fixed line as fallbacks."""

import json
import logging
import os

import httpx

from remcyclealarm.models import Fortune

logger = logging.getLogger(__name__)

_DEFAULT_API_URL = "https://api.viewbits.com/v1/fortunecookie?mode=random"
_DEFAULT_PROXY_URL = "https://api.allorigins.win/get"
_DEFAULT_TIMEOUT = 6.0
_NO_STORE = {"Cache-Control": "no-store"}

FALLBACK_TEXT = "One that would have the fruit must climb the tree."


class FortuneUnavailable(Exception):
    """A single fortune source failed or returned nothing usable."""


def _api_url() -> str:
    return os.environ.get("FORTUNE_API_URL", _DEFAULT_API_URL)


def _proxy_url() -> str:
    return os.environ.get("FORTUNE_PROXY_URL", _DEFAULT_PROXY_URL)


def _default_timeout() -> float:
    raw = os.environ.get("FORTUNE_TIMEOUT")
    if raw is None:
        return _DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid FORTUNE_TIMEOUT %r, using %ss", raw, _DEFAULT_TIMEOUT)
        return _DEFAULT_TIMEOUT


def _extract_text(payload: object) -> str:
    """Pull a non-empty ``text`` field out of a decoded fortune payload."""
    if not isinstance(payload, dict):
        raise FortuneUnavailable(f"unexpected payload type: {type(payload).__name__}")
    text = payload.get("text")
    if not text:
        raise FortuneUnavailable("payload has no text")
    return str(text)


def _get_json(url: str, timeout: float, params: dict[str, str] | None = None) -> object:
    try:
        resp = httpx.get(url, params=params, headers=_NO_STORE, timeout=timeout)
        resp.raise_for_status()
        return resp.json()
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        raise FortuneUnavailable(str(e)) from e


def _fetch_primary(timeout: float) -> str:
    """Single call to the fortune API. Raises FortuneUnavailable on any failure."""
    return _extract_text(_get_json(_api_url(), timeout))


def _fetch_via_proxy(timeout: float) -> str:
    """Fetch the fortune API through allorigins.

    The proxy wraps the upstream body as a JSON string under ``contents``,
    so the payload is decoded twice.
    """
    wrapper = _get_json(_proxy_url(), timeout, params={"url": _api_url()})
    if not isinstance(wrapper, dict) or not wrapper.get("contents"):
        raise FortuneUnavailable("proxy response has no contents")
    try:
        inner = json.loads(wrapper["contents"])
    except (TypeError, ValueError) as e:
        raise FortuneUnavailable(f"proxy contents are not JSON: {e}") from e
    return _extract_text(inner)


def fetch_fortune(timeout: float | None = None) -> Fortune:
    """Fetch a fortune, falling back through the proxy and then a fixed line.

    Never raises: each failing source is logged and the next one tried.

    Args:
        timeout: Per-request timeout in seconds. Defaults to FORTUNE_TIMEOUT (6s).

    Returns:
        Fortune with the text and the source that produced it.
    """
    if timeout is None:
        timeout = _default_timeout()

    try:
        text = _fetch_primary(timeout)
        logger.debug("fortune from primary API")
        return Fortune(text=text, source="primary")
    except FortuneUnavailable as e:
        logger.warning("Fortune API unavailable, trying proxy: %s", e)

    try:
        text = _fetch_via_proxy(timeout)
        logger.debug("fortune from proxy")
        return Fortune(text=text, source="proxy")
    except FortuneUnavailable as e:
        logger.warning("Fortune proxy unavailable, using fallback: %s", e)

    return Fortune(text=FALLBACK_TEXT, source="fallback")
