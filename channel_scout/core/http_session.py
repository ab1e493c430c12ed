"""Pooled HTTP sessions for outbound API calls."""

import threading
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from channel_scout.core.constants import APP_NAME, APP_VERSION

DEFAULT_TIMEOUT = 30

# name -> (session, default timeout)
_sessions: dict[str, tuple[requests.Session, int]] = {}
# Discovery runs in executor threads; guards _sessions
_sessions_lock = threading.Lock()


def _build_session() -> requests.Session:
    session = requests.Session()

    # Upstream calls are never retried
    no_retry = Retry(total=0, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=no_retry, pool_connections=4, pool_maxsize=8)
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    session.headers.update(
        {
            "User-Agent": f"{APP_NAME.replace(' ', '-').lower()}/{APP_VERSION}",
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
        }
    )
    return session


def _get_entry(name: str, timeout: int) -> tuple[requests.Session, int]:
    with _sessions_lock:
        entry = _sessions.get(name)
        if entry is None:
            entry = _sessions[name] = (_build_session(), timeout)
        return entry


def get_session(name: str = "default", timeout: int = DEFAULT_TIMEOUT) -> requests.Session:
    """
    Get or create the pooled session registered under ``name``.

    The timeout given on first creation becomes the session's default.

    Args:
        name: Registry key, one per upstream API
        timeout: Default request timeout in seconds

    Returns:
        requests.Session instance
    """
    return _get_entry(name, timeout)[0]


def close_all_sessions() -> None:
    """Close every pooled session."""
    with _sessions_lock:
        for session, _ in _sessions.values():
            session.close()
        _sessions.clear()


def get(
    url: str,
    session_name: str = "default",
    timeout: int | None = None,
    **kwargs: Any,
) -> requests.Response:
    """
    Issue a single GET through a pooled session.

    A timeout given on the call that creates the session becomes its default.

    Args:
        url: Request URL
        session_name: Registry key of the session to use
        timeout: Request timeout (the session default when omitted)
        **kwargs: Passed through to ``Session.get`` (``params``, ``headers``...)

    Returns:
        requests.Response, whatever its status code
    """
    session, default_timeout = _get_entry(
        session_name, DEFAULT_TIMEOUT if timeout is None else timeout
    )
    if timeout is None:
        timeout = default_timeout
    return session.get(url, timeout=timeout, **kwargs)
