"""
Shared HTTP session factory.

Provides pre-configured ``requests.Session`` objects with a default timeout
and a mounted retry adapter. Collectors must not retry on their own, so the
provider sessions are built with :data:`NO_RETRY`; a failed fetch waits for
the next scheduled tick instead.

Usage::

    from restaurant_signals.services.http import create_session

    session = create_session(timeout=10)
    resp = session.get("https://api.example.com/v1/data")
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from restaurant_signals import __version__

#: One attempt only; errors surface to the collector immediately.
NO_RETRY = Retry(total=0, raise_on_status=False)

DEFAULT_TIMEOUT = 30  # seconds

USER_AGENT = f"restaurant-signals/{__version__}"


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with retry adapter mounted.

    Args:
        retry: Retry strategy (defaults to ``NO_RETRY``).
        timeout: Default timeout applied to every request.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or NO_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT

    # Session.request always passes timeout=None down to send, so a None
    # value means "not set by the caller".
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = timeout
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s
