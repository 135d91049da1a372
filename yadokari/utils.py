"""Helper utilities shared by the outbound HTTP clients."""

from __future__ import annotations

import requests

from yadokari import __version__


def get_http_session() -> requests.Session:
    """Return a new HTTP session with the service's default headers.

    Caller is responsible for closing the session or letting it be
    garbage collected.
    """
    session = requests.Session()
    session.headers.update(
        {
            "User-Agent": f"yadokari/{__version__} (+listing notifier)",
            "Accept": "application/json, text/javascript, */*; q=0.01",
        }
    )
    return session


__all__ = ["get_http_session"]
