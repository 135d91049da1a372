"""Slack notifier.

Posts rendered blocks to a channel through chat.postMessage.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from yadokari.config import DEFAULT_SLACK_POST_MESSAGE_URL
from yadokari.errors import DispatchError
from yadokari.utils import get_http_session

logger = logging.getLogger("slack")


class SlackNotifier:
    def __init__(
        self,
        url: str = DEFAULT_SLACK_POST_MESSAGE_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or get_http_session()

    def send(self, bot_token: str, channel: str, blocks: List[Dict[str, Any]]) -> None:
        """Post `blocks` to `channel`. Raises DispatchError on any failure.

        Slack answers 200 for most API errors, so the `ok` flag of the
        body is checked as well as the status code.
        """
        headers = {"Authorization": f"Bearer {bot_token}"}
        payload = {"channel": channel, "blocks": blocks}
        try:
            resp = self.session.post(self.url, json=payload, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json()
        except requests.RequestException as e:
            raise DispatchError(f"chat.postMessage request failed: {e}") from e
        except ValueError as e:
            raise DispatchError(f"chat.postMessage returned non-JSON body: {e}") from e

        if not isinstance(body, dict) or not body.get("ok"):
            error = body.get("error", "unknown_error") if isinstance(body, dict) else "unknown_error"
            raise DispatchError(f"chat.postMessage rejected: {error}")

        logger.debug("Posted %d blocks to %s", len(blocks), channel)


__all__ = ["SlackNotifier"]
