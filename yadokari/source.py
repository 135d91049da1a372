"""Listing source client.

Fetches the full snapshot of listings for one region. One call per workflow
run, no retries: a failure ends the run.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import requests
from pydantic import TypeAdapter, ValidationError

from yadokari.errors import MalformedResponse, SourceUnavailable
from yadokari.models import Listing
from yadokari.utils import get_http_session

logger = logging.getLogger("source")

_LISTINGS = TypeAdapter(List[Listing])


class ListingSourceClient:
    def __init__(self, url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or get_http_session()

    def fetch(self, region_code: str) -> List[Listing]:
        """Return every listing currently published for `region_code`.

        Raises SourceUnavailable on transport errors, timeouts and non-2xx
        answers, MalformedResponse when the body is not a JSON array of
        listing records.
        """
        form = {"tdfk": region_code, "is_sp": "false"}
        try:
            resp = self.session.post(self.url, data=form, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise SourceUnavailable(f"listing source request failed: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponse(f"listing source returned non-JSON body: {e}") from e

        if not isinstance(data, list):
            raise MalformedResponse(f"expected a JSON array, got {type(data).__name__}")

        try:
            listings = _LISTINGS.validate_python(data)
        except ValidationError as e:
            raise MalformedResponse(f"listing record failed validation: {e.error_count()} error(s)") from e

        logger.debug("Fetched %d listings for region %s", len(listings), region_code)
        return listings


__all__ = ["ListingSourceClient"]
