# yadokari/tasks.py
"""
Background fetch -> diff -> notify workflow.

The webhook handler only schedules the workflow; it runs after the response
has been sent. At most one run per region is in flight at a time: a trigger
that arrives while a run is active is dropped, since the active run already
reads the latest snapshot.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from fastapi import BackgroundTasks
from sqlalchemy.engine import Engine

from yadokari.config import AppConfig
from yadokari.errors import FetchError, PersistenceFailure, DispatchError
from yadokari.formatter import format_listings, render_limit
from yadokari.models import MessageEvent
from yadokari.repository import listing_state
from yadokari.slack import SlackNotifier
from yadokari.source import ListingSourceClient

LOG = logging.getLogger("tasks")


class SingleFlight:
    """Non-blocking per-key gate."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(key, threading.Lock())

    @contextmanager
    def acquire(self, key: str) -> Iterator[bool]:
        lock = self._lock_for(key)
        acquired = lock.acquire(blocking=False)
        try:
            yield acquired
        finally:
            if acquired:
                lock.release()


class TaskDispatcher:
    def __init__(
        self,
        config: AppConfig,
        engine: Engine,
        source: ListingSourceClient,
        notifier: SlackNotifier,
        gate: Optional[SingleFlight] = None,
    ):
        self.config = config
        self.engine = engine
        self.source = source
        self.notifier = notifier
        self.gate = gate or SingleFlight()

    def dispatch(self, event: MessageEvent, background_tasks: BackgroundTasks) -> bool:
        """Schedule the workflow for `event`; returns False when nothing was scheduled."""
        if event.source_user == self.config.bot_user:
            # our own notification echoing back
            LOG.debug("Ignoring event from bot user in %s", event.channel)
            return False

        background_tasks.add_task(self.run_workflow, event.channel)
        return True

    def run_workflow(self, channel: str) -> int:
        """
        One fetch -> diff -> commit -> notify pass for the configured region.
        Returns the number of listings rendered into the notification.
        """
        region = self.config.region_code
        with self.gate.acquire(region) as acquired:
            if not acquired:
                LOG.info("region %s: run already in flight, trigger from %s dropped", region, channel)
                return 0
            try:
                return self._run(region, channel)
            except FetchError as e:
                LOG.error("region %s: listing fetch failed: %s", region, e)
            except PersistenceFailure as e:
                LOG.error("region %s: snapshot not updated: %s", region, e)
            except DispatchError as e:
                LOG.error("region %s: notification to %s failed: %s", region, channel, e)
            return 0

    def _run(self, region: str, channel: str) -> int:
        current = self.source.fetch(region)
        LOG.info("region %s: fetched %d listings", region, len(current))

        fresh = listing_state.refresh(self.engine, region, current)

        blocks = format_listings(fresh, limit=self.config.max_notify_listings)
        if blocks is None:
            LOG.info("region %s: no fresh listings", region)
            return 0

        # committed above: a failed post is never retried
        self.notifier.send(self.config.bot_token, channel, blocks)
        notified = min(len(fresh), render_limit(self.config.max_notify_listings))
        if notified < len(fresh):
            LOG.warning("region %s: %d fresh listings not rendered (message bound)", region, len(fresh) - notified)
        LOG.info("region %s: notified %s about %d listings", region, channel, notified)
        return notified
