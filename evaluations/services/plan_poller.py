"""
Fixed-interval poller following plans that are being generated.

Only plans in ``generating`` are watched. Each watched set gets its own
cancellable timer that stops by itself once every plan has settled.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, FrozenSet, Iterable, Optional

from django.conf import settings
from django.db import connection

from evaluations.models.choices import PlanStatus
from evaluations.services.plans import PlanService

logger = logging.getLogger(__name__)

FetchStatuses = Callable[[Iterable[int]], Dict[int, str]]
OnSettled = Callable[[int, str], None]


class PlanStatusPoller:
    """
    Usage::

        poller = PlanStatusPoller(on_settled=lambda pk, status: print(pk, status))
        poller.watch([12, 13])
        poller.wait(timeout=300)
        poller.stop()

    ``fetch_statuses`` maps evaluation ids to plan statuses and defaults to
    a database read; ids missing from its result are dropped.
    """

    def __init__(
        self,
        fetch_statuses: Optional[FetchStatuses] = None,
        on_settled: Optional[OnSettled] = None,
        interval: Optional[float] = None,
    ) -> None:
        self._fetch = fetch_statuses or PlanService.statuses
        self._on_settled = on_settled
        self.interval = float(interval if interval is not None else settings.PLAN_STATUS_POLL_SECONDS)
        self._lock = threading.Lock()
        self._watched: set = set()
        self._timer: Optional[threading.Timer] = None
        # Bumped on every watch/stop so a tick from an older timer cannot reschedule.
        self._generation = 0
        self._idle = threading.Event()
        self._idle.set()

    @property
    def watched(self) -> FrozenSet[int]:
        with self._lock:
            return frozenset(self._watched)

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._timer is not None

    def watch(self, evaluation_ids: Iterable[int]) -> FrozenSet[int]:
        """
        [Purpose] Replace the watched set with the given ids that are currently generating.
        [Usage] Any running timer is torn down first.
        [Returns] The ids actually watched.
        """
        ids = {int(pk) for pk in evaluation_ids}
        statuses = self._fetch(ids) if ids else {}
        generating = {pk for pk, status in statuses.items() if status == PlanStatus.GENERATING}

        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._watched = generating
            if generating:
                self._idle.clear()
                self._schedule(self._generation)
            else:
                self._idle.set()
        logger.debug("Watching plan generation for %s", sorted(generating))
        return frozenset(generating)

    def poll_once(self) -> Dict[int, str]:
        """
        [Purpose] Re-read statuses, drop settled plans and report them to ``on_settled``.
        [Usage] Called by the timer; callable directly in tests.
        [Returns] ``{id: status}`` settled this round.
        """
        with self._lock:
            ids = set(self._watched)
        if not ids:
            return {}

        statuses = self._fetch(ids)
        settled = {
            pk: status
            for pk, status in statuses.items()
            if pk in ids and status != PlanStatus.GENERATING
        }
        missing = ids - set(statuses)
        if missing:
            logger.warning("Evaluations %s disappeared while polling", sorted(missing))

        with self._lock:
            self._watched -= set(settled) | missing

        for pk, status in settled.items():
            logger.info("Plan of evaluation %s is now %s", pk, status)
            if self._on_settled is not None:
                self._on_settled(pk, status)

        # Idle only once every callback has returned.
        with self._lock:
            if not self._watched:
                self._idle.set()
        return settled

    def stop(self) -> None:
        """[Purpose] Cancel the timer and forget every watched id."""
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._watched = set()
            self._idle.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """[Purpose] Block until nothing is generating and every callback has run. [Returns] False on timeout."""
        return self._idle.wait(timeout)

    def _schedule(self, generation: int) -> None:
        timer = threading.Timer(self.interval, self._tick, args=(generation,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
        try:
            self.poll_once()
        except Exception:  # noqa: BLE001
            logger.exception("Plan status poll failed; retrying in %ss", self.interval)
        finally:
            # Each tick runs on a fresh timer thread with its own connection.
            connection.close()

        with self._lock:
            if generation != self._generation:
                return
            if self._watched:
                self._schedule(generation)
            else:
                self._timer = None
