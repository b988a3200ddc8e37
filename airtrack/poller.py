"""Refresh loop that keeps the tracking store in sync with the upstream feed."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Callable

from airtrack.config import settings
from airtrack.ingestors.adsb import ADSBIngestor, FetchError
from airtrack.pipeline import ProjectionEngine, build_snapshot
from airtrack.store import TrackingStore

logger = logging.getLogger("airtrack.poller")

FailureReporter = Callable[[Exception], None]


class PollerState(str, Enum):
    """Phases of one refresh cycle."""

    IDLE = "idle"
    FETCHING = "fetching"
    APPLYING = "applying"
    FAILED = "failed"
    STOPPED = "stopped"


class PollOutcome(str, Enum):
    """Result of a single refresh attempt."""

    APPLIED = "applied"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class PollerStatus:
    """Diagnostic view of the poller."""

    state: PollerState
    running: bool
    interval_seconds: float
    consecutive_failures: int
    last_success_at: datetime | None
    last_error: str | None


class Poller:
    """Drive fetch → validate → project → replace on a fixed cadence.

    Only one refresh runs at a time. A tick or manual trigger that arrives
    while a refresh is in flight is skipped, so results reach the store in
    the order their fetches were issued. A failed refresh leaves the store
    untouched and the loop keeps going until ``stop`` is called.
    """

    def __init__(
        self,
        *,
        store: TrackingStore,
        ingestor: ADSBIngestor,
        engine: ProjectionEngine,
        center_lat: float,
        center_lon: float,
        radius_nm: float,
        interval_seconds: float,
        max_backoff_seconds: float | None = None,
        on_failure: FailureReporter | None = None,
    ) -> None:
        self.store = store
        self.ingestor = ingestor
        self.engine = engine
        self.center_lat = center_lat
        self.center_lon = center_lon
        self.radius_nm = radius_nm
        self.interval_seconds = interval_seconds
        self.max_backoff_seconds = (
            max_backoff_seconds if max_backoff_seconds is not None else interval_seconds
        )
        self.on_failure = on_failure

        self._state = PollerState.IDLE
        self._run_lock = asyncio.Lock()
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task | None = None
        self.consecutive_failures = 0
        self.last_success_at: datetime | None = None
        self.last_error: str | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @interval_seconds.setter
    def interval_seconds(self, value: float) -> None:
        if value <= 0:
            raise ValueError("interval_seconds must be positive")
        self._interval_seconds = float(value)

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def status(self) -> PollerStatus:
        return PollerStatus(
            state=self._state,
            running=self.running,
            interval_seconds=self.interval_seconds,
            consecutive_failures=self.consecutive_failures,
            last_success_at=self.last_success_at,
            last_error=self.last_error,
        )

    def next_delay(self) -> float:
        """Seconds until the next tick, backing off after consecutive failures."""

        if self.consecutive_failures == 0:
            return self.interval_seconds
        ceiling = max(self.max_backoff_seconds, self.interval_seconds)
        delay = self.interval_seconds
        for _ in range(self.consecutive_failures):
            delay = min(delay * 2, ceiling)
            if delay >= ceiling:
                break
        return delay

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    async def run_once(self) -> PollOutcome:
        """Run one refresh unless the poller is stopped or another is in flight."""

        if self._state is PollerState.STOPPED:
            logger.debug("Poller stopped; skipping refresh")
            return PollOutcome.SKIPPED
        if self._run_lock.locked():
            logger.debug("Refresh already in flight; skipping")
            return PollOutcome.SKIPPED

        async with self._run_lock:
            return await self._refresh()

    async def refresh_now(self) -> PollOutcome:
        """Manual trigger outside the regular cadence, same failure policy."""

        logger.info("Manual refresh requested")
        return await self.run_once()

    def _advance(self, state: PollerState) -> None:
        # STOPPED is terminal until the next start().
        if self._state is not PollerState.STOPPED:
            self._state = state

    async def _refresh(self) -> PollOutcome:
        self._advance(PollerState.FETCHING)
        try:
            payload = await self.ingestor.fetch_raw(
                self.center_lat, self.center_lon, self.radius_nm
            )
            self._advance(PollerState.APPLYING)
            snapshot = build_snapshot(
                payload.entries,
                self.engine,
                sequence=self.store.next_sequence(),
                fetched_at=payload.fetched_at,
            )
            self.store.replace(snapshot)
        except FetchError as exc:
            self._report_failure(exc)
            return PollOutcome.FAILED
        except Exception as exc:
            logger.exception("Refresh pipeline failed unexpectedly")
            self._report_failure(exc)
            return PollOutcome.FAILED
        finally:
            self._advance(PollerState.IDLE)

        self.consecutive_failures = 0
        self.last_error = None
        self.last_success_at = datetime.now(tz=timezone.utc)
        logger.debug(
            "Refresh applied snapshot %s with %s aircraft",
            snapshot.sequence,
            len(snapshot.records),
        )
        return PollOutcome.APPLIED

    def _report_failure(self, exc: Exception) -> None:
        self._advance(PollerState.FAILED)
        self.consecutive_failures += 1
        self.last_error = str(exc) or type(exc).__name__
        logger.warning(
            "Refresh failed (%s consecutive); keeping snapshot %s: %s",
            self.consecutive_failures,
            self.store.current().sequence,
            self.last_error,
        )
        if self.on_failure is None:
            return
        try:
            self.on_failure(exc)
        except Exception:  # pragma: no cover - defensive logging
            logger.exception("Failure reporter raised")

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the refresh loop on the running event loop."""

        if self.running:
            return
        self._stop_event = asyncio.Event()
        self._state = PollerState.IDLE
        self._task = asyncio.create_task(self._run())
        logger.info(
            "Poller started (interval=%.1fs, center=%s,%s, radius=%snm)",
            self.interval_seconds,
            self.center_lat,
            self.center_lon,
            self.radius_nm,
        )

    async def stop(self) -> None:
        """Stop the loop, abandoning any in-flight fetch."""

        if self._stop_event is not None:
            self._stop_event.set()
        task = self._task
        self._task = None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._state = PollerState.STOPPED
        logger.info("Poller stopped")

    async def _run(self) -> None:
        stop_event = self._stop_event
        try:
            while not stop_event.is_set():
                await self.run_once()
                with contextlib.suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(stop_event.wait(), timeout=self.next_delay())
        except asyncio.CancelledError:
            logger.info("Poller cancelled")
            raise


def build_poller(
    store: TrackingStore,
    *,
    ingestor: ADSBIngestor | None = None,
    on_failure: FailureReporter | None = None,
) -> Poller:
    """Create a poller from the application settings."""

    return Poller(
        store=store,
        ingestor=ingestor or ADSBIngestor(),
        engine=ProjectionEngine(
            horizon_minutes=settings.projection_horizon_minutes,
            arc_minutes_per_nm=settings.projection_arc_minutes_per_nm,
        ),
        center_lat=settings.tracking_center_lat,
        center_lon=settings.tracking_center_lon,
        radius_nm=settings.tracking_radius_nm,
        interval_seconds=settings.poll_interval_seconds,
        max_backoff_seconds=settings.poll_max_backoff_seconds,
        on_failure=on_failure,
    )


__all__ = [
    "FailureReporter",
    "PollOutcome",
    "Poller",
    "PollerState",
    "PollerStatus",
    "build_poller",
]
