"""In-memory holder of the current tracking snapshot."""

from __future__ import annotations

import itertools
import logging
from threading import Lock
from typing import Callable

from airtrack.models.aircraft import Snapshot

logger = logging.getLogger("airtrack.store")

SnapshotListener = Callable[[Snapshot], None]


class TrackingStore:
    """Hold the authoritative snapshot and hand it out whole.

    ``replace`` swaps a single immutable reference under a lock, so a reader
    sees either the previous snapshot or the new one, never a mix of the two.
    """

    def __init__(self, initial: Snapshot | None = None) -> None:
        self._lock = Lock()
        self._snapshot = initial or Snapshot.empty()
        self._sequence = itertools.count(self._snapshot.sequence + 1)
        self._listeners: list[SnapshotListener] = []

    def current(self) -> Snapshot:
        with self._lock:
            return self._snapshot

    def next_sequence(self) -> int:
        """Issue the sequence number for the next snapshot to be built."""

        with self._lock:
            return next(self._sequence)

    def replace(self, snapshot: Snapshot) -> None:
        with self._lock:
            self._snapshot = snapshot
            listeners = list(self._listeners)
        logger.debug(
            "Snapshot %s applied (%s aircraft, %s segments)",
            snapshot.sequence,
            len(snapshot.records),
            len(snapshot.segments),
        )
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener %r failed", listener)

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register ``listener`` for replaced snapshots; returns an unsubscribe callable."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe


__all__ = ["SnapshotListener", "TrackingStore"]
