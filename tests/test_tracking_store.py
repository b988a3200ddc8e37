import threading

from airtrack.models.aircraft import AircraftRecord, GeoPoint, HeadingSegment, Snapshot
from airtrack.store import TrackingStore


def _snapshot(sequence: int, size: int = 5) -> Snapshot:
    records = tuple(
        AircraftRecord(id=f"t{sequence}-{i}", lat=float(i), lon=float(sequence % 180))
        for i in range(size)
    )
    segments = tuple(
        HeadingSegment(id=record.id, start=record.position, end=GeoPoint(lat=record.lat + 0.1, lon=record.lon))
        for record in records
    )
    return Snapshot(records=records, segments=segments, sequence=sequence)


def test_store_starts_empty():
    store = TrackingStore()

    current = store.current()

    assert current.sequence == 0
    assert current.records == ()
    assert current.segments == ()


def test_replace_swaps_whole_snapshot():
    store = TrackingStore()
    first = _snapshot(1)
    second = _snapshot(2, size=2)

    store.replace(first)
    store.replace(second)

    assert store.current() is second
    assert all(record.id.startswith("t2-") for record in store.current().records)


def test_next_sequence_increases():
    store = TrackingStore()

    assert [store.next_sequence() for _ in range(3)] == [1, 2, 3]


def test_reader_never_sees_mixed_snapshot():
    store = TrackingStore(_snapshot(0))
    stop = threading.Event()
    mismatches: list[int] = []

    def reader():
        while not stop.is_set():
            snapshot = store.current()
            record_ids = {record.id for record in snapshot.records}
            segment_ids = {segment.id for segment in snapshot.segments}
            if record_ids != segment_ids:
                mismatches.append(snapshot.sequence)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for sequence in range(1, 500):
        store.replace(_snapshot(sequence))
    stop.set()
    for thread in threads:
        thread.join(timeout=5)

    assert mismatches == []
    assert store.current().sequence == 499


def test_listeners_are_notified_and_isolated():
    store = TrackingStore()
    received: list[int] = []

    def broken(snapshot):
        raise RuntimeError("renderer exploded")

    store.subscribe(broken)
    unsubscribe = store.subscribe(lambda snapshot: received.append(snapshot.sequence))

    store.replace(_snapshot(1))
    unsubscribe()
    store.replace(_snapshot(2))

    assert received == [1]
    assert store.current().sequence == 2
