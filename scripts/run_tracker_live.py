#!/usr/bin/env python
"""
Run a few live refresh cycles against the configured ADS-B aggregator and print
the resulting snapshots.

Usage (from repo root):
    python scripts/run_tracker_live.py [cycles]
"""

import asyncio
import sys

from airtrack.poller import PollOutcome, build_poller
from airtrack.sectors import SectorCatalog
from airtrack.store import TrackingStore


async def main(cycles: int) -> None:
    store = TrackingStore()
    poller = build_poller(store)
    catalog = SectorCatalog()

    print(
        f"=== Live tracking around {poller.center_lat}, {poller.center_lon} "
        f"(radius {poller.radius_nm} nm, {len(catalog)} sectors) ===\n"
    )

    for cycle in range(1, cycles + 1):
        outcome = await poller.refresh_now()
        snapshot = store.current()
        print(f"Cycle {cycle}: {outcome.value}, snapshot #{snapshot.sequence}")
        if outcome is PollOutcome.FAILED:
            print(f"  error: {poller.last_error}")
        else:
            print(f"  {len(snapshot.records)} aircraft, {len(snapshot.segments)} heading segments")
            for record in snapshot.records[:5]:
                segment = snapshot.segment_for(record.id)
                label = record.label()
                heading = (
                    f"-> ({segment.end.lat:.4f}, {segment.end.lon:.4f})" if segment else "no heading"
                )
                print(
                    f"  {record.id} flight={label.flight!r} alt={label.altitude} "
                    f"at ({record.lat:.4f}, {record.lon:.4f}) {heading}"
                )
        if cycle < cycles:
            await asyncio.sleep(poller.next_delay())


if __name__ == "__main__":
    asyncio.run(main(int(sys.argv[1]) if len(sys.argv) > 1 else 3))
