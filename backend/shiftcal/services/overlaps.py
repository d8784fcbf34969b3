"""Overlap graph between shifts that share a device.

Two shifts overlap when they are on the same device and
``a.start < b.end and b.start < a.end``. Touching boundaries (one ends exactly
when the other starts) are not an overlap.

Links are stored in ``shift_overlaps`` in both directions. Nothing here
commits: callers run these helpers inside the transaction of the mutation
that triggered them, so the graph changes together with the shift or not at
all. No winner is picked between overlapping shifts.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from shiftcal.models import Shift, shift_overlaps

log = logging.getLogger("shiftcal.overlaps")


def intervals_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and b_start < a_end


def find_overlapping(
    db: Session,
    *,
    device: str,
    start_time: datetime,
    end_time: datetime,
    exclude_id: int | None = None,
    lock: bool = False,
) -> list[Shift]:
    stmt = select(Shift).where(
        Shift.selected_device == device,
        Shift.start_time < end_time,
        Shift.end_time > start_time,
    )
    if exclude_id is not None:
        stmt = stmt.where(Shift.id != exclude_id)
    if lock:
        stmt = stmt.with_for_update()
    return list(db.scalars(stmt.order_by(Shift.id.asc())).all())


def link(a: Shift, b: Shift) -> None:
    if b not in a.overlap_peers:
        a.overlap_peers.append(b)
    if a not in b.overlap_peers:
        b.overlap_peers.append(a)


def unlink(a: Shift, b: Shift) -> None:
    if b in a.overlap_peers:
        a.overlap_peers.remove(b)
    if a in b.overlap_peers:
        b.overlap_peers.remove(a)


def relink(db: Session, shift: Shift) -> tuple[set[int], set[int]]:
    """Recompute links of ``shift`` from its current device and range.

    Handles every case: a fresh shift (no links yet), a moved or resized
    shift (gains and loses peers) and a device change (all old peers are on
    the other device, so they drop out).
    Returns (added, removed) peer ids.
    """
    db.flush()

    current = {p.id: p for p in shift.overlap_peers}
    wanted = {
        p.id: p
        for p in find_overlapping(
            db,
            device=shift.selected_device,
            start_time=shift.start_time,
            end_time=shift.end_time,
            exclude_id=shift.id,
            lock=True,
        )
    }

    added = set(wanted) - set(current)
    removed = set(current) - set(wanted)

    for peer_id in sorted(added):
        link(shift, wanted[peer_id])
    for peer_id in sorted(removed):
        unlink(shift, current[peer_id])

    if added or removed:
        log.debug("shift %s overlap links: added=%s removed=%s", shift.id, sorted(added), sorted(removed))
    return added, removed


def unlink_all(shift: Shift) -> set[int]:
    """Drop ``shift`` from every peer's overlap set (before deleting it)."""
    removed = set()
    for peer in list(shift.overlap_peers):
        unlink(shift, peer)
        removed.add(peer.id)
    if removed:
        log.debug("shift %s unlinked from %s", shift.id, sorted(removed))
    return removed


def expected_links(shifts: list[Shift]) -> set[tuple[int, int]]:
    """All (a, b) pairs that must be linked, both directions."""
    by_device: dict[str, list[Shift]] = defaultdict(list)
    for s in shifts:
        by_device[s.selected_device].append(s)

    pairs: set[tuple[int, int]] = set()
    for rows in by_device.values():
        rows.sort(key=lambda s: (s.start_time, s.id))
        for i, a in enumerate(rows):
            # sorted by start, so b.start >= a.start; stop at the first b starting after a ends
            for b in rows[i + 1:]:
                if b.start_time >= a.end_time:
                    break
                if intervals_overlap(a.start_time, a.end_time, b.start_time, b.end_time):
                    pairs.add((a.id, b.id))
                    pairs.add((b.id, a.id))
    return pairs


def check_overlap_graph(db: Session) -> None:
    """Verify the stored graph against a from-scratch recomputation.

    Raises AssertionError on dangling ids, asymmetric links, or links that
    disagree with the overlap rule. A failure here is a bug, not bad input.
    """
    db.flush()
    shifts = list(db.scalars(select(Shift)).all())
    ids = {s.id for s in shifts}
    stored = {(r.shift_id, r.peer_shift_id) for r in db.execute(select(shift_overlaps)).all()}

    dangling = {p for p in stored if p[0] not in ids or p[1] not in ids}
    if dangling:
        raise AssertionError(f"overlap links reference missing shifts: {sorted(dangling)}")

    asymmetric = {(a, b) for a, b in stored if (b, a) not in stored}
    if asymmetric:
        raise AssertionError(f"overlap links are not symmetric: {sorted(asymmetric)}")

    expected = expected_links(shifts)
    missing = expected - stored
    spurious = stored - expected
    if missing or spurious:
        raise AssertionError(
            f"overlap graph out of date: missing={sorted(missing)} spurious={sorted(spurious)}"
        )
