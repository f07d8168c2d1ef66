# src/midisong/conductor.py
from __future__ import annotations
import logging
from typing import List, Sequence

from .events import AnyEvent, ChannelEvent, is_conductor_event
from .ticks import resolve_ticks, to_delta_times

logger = logging.getLogger(__name__)

def is_conductor_track(events: Sequence[AnyEvent]) -> bool:
    return not any(isinstance(e, ChannelEvent) for e in events)

def ensure_conductor_track(tracks: Sequence[Sequence[AnyEvent]]) -> List[List[AnyEvent]]:
    """
    Guarantees a conductor track at index 0 holding every tempo and
    time-signature event of the file. Other meta-only tracks follow it,
    then the normal tracks, each in their original order.
    Returns delta-time event lists.
    """
    conductor_tracks = [list(t) for t in tracks if is_conductor_track(t)]
    normal_tracks = [list(t) for t in tracks if not is_conductor_track(t)]

    if not conductor_tracks:
        conductor_tracks.append([])

    conductor, *rest = [resolve_ticks(t) for t in conductor_tracks + normal_tracks]

    moved = 0
    new_rest: List[List[AnyEvent]] = []
    for track in rest:
        kept = []
        for e in track:
            if is_conductor_event(e):
                conductor.append(e)
                moved += 1
            else:
                kept.append(e)
        new_rest.append(kept)
    if moved:
        logger.debug("moved %d tempo/time-signature events into the conductor track", moved)

    # to_delta_times sorts by tick, so the appended conductor events land in place
    return [to_delta_times(t) for t in [conductor, *new_rest]]
