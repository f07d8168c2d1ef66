# src/midisong/split.py
from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Sequence

from .events import AnyEvent, ChannelEvent
from .song import Track
from .ticks import resolve_ticks

def find_channel(events: Iterable[AnyEvent]) -> Optional[int]:
    """Channel of the first channel event, None for a meta-only list."""
    for e in events:
        if isinstance(e, ChannelEvent):
            return e.channel
    return None

def track_from_events(events: Sequence[AnyEvent]) -> Track:
    track = Track(channel=find_channel(events))
    track.add_events(events)
    return track

def split_format0(events: Sequence[AnyEvent]) -> List[Track]:
    """
    One merged SMF-0 stream -> slot 0 (conductor: everything without a channel)
    plus slot c+1 per channel c. Slots are dense: unused channels below the
    highest one get empty tracks.
    """
    per_slot: Dict[int, List[AnyEvent]] = {}
    for e in resolve_ticks(events):
        slot = e.channel + 1 if isinstance(e, ChannelEvent) else 0
        per_slot.setdefault(slot, []).append(e)

    tracks: List[Track] = []
    for slot in sorted(per_slot):
        while len(tracks) <= slot:
            idx = len(tracks)
            tracks.append(Track(channel=idx - 1 if idx > 0 else None))
        tracks[slot].add_events(per_slot[slot])
    return tracks

def split_format1(track_events: Sequence[Sequence[AnyEvent]]) -> List[Track]:
    """SMF-1: one Track per event list, channel taken from its first channel event."""
    return [track_from_events(events) for events in track_events]
