# src/midisong/song.py
from __future__ import annotations
import copy
from pathlib import Path
from typing import Iterable, List, Optional

from .events import AnyEvent, ChannelEvent, MetaEvent, is_end_of_track
from .ticks import resolve_ticks

DEFAULT_TIMEBASE = 480


class Track:
    """
    One logical track. Events are stored with absolute ticks, ordered by tick.
    channel None marks a conductor (meta-only) track.
    """

    def __init__(self, channel: Optional[int] = None):
        self.channel = channel
        self.events: List[AnyEvent] = []
        self._end_of_track = 0

    def add_events(self, events: Iterable[AnyEvent]):
        ticked = resolve_ticks(events)
        if self.channel is None and any(isinstance(e, ChannelEvent) for e in ticked):
            raise ValueError("conductor track cannot hold channel events")
        body = []
        for e in ticked:
            if is_end_of_track(e):
                self._end_of_track = max(self._end_of_track, e.tick)
            else:
                body.append(e)
        # stable: existing events stay ahead of new ones on the same tick
        self.events = sorted(self.events + body, key=lambda e: e.tick)

    @property
    def name(self) -> Optional[str]:
        for e in self.events:
            if isinstance(e, MetaEvent) and e.subtype == "track_name":
                return e.text
        return None

    @property
    def end_tick(self) -> int:
        last = self.events[-1].tick if self.events else 0
        return max(last, self._end_of_track)

    @property
    def is_conductor_track(self) -> bool:
        return self.channel is None

    def __repr__(self):
        return f"Track(channel={self.channel!r}, name={self.name!r}, events={len(self.events)})"


class Song:
    def __init__(self, name: str = "", timebase: int = DEFAULT_TIMEBASE):
        self.tracks: List[Track] = []
        self.name = name
        self.timebase = timebase
        self.filepath = ""
        self.backing_track: Optional[str] = None   # audio file played along, not part of the SMF

    @property
    def timebase(self) -> int:
        return self._timebase

    @timebase.setter
    def timebase(self, value: int):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f"timebase must be a positive integer, got {value!r}")
        self._timebase = value

    def add_track(self, track: Track) -> int:
        self.tracks.append(track)
        return len(self.tracks) - 1

    @property
    def conductor_track(self) -> Optional[Track]:
        for t in self.tracks:
            if t.is_conductor_track:
                return t
        return None

    @property
    def all_events(self) -> List[AnyEvent]:
        """All tracks merged by tick; on equal ticks track order wins."""
        merged = [e for t in self.tracks for e in t.events]
        return sorted(merged, key=lambda e: e.tick)

    @property
    def end_of_song(self) -> int:
        return max((t.end_tick for t in self.tracks), default=0)

    @property
    def display_name(self) -> str:
        if self.filepath:
            return Path(self.filepath).name
        return self.name

    def snapshot(self) -> "Song":
        return copy.deepcopy(self)
