# src/midisong/beatmap.py
from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .events import AnyEvent, ChannelEvent, MetaEvent
from .song import Song
from .util.time import micro_to_bpm, tick_to_millisec

logger = logging.getLogger(__name__)

DEFAULT_TEMPO = 120.0

@dataclass
class BeatmapSample:
    pitch: int
    velocity: int
    time: float                        # seconds
    duration: Optional[float] = None   # seconds, set by the matching note-off

    def to_dict(self) -> Dict[str, float]:
        d = {"type": self.pitch, "position": self.velocity, "time": self.time}
        if self.duration is not None:
            d["duration"] = self.duration
        return d

def project_beatmap(events: Iterable[AnyEvent], default_tempo: float = DEFAULT_TEMPO) -> List[BeatmapSample]:
    """
    Walks tick-ordered, absolute-tick events and emits one sample per note-on.
    A tempo change affects the time after its own event. A zero tempo and a
    note-off without an open note are skipped with a warning.
    """
    current_tempo = float(default_tempo)
    current_tick = 0
    millisec = 0.0

    res: List[BeatmapSample] = []
    open_notes: Dict[int, BeatmapSample] = {}

    for e in events:
        millisec += tick_to_millisec(e.tick - current_tick, current_tempo)
        current_tick = e.tick
        now = millisec / 1000

        if isinstance(e, MetaEvent):
            if e.subtype == "set_tempo":
                if not e.tempo:
                    logger.warning("ignoring zero tempo at tick=%d", e.tick)
                    continue
                current_tempo = micro_to_bpm(e.tempo)
        elif isinstance(e, ChannelEvent):
            if e.is_note_on:
                sample = BeatmapSample(pitch=e.note, velocity=e.velocity, time=now)
                res.append(sample)
                open_notes[e.note] = sample   # re-trigger replaces the open note
            elif e.is_note_off:
                sample = open_notes.pop(e.note, None)
                if sample is None:
                    logger.warning("note-off without note-on: pitch=%d tick=%d", e.note, e.tick)
                    continue
                sample.duration = now - sample.time

    return res

def song_to_beatmap(song: Song, default_tempo: float = DEFAULT_TEMPO) -> List[BeatmapSample]:
    return project_beatmap(song.all_events, default_tempo)

def beatmap_to_json(samples: Iterable[BeatmapSample]) -> str:
    return json.dumps([s.to_dict() for s in samples])
