# src/midisong/events.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from .errors import MixedTimingError

CONDUCTOR_SUBTYPES = ("set_tempo", "time_signature")

# --- timing mixin: every event carries exactly one of delta_time / tick ---

class _Timed:
    delta_time: Optional[int]
    tick: Optional[int]

    def _check_timing(self):
        if (self.delta_time is None) == (self.tick is None):
            raise ValueError(f"{type(self).__name__} needs exactly one of delta_time or tick")
        value = self.tick if self.delta_time is None else self.delta_time
        if value < 0:
            raise ValueError(f"{type(self).__name__}: negative time {value}")

    @property
    def is_ticked(self) -> bool:
        return self.tick is not None

    def at_tick(self, tick: int):
        return replace(self, tick=tick, delta_time=None)

    def with_delta(self, delta_time: int):
        return replace(self, delta_time=delta_time, tick=None)


@dataclass(frozen=True)
class ChannelEvent(_Timed):
    kind: str                                  # mido type: note_on, control_change, ...
    channel: int
    data: Dict[str, Any] = field(default_factory=dict)
    delta_time: Optional[int] = None
    tick: Optional[int] = None
    __hash__ = None                            # payload is a dict

    def __post_init__(self):
        self._check_timing()
        object.__setattr__(self, "data", dict(self.data))
        if not 0 <= self.channel <= 15:
            raise ValueError(f"channel out of range: {self.channel}")

    @property
    def note(self) -> Optional[int]:
        return self.data.get("note")

    @property
    def velocity(self) -> Optional[int]:
        return self.data.get("velocity")

    @property
    def is_note_on(self) -> bool:
        return self.kind == "note_on" and (self.velocity or 0) > 0

    @property
    def is_note_off(self) -> bool:
        # note_on with velocity 0 is a note-off in SMF
        return self.kind == "note_off" or (self.kind == "note_on" and not self.velocity)


@dataclass(frozen=True)
class MetaEvent(_Timed):
    subtype: str                               # mido meta type: set_tempo, track_name, ...
    data: Dict[str, Any] = field(default_factory=dict)
    delta_time: Optional[int] = None
    tick: Optional[int] = None
    __hash__ = None

    def __post_init__(self):
        self._check_timing()
        object.__setattr__(self, "data", dict(self.data))

    @property
    def tempo(self) -> Optional[int]:
        """Microseconds per beat (set_tempo only)."""
        return self.data.get("tempo")

    @property
    def text(self) -> Optional[str]:
        return self.data.get("name", self.data.get("text"))


@dataclass(frozen=True)
class SysExEvent(_Timed):
    data: Tuple[int, ...] = ()
    delta_time: Optional[int] = None
    tick: Optional[int] = None

    def __post_init__(self):
        self._check_timing()


AnyEvent = Union[ChannelEvent, MetaEvent, SysExEvent]

# ---------- helpers ----------

def is_conductor_event(e: AnyEvent) -> bool:
    return isinstance(e, MetaEvent) and e.subtype in CONDUCTOR_SUBTYPES

def is_end_of_track(e: AnyEvent) -> bool:
    return isinstance(e, MetaEvent) and e.subtype == "end_of_track"

def end_of_track(delta_time: int = 0) -> MetaEvent:
    return MetaEvent("end_of_track", delta_time=delta_time)

def set_channel(e: AnyEvent, channel: int) -> AnyEvent:
    if isinstance(e, ChannelEvent):
        return replace(e, channel=channel)
    return e

def timing_of(events: Iterable[AnyEvent]) -> Optional[str]:
    """
    "tick" / "delta" for a homogeneous list, None for an empty one.
    Raises MixedTimingError when both representations occur.
    """
    seen = set()
    for e in events:
        seen.add("tick" if e.is_ticked else "delta")
    if len(seen) > 1:
        raise MixedTimingError("event list mixes delta_time and tick events")
    return seen.pop() if seen else None
