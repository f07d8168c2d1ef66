# src/midisong/ticks.py
from __future__ import annotations
from typing import Iterable, List

from .events import AnyEvent, timing_of

def resolve_ticks(events: Iterable[AnyEvent]) -> List[AnyEvent]:
    """
    Delta-times -> absolute ticks (cumulative, first event: tick = delta).
    Already ticked lists come back unchanged (as a new list).
    """
    events = list(events)
    if timing_of(events) != "delta":
        return events
    out: List[AnyEvent] = []
    tick = 0
    for e in events:
        tick += e.delta_time
        out.append(e.at_tick(tick))
    return out

def to_delta_times(events: Iterable[AnyEvent]) -> List[AnyEvent]:
    """
    Absolute ticks -> delta-times. Sorted stably by tick so that
    simultaneous events (note-off followed by note-on) keep their order.
    """
    events = list(events)
    if timing_of(events) != "tick":
        return events
    out: List[AnyEvent] = []
    last = 0
    for e in sorted(events, key=lambda ev: ev.tick):
        out.append(e.with_delta(e.tick - last))
        last = e.tick
    return out
