# src/midisong/codec.py
from __future__ import annotations
import io
import logging
import os
from dataclasses import dataclass, field
from typing import BinaryIO, List, Sequence, Union

import mido

from .errors import MidiDecodeError
from .events import AnyEvent, ChannelEvent, MetaEvent, SysExEvent

logger = logging.getLogger(__name__)

MidiSource = Union[bytes, bytearray, str, "os.PathLike[str]", BinaryIO]

@dataclass
class MidiData:
    """Decoded SMF: header fields plus one delta-time event list per track."""
    format_type: int
    ticks_per_beat: int
    tracks: List[List[AnyEvent]] = field(default_factory=list)

# ---------- mido <-> events ----------

def _fields(msg, *skip: str) -> dict:
    out = {}
    for k, v in msg.dict().items():
        if k in ("type", "time") or k in skip:
            continue
        out[k] = tuple(v) if isinstance(v, list) else v
    return out

def event_from_message(msg) -> AnyEvent:
    """mido message (msg.time = delta ticks) -> event with delta_time."""
    if msg.is_meta:
        return MetaEvent(msg.type, _fields(msg), delta_time=msg.time)
    if msg.type == "sysex":
        return SysExEvent(tuple(msg.data), delta_time=msg.time)
    if hasattr(msg, "channel"):
        return ChannelEvent(msg.type, msg.channel, _fields(msg, "channel"), delta_time=msg.time)
    raise MidiDecodeError(f"unexpected message in track data: {msg.type}")

def event_to_message(e: AnyEvent):
    """Event with delta_time -> mido message."""
    if e.delta_time is None:
        raise ValueError("event_to_message needs delta-time events")
    if isinstance(e, ChannelEvent):
        return mido.Message(e.kind, channel=e.channel, time=e.delta_time, **e.data)
    if isinstance(e, MetaEvent):
        if e.subtype == "unknown_meta":
            return mido.UnknownMetaMessage(type_byte=e.data["type_byte"],
                                           data=e.data.get("data", ()),
                                           time=e.delta_time)
        return mido.MetaMessage(e.subtype, time=e.delta_time, **e.data)
    return mido.Message("sysex", data=e.data, time=e.delta_time)

# ---------- file level ----------

def read_midi(source: MidiSource) -> MidiData:
    """
    Decodes bytes, a path or a binary file object.
    Raises MidiDecodeError when mido cannot parse the data.
    """
    try:
        if isinstance(source, (bytes, bytearray)):
            mid = mido.MidiFile(file=io.BytesIO(bytes(source)))
        elif isinstance(source, (str, os.PathLike)):
            mid = mido.MidiFile(os.fspath(source))
        else:
            mid = mido.MidiFile(file=source)
    except (OSError, EOFError, ValueError, KeyError) as exc:
        raise MidiDecodeError(f"Cannot parse MIDI data: {exc}") from exc

    tracks = [[event_from_message(msg) for msg in track] for track in mid.tracks]
    logger.debug("decoded SMF type=%d tpb=%d tracks=%d", mid.type, mid.ticks_per_beat, len(tracks))
    return MidiData(format_type=mid.type, ticks_per_beat=mid.ticks_per_beat, tracks=tracks)

def write_midi(tracks: Sequence[Sequence[AnyEvent]], ticks_per_beat: int, format_type: int = 1) -> bytes:
    """Encodes delta-time event streams as an SMF byte string."""
    mid = mido.MidiFile(type=format_type, ticks_per_beat=ticks_per_beat)
    for events in tracks:
        mid.tracks.append(mido.MidiTrack(event_to_message(e) for e in events))
    buf = io.BytesIO()
    mid.save(file=buf)
    return buf.getvalue()
