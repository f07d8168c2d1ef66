"""Event and SMF builders shared by the tests."""
from __future__ import annotations
import io

import mido

from midisong.events import ChannelEvent, MetaEvent


def note_on(note, velocity=100, channel=0, **timing):
    return ChannelEvent("note_on", channel, {"note": note, "velocity": velocity}, **timing)


def note_off(note, channel=0, **timing):
    return ChannelEvent("note_off", channel, {"note": note, "velocity": 0}, **timing)


def tempo(micro=500_000, **timing):
    return MetaEvent("set_tempo", {"tempo": micro}, **timing)


def time_signature(num=4, den=4, **timing):
    return MetaEvent("time_signature", {"numerator": num, "denominator": den,
                                        "clocks_per_click": 24, "notated_32nd_notes_per_beat": 8}, **timing)


def track_name(name, **timing):
    return MetaEvent("track_name", {"name": name}, **timing)


def smf_bytes(tracks, type=1, ticks_per_beat=480) -> bytes:
    """Encode lists of mido messages as an in-memory Standard MIDI File."""
    mid = mido.MidiFile(type=type, ticks_per_beat=ticks_per_beat)
    for msgs in tracks:
        mid.tracks.append(mido.MidiTrack(msgs))
    buf = io.BytesIO()
    mid.save(file=buf)
    return buf.getvalue()
