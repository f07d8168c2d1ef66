# src/midisong/convert.py
from __future__ import annotations
import logging
import os
from typing import List

from .codec import MidiData, MidiSource, read_midi, write_midi
from .conductor import ensure_conductor_track
from .errors import UnsupportedFormatError
from .events import AnyEvent, end_of_track, is_end_of_track, set_channel
from .song import Song, Track
from .split import split_format0, split_format1
from .ticks import to_delta_times

logger = logging.getLogger(__name__)

# ---------- import ----------

def _is_blank(midi: MidiData) -> bool:
    """Only end-of-track markers, all at tick 0: nothing worth a track."""
    return all(is_end_of_track(e) and e.delta_time == 0 for track in midi.tracks for e in track)

def tracks_from_midi(midi: MidiData) -> List[Track]:
    """
    Format 0 is split per channel, format 1 gets a conductor track first.
    Anything else raises UnsupportedFormatError before a track is built.
    """
    if midi.format_type not in (0, 1):
        raise UnsupportedFormatError(midi.format_type)
    if _is_blank(midi):
        return []
    if midi.format_type == 0:
        return split_format0(midi.tracks[0])
    return split_format1(ensure_conductor_track(midi.tracks))

def song_from_midi(source: MidiSource) -> Song:
    midi = read_midi(source)
    tracks = tracks_from_midi(midi)

    song = Song(timebase=midi.ticks_per_beat)
    for t in tracks:
        song.add_track(t)

    if midi.format_type == 1 and song.tracks:
        # first track name doubles as song title
        name = song.tracks[0].name
        if name is not None:
            song.name = name

    if isinstance(source, (str, os.PathLike)):
        song.filepath = os.fspath(source)

    logger.debug("imported song %r: format=%d tracks=%d timebase=%d",
                 song.display_name, midi.format_type, len(song.tracks), song.timebase)
    return song

# ---------- export ----------

def _track_to_raw_events(track: Track) -> List[AnyEvent]:
    raw = to_delta_times(track.events)
    last = track.events[-1].tick if track.events else 0
    raw.append(end_of_track(delta_time=track.end_tick - last))
    if track.channel is not None:
        raw = [set_channel(e, track.channel) for e in raw]
    return raw

def song_to_midi_events(song: Song) -> List[List[AnyEvent]]:
    """Per-track delta-time streams, each closed by end_of_track."""
    snapshot = song.snapshot()
    return [_track_to_raw_events(t) for t in snapshot.tracks]

def song_to_midi(song: Song) -> bytes:
    tracks = song_to_midi_events(song)
    if not tracks:
        # a file needs at least one track; an empty conductor keeps it loadable
        tracks = [[end_of_track()]]
    data = write_midi(tracks, song.timebase)
    logger.debug("exported %d tracks (%d bytes)", len(tracks), len(data))
    return data
