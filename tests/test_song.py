from __future__ import annotations

import pytest

from midisong.events import end_of_track
from midisong.song import Song, Track

from helpers import note_off, note_on, tempo, track_name


def test_track_accepts_delta_events_and_strips_end_of_track():
    t = Track(channel=0)
    t.add_events([note_on(60, delta_time=10), note_off(60, delta_time=10), end_of_track(100)])
    assert [e.tick for e in t.events] == [10, 20]
    assert t.end_tick == 120


def test_track_merges_by_tick():
    t = Track(channel=0)
    t.add_events([note_on(60, tick=0), note_off(60, tick=100)])
    t.add_events([note_on(62, tick=50), note_on(64, tick=100)])
    assert [(e.note, e.tick) for e in t.events] == [(60, 0), (62, 50), (60, 100), (64, 100)]


def test_conductor_track_rejects_channel_events():
    t = Track()
    with pytest.raises(ValueError):
        t.add_events([tempo(tick=0), note_on(60, tick=0)])
    assert t.events == []


def test_track_name():
    t = Track()
    assert t.name is None
    t.add_events([track_name("Drums", tick=0)])
    assert t.name == "Drums"


@pytest.mark.parametrize("bad", [0, -480, 1.5, "480", True])
def test_timebase_must_be_positive_int(bad):
    with pytest.raises(ValueError):
        Song(timebase=bad)


def test_all_events_merge_tracks_by_tick():
    song = Song()
    c = Track()
    c.add_events([tempo(tick=240)])
    song.add_track(c)
    t = Track(channel=0)
    t.add_events([note_on(60, tick=0), note_off(60, tick=240)])
    song.add_track(t)

    kinds = [getattr(e, "kind", getattr(e, "subtype", None)) for e in song.all_events]
    assert kinds == ["note_on", "set_tempo", "note_off"]
    assert song.conductor_track is c
    assert song.end_of_song == 240


def test_display_name_and_snapshot():
    song = Song(name="Untitled")
    assert song.display_name == "Untitled"
    song.filepath = "/tmp/songs/demo.mid"
    assert song.display_name == "demo.mid"

    t = Track(channel=1)
    t.add_events([note_on(60, channel=1, tick=0)])
    song.add_track(t)
    snap = song.snapshot()
    snap.tracks[0].channel = 7
    assert song.tracks[0].channel == 1
