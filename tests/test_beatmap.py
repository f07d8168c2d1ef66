from __future__ import annotations

import json
import logging

import mido
import pytest

from midisong.beatmap import BeatmapSample, beatmap_to_json, project_beatmap, song_to_beatmap
from midisong.convert import song_from_midi
from midisong.song import Song, Track
from midisong.util.time import bpm_to_micro

from helpers import note_off, note_on, smf_bytes, tempo


def _song(conductor_events, note_events, timebase=480) -> Song:
    song = Song(timebase=timebase)
    conductor = Track()
    conductor.add_events(conductor_events)
    song.add_track(conductor)
    track = Track(channel=0)
    track.add_events(note_events)
    song.add_track(track)
    return song


def test_single_note_at_120_bpm():
    song = _song([tempo(bpm_to_micro(120), tick=0)],
                 [note_on(60, 100, tick=0), note_off(60, tick=240)])

    samples = song_to_beatmap(song)

    assert len(samples) == 1
    s = samples[0]
    assert (s.pitch, s.velocity, s.time) == (60, 100, 0.0)
    # 240 ticks against the 480-per-beat reference = half a beat = 0.25 s
    assert s.duration == pytest.approx(0.25)


def test_one_beat_is_half_a_second_at_120_bpm():
    samples = project_beatmap([note_on(60, tick=480), note_off(60, tick=960)])
    assert samples[0].time == pytest.approx(0.5)
    assert samples[0].duration == pytest.approx(0.5)


def test_tempo_change_applies_after_its_event():
    song = _song(
        [tempo(bpm_to_micro(120), tick=0), tempo(bpm_to_micro(60), tick=480)],
        [note_on(60, tick=0), note_off(60, tick=960), note_on(62, tick=960), note_off(62, tick=1440)],
    )

    first, second = song_to_beatmap(song)

    assert first.time == 0.0
    assert first.duration == pytest.approx(1.5)
    assert second.time == pytest.approx(1.5)
    assert second.duration == pytest.approx(1.0)


def test_default_tempo_is_injectable():
    events = [note_on(60, tick=0), note_off(60, tick=480)]
    assert project_beatmap(events)[0].duration == pytest.approx(0.5)
    assert project_beatmap(events, default_tempo=60)[0].duration == pytest.approx(1.0)


def test_timing_ignores_song_timebase():
    # the fixed 480 reference makes a 960-tpb song play at double length
    song = _song([], [note_on(60, tick=0), note_off(60, tick=960)], timebase=960)
    assert song_to_beatmap(song)[0].duration == pytest.approx(1.0)


def test_orphan_note_off_is_skipped(caplog):
    events = [note_off(61, tick=0), note_on(60, tick=0), note_off(60, tick=480)]

    with caplog.at_level(logging.WARNING, logger="midisong.beatmap"):
        samples = project_beatmap(events)

    assert [(s.pitch, s.duration) for s in samples] == [(60, pytest.approx(0.5))]
    assert "note-off without note-on" in caplog.text


def test_retrigger_replaces_open_note():
    events = [note_on(60, 90, tick=0), note_on(60, 80, tick=240), note_off(60, tick=480)]

    samples = project_beatmap(events)

    assert [s.velocity for s in samples] == [90, 80]
    assert samples[0].duration is None
    assert samples[1].duration == pytest.approx(0.25)


def test_zero_velocity_note_on_closes_note():
    samples = project_beatmap([note_on(64, tick=0), note_on(64, velocity=0, tick=480)])
    assert len(samples) == 1
    assert samples[0].duration == pytest.approx(0.5)


def test_samples_follow_note_on_order_across_tracks():
    song = Song()
    song.add_track(Track())
    for ch, (pitch, start) in enumerate([(72, 240), (48, 0)]):
        t = Track(channel=ch)
        t.add_events([note_on(pitch, channel=ch, tick=start), note_off(pitch, channel=ch, tick=start + 120)])
        song.add_track(t)

    samples = song_to_beatmap(song)

    assert [s.pitch for s in samples] == [48, 72]
    times = [s.time for s in samples]
    assert times == sorted(times)


def test_json_output():
    samples = [BeatmapSample(60, 100, 0.0, 0.5), BeatmapSample(62, 90, 0.5)]
    assert json.loads(beatmap_to_json(samples)) == [
        {"type": 60, "position": 100, "time": 0.0, "duration": 0.5},
        {"type": 62, "position": 90, "time": 0.5},
    ]


def test_empty_song():
    assert song_to_beatmap(Song()) == []


def test_zero_tempo_is_ignored(caplog):
    data = smf_bytes([
        [mido.MetaMessage("set_tempo", tempo=0, time=0)],
        [mido.Message("note_on", note=60, velocity=100, time=0), mido.Message("note_off", note=60, time=480)],
    ])

    with caplog.at_level(logging.WARNING, logger="midisong.beatmap"):
        samples = song_to_beatmap(song_from_midi(data))

    # the default tempo stays in effect
    assert samples[0].duration == pytest.approx(0.5)
    assert "ignoring zero tempo" in caplog.text


def test_zero_tempo_keeps_previous_tempo():
    events = [tempo(bpm_to_micro(60), tick=0), tempo(0, tick=240), note_on(60, tick=480), note_off(60, tick=960)]
    samples = project_beatmap(events)
    assert samples[0].time == pytest.approx(1.0)
    assert samples[0].duration == pytest.approx(1.0)
