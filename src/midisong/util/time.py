from __future__ import annotations

# Beatmap timing assumes this resolution regardless of the song's timebase.
REFERENCE_TICKS_PER_BEAT = 480

def tick_to_millisec(tick: int, bpm: float) -> float:
    return tick / (REFERENCE_TICKS_PER_BEAT / 60) / bpm * 1000

def micro_to_bpm(micro: int) -> float:
    return 60_000_000 / micro

def bpm_to_micro(bpm: float) -> int:
    return int(round(60_000_000 / max(1e-6, float(bpm))))
