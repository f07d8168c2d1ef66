from __future__ import annotations
import argparse, logging, pathlib, sys, traceback
from .beatmap import beatmap_to_json, song_to_beatmap
from .config import get_default_tempo, load_config
from .convert import song_from_midi, song_to_midi
from .errors import MidiSongError

def _default_midi_path(outfile, display_name, in_path, cfg) -> pathlib.Path:
    """Explicit --out wins, else the song's file name (never the input itself), else the config name."""
    if outfile:
        return pathlib.Path(outfile).expanduser().resolve()
    fallback = pathlib.Path(cfg["export"]["midi_filename"]).resolve()
    if not display_name:
        return fallback
    path = pathlib.Path(display_name).resolve()
    return fallback if path == in_path else path

def main(argv=None):
    p = argparse.ArgumentParser(description="Standard MIDI File -> song / MIDI / beatmap")
    p.add_argument("--in", dest="infile", required=True, help="Input MIDI file (.mid)")
    p.add_argument("--out", dest="outfile", nargs="?", const="", default=None,
                   help="Re-export the song as MIDI (no value: the input file name in the working directory, or the config name)")
    p.add_argument("--beatmap", dest="beatmap", nargs="?", const="", default=None,
                   help="Write the beatmap JSON (default name from config if no value)")
    p.add_argument("--config", dest="config", default=None, help="YAML config (defaults applied if omitted)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = p.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    in_path = pathlib.Path(args.infile).expanduser().resolve()
    if not in_path.exists():
        print(f"[cli] ERROR: Input not found: {in_path}", file=sys.stderr)
        return 1

    cfg = load_config(args.config)
    print(f"[cli] infile = {in_path}")

    try:
        song = song_from_midi(in_path)
        midi_bytes = song_to_midi(song) if args.outfile is not None else None
        beatmap = song_to_beatmap(song, get_default_tempo(cfg)) if args.beatmap is not None else None
    except MidiSongError as exc:
        traceback.print_exc()
        print(f"[cli] ERROR: {exc}", file=sys.stderr)
        return 2

    wrote_anything = False

    if midi_bytes is not None:
        out_path = _default_midi_path(args.outfile, song.display_name, in_path, cfg)
        out_path.write_bytes(midi_bytes)
        print(f"[cli] midi    -> {out_path}")
        wrote_anything = True

    if beatmap is not None:
        bm_path = pathlib.Path(args.beatmap or cfg["export"]["beatmap_filename"]).expanduser().resolve()
        bm_path.write_text(beatmap_to_json(beatmap), encoding="utf-8")
        print(f"[cli] beatmap -> {bm_path} ({len(beatmap)} notes)")
        wrote_anything = True

    if not wrote_anything:
        print("[cli] WARNING: no output produced (use --out and/or --beatmap).")

    print(f"[cli] Done. name={song.display_name!r} tracks={len(song.tracks)} timebase={song.timebase}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
