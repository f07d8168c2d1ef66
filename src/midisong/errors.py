from __future__ import annotations


class MidiSongError(Exception):
    """Base class for everything the import/export pipeline raises."""


class UnsupportedFormatError(MidiSongError):
    def __init__(self, format_type: int):
        super().__init__(f"Unsupported midi format {format_type}")
        self.format_type = format_type


class MidiDecodeError(MidiSongError):
    pass


class MixedTimingError(MidiSongError, ValueError):
    """An event list mixes delta-time and absolute-tick events."""
