# notes/model.py
from dataclasses import dataclass, replace
from typing import Tuple

@dataclass(frozen=True)
class Note:
    pitch: int          # MIDI note number
    velocity: int
    start: int          # ticks
    duration: int       # ticks
    channel: int        # 0-15
    off_velocity: int = 0

    @property
    def end(self) -> int:
        return self.start + self.duration

    @property
    def key(self) -> Tuple[int, int, int]:
        """Identity used to match a note against its on/off events."""
        return (self.pitch, self.channel, self.start)

    def with_channel(self, channel: int) -> "Note":
        return replace(self, channel=channel)

@dataclass(frozen=True)
class Chord:
    """Notes starting together on one channel, lowest pitch first."""
    notes: Tuple[Note, ...]

    @property
    def time(self) -> int:
        return min(n.start for n in self.notes)

    @property
    def channel(self) -> int:
        return self.notes[0].channel

    def __len__(self) -> int:
        return len(self.notes)
