# channels/occupancy.py
from typing import Dict, Iterable, List, Tuple

from notes.model import Note

Interval = Tuple[int, int]

class OccupancyTracker:
    """Per-channel [start, end) intervals of notes already sounding.

    Intervals are only appended (no merging); the lists stay short enough
    for a linear scan.
    """
    def __init__(self):
        self._intervals: Dict[int, List[Interval]] = {}

    @classmethod
    def from_notes(cls, notes: Iterable[Note]) -> "OccupancyTracker":
        occ = cls()
        for n in notes:
            occ.record(n.channel, n.start, n.end)
        return occ

    def overlaps(self, channel: int, start: int, end: int) -> bool:
        return any(start < e and end > s for s, e in self._intervals.get(channel, ()))

    def record(self, channel: int, start: int, end: int) -> None:
        self._intervals.setdefault(channel, []).append((start, end))

    def release(self, channel: int, start: int, end: int) -> bool:
        """Forget one interval equal to [start, end) on `channel`, if recorded."""
        arr = self._intervals.get(channel)
        if not arr:
            return False
        try:
            arr.remove((start, end))
        except ValueError:
            return False
        return True

    def intervals(self, channel: int) -> List[Interval]:
        return list(self._intervals.get(channel, ()))

    def channels(self) -> List[int]:
        return sorted(self._intervals)
