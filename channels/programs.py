# channels/programs.py
from bisect import bisect_left, bisect_right
from typing import Dict, Iterable, List, Tuple

DEFAULT_PROGRAM = 0  # Acoustic Grand

class ProgramTimeline:
    """What program each channel plays over time, merged across all chunks."""
    def __init__(self):
        self._times: Dict[int, List[int]] = {}
        self._programs: Dict[int, List[int]] = {}

    @classmethod
    def from_changes(cls, changes: Iterable[Tuple[int, int, int]]) -> "ProgramTimeline":
        """Build from (time, channel, program) triples."""
        tl = cls()
        for time, channel, program in changes:
            tl.add(channel, time, program)
        return tl

    def add(self, channel: int, time: int, program: int) -> None:
        times = self._times.setdefault(channel, [])
        programs = self._programs.setdefault(channel, [])
        # keep document order among changes at one tick
        i = bisect_right(times, time)
        times.insert(i, time)
        programs.insert(i, program)

    def program_at(self, channel: int, time: int) -> int:
        times = self._times.get(channel)
        if not times:
            return DEFAULT_PROGRAM
        i = bisect_right(times, time) - 1
        if i < 0:
            # before the first change the first known program applies
            return self._programs[channel][0]
        # several changes at one tick: the first recorded applies
        i = bisect_left(times, times[i])
        return self._programs[channel][i]

    def assignments(self, channel: int) -> List[Tuple[int, int]]:
        return list(zip(self._times.get(channel, ()), self._programs.get(channel, ())))
