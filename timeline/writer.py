# timeline/writer.py
from typing import Dict, Iterable, List

import mido

from midi.chunk import Chunk
from channels.allocator import Placement, ProgramChangeRequest

class TimelineWriter:
    """Puts redistributed notes and their program changes back into the chunks.

    Run after every chunk has had its chord notes removed.
    """
    def __init__(self, chunks: Iterable[Chunk]):
        self.chunks: Dict[int, Chunk] = {c.index: c for c in chunks}

    def insert_program_changes(self, requests: Iterable[ProgramChangeRequest]) -> int:
        n = 0
        for pc in sorted(requests, key=lambda r: (r.time, r.chunk, r.channel, r.program)):
            self.chunks[pc.chunk].add_event(
                pc.time, mido.Message('program_change', channel=pc.channel, program=pc.program))
            n += 1
        return n

    def insert_notes(self, placements: Iterable[Placement]) -> int:
        n = 0
        for p in sorted(placements, key=lambda p: p.time):
            clone = p.note.with_channel(p.channel)
            chunk = self.chunks[p.chunk]
            chunk.add_event(clone.start, mido.Message(
                'note_on', channel=clone.channel, note=clone.pitch, velocity=clone.velocity))
            chunk.add_event(clone.end, mido.Message(
                'note_off', channel=clone.channel, note=clone.pitch, velocity=clone.off_velocity))
            n += 1
        return n

    def apply(self, placements: List[Placement], requests: Iterable[ProgramChangeRequest]) -> None:
        self.insert_program_changes(requests)
        self.insert_notes(placements)
        for chunk in self.chunks.values():
            chunk.sort_events()
