# channels/allocator.py
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from notes.model import Note, Chord
from midi.chunk import Chunk
from channels.occupancy import OccupancyTracker
from channels.programs import ProgramTimeline
from channels.registry import InstrumentRegistry

log = logging.getLogger(__name__)

ALL_CHANNELS = list(range(16))

@dataclass(frozen=True)
class Placement:
    note: Note        # original note, original channel
    channel: int      # assigned channel
    time: int
    chunk: int        # chunk index
    program: int

@dataclass(frozen=True)
class ProgramChangeRequest:
    chunk: int
    channel: int
    program: int
    time: int

@dataclass(frozen=True)
class DroppedNote:
    chunk: int
    chord_time: int
    note: Note

@dataclass
class SplitReport:
    placements: List[Placement] = field(default_factory=list)
    program_changes: Set[ProgramChangeRequest] = field(default_factory=set)
    dropped: List[DroppedNote] = field(default_factory=list)
    chords: int = 0
    removed: int = 0

class ChordRedistributor:
    """Spreads each chord's notes over free channels playing the chord's instrument.

    Shared state is read and extended in place, one note at a time, so later
    notes and chords see every earlier allocation.
    """
    def __init__(self, occupancy: OccupancyTracker, programs: ProgramTimeline,
                 registry: InstrumentRegistry, report: Optional[SplitReport] = None):
        self.occupancy = occupancy
        self.programs = programs
        self.registry = registry
        self.report = report if report is not None else SplitReport()

    # ---------- search ----------
    def _free(self, ch: int, note: Note, used: Set[int]) -> bool:
        return ch not in used and not self.occupancy.overlaps(ch, note.start, note.end)

    def _preferred(self, program: int, note: Note, used: Set[int]) -> Optional[int]:
        for ch in self.registry.channels_for(program):
            if self._free(ch, note, used):
                return ch
        return None

    def _fallback(self, program: int, note: Note, used: Set[int]) -> Optional[int]:
        tried = set(self.registry.channels_for(program))
        for ch in ALL_CHANNELS:
            if ch in tried:
                continue
            if self._free(ch, note, used):
                return ch
        return None

    def allocate(self, program: int, note: Note, used: Set[int]) -> Optional[int]:
        ch = self._preferred(program, note, used)
        if ch is None:
            ch = self._fallback(program, note, used)
            if ch is not None:
                self.registry.register(program, ch)
        return ch

    # ---------- chords ----------
    def split_chord(self, chunk_index: int, chord: Chord) -> List[Placement]:
        notes = sorted(chord.notes, key=lambda n: n.pitch)
        if len(notes) < 2:
            return []

        main_program = self.programs.program_at(notes[0].channel, notes[0].start)
        # originals are removed from the output, their channel time is free again
        for n in notes:
            self.occupancy.release(n.channel, n.start, n.end)

        used: Set[int] = set()
        placed: List[Placement] = []
        for note in notes:
            ch = self.allocate(main_program, note, used)
            if ch is None:
                log.warning("Not enough channels to split chord at tick %d; dropping note %d",
                            chord.time, note.pitch)
                self.report.dropped.append(DroppedNote(chunk_index, chord.time, note))
                continue
            self.report.program_changes.add(
                ProgramChangeRequest(chunk_index, ch, main_program, note.start))
            p = Placement(note=note, channel=ch, time=note.start, chunk=chunk_index, program=main_program)
            placed.append(p)
            self.occupancy.record(ch, note.start, note.end)
            used.add(ch)

        self.report.placements.extend(placed)
        self.report.chords += 1
        return placed

    def process_chunk(self, chunk: Chunk, tolerance: int = 3, min_count: int = 2) -> int:
        """Split every chord of `chunk`, then remove the original chord notes from it."""
        to_remove: List[Note] = []
        for chord in chunk.chords(tolerance, min_count):
            if len(chord) < 2:
                continue
            to_remove.extend(chord.notes)
            self.split_chord(chunk.index, chord)

        removed = chunk.remove_notes(to_remove) if to_remove else 0
        self.report.removed += removed
        log.debug("Chunk %d: removed %d chord notes", chunk.index, removed)
        return removed
