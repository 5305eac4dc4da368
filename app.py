# app.py
import logging
from typing import List

from config import AppConfig, SplitConfig
from midi.chunk import Chunk
from midi.parser import read_midi
from midi.writer import write_midi
from channels.allocator import ChordRedistributor, SplitReport
from channels.occupancy import OccupancyTracker
from channels.programs import ProgramTimeline
from channels.registry import InstrumentRegistry
from timeline.writer import TimelineWriter
from utils.path import default_output_path, ensure_parent_dir

log = logging.getLogger(__name__)

def build_state(chunks: List[Chunk]):
    """Whole-piece channel state, built once before any chord is touched."""
    changes = [pc for c in chunks for pc in c.program_changes()]
    programs = ProgramTimeline.from_changes(changes)
    registry = InstrumentRegistry.from_changes(changes)
    occupancy = OccupancyTracker.from_notes(n for c in chunks for n in c.notes())
    return occupancy, programs, registry

def split_chunks(chunks: List[Chunk], cfg: SplitConfig) -> SplitReport:
    """Split every chord in `chunks` in place and return what was done.

    Chunks are processed in document order against one shared channel view.
    """
    occupancy, programs, registry = build_state(chunks)
    engine = ChordRedistributor(occupancy, programs, registry)
    for chunk in chunks:
        engine.process_chunk(chunk, cfg.tolerance_ticks, cfg.min_chord_notes)

    report = engine.report
    TimelineWriter(chunks).apply(report.placements, report.program_changes)
    return report

class App:
    def __init__(self, cfg: AppConfig):
        self.cfg = cfg
        self.report = None

    @property
    def output_path(self) -> str:
        return default_output_path(self.cfg.io.input_path, self.cfg.io.output_path)

    def run(self) -> SplitReport:
        src = self.cfg.io.input_path
        dst = self.output_path
        log.info("讀取 %s", src)
        mid, chunks = read_midi(src)

        report = split_chunks(chunks, self.cfg.split)
        log.info("Split %d chords: %d notes placed, %d dropped, %d program changes",
                 report.chords, len(report.placements), len(report.dropped),
                 len(report.program_changes))

        ensure_parent_dir(dst)
        write_midi(mid, chunks, dst)
        log.info("Wrote: %s", dst)
        self.report = report
        return report
