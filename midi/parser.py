# midi/parser.py
import logging
from typing import List, Tuple

import mido

from midi.chunk import Chunk, TimedEvent

log = logging.getLogger(__name__)

class MalformedMidiError(ValueError):
    """The input file could not be read as a MIDI container."""

def track_to_chunk(index: int, track) -> Chunk:
    t = 0
    events: List[TimedEvent] = []
    end_time = 0
    for msg in track:
        t += msg.time
        if msg.type == 'end_of_track':
            end_time = t
            continue
        events.append(TimedEvent(t, msg.copy(time=0)))
    return Chunk(index, events, end_time=max(end_time, t))

def read_midi(path: str) -> Tuple[mido.MidiFile, List[Chunk]]:
    try:
        mid = mido.MidiFile(path)
    except (OSError, EOFError, ValueError, KeyError) as e:
        raise MalformedMidiError(f"Failed to read MIDI file {path}: {e}") from e

    chunks = [track_to_chunk(i, tr) for i, tr in enumerate(mid.tracks)]
    log.debug("Read %s: type %d, %d tracks, %d ticks/beat",
              path, mid.type, len(chunks), mid.ticks_per_beat)
    return mid, chunks
