# midi/writer.py
import logging
from typing import List

import mido

from midi.chunk import Chunk

log = logging.getLogger(__name__)

def chunk_to_track(chunk: Chunk) -> mido.MidiTrack:
    track = mido.MidiTrack()
    last = 0
    for te in chunk.ordered_events():
        track.append(te.msg.copy(time=te.time - last))
        last = te.time
    eot = max(chunk.end_time, last)
    track.append(mido.MetaMessage('end_of_track', time=eot - last))
    return track

def build_midi(mid: mido.MidiFile, chunks: List[Chunk]) -> mido.MidiFile:
    out = mido.MidiFile(type=mid.type, ticks_per_beat=mid.ticks_per_beat)
    for chunk in chunks:
        out.tracks.append(chunk_to_track(chunk))
    return out

def write_midi(mid: mido.MidiFile, chunks: List[Chunk], path: str) -> mido.MidiFile:
    out = build_midi(mid, chunks)
    out.save(path)
    log.debug("Saved %d tracks to %s", len(out.tracks), path)
    return out
