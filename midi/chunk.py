# midi/chunk.py
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import mido

from notes.model import Note, Chord
from notes.chords import detect_chords

@dataclass
class TimedEvent:
    time: int            # absolute ticks
    msg: mido.Message    # its own .time is ignored

def _is_note_on(msg) -> bool:
    return msg.type == 'note_on' and msg.velocity > 0

def _is_note_off(msg) -> bool:
    return msg.type == 'note_off' or (msg.type == 'note_on' and msg.velocity == 0)

# order at one tick: note-offs, then everything else, then note-ons
_OFF, _OTHER, _ON, _ZERO_OFF = 0, 1, 2, 3

def _rank(msg) -> int:
    if _is_note_off(msg):
        return _OFF
    if _is_note_on(msg):
        return _ON
    return _OTHER

def pair_notes(events: List[TimedEvent]) -> List[Tuple[Note, int, Optional[int]]]:
    """(note, on_index, off_index) in list order of the note-ons."""
    active: Dict[Tuple[int, int], List[int]] = {}
    pairs: List[Tuple[int, Optional[int]]] = []
    for i, te in enumerate(events):
        msg = te.msg
        if _is_note_on(msg):
            active.setdefault((msg.channel, msg.note), []).append(len(pairs))
            pairs.append((i, None))
        elif _is_note_off(msg):
            waiting = active.get((msg.channel, msg.note))
            if waiting:
                p = waiting.pop(0)
                pairs[p] = (pairs[p][0], i)

    # close dangling
    last = events[-1].time if events else 0
    out = []
    for on_i, off_i in pairs:
        on = events[on_i]
        if off_i is None:
            end, off_vel = last, 0
        else:
            end, off_vel = events[off_i].time, events[off_i].msg.velocity
        out.append((Note(pitch=on.msg.note, velocity=on.msg.velocity, start=on.time,
                         duration=end - on.time, channel=on.msg.channel,
                         off_velocity=off_vel), on_i, off_i))
    return out

class Chunk:
    """One track of a MIDI file held as absolute-time events.

    Notes are derived from the events on demand, so removals and insertions
    always act on the event list itself.
    """
    def __init__(self, index: int, events: Optional[Iterable[TimedEvent]] = None, end_time: int = 0):
        self.index = index
        self.events: List[TimedEvent] = list(events or [])
        self.end_time = end_time  # end_of_track position as read

    def __repr__(self) -> str:
        return f"Chunk(index={self.index}, events={len(self.events)})"

    # ---------- queries ----------
    def _paired(self) -> List[Tuple[Note, int, Optional[int]]]:
        return pair_notes(self.events)

    def notes(self) -> List[Note]:
        notes = [n for n, _, _ in self._paired()]
        notes.sort(key=lambda n: (n.start, n.pitch))
        return notes

    def program_changes(self) -> List[Tuple[int, int, int]]:
        return [(te.time, te.msg.channel, te.msg.program)
                for te in self.events if te.msg.type == 'program_change']

    def chords(self, tolerance: int, min_count: int) -> List[Chord]:
        return detect_chords(self.notes(), tolerance=tolerance, min_count=min_count)

    # ---------- edits ----------
    def remove_notes(self, notes: Iterable[Note]) -> int:
        """Drop the on/off events of every note matching by pitch, channel and start."""
        keys = {n.key for n in notes}
        if not keys:
            return 0
        drop = set()
        removed = 0
        for note, on_i, off_i in self._paired():
            if note.key in keys:
                drop.add(on_i)
                if off_i is not None:
                    drop.add(off_i)
                removed += 1
        self.events = [te for i, te in enumerate(self.events) if i not in drop]
        return removed

    def add_event(self, time: int, msg) -> None:
        self.events.append(TimedEvent(time, msg))

    def ordered_events(self) -> List[TimedEvent]:
        """Events by tick; at one tick note-offs come first and note-ons last.

        A zero-length note keeps its off after its on. Within a rank the
        original order is kept.
        """
        by_time = sorted(self.events, key=lambda te: te.time)
        zero = {off_i for note, _, off_i in pair_notes(by_time)
                if off_i is not None and note.duration == 0}
        order = sorted(range(len(by_time)), key=lambda i: (
            by_time[i].time, _ZERO_OFF if i in zero else _rank(by_time[i].msg)))
        return [by_time[i] for i in order]

    def sort_events(self) -> None:
        self.events = self.ordered_events()
