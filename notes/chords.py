# ========================= notes/chords.py =========================
from typing import Iterable, List
from notes.model import Note, Chord

def detect_chords(notes: Iterable[Note], tolerance: int = 3, min_count: int = 2) -> List[Chord]:
    """Group notes whose onsets lie within `tolerance` ticks of the chord's first note.

    Grouping is per channel. Groups smaller than `min_count` are not chords
    and are left out of the result.
    """
    by_channel = {}
    for n in notes:
        by_channel.setdefault(n.channel, []).append(n)

    chords: List[Chord] = []
    for ch in sorted(by_channel):
        arr = sorted(by_channel[ch], key=lambda x: (x.start, x.pitch))
        group: List[Note] = []
        for n in arr:
            if group and n.start - group[0].start > tolerance:
                chords.append(_make_chord(group))
                group = []
            group.append(n)
        if group:
            chords.append(_make_chord(group))

    chords = [c for c in chords if len(c) >= min_count]
    chords.sort(key=lambda c: (c.time, c.channel))
    return chords

def _make_chord(group: List[Note]) -> Chord:
    return Chord(notes=tuple(sorted(group, key=lambda n: (n.pitch, n.start))))
