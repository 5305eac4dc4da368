import mido

from midi.chunk import Chunk, TimedEvent
from midi_helpers import make_chunk, note_events

def test_notes_pair_on_off_first_in_first_out():
    events = [
        TimedEvent(0, mido.Message('note_on', channel=0, note=60, velocity=80)),
        TimedEvent(10, mido.Message('note_on', channel=0, note=60, velocity=70)),
        TimedEvent(100, mido.Message('note_off', channel=0, note=60, velocity=5)),
        TimedEvent(200, mido.Message('note_on', channel=0, note=60, velocity=0)),
    ]
    notes = Chunk(0, events).notes()
    assert [(x.start, x.duration, x.velocity) for x in notes] == [(0, 100, 80), (10, 190, 70)]
    assert notes[0].off_velocity == 5

def test_dangling_note_closes_at_last_event():
    events = [
        TimedEvent(0, mido.Message('note_on', channel=3, note=50, velocity=80)),
        TimedEvent(300, mido.Message('control_change', channel=3, control=7, value=100)),
    ]
    (note,) = Chunk(0, events).notes()
    assert note.end == 300
    assert note.channel == 3

def test_program_changes_in_event_order():
    chunk = make_chunk(0, programs=[(1, 40, 0), (2, 0, 480)])
    assert chunk.program_changes() == [(0, 1, 40), (480, 2, 0)]

def test_remove_notes_drops_on_and_off_events():
    chunk = make_chunk(0, notes=[(2, 60, 0, 480), (2, 64, 0, 480), (2, 67, 960, 480)])
    victims = [n for n in chunk.notes() if n.start == 0]
    assert chunk.remove_notes(victims) == 2
    assert [n.pitch for n in chunk.notes()] == [67]
    assert len(chunk.events) == 2

def test_remove_nothing():
    chunk = make_chunk(0, notes=[(0, 60, 0, 480)])
    assert chunk.remove_notes([]) == 0
    assert len(chunk.events) == 2

def test_sort_events_ranks_events_within_a_tick():
    chunk = Chunk(0, note_events(0, 60, 0, 480))
    chunk.add_event(0, mido.Message('program_change', channel=1, program=5))
    chunk.add_event(0, mido.Message('control_change', channel=1, control=7, value=90))
    chunk.sort_events()
    assert [te.msg.type for te in chunk.events] == [
        'program_change', 'control_change', 'note_on', 'note_off']

def test_note_off_sorts_before_note_on_at_same_tick():
    chunk = Chunk(0, note_events(0, 64, 480, 480))
    for te in note_events(0, 64, 0, 480):
        chunk.add_event(te.time, te.msg)
    chunk.sort_events()
    at_480 = [(te.msg.type, te.msg.velocity) for te in chunk.events if te.time == 480]
    assert at_480 == [('note_off', 0), ('note_on', 100)]
    assert [(n.start, n.duration) for n in chunk.notes()] == [(0, 480), (480, 480)]

def test_zero_length_note_keeps_on_before_off():
    events = [
        TimedEvent(240, mido.Message('note_on', channel=0, note=60, velocity=80)),
        TimedEvent(240, mido.Message('note_on', channel=0, note=60, velocity=0)),
    ]
    chunk = Chunk(0, events)
    chunk.sort_events()
    assert [te.msg.velocity for te in chunk.events] == [80, 0]
    (note,) = chunk.notes()
    assert (note.start, note.duration) == (240, 0)

def test_chords_delegates_to_detection():
    chunk = make_chunk(0, notes=[(2, 64, 1, 480), (2, 60, 0, 480), (2, 72, 900, 10)])
    chords = chunk.chords(tolerance=3, min_count=2)
    assert len(chords) == 1
    assert [n.pitch for n in chords[0].notes] == [60, 64]
