import os

import mido
import pytest

import main as cli
from main import main, parse_args
from midi_helpers import chord_track, make_midi_file

def _args(tmp_path, *extra):
    return ['--no-log-file', '--log-dir', str(tmp_path / "logs"), *extra]

@pytest.fixture(autouse=True)
def crash_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "setup_crashlog", lambda: calls.append(True))
    return calls

def test_defaults():
    cfg = parse_args([])
    assert cfg.io.input_path == "./input.mid"
    assert cfg.io.output_path is None
    assert cfg.split.tolerance_ticks == 3
    assert cfg.split.min_chord_notes == 2

def test_cli_writes_output(tmp_path, capsys):
    src = tmp_path / "in.mid"
    dst = tmp_path / "out" / "split.mid"
    make_midi_file([chord_track(0, [60, 64, 67], program=19)]).save(str(src))

    assert main(_args(tmp_path, '-i', str(src), '-o', str(dst))) == 0
    assert f"Wrote: {dst}" in capsys.readouterr().out

    out = mido.MidiFile(str(dst))
    pcs = sorted((m.channel, m.program) for m in out.tracks[0] if m.type == 'program_change')
    assert pcs == [(0, 19), (0, 19), (1, 19), (2, 19)]

def test_cli_default_output_next_to_input(tmp_path):
    src = tmp_path / "in.mid"
    make_midi_file([chord_track(0, [60, 64])]).save(str(src))
    assert main(_args(tmp_path, '-i', str(src))) == 0
    assert os.path.exists(f"{src}.split.mid")

def test_cli_malformed_input(tmp_path, capsys):
    src = tmp_path / "broken.mid"
    src.write_bytes(b"garbage")
    dst = tmp_path / "out.mid"
    assert main(_args(tmp_path, '-i', str(src), '-o', str(dst))) == 1
    assert "Failed to read MIDI file." in capsys.readouterr().out
    assert not dst.exists()

def test_main_installs_crash_hooks(tmp_path, crash_calls):
    src = tmp_path / "in.mid"
    make_midi_file([chord_track(0, [60, 64])]).save(str(src))
    assert main(_args(tmp_path, '-i', str(src))) == 0
    assert crash_calls == [True]
