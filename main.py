# main.py
import sys, os
sys.path.append(os.path.dirname(__file__))  # 確保能找到 config.py

import argparse
import logging
from logging.handlers import RotatingFileHandler

from config import AppConfig, SplitConfig, IOConfig, LogConfig
from app import App
from midi.parser import MalformedMidiError
from utils.crashlog import setup_crashlog, log_exception, log_dir, set_log_dir

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

def _init_logging(cfg: LogConfig):
    root = logging.getLogger()
    if root.handlers:
        return

    logging.basicConfig(level=getattr(logging, cfg.level.upper(), logging.INFO),
                        format=LOG_FORMAT, encoding="utf-8")
    if cfg.to_file:
        try:
            fh = RotatingFileHandler(os.path.join(log_dir(), "app.log"),
                                     maxBytes=2*1024*1024, backupCount=3, encoding="utf-8")
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(fh)
        except OSError as e:
            logging.warning("File logging disabled: %s", e)

def parse_args(argv=None) -> AppConfig:
    ap = argparse.ArgumentParser(
        prog="midi-chord-split",
        description="Spread chords on one MIDI channel over several channels, one note each.")
    ap.add_argument('-i', '--input', default="./input.mid", help="input .mid (default ./input.mid)")
    ap.add_argument('-o', '--output', default=None, help="output .mid (default <input>.split.mid)")
    ap.add_argument('--tolerance', type=int, default=3, help="chord onset tolerance in ticks")
    ap.add_argument('--min-notes', type=int, default=2, help="minimum notes per chord")
    ap.add_argument('--log-level', default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    ap.add_argument('--log-dir', default=None)
    ap.add_argument('--no-log-file', action='store_true')
    args = ap.parse_args(argv)

    return AppConfig(
        split=SplitConfig(tolerance_ticks=args.tolerance, min_chord_notes=args.min_notes),
        io=IOConfig(input_path=args.input, output_path=args.output),
        log=LogConfig(level=args.log_level, log_dir=args.log_dir, to_file=not args.no_log_file),
    )

def main(argv=None) -> int:
    cfg = parse_args(argv)
    set_log_dir(cfg.log.log_dir)
    setup_crashlog()
    _init_logging(cfg.log)

    app = App(cfg)
    try:
        app.run()
    except MalformedMidiError as e:
        logging.error("%s", e)
        print("Failed to read MIDI file.")
        return 1
    print(f"Wrote: {app.output_path}")
    return 0

if __name__ == '__main__':
    try:
        sys.exit(main())
    except Exception as e:
        log_exception("Top-level exception", e)
        logging.error("未捕捉的例外：%s", e, exc_info=True)
        raise
