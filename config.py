# ========================= config.py =========================
from dataclasses import dataclass, field
from typing import Optional

@dataclass
class SplitConfig:
    tolerance_ticks: int = 3   # onsets this close form one chord
    min_chord_notes: int = 2

@dataclass
class IOConfig:
    input_path: str = "./input.mid"
    output_path: Optional[str] = None  # None -> "<input>.split.mid"

@dataclass
class LogConfig:
    level: str = "INFO"
    log_dir: Optional[str] = None      # None -> ./logs
    to_file: bool = True

@dataclass
class AppConfig:
    split: SplitConfig = field(default_factory=SplitConfig)
    io: IOConfig = field(default_factory=IOConfig)
    log: LogConfig = field(default_factory=LogConfig)
