# src/boreblock/config/defaults.py
from __future__ import annotations

from pathlib import Path

from .schema import IOConfig, RunConfig


def default_config() -> RunConfig:
    base = Path.cwd()
    return RunConfig(
        io=IOConfig(
            out_dir=base / "out",
        )
    )
