# src/boreblock/io/__init__.py
from __future__ import annotations

from .csv import read_csv_rows, write_csv
from .result_npz import load_blocker_npz, save_blocker_npz
from .trace import TraceReadError, read_trace, read_trace_csv, read_trace_las

__all__ = [
    "read_csv_rows",
    "write_csv",
    "load_blocker_npz",
    "save_blocker_npz",
    "TraceReadError",
    "read_trace",
    "read_trace_csv",
    "read_trace_las",
]
