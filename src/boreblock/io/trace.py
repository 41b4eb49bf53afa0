# src/boreblock/io/trace.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Tuple

import numpy as np

try:
    import pandas as pd  # type: ignore
except Exception:  # pragma: no cover
    pd = None  # type: ignore

try:
    import lasio  # type: ignore
except Exception:  # pragma: no cover
    lasio = None  # type: ignore


DEPTH_ALIASES = ("depth", "dept", "depth_m", "md", "z")


class TraceReadError(RuntimeError):
    """Raised when a trace file cannot be turned into (depth, value) arrays."""


def _require_pandas() -> None:
    if pd is None:
        raise RuntimeError("pandas is required for CSV traces. Install with: pip install pandas")


def require_lasio() -> None:
    if lasio is None:
        raise RuntimeError(
            "lasio is required for LAS traces. Install it with:\n"
            "  pip install lasio\n"
        )


def pick_col(columns: Sequence[str], wanted: Sequence[str]) -> Optional[str]:
    """First column matching any of `wanted`, case-insensitive."""
    col_map = {str(c).strip().lower(): str(c) for c in columns}
    for c in wanted:
        key = str(c).strip().lower()
        if key in col_map:
            return col_map[key]
    return None


def _finite_pairs(depth: np.ndarray, value: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    d = np.asarray(depth, dtype="float64").reshape(-1)
    v = np.asarray(value, dtype="float64").reshape(-1)
    keep = np.isfinite(d) & np.isfinite(v)
    return d[keep], v[keep]


def read_trace_csv(path: Path, *, depth_col: str = "depth", value_col: str = "value") -> Tuple[np.ndarray, np.ndarray]:
    """
    Read (depth, value) from a delimited table. The delimiter is sniffed.

    depth_col falls back to common depth spellings (DEPT, MD, ...); rows with
    a missing depth or value are dropped.
    """
    _require_pandas()
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    df = pd.read_csv(p, sep=None, engine="python")
    dc = pick_col(list(df.columns), [depth_col, *DEPTH_ALIASES])
    vc = pick_col(list(df.columns), [value_col])
    if dc is None:
        raise TraceReadError(f"No depth column ({depth_col!r} or aliases) in {p}")
    if vc is None:
        raise TraceReadError(f"No value column {value_col!r} in {p}")

    d = pd.to_numeric(df[dc], errors="coerce").to_numpy(dtype="float64")
    v = pd.to_numeric(df[vc], errors="coerce").to_numpy(dtype="float64")
    return _finite_pairs(d, v)


def read_trace_las(path: Path, *, curve: str = "GR") -> Tuple[np.ndarray, np.ndarray]:
    """
    Read (index depth, curve) from a LAS file. Null values (lasio -> NaN) are dropped.
    """
    require_lasio()
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    try:
        las = lasio.read(str(p))  # type: ignore[attr-defined]
    except Exception as e:
        raise TraceReadError(f"Failed to read LAS: {p}") from e

    mnemonics = [str(getattr(c, "mnemonic", "") or "").strip() for c in las.curves]
    raw = pick_col(mnemonics, [curve])
    if raw is None:
        raise TraceReadError(f"Curve {curve!r} not found in {p} (have {mnemonics})")

    return _finite_pairs(np.asarray(las.index), np.asarray(las[raw]))


def read_trace(
    path: Path,
    *,
    depth_col: str = "depth",
    value_col: str = "value",
    las_curve: str = "GR",
) -> Tuple[np.ndarray, np.ndarray]:
    p = Path(path)
    if p.suffix.lower() == ".las":
        return read_trace_las(p, curve=las_curve)
    return read_trace_csv(p, depth_col=depth_col, value_col=value_col)
