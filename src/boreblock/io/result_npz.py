# src/boreblock/io/result_npz.py
from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any, Dict

import numpy as np

from boreblock.blocker import BlockerResult

_SCALARS = {"depth_step": float, "n_data": int, "n_wavelet": int, "n_layer": int, "n_regions": int}
_OPTIONAL = ("importance_matrix", "wavelet_matrix")


def save_blocker_npz(result: BlockerResult, out_path: str | Path) -> None:
    """
    Save a BlockerResult as one compressed NPZ: one array per field; scalars
    as 0-d arrays; optional matrices only when present.
    """
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    payload: Dict[str, np.ndarray] = {}
    for f in fields(result):
        v = getattr(result, f.name)
        if v is None:
            continue
        payload[f.name] = np.asarray(v)
    np.savez_compressed(out_path, **payload)


def load_blocker_npz(path: str | Path) -> BlockerResult:
    """Load an NPZ written by save_blocker_npz()."""
    z = np.load(Path(path), allow_pickle=False)
    kwargs: Dict[str, Any] = {}
    for f in fields(BlockerResult):
        if f.name not in z.files:
            if f.name in _OPTIONAL or f.name == "n_regions":
                continue
            raise ValueError(f"Invalid blocker NPZ: missing {f.name!r}")
        arr = z[f.name]
        cast = _SCALARS.get(f.name)
        kwargs[f.name] = cast(arr) if cast is not None else np.asarray(arr)

    label = kwargs["layer_label"]
    if label.ndim != 2 or label.shape[0] != int(kwargs["n_data"]):
        raise ValueError(f"Invalid blocker NPZ: layer_label shape {label.shape} does not match n_data")

    return BlockerResult(**kwargs)
