# src/boreblock/layers/boundaries.py
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .reconcile import ReconciliationError


@dataclass(frozen=True)
class LayerBoundaries:
    depth_index: np.ndarray  # (nLayer, 2) first/last row at the finest scale, 0-based inclusive
    depth: np.ndarray        # (nLayer, 2) depths at those rows
    thickness: np.ndarray    # (nLayer,) depth span + one depth step


def extract_boundaries(labels: np.ndarray, depth: np.ndarray, depth_step: float, n_layer: int) -> LayerBoundaries:
    """
    First and last finest-scale row of every rank 1..n_layer.

    A sample stands for a depth interval, so thickness adds one depth step
    to the top-to-bottom span.
    """
    L = np.asarray(labels)
    depth = np.asarray(depth, dtype="float64")
    n_layer = int(n_layer)

    idx = np.zeros((n_layer, 2), dtype=np.int64)
    if n_layer == 0:
        z = np.zeros((0, 2), dtype="float64")
        return LayerBoundaries(depth_index=idx, depth=z, thickness=np.zeros(0, dtype="float64"))

    finest = L[:, 0]
    for k in range(n_layer):
        rows = np.flatnonzero(finest == k + 1)
        if rows.size == 0:
            raise ReconciliationError(f"Layer rank {k + 1} is missing from the finest scale.")
        idx[k, 0] = rows[0]
        idx[k, 1] = rows[-1]

    d = depth[idx]
    thickness = (d[:, 1] - d[:, 0]) + float(depth_step)
    return LayerBoundaries(depth_index=idx, depth=d, thickness=thickness)
