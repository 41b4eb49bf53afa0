# src/boreblock/layers/ranking.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np


@dataclass(frozen=True)
class RankedLayers:
    """
    labels:            (nData, nWavelet) matrix relabeled so 1 is the most important layer
    importance:        (nLayer,) normalized importance, descending (rank order)
    raw_importance:    (nLayer,) |mean transform| per layer, in rank order
    order:             order[k] = position (in the input member list) of rank k + 1
    members:           flat cell indices per rank
    importance_matrix: optional display matrix of normalized importance per cell
    """
    labels: np.ndarray
    importance: np.ndarray
    raw_importance: np.ndarray
    order: np.ndarray
    members: List[np.ndarray]
    importance_matrix: Optional[np.ndarray] = None

    @property
    def n_layer(self) -> int:
        return int(self.importance.size)


def normalize_importance(x: np.ndarray) -> np.ndarray:
    """
    (x - max) / (max - min) + 1

    The largest value maps to exactly 1 and the smallest to 0. A constant
    input (max == min) maps to all ones.
    """
    a = np.asarray(x, dtype="float64")
    if a.size == 0:
        return a.copy()
    mx = float(np.max(a))
    mn = float(np.min(a))
    if mx == mn:
        return np.ones_like(a)
    return (a - mx) / (mx - mn) + 1.0


def area_weighted_deflection(transform: np.ndarray, members: Sequence[np.ndarray]) -> np.ndarray:
    """|mean(transform)| over each member set (flat, row-major indices)."""
    Wf = np.asarray(transform, dtype="float64").reshape(-1)
    return np.asarray([abs(float(np.mean(Wf[idx]))) for idx in members], dtype="float64")


def rank_layers(
    transform: np.ndarray,
    labels: np.ndarray,
    members: Sequence[np.ndarray],
    *,
    keep_matrix: bool = False,
) -> RankedLayers:
    """
    Sort reconciled layers by importance and relabel the matrix by rank.

    Ties keep their reconciled label order (stable sort).
    """
    L = np.asarray(labels)
    raw = area_weighted_deflection(transform, members)
    norm = normalize_importance(raw)

    order = np.argsort(-norm, kind="stable")

    out = np.zeros(L.shape, dtype=np.int64)
    flat = out.reshape(-1)
    ranked_members: List[np.ndarray] = []
    for rank, src in enumerate(order.tolist(), start=1):
        idx = members[src]
        flat[idx] = rank
        ranked_members.append(idx)

    importance_matrix = None
    if keep_matrix:
        M = np.zeros(L.shape, dtype="float64")
        Mf = M.reshape(-1)
        for src, idx in enumerate(members):
            Mf[idx] = raw[src]
        importance_matrix = normalize_importance(M)

    return RankedLayers(
        labels=out,
        importance=norm[order],
        raw_importance=raw[order],
        order=order,
        members=ranked_members,
        importance_matrix=importance_matrix,
    )
