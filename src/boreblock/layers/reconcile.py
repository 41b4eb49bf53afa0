# src/boreblock/layers/reconcile.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

import numpy as np


class ReconciliationError(RuntimeError):
    """Raised when the label matrix is inconsistent with layer reconciliation."""


@dataclass
class ReconciliationState:
    """
    Mutable state owned by one reconciliation pass.

    labels:  (nData, nWavelet) label matrix, rewritten in place on absorption
    live:    labels still present in the matrix
    members: label -> flat (row-major) indices of its cells
    counts:  live-label count after every absorption (non-increasing)
    """
    labels: np.ndarray
    live: Set[int]
    members: Dict[int, np.ndarray]
    n_initial: int
    n_absorbed: int = 0
    counts: List[int] = field(default_factory=list)

    @classmethod
    def from_labels(cls, labels: np.ndarray, n_labels: int) -> "ReconciliationState":
        L = np.ascontiguousarray(labels, dtype=np.int64)
        flat = L.reshape(-1)

        order = np.argsort(flat, kind="stable")
        sorted_labels = flat[order]
        uniq, first = np.unique(sorted_labels, return_index=True)
        bounds = np.append(first, sorted_labels.size)

        members: Dict[int, np.ndarray] = {}
        for i, lab in enumerate(uniq.tolist()):
            if lab <= 0:
                raise ReconciliationError(f"Label matrix contains invalid label {lab}.")
            members[int(lab)] = order[bounds[i] : bounds[i + 1]]

        return cls(
            labels=L,
            live=set(members.keys()),
            members=members,
            n_initial=int(n_labels),
            counts=[len(members)],
        )

    @property
    def n_layer(self) -> int:
        return len(self.live)


def reconcile_orphans(state: ReconciliationState) -> ReconciliationState:
    """
    Absorb every region that never reaches column 0 (the finest scale).

    Labels are visited once, in ascending order. An orphan is merged into the
    label immediately left of its first-disappearing cell: the smallest row
    within its minimum column, one column finer. If that target is itself an
    orphan with a higher label, the merged cells move again when the target's
    turn comes.
    """
    L = state.labels
    if L.ndim != 2:
        raise ReconciliationError(f"Label matrix must be 2D. Got ndim={L.ndim}")
    n_cols = int(L.shape[1])
    if L.size == 0:
        return state

    flat = L.reshape(-1)
    finest = set(np.unique(L[:, 0]).tolist())

    for lab in range(1, int(state.n_initial) + 1):
        if lab in finest or lab not in state.live:
            continue

        idx = state.members[lab]
        rows = idx // n_cols
        cols = idx % n_cols

        c = int(cols.min())
        r = int(rows[cols == c].min())
        if c == 0:
            raise ReconciliationError(f"Label {lab} reaches column 0 but was not found there.")

        target = int(L[r, c - 1])
        if target <= 0 or target == lab or target not in state.live:
            raise ReconciliationError(
                f"Orphan label {lab} has no valid left neighbour at (row={r}, col={c - 1}): got {target}."
            )

        flat[idx] = target
        state.members[target] = np.concatenate([state.members[target], idx])
        del state.members[lab]
        state.live.discard(lab)
        state.n_absorbed += 1
        state.counts.append(len(state.live))

    stray = state.live - finest
    if stray:
        raise ReconciliationError(f"Labels still missing from column 0 after reconciliation: {sorted(stray)[:10]}")

    return state


def renumber(state: ReconciliationState) -> Tuple[np.ndarray, List[np.ndarray]]:
    """
    Relabel survivors contiguously 1..nLayer, keeping ascending label order.

    Returns (labels, members) where members[k] are the flat indices of label k + 1.
    """
    survivors = sorted(state.live)
    out = np.zeros_like(state.labels)
    flat = out.reshape(-1)

    members: List[np.ndarray] = []
    for new_lab, old in enumerate(survivors, start=1):
        idx = np.sort(state.members[old])
        flat[idx] = new_lab
        members.append(idx)

    return out, members
