# src/boreblock/layers/labeling.py
from __future__ import annotations

from typing import List, Tuple

import numpy as np


class _UnionFind:
    """Disjoint sets over 0..n-1 with path compression and union by rank."""

    def __init__(self, n: int) -> None:
        self._parent = list(range(int(n)))
        self._rank = [0] * int(n)

    def find(self, x: int) -> int:
        root = x
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[x] != root:
            self._parent[x], x = root, self._parent[x]
        return root

    def union(self, a: int, b: int) -> None:
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return
        if self._rank[ra] < self._rank[rb]:
            ra, rb = rb, ra
        self._parent[rb] = ra
        if self._rank[ra] == self._rank[rb]:
            self._rank[ra] += 1


def _column_runs(col: np.ndarray) -> Tuple[List[int], List[int], List[int]]:
    """Maximal runs of equal value down one column: (starts, ends, values)."""
    n = int(col.size)
    if n == 0:
        return [], [], []
    change = np.flatnonzero(col[1:] != col[:-1]) + 1
    starts = np.concatenate([np.array([0]), change])
    ends = np.concatenate([change - 1, np.array([n - 1])])
    return starts.tolist(), ends.tolist(), col[starts].tolist()


def label_sign_regions(signs: np.ndarray) -> Tuple[np.ndarray, int]:
    """
    Label maximal 4-connected regions of equal sign.

    signs: (nData, nWavelet) matrix in {-1, 0, +1}; 0 is a sign class of its own.

    Returns (labels, n_labels). labels holds 1..n_labels, numbered in order of
    first appearance in a column-major scan (column 0 top to bottom first).

    Runs of equal sign down each column are the nodes; a run is merged with
    every run in the previous column that shares its sign and overlaps it in
    depth, which is exactly 4-neighbour adjacency between the two columns.
    """
    S = np.asarray(signs)
    if S.ndim != 2:
        raise ValueError(f"signs must be 2D (nData, nWavelet). Got ndim={S.ndim}")

    n, m = S.shape
    labels = np.zeros((n, m), dtype=np.int64)
    if S.size == 0:
        return labels, 0

    runs = [_column_runs(S[:, j]) for j in range(m)]
    offsets = np.cumsum([0] + [len(r[0]) for r in runs]).tolist()
    uf = _UnionFind(int(offsets[-1]))

    for j in range(1, m):
        a_start, a_end, a_val = runs[j - 1]
        b_start, b_end, b_val = runs[j]
        oa = offsets[j - 1]
        ob = offsets[j]
        i = k = 0
        while i < len(a_start) and k < len(b_start):
            if a_val[i] == b_val[k] and a_start[i] <= b_end[k] and b_start[k] <= a_end[i]:
                uf.union(oa + i, ob + k)
            if a_end[i] < b_end[k]:
                i += 1
            elif a_end[i] > b_end[k]:
                k += 1
            else:
                i += 1
                k += 1

    root_label = {}
    for j in range(m):
        starts, ends, _vals = runs[j]
        run_labels = np.empty(len(starts), dtype=np.int64)
        for r in range(len(starts)):
            root = uf.find(offsets[j] + r)
            lab = root_label.get(root)
            if lab is None:
                lab = len(root_label) + 1
                root_label[root] = lab
            run_labels[r] = lab
        lengths = np.asarray(ends) - np.asarray(starts) + 1
        labels[:, j] = np.repeat(run_labels, lengths)

    return labels, len(root_label)
