from __future__ import annotations

import numpy as np
import pytest

from boreblock.config.schema import TransformConfig
from boreblock.layers.labeling import label_sign_regions
from boreblock.layers.reconcile import (
    ReconciliationError,
    ReconciliationState,
    reconcile_orphans,
    renumber,
)
from boreblock.wavelet.transform import sign_matrix, wavelet_transform


def test_orphans_move_to_their_left_neighbour() -> None:
    L = np.array(
        [
            [1, 1, 1],
            [2, 3, 3],
            [2, 2, 4],
        ]
    )
    state = ReconciliationState.from_labels(L, 4)
    reconcile_orphans(state)

    assert state.labels.tolist() == [[1, 1, 1], [2, 2, 2], [2, 2, 2]]
    assert state.live == {1, 2}
    assert state.n_absorbed == 2
    assert state.counts == [4, 3, 2]
    assert sorted(state.members[2].tolist()) == [3, 4, 5, 6, 7, 8]


def test_orphan_absorbed_into_orphan_moves_again() -> None:
    L = np.array(
        [
            [1, 1, 1, 1],
            [1, 3, 2, 2],
        ]
    )
    state = ReconciliationState.from_labels(L, 3)
    reconcile_orphans(state)

    assert np.all(state.labels == 1)
    assert state.n_layer == 1
    assert state.counts == [3, 2, 1]


def test_renumber_keeps_ascending_label_order() -> None:
    L = np.array([[1, 5], [3, 5]])
    state = ReconciliationState.from_labels(L, 5)
    reconcile_orphans(state)
    labels, members = renumber(state)

    assert labels.tolist() == [[1, 1], [2, 1]]
    assert [m.tolist() for m in members] == [[0, 1, 3], [2]]


def test_invalid_labels_are_rejected() -> None:
    with pytest.raises(ReconciliationError):
        ReconciliationState.from_labels(np.array([[1, 0]]), 1)


def test_reconciliation_on_a_real_transform_is_monotone() -> None:
    rng = np.random.default_rng(42)
    depth = np.arange(120.0)
    value = np.cumsum(rng.normal(size=120))
    tr = wavelet_transform(depth, value, cfg=TransformConfig(progress=False))

    labels, n0 = label_sign_regions(sign_matrix(tr.transform, eps=1e-12))
    state = ReconciliationState.from_labels(labels, n0)
    reconcile_orphans(state)

    assert state.counts[0] == n0
    assert all(b == a - 1 for a, b in zip(state.counts, state.counts[1:]))
    assert state.n_layer == n0 - state.n_absorbed
    assert state.n_absorbed <= n0
    assert set(np.unique(state.labels).tolist()) == state.live
    assert set(np.unique(state.labels[:, 0]).tolist()) == state.live

    out, members = renumber(state)
    assert np.unique(out).tolist() == list(range(1, state.n_layer + 1))
    assert sum(m.size for m in members) == out.size
