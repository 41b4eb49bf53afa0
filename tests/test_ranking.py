from __future__ import annotations

import numpy as np
import pytest

from boreblock.layers.boundaries import extract_boundaries
from boreblock.layers.ranking import area_weighted_deflection, normalize_importance, rank_layers
from boreblock.layers.reconcile import ReconciliationError


def test_normalization_maps_max_to_one_and_min_to_zero() -> None:
    assert np.allclose(normalize_importance(np.array([2.0, 4.0, 3.0])), [0.0, 1.0, 0.5])
    assert normalize_importance(np.array([5.0, 5.0])).tolist() == [1.0, 1.0]
    assert normalize_importance(np.zeros(0)).size == 0


def test_layers_are_relabelled_by_descending_importance() -> None:
    W = np.array([[-1.0, -3.0], [2.0, 0.5]])
    labels = np.array([[2, 2], [1, 1]])
    members = [np.array([2, 3]), np.array([0, 1])]

    ranked = rank_layers(W, labels, members, keep_matrix=True)

    assert ranked.n_layer == 2
    assert ranked.order.tolist() == [1, 0]
    assert ranked.labels.tolist() == [[1, 1], [2, 2]]
    assert ranked.importance.tolist() == [1.0, 0.0]
    assert np.allclose(ranked.raw_importance, [2.0, 1.25])
    assert [m.tolist() for m in ranked.members] == [[0, 1], [2, 3]]
    assert np.allclose(ranked.importance_matrix, [[1.0, 1.0], [0.0, 0.0]])


def test_ties_keep_reconciled_order() -> None:
    W = np.array([[1.0], [-1.0]])
    ranked = rank_layers(W, np.array([[1], [2]]), [np.array([0]), np.array([1])])
    assert ranked.order.tolist() == [0, 1]
    assert ranked.importance.tolist() == [1.0, 1.0]


def test_deflection_is_absolute_mean() -> None:
    W = np.array([[1.0, -3.0], [0.0, 0.0]])
    assert np.allclose(area_weighted_deflection(W, [np.array([0, 1]), np.array([2, 3])]), [1.0, 0.0])


def test_boundaries_use_first_and_last_finest_row() -> None:
    labels = np.array([[1, 1], [1, 1], [2, 1], [2, 1], [2, 2], [1, 2]])
    depth = np.arange(10.0, 16.0)
    b = extract_boundaries(labels, depth, 1.0, 2)

    assert b.depth_index.tolist() == [[0, 5], [2, 4]]
    assert b.depth.tolist() == [[10.0, 15.0], [12.0, 14.0]]
    assert b.thickness.tolist() == [6.0, 3.0]


def test_missing_rank_at_finest_scale_is_an_error() -> None:
    labels = np.array([[1, 2], [1, 2]])
    with pytest.raises(ReconciliationError):
        extract_boundaries(labels, np.arange(2.0), 1.0, 2)
