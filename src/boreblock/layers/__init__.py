# src/boreblock/layers/__init__.py
from __future__ import annotations

"""
Layer segmentation over the transform sign matrix: labeling, orphan
reconciliation, importance ranking, boundaries and re-blocking.
"""

from .boundaries import LayerBoundaries, extract_boundaries
from .labeling import label_sign_regions
from .ranking import RankedLayers, normalize_importance, rank_layers
from .reconcile import ReconciliationError, ReconciliationState, reconcile_orphans, renumber
from .selection import LayerSelection, cover_blocks, select_layers, selected_ranks

__all__ = [
    "LayerBoundaries",
    "extract_boundaries",
    "label_sign_regions",
    "RankedLayers",
    "normalize_importance",
    "rank_layers",
    "ReconciliationError",
    "ReconciliationState",
    "reconcile_orphans",
    "renumber",
    "LayerSelection",
    "cover_blocks",
    "select_layers",
    "selected_ranks",
]
