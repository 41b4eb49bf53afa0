# src/boreblock/blocker.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from boreblock.config.schema import TransformConfig
from boreblock.layers.boundaries import extract_boundaries
from boreblock.layers.labeling import label_sign_regions
from boreblock.layers.ranking import rank_layers
from boreblock.layers.reconcile import ReconciliationState, reconcile_orphans, renumber
from boreblock.wavelet.transform import ProgressFn, sign_matrix, wavelet_transform


@dataclass(frozen=True)
class Layer:
    rank: int
    importance: float
    start_index: int
    end_index: int
    start_depth: float
    end_depth: float
    thickness: float


@dataclass(frozen=True)
class BlockerResult:
    """
    Output of block_trace().

      depth, data:        trace after orientation + even-length truncation
      depth_step:         mean depth increment
      wavelet_transform:  (nData, nWavelet) transform matrix
      layer_label:        (nData, nWavelet) ranks, 1 = most important
      layer_importance:   (nLayer,) normalized importance, descending
      layer_depth_index:  (nLayer, 2) first/last finest-scale row per rank (0-based)
      layer_depth:        (nLayer, 2) depths of those rows
      layer_thickness:    (nLayer,) thickness per rank
      wavelet_width:      (nWavelet,) physical operator widths, (w + 1) / 3 * depth_step
      widths:             (nWavelet,) functional widths in taps
      importance_matrix:  optional (nData, nWavelet) display matrix
      wavelet_matrix:     optional (2*nData+2, nWavelet) wavelet bank
    """
    depth: np.ndarray
    data: np.ndarray
    depth_step: float
    n_data: int
    n_wavelet: int
    n_layer: int
    wavelet_transform: np.ndarray
    layer_label: np.ndarray
    layer_importance: np.ndarray
    layer_depth_index: np.ndarray
    layer_depth: np.ndarray
    layer_thickness: np.ndarray
    wavelet_width: np.ndarray
    widths: np.ndarray
    n_regions: int = 0
    importance_matrix: Optional[np.ndarray] = None
    wavelet_matrix: Optional[np.ndarray] = None

    def layers(self) -> List[Layer]:
        out: List[Layer] = []
        for k in range(int(self.n_layer)):
            out.append(
                Layer(
                    rank=k + 1,
                    importance=float(self.layer_importance[k]),
                    start_index=int(self.layer_depth_index[k, 0]),
                    end_index=int(self.layer_depth_index[k, 1]),
                    start_depth=float(self.layer_depth[k, 0]),
                    end_depth=float(self.layer_depth[k, 1]),
                    thickness=float(self.layer_thickness[k]),
                )
            )
        return out


def block_trace(
    depth: object,
    value: object,
    *,
    cfg: TransformConfig = TransformConfig(),
    on_progress: Optional[ProgressFn] = None,
) -> BlockerResult:
    """
    Segment a depth trace into ranked layers.

    transform -> sign regions -> orphan reconciliation -> importance ranking
    -> finest-scale boundaries.
    """
    tr = wavelet_transform(depth, value, cfg=cfg, on_progress=on_progress)
    trace = tr.trace

    signs = sign_matrix(tr.transform, eps=float(cfg.sign_eps))
    labels, n_regions = label_sign_regions(signs)
    if cfg.progress:
        print(f"[layers] regions found: {n_regions}", flush=True)
    if on_progress is not None:
        on_progress("layers", 1, 3)

    state = ReconciliationState.from_labels(labels, n_regions)
    reconcile_orphans(state)
    reconciled, members = renumber(state)
    if cfg.progress:
        print(f"[layers] orphans absorbed: {state.n_absorbed}  layers: {state.n_layer}", flush=True)
    if on_progress is not None:
        on_progress("layers", 2, 3)

    ranked = rank_layers(tr.transform, reconciled, members, keep_matrix=bool(cfg.keep_importance_matrix))
    bounds = extract_boundaries(ranked.labels, trace.depth, trace.depth_step, ranked.n_layer)
    if on_progress is not None:
        on_progress("layers", 3, 3)

    if ranked.n_layer == 0 and cfg.progress:
        print("[layers] no layers found", flush=True)

    return BlockerResult(
        depth=trace.depth,
        data=trace.data,
        depth_step=float(trace.depth_step),
        n_data=trace.n_data,
        n_wavelet=tr.n_wavelet,
        n_layer=ranked.n_layer,
        wavelet_transform=tr.transform,
        layer_label=ranked.labels,
        layer_importance=ranked.importance,
        layer_depth_index=bounds.depth_index,
        layer_depth=bounds.depth,
        layer_thickness=bounds.thickness,
        wavelet_width=tr.wavelet_width,
        widths=tr.widths,
        n_regions=int(n_regions),
        importance_matrix=ranked.importance_matrix,
        wavelet_matrix=tr.wavelet_matrix,
    )
