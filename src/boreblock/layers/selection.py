# src/boreblock/layers/selection.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Sequence

import numpy as np

from boreblock.config.schema import SELECTION_MODES

if TYPE_CHECKING:  # pragma: no cover
    from boreblock.blocker import BlockerResult


@dataclass(frozen=True)
class LayerSelection:
    """
    Re-blocked trace for one selection criterion.

    blocks are 0-based inclusive (start, end) rows covering 0..nData-1 with
    no gaps or overlaps. layer_depth has nLayer + 1 entries (block tops plus
    the bottom of the last block); the plot_* arrays trace a stair-step.
    """
    depth: np.ndarray
    data: np.ndarray
    n_layer: int
    mode: str
    value: float
    selected_ranks: np.ndarray
    blocks: np.ndarray
    layer_depth: np.ndarray
    layer_thickness: np.ndarray
    layer_mean: np.ndarray
    layer_median: np.ndarray
    layer_variance: np.ndarray
    plot_depth: np.ndarray
    plot_mean: np.ndarray
    plot_median: np.ndarray


def selected_ranks(result: "BlockerResult", value: float, mode: str = "max_width") -> np.ndarray:
    """
    Ranks (1-based) picked by a selection criterion.

      max_width:      ranks present at the coarsest scale whose operator width <= value
      top_n:          ranks 1..floor(value)
      top_percent:    ranks 1..floor(value * nLayer / 100)
      min_thickness:  ranks with thickness >= value
      max_thickness:  ranks with thickness <= value
    """
    n_layer = int(result.n_layer)
    empty = np.zeros(0, dtype=np.int64)

    if mode == "max_width":
        hits = np.flatnonzero(np.asarray(result.wavelet_width) <= float(value))
        if hits.size == 0 or n_layer == 0:
            return empty
        col = min(int(hits[-1]), int(result.n_wavelet) - 1)
        return np.unique(np.asarray(result.layer_label)[:, col]).astype(np.int64)

    if mode == "top_n":
        k = min(int(math.floor(float(value))), n_layer)
        return np.arange(1, k + 1, dtype=np.int64) if k > 0 else empty

    if mode == "top_percent":
        k = min(int(math.floor(float(value) * n_layer / 100.0)), n_layer)
        return np.arange(1, k + 1, dtype=np.int64) if k > 0 else empty

    thk = np.asarray(result.layer_thickness, dtype="float64")
    if mode == "min_thickness":
        return (np.flatnonzero(thk >= float(value)) + 1).astype(np.int64)
    if mode == "max_thickness":
        return (np.flatnonzero(thk <= float(value)) + 1).astype(np.int64)

    raise ValueError(f"mode must be one of {SELECTION_MODES} (got {mode!r})")


def cover_blocks(pairs: np.ndarray, n_data: int) -> np.ndarray:
    """
    Turn selected (start, end) rows into contiguous blocks covering 0..n_data-1.

    All boundary rows go into one sorted pool. The first two close the first
    block; after that each block starts one row past the previous end and
    closes at the next pooled row. A pooled row equal to the new start is a
    layer top, so the block runs to the row after it. Rows already behind the
    current start (duplicates from single-row layers) are skipped. Leading and
    trailing gaps become blocks of their own.
    """
    n_data = int(n_data)
    if n_data <= 0:
        return np.zeros((0, 2), dtype=np.int64)

    pool = sorted(int(min(max(v, 0), n_data - 1)) for v in np.asarray(pairs).reshape(-1).tolist())
    if len(pool) < 2:
        return np.array([[0, n_data - 1]], dtype=np.int64)

    blocks: List[List[int]] = [[pool[0], pool[1]]]
    i = 2
    while i < len(pool):
        start = blocks[-1][1] + 1
        v = pool[i]
        if v < start:
            i += 1
            continue
        if v == start and i + 1 < len(pool):
            i += 1
            v = pool[i]
        blocks.append([start, v])
        i += 1

    if blocks[0][0] != 0:
        blocks.insert(0, [0, blocks[0][0] - 1])
    if blocks[-1][1] != n_data - 1:
        blocks.append([blocks[-1][1] + 1, n_data - 1])

    return np.asarray(blocks, dtype=np.int64)


def _block_stats(data: np.ndarray, blocks: np.ndarray) -> Dict[str, np.ndarray]:
    nb = int(blocks.shape[0])
    mean = np.zeros(nb, dtype="float64")
    median = np.zeros(nb, dtype="float64")
    var = np.zeros(nb, dtype="float64")
    for b in range(nb):
        seg = data[int(blocks[b, 0]) : int(blocks[b, 1]) + 1]
        mean[b] = float(np.mean(seg))
        median[b] = float(np.median(seg))
        var[b] = float(np.var(seg, ddof=1)) if seg.size > 1 else 0.0
    return {"mean": mean, "median": median, "variance": var}


def select_layers(result: "BlockerResult", value: float, *, mode: str = "max_width") -> LayerSelection:
    """
    Re-block a trace into the layers chosen by (mode, value).

    Parts of the trace not covered by a selected layer become extra blocks,
    so the output always spans the whole trace. The BlockerResult is only read.
    """
    ranks = selected_ranks(result, value, mode)

    depth = np.asarray(result.depth, dtype="float64")
    data = np.asarray(result.data, dtype="float64")
    n_data = int(result.n_data)

    pairs = np.asarray(result.layer_depth_index)[ranks - 1] if ranks.size else np.zeros((0, 2), dtype=np.int64)
    blocks = cover_blocks(pairs, n_data)

    nb = int(blocks.shape[0])
    if nb == 0:
        z = np.zeros(0, dtype="float64")
        return LayerSelection(
            depth=depth, data=data, n_layer=0, mode=mode, value=float(value), selected_ranks=ranks,
            blocks=blocks, layer_depth=z, layer_thickness=z, layer_mean=z, layer_median=z,
            layer_variance=z, plot_depth=z, plot_mean=z, plot_median=z,
        )

    layer_depth = depth[np.append(blocks[:, 0], blocks[-1, 1])]
    stats = _block_stats(data, blocks)

    plot_depth = np.empty(2 * nb, dtype="float64")
    plot_depth[0::2] = layer_depth[:-1]
    plot_depth[1::2] = layer_depth[1:]

    return LayerSelection(
        depth=depth,
        data=data,
        n_layer=nb,
        mode=mode,
        value=float(value),
        selected_ranks=ranks,
        blocks=blocks,
        layer_depth=layer_depth,
        layer_thickness=np.diff(layer_depth),
        layer_mean=stats["mean"],
        layer_median=stats["median"],
        layer_variance=stats["variance"],
        plot_depth=plot_depth,
        plot_mean=np.repeat(stats["mean"], 2),
        plot_median=np.repeat(stats["median"], 2),
    )


SELECTION_FIELDS = ["block", "start_index", "end_index", "top_depth", "bottom_depth", "mean", "median", "variance"]


def selection_rows(sel: LayerSelection) -> List[Dict[str, object]]:
    rows: List[Dict[str, object]] = []
    for b in range(int(sel.n_layer)):
        rows.append(
            {
                "block": b + 1,
                "start_index": int(sel.blocks[b, 0]),
                "end_index": int(sel.blocks[b, 1]),
                "top_depth": f"{float(sel.layer_depth[b]):.3f}",
                "bottom_depth": f"{float(sel.layer_depth[b + 1]):.3f}",
                "mean": f"{float(sel.layer_mean[b]):.6g}",
                "median": f"{float(sel.layer_median[b]):.6g}",
                "variance": f"{float(sel.layer_variance[b]):.6g}",
            }
        )
    return rows


def layer_rows(layers: Sequence[object]) -> List[Dict[str, object]]:
    """Rows for the ranked-layer table (one per Layer)."""
    rows: List[Dict[str, object]] = []
    for lay in layers:
        rows.append(
            {
                "rank": int(getattr(lay, "rank")),
                "importance": f"{float(getattr(lay, 'importance')):.6g}",
                "start_index": int(getattr(lay, "start_index")),
                "end_index": int(getattr(lay, "end_index")),
                "start_depth": f"{float(getattr(lay, 'start_depth')):.3f}",
                "end_depth": f"{float(getattr(lay, 'end_depth')):.3f}",
                "thickness": f"{float(getattr(lay, 'thickness')):.3f}",
            }
        )
    return rows


LAYER_FIELDS = ["rank", "importance", "start_index", "end_index", "start_depth", "end_depth", "thickness"]
