# src/boreblock/viz/plots.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Sequence

import numpy as np

try:
    import matplotlib.pyplot as plt  # type: ignore
except Exception:  # pragma: no cover
    plt = None  # type: ignore

from boreblock.blocker import BlockerResult
from boreblock.layers.selection import LayerSelection

PLOT_KINDS = ("transform", "labels", "importance")


def _require_mpl() -> None:
    if plt is None:
        raise RuntimeError("matplotlib is required. Install with: pip install matplotlib")


def _transform_panel(ax, result: BlockerResult, kind: str) -> None:
    x = np.asarray(result.wavelet_width, dtype="float64")
    y = np.asarray(result.depth, dtype="float64")

    if kind == "transform":
        W = np.asarray(result.wavelet_transform, dtype="float64")
        lim = float(np.max(np.abs(W))) if W.size else 1.0
        lim = lim if lim > 0 else 1.0
        mesh = ax.pcolormesh(x, y, W, shading="auto", cmap="bwr", vmin=-lim, vmax=lim)
        if W.size and W.shape[1] > 1 and np.any(W > 0) and np.any(W < 0):
            ax.contour(x, y, W, levels=[0.0], colors="k", linewidths=0.7)
        title = "Differential transform of data"
    elif kind == "labels":
        L = np.asarray(result.layer_label, dtype="float64")
        mesh = ax.pcolormesh(x, y, L, shading="auto", cmap="tab10", vmin=1, vmax=max(1, int(result.n_layer)))
        title = "Layer regions"
    elif kind == "importance":
        if result.importance_matrix is not None:
            M = np.asarray(result.importance_matrix, dtype="float64")
            mesh = ax.pcolormesh(x, y, M, shading="auto", cmap="Blues")
        else:
            # rank matrix: 1 (most important) drawn darkest
            L = np.asarray(result.layer_label, dtype="float64")
            mesh = ax.pcolormesh(x, y, L, shading="auto", cmap="Blues_r", vmin=1, vmax=max(1, int(result.n_layer)))
        title = "Layer importance"
    else:
        raise ValueError(f"kind must be one of {PLOT_KINDS} (got {kind!r})")

    ax.figure.colorbar(mesh, ax=ax)
    ax.invert_yaxis()
    ax.set_xlabel("Operator width")
    ax.set_ylabel("Depth")
    ax.set_title(title)


def plot_transform(result: BlockerResult, *, kind: str = "transform", with_trace: bool = True):
    """
    Transform / layer-region / importance matrix against operator width and depth,
    optionally beside the trace itself. Returns the Figure.
    """
    _require_mpl()
    if int(result.n_wavelet) == 0:
        raise ValueError("Nothing to plot: the transform has no scales.")

    if with_trace:
        fig, (ax, ax_tr) = plt.subplots(1, 2, figsize=(10, 8), sharey=True)
    else:
        fig, ax = plt.subplots(figsize=(6.6, 8))
        ax_tr = None

    _transform_panel(ax, result, kind)

    if ax_tr is not None:
        ax_tr.plot(result.data, result.depth, "k", linewidth=0.8)
        ax_tr.set_xlabel("Data value")
        ax_tr.set_title("Trace")

    return fig


def plot_diagnostics(result: BlockerResult):
    """Log-log layer importance and thickness against rank."""
    _require_mpl()
    fig, (ax_i, ax_t) = plt.subplots(2, 1, figsize=(6.6, 8))
    rank = np.arange(1, int(result.n_layer) + 1)

    ax_i.loglog(rank, np.clip(result.layer_importance, 1e-12, None), "k.-")
    ax_i.set_xlabel("Layer number")
    ax_i.set_ylabel("Layer importance")
    ax_i.set_title("Layer importance")

    ax_t.loglog(rank, np.clip(result.layer_thickness, 1e-12, None), "k.-")
    ax_t.set_xlabel("Layer number")
    ax_t.set_ylabel("Layer thickness")
    ax_t.set_title("Layer thickness")

    fig.tight_layout()
    return fig


def plot_selection(
    result: BlockerResult,
    selections: Dict[str, LayerSelection],
    *,
    use_median: bool = False,
    title: Optional[str] = None,
):
    """Trace with one stair-step blocked curve per named selection."""
    _require_mpl()
    fig, ax = plt.subplots(figsize=(5, 8))
    ax.plot(result.data, result.depth, "k", linewidth=0.8, label="trace")

    for name, sel in selections.items():
        vals = sel.plot_median if use_median else sel.plot_mean
        ax.plot(vals, sel.plot_depth, linewidth=1.4, label=f"{name} ({sel.n_layer})")

    ax.invert_yaxis()
    ax.set_xlabel("Data value")
    ax.set_ylabel("Depth")
    ax.set_title(title or "Blocked trace")
    ax.legend(loc="best", fontsize=8)
    return fig


def save_figures(figs: Dict[str, object], out_dir: Path, *, dpi: int = 160) -> Sequence[Path]:
    _require_mpl()
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for name, fig in figs.items():
        p = out_dir / f"{name}.png"
        fig.savefig(p, dpi=int(dpi), bbox_inches="tight")  # type: ignore[attr-defined]
        plt.close(fig)  # type: ignore[arg-type]
        written.append(p)
    return written
