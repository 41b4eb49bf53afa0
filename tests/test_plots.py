from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from boreblock.blocker import block_trace
from boreblock.config.schema import TransformConfig
from boreblock.layers.selection import select_layers
from boreblock.viz.plots import plot_diagnostics, plot_selection, plot_transform, save_figures


def test_figures_are_written(tmp_path: Path) -> None:
    depth = np.arange(48.0)
    value = np.where(depth < 20, 1.0, 3.0) + 0.1 * np.sin(depth)
    res = block_trace(depth, value, cfg=TransformConfig(progress=False, keep_importance_matrix=True))

    figs = {
        "transform": plot_transform(res),
        "labels": plot_transform(res, kind="labels", with_trace=False),
        "importance": plot_transform(res, kind="importance", with_trace=False),
        "diagnostics": plot_diagnostics(res),
        "blocks": plot_selection(res, {"top": select_layers(res, 3, mode="top_n")}, use_median=True),
    }
    written = save_figures(figs, tmp_path / "figs")

    assert [p.name for p in written] == [f"{k}.png" for k in figs]
    assert all(p.stat().st_size > 0 for p in written)


def test_unknown_panel_and_empty_transform() -> None:
    res = block_trace(np.arange(2.0), np.arange(2.0), cfg=TransformConfig(progress=False))
    with pytest.raises(ValueError):
        plot_transform(res)

    res = block_trace(np.arange(20.0), np.sin(np.arange(20.0)), cfg=TransformConfig(progress=False))
    with pytest.raises(ValueError):
        plot_transform(res, kind="contours")
