# src/boreblock/viz/__init__.py
from __future__ import annotations

from .plots import PLOT_KINDS, plot_diagnostics, plot_selection, plot_transform, save_figures

__all__ = ["PLOT_KINDS", "plot_diagnostics", "plot_selection", "plot_transform", "save_figures"]
