# src/boreblock/config/schema.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

SelectionMode = Literal["max_width", "top_n", "top_percent", "min_thickness", "max_thickness"]

SELECTION_MODES = ("max_width", "top_n", "top_percent", "min_thickness", "max_thickness")


@dataclass(frozen=True)
class TransformConfig:
    """
    Multi-scale second-derivative transform.

    Functional widths run first_width, first_width + width_step, ... up to
    min(3 * n_data - 1, 2 * n_data + 2).
    """
    first_width: int = 8
    width_step: int = 4

    # |W| <= sign_eps * max|W| is classed as sign 0 before labeling
    sign_eps: float = 1e-12

    # Scales per batched FFT; bounds the (padded_length x chunk) bank in memory
    chunk_scales: int = 64
    workers: int = 1

    keep_wavelets: bool = False
    keep_importance_matrix: bool = False

    progress: bool = True


@dataclass(frozen=True)
class SelectionConfig:
    mode: SelectionMode = "max_width"
    value: float = 5.0


@dataclass(frozen=True)
class IOConfig:
    trace_path: Optional[Path] = None
    depth_col: str = "depth"
    value_col: str = "value"
    las_curve: str = "GR"
    out_dir: Path = Path("out")


@dataclass(frozen=True)
class RunConfig:
    io: IOConfig = field(default_factory=IOConfig)
    transform: TransformConfig = field(default_factory=TransformConfig)
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    plots: bool = False
