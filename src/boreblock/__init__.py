# src/boreblock/__init__.py
from __future__ import annotations

from boreblock.blocker import BlockerResult, Layer, block_trace
from boreblock.config.schema import RunConfig, SelectionConfig, TransformConfig
from boreblock.layers.selection import LayerSelection, select_layers

__all__ = [
    "BlockerResult",
    "Layer",
    "block_trace",
    "RunConfig",
    "SelectionConfig",
    "TransformConfig",
    "LayerSelection",
    "select_layers",
]

__version__ = "0.1.0"
