# src/boreblock/config/__init__.py
from __future__ import annotations

from .defaults import default_config
from .schema import SELECTION_MODES, IOConfig, RunConfig, SelectionConfig, TransformConfig

__all__ = ["default_config", "SELECTION_MODES", "IOConfig", "RunConfig", "SelectionConfig", "TransformConfig"]
