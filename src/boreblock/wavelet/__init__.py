# src/boreblock/wavelet/__init__.py
from __future__ import annotations

from .kernel import InvalidWaveletLength, create_wavelet_double
from .transform import (
    PreparedTrace,
    TraceError,
    TransformResult,
    prepare_trace,
    sign_matrix,
    wavelet_transform,
)

__all__ = [
    "InvalidWaveletLength",
    "create_wavelet_double",
    "PreparedTrace",
    "TraceError",
    "TransformResult",
    "prepare_trace",
    "sign_matrix",
    "wavelet_transform",
]
