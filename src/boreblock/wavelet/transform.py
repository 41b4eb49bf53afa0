# src/boreblock/wavelet/transform.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np
from scipy import fft as sp_fft

from boreblock.config.schema import TransformConfig

from .kernel import create_wavelet_double

ProgressFn = Callable[[str, int, int], None]


class TraceError(ValueError):
    """Raised when a depth/value trace cannot enter the transform."""


@dataclass(frozen=True)
class PreparedTrace:
    """
    Trace after orientation, even-length truncation and centering.

    depth/data are the (possibly reversed, possibly truncated) raw arrays;
    centered is data minus its mean (exact zeros for a constant trace).
    """
    depth: np.ndarray
    data: np.ndarray
    centered: np.ndarray
    depth_step: float

    @property
    def n_data(self) -> int:
        return int(self.data.size)


@dataclass(frozen=True)
class TransformResult:
    trace: PreparedTrace
    widths: np.ndarray          # (nWavelet,) functional widths in taps
    wavelet_width: np.ndarray   # (nWavelet,) physical operator widths
    transform: np.ndarray       # (nData, nWavelet)
    wavelet_matrix: Optional[np.ndarray] = None  # (2*nData+2, nWavelet)

    @property
    def n_wavelet(self) -> int:
        return int(self.widths.size)


def _as_1d(x: object, name: str) -> np.ndarray:
    a = np.asarray(x, dtype="float64")
    if a.ndim != 1:
        a = np.squeeze(a)
    if a.ndim != 1:
        raise TraceError(f"{name} must be 1D (got shape {np.asarray(x).shape}).")
    return a


def prepare_trace(depth: object, value: object) -> PreparedTrace:
    """
    Validate and normalize a raw (depth, value) trace.

    - depth is flipped to ascending (values follow) when its mean increment is negative
    - an odd sample count loses its last sample
    - values are mean-centered
    """
    d = _as_1d(depth, "depth")
    v = _as_1d(value, "value")

    if d.size != v.size:
        raise TraceError(f"depth and value lengths differ: {d.size} != {v.size}")
    if not np.all(np.isfinite(d)):
        raise TraceError("depth contains non-finite samples.")
    if not np.all(np.isfinite(v)):
        raise TraceError("value contains non-finite samples.")

    if d.size >= 2 and float(np.mean(np.diff(d))) < 0.0:
        d = d[::-1]
        v = v[::-1]

    if d.size >= 2 and np.any(np.diff(d) <= 0.0):
        raise TraceError("depth must be strictly monotonic.")

    if d.size % 2 == 1:
        d = d[:-1]
        v = v[:-1]

    d = d.copy()
    v = v.copy()

    depth_step = float(np.mean(np.diff(d))) if d.size >= 2 else 0.0

    if v.size == 0 or float(np.ptp(v)) == 0.0:
        centered = np.zeros_like(v)
    else:
        centered = v - float(np.mean(v))

    return PreparedTrace(depth=d, data=v, centered=centered, depth_step=depth_step)


def padded_trace(centered: np.ndarray) -> np.ndarray:
    """
    Odd reflection of the centered trace: [0, -reverse(c), 0, c].

    Read circularly, both trace ends are reflected about a zero sample,
    so the FFT convolution sees no artificial wrap-around jump.
    """
    c = np.asarray(centered, dtype="float64")
    z = np.zeros(1, dtype="float64")
    return np.concatenate([z, -c[::-1], z, c])


def transform_widths(n_data: int, n_padded: int, *, cfg: TransformConfig) -> np.ndarray:
    hi = min(3 * int(n_data) - 1, int(n_padded))
    step = max(1, int(cfg.width_step))
    return np.arange(int(cfg.first_width), hi + 1, step, dtype=int)


def physical_widths(widths: np.ndarray, depth_step: float) -> np.ndarray:
    # Positive lobe of a w-tap wavelet spans (w + 1) / 3 samples.
    return (np.asarray(widths, dtype="float64") + 1.0) / 3.0 * float(depth_step)


def wavelet_bank(widths: np.ndarray, n_point: int) -> np.ndarray:
    """(n_point, len(widths)) matrix of zero-padded wavelets, one per column."""
    cols: List[np.ndarray] = [create_wavelet_double(int(w), int(n_point)) for w in widths]
    if not cols:
        return np.zeros((int(n_point), 0), dtype="float64")
    return np.stack(cols, axis=1)


def wavelet_transform(
    depth: object,
    value: object,
    *,
    cfg: TransformConfig = TransformConfig(),
    on_progress: Optional[ProgressFn] = None,
) -> TransformResult:
    """
    Multi-scale transform of a trace against the second-derivative wavelet bank.

    The padded trace is transformed to the frequency domain once; scales are
    processed in batches of cfg.chunk_scales (each scale is independent, and
    scipy.fft spreads a batch over cfg.workers threads). Column j holds the
    circular convolution samples 1..nData for widths[j].
    """
    trace = prepare_trace(depth, value)
    n = trace.n_data

    x = padded_trace(trace.centered)
    n_pad = int(x.size)

    widths = transform_widths(n, n_pad, cfg=cfg)
    n_wave = int(widths.size)

    out = np.zeros((n, n_wave), dtype="float64")
    bank_all = np.zeros((n_pad, n_wave), dtype="float64") if cfg.keep_wavelets else None

    if n_wave == 0:
        if cfg.progress:
            print(f"[transform] no usable wavelet widths for {n} samples", flush=True)
        return TransformResult(
            trace=trace,
            widths=widths,
            wavelet_width=physical_widths(widths, trace.depth_step),
            transform=out,
            wavelet_matrix=bank_all,
        )

    workers = max(1, int(cfg.workers))
    chunk = max(1, int(cfg.chunk_scales))

    if cfg.progress:
        print(f"[transform] {n} samples, {n_wave} scales (widths {widths[0]}..{widths[-1]})", flush=True)

    spectrum = sp_fft.rfft(x, workers=workers)

    for j0 in range(0, n_wave, chunk):
        j1 = min(n_wave, j0 + chunk)
        bank = wavelet_bank(widths[j0:j1], n_pad)
        if bank_all is not None:
            bank_all[:, j0:j1] = bank

        conv = sp_fft.irfft(
            sp_fft.rfft(bank, axis=0, workers=workers) * spectrum[:, None],
            n=n_pad,
            axis=0,
            workers=workers,
        )
        out[:, j0:j1] = conv[1 : n + 1, :]

        if on_progress is not None:
            on_progress("transform", j1, n_wave)

    if cfg.progress:
        print("[transform] done", flush=True)

    return TransformResult(
        trace=trace,
        widths=widths,
        wavelet_width=physical_widths(widths, trace.depth_step),
        transform=out,
        wavelet_matrix=bank_all,
    )


def sign_matrix(transform: np.ndarray, *, eps: float = 0.0) -> np.ndarray:
    """
    Per-cell sign in {-1, 0, +1}; |W| <= eps * max|W| is treated as 0.
    """
    W = np.asarray(transform, dtype="float64")
    s = np.sign(W).astype(np.int8)
    if W.size == 0:
        return s
    peak = float(np.max(np.abs(W)))
    if peak <= 0.0:
        return np.zeros_like(s)
    if eps > 0.0:
        s[np.abs(W) <= float(eps) * peak] = 0
    return s
