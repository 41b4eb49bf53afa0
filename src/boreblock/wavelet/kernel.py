# src/boreblock/wavelet/kernel.py
from __future__ import annotations

import numpy as np

# Canonical double-derivative operator [-1/2, 1, -1/2], padded with zero ends
# and sampled over abscissae 0..4.
_SHAPE_X = np.array([0.0, 1.0, 2.0, 3.0, 4.0], dtype="float64")
_SHAPE_Y = np.array([0.0, -0.5, 1.0, -0.5, 0.0], dtype="float64")


class InvalidWaveletLength(ValueError):
    """Raised when the functional wavelet width exceeds the total wavelet length."""


def _match_parity(i_point: int, n_point: int) -> int:
    if (i_point % 2) == (n_point % 2):
        return i_point
    fixed = i_point - 1
    kind = "even" if n_point % 2 == 0 else "odd"
    print(
        f"[wavelet] total wavelet length {n_point} is {kind} while functional width {i_point} is not: "
        f"new functional wavelet length {fixed}.",
        flush=True,
    )
    return fixed


def wavelet_half(i_point: int) -> np.ndarray:
    """
    One arm of the functional wavelet (no zero padding), normalized so that
    its L2 norm is 1/2.

    Samples sit at t_k = 4k / (i_point + 1), k = 1..floor(i_point / 2).
    """
    k = np.arange(1, int(i_point) // 2 + 1, dtype="float64")
    if k.size == 0:
        return np.zeros(0, dtype="float64")

    t = 4.0 * k / (float(i_point) + 1.0)
    half = np.interp(t, _SHAPE_X, _SHAPE_Y)

    norm = float(np.sqrt(np.sum(half ** 2)))
    if norm <= 0.0:
        return np.zeros_like(half)
    return half / norm / 2.0


def create_wavelet_double(i_point: int, n_point: int) -> np.ndarray:
    """
    Build a zero-padded, symmetric second-derivative wavelet.

    i_point: functional (non-zero) width in taps
    n_point: total length of the returned wavelet

    The functional width must share the parity of the total length; a
    mismatch is repaired by dropping one tap (with a printed diagnostic).
    When n_point > i_point the arms are zero-padded so the wavelet can be
    used directly in a circular (FFT) convolution of length n_point.

    Example (before normalization) for i_point = n_point = 8:
      [-2/9, -4/9, 0, 6/9, 6/9, 0, -4/9, -2/9]
    """
    i_point = int(i_point)
    n_point = int(n_point)
    if i_point <= 0 or n_point <= 0:
        raise ValueError(f"Wavelet widths must be positive (got i_point={i_point}, n_point={n_point}).")
    if i_point > n_point:
        raise InvalidWaveletLength(
            f"Total wavelet length {n_point} is shorter than requested functional length {i_point}."
        )

    i_point = _match_parity(i_point, n_point)
    half = wavelet_half(i_point)

    n_half = n_point // 2 if n_point % 2 == 0 else (n_point + 1) // 2
    arm = np.concatenate([np.zeros(n_half - half.size, dtype="float64"), half])

    if i_point % 2 == 1:
        return np.concatenate([arm[:-1], arm[::-1]])
    return np.concatenate([arm, arm[::-1]])
