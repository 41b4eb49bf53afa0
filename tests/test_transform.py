from __future__ import annotations

import numpy as np
import pytest

from boreblock.config.schema import TransformConfig
from boreblock.wavelet.kernel import create_wavelet_double
from boreblock.wavelet.transform import (
    TraceError,
    padded_trace,
    physical_widths,
    prepare_trace,
    sign_matrix,
    transform_widths,
    wavelet_transform,
)

QUIET = TransformConfig(progress=False)


def _step_trace() -> tuple:
    depth = np.arange(64.0)
    value = np.where(depth < 32, 0.0, 10.0)
    return depth, value


def test_descending_depth_is_flipped_with_its_values() -> None:
    tr = prepare_trace([4.0, 3.0, 2.0, 1.0], [10.0, 20.0, 30.0, 40.0])
    assert tr.depth.tolist() == [1.0, 2.0, 3.0, 4.0]
    assert tr.data.tolist() == [40.0, 30.0, 20.0, 10.0]
    assert tr.depth_step == pytest.approx(1.0)
    assert tr.centered.tolist() == [15.0, 5.0, -5.0, -15.0]


def test_odd_sample_count_drops_last_sample() -> None:
    tr = prepare_trace([0.0, 0.5, 1.0, 1.5, 2.0], [1.0, 2.0, 3.0, 4.0, 5.0])
    assert tr.n_data == 4
    assert tr.depth.tolist() == [0.0, 0.5, 1.0, 1.5]
    assert tr.depth_step == pytest.approx(0.5)


def test_constant_trace_centers_to_exact_zeros() -> None:
    tr = prepare_trace(np.arange(6.0), np.full(6, 7.25))
    assert np.all(tr.centered == 0.0)


@pytest.mark.parametrize(
    "depth, value",
    [
        ([0.0, 1.0, 2.0], [1.0, 2.0]),
        ([0.0, 1.0, 1.0, 2.0], [1.0, 2.0, 3.0, 4.0]),
        ([0.0, 2.0, 1.0, 3.0], [1.0, 2.0, 3.0, 4.0]),
        ([0.0, 1.0, 2.0, 3.0], [1.0, np.nan, 3.0, 4.0]),
    ],
)
def test_bad_traces_are_rejected(depth, value) -> None:
    with pytest.raises(TraceError):
        prepare_trace(depth, value)


def test_padding_is_odd_reflection_about_zero_samples() -> None:
    x = padded_trace(np.array([1.0, 2.0, 3.0, 4.0]))
    assert x.tolist() == [0.0, -4.0, -3.0, -2.0, -1.0, 0.0, 1.0, 2.0, 3.0, 4.0]


def test_width_bank_for_64_samples() -> None:
    w = transform_widths(64, 130, cfg=QUIET)
    assert w[0] == 8
    assert w[-1] == 128
    assert w.size == 31
    assert np.all(np.diff(w) == 4)
    assert np.allclose(physical_widths(np.array([8, 11]), 0.5), [1.5, 2.0])


def test_short_trace_has_no_scales() -> None:
    res = wavelet_transform([0.0, 1.0], [3.0, 5.0], cfg=QUIET)
    assert res.n_wavelet == 0
    assert res.transform.shape == (2, 0)


def test_fft_convolution_matches_direct_circular_sum() -> None:
    rng = np.random.default_rng(7)
    depth = np.arange(20.0)
    value = rng.normal(size=20)

    res = wavelet_transform(depth, value, cfg=TransformConfig(progress=False, chunk_scales=4))
    x = padded_trace(res.trace.centered)
    n_pad = x.size

    assert res.transform.shape == (20, res.n_wavelet)
    for j, width in enumerate(res.widths.tolist()):
        w = create_wavelet_double(width, n_pad)
        full = np.array([sum(w[m] * x[(k - m) % n_pad] for m in range(n_pad)) for k in range(n_pad)])
        assert np.allclose(res.transform[:, j], full[1:21], atol=1e-10)


def test_chunking_and_orientation_do_not_change_the_transform() -> None:
    rng = np.random.default_rng(3)
    depth = np.linspace(100.0, 149.0, 50)
    value = np.cumsum(rng.normal(size=50))

    a = wavelet_transform(depth, value, cfg=TransformConfig(progress=False, chunk_scales=64))
    b = wavelet_transform(depth, value, cfg=TransformConfig(progress=False, chunk_scales=3, workers=2))
    c = wavelet_transform(depth[::-1], value[::-1], cfg=QUIET)

    assert np.allclose(a.transform, b.transform)
    assert np.allclose(a.transform, c.transform)


def test_wavelet_bank_is_kept_on_request() -> None:
    depth = np.arange(16.0)
    res = wavelet_transform(depth, np.sin(depth), cfg=TransformConfig(progress=False, keep_wavelets=True))
    assert res.wavelet_matrix is not None
    assert res.wavelet_matrix.shape == (34, res.n_wavelet)
    assert np.allclose(res.wavelet_matrix[:, 0], create_wavelet_double(8, 34))


def test_step_response_at_finest_scale() -> None:
    depth, value = _step_trace()
    res = wavelet_transform(depth, value, cfg=QUIET)
    W = res.transform
    col = W[:, 0]
    tiny = 1e-9 * float(np.max(np.abs(W)))

    assert np.all(col[0:3] < 0)
    assert np.all(np.abs(col[3:28]) <= tiny)
    assert np.all(col[28:31] < 0)
    assert np.all(col[32:35] > 0)
    assert np.all(np.abs(col[35:60]) <= tiny)
    assert np.all(col[60:64] > 0)

    # the step sits midway between rows 31 and 32; row 31 is antisymmetric at every scale
    assert np.all(np.abs(W[31, :]) <= tiny)


def test_sign_matrix_treats_round_off_as_zero() -> None:
    W = np.array([[1.0, -2.0], [1e-15, 0.0], [-1e-3, 4.0]])
    assert sign_matrix(W).tolist() == [[1, -1], [1, 0], [-1, 1]]
    assert sign_matrix(W, eps=1e-12).tolist() == [[1, -1], [0, 0], [-1, 1]]
    assert np.all(sign_matrix(np.zeros((3, 2)), eps=1e-12) == 0)
