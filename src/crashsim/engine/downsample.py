"""Bounded-length series for charting. Lossy; never feed the output to metrics."""

import numpy as np

from . import DEFAULT_DOWNSAMPLE_TARGET


def downsample_indices(length: int, target_length: int = DEFAULT_DOWNSAMPLE_TARGET) -> np.ndarray:
    """Strictly increasing positions round(i * length/target) for i in [0, target)."""
    if target_length < 1:
        raise ValueError(f"target_length must be >= 1, got {target_length}")
    if length <= target_length:
        return np.arange(length)
    step = length / target_length
    indices = np.round(np.arange(target_length) * step).astype(int)
    return indices[indices < length]


def downsample(series: np.ndarray, target_length: int = DEFAULT_DOWNSAMPLE_TARGET) -> np.ndarray:
    """Reduce the last axis of ``series`` to at most ``target_length`` points.

    Works on a single series or an (assets, time) matrix. Series already
    short enough are returned unchanged.
    """
    series = np.asarray(series)
    length = series.shape[-1]
    if length <= target_length:
        return series
    return series[..., downsample_indices(length, target_length)]
