"""Robust statistics kernels for the sliding window.

The window hot path calls :func:`median_and_mad` and
:func:`linear_extrapolation`, both compiled with numba so that one filter step
stays in compiled code and allocates nothing. Numba specialises each kernel on
first use for ``float32`` and ``float64`` windows.
"""

from __future__ import annotations

import logging

import numpy as np
from numba import njit

from hampel.config import MAD_SCALE

LOGGER = logging.getLogger(__name__)


@njit(cache=True)
def _insertion_sort(work: np.ndarray) -> None:
    """Sort ``work`` in place. Fast for the small arrays a window holds."""
    for i in range(1, work.shape[0]):
        j = i
        while j > 0 and work[j - 1] > work[j]:
            tmp = work[j - 1]
            work[j - 1] = work[j]
            work[j] = tmp
            j -= 1


@njit(cache=True)
def _median_of_sorted(work: np.ndarray) -> float:
    n = work.shape[0]
    mid = n // 2
    if n % 2 == 1:
        return work[mid]
    # Even length: mean of the two central order statistics
    return 0.5 * (work[mid - 1] + work[mid])


@njit(cache=True)
def median_and_mad(window: np.ndarray, work: np.ndarray) -> tuple[float, float]:
    """
    Median and median absolute deviation of ``window``.

    Args:
        window: Samples to summarise. Left untouched.
        work: float64 scratch array with the same shape as ``window``; overwritten.

    Returns:
        (median, mad), where the MAD is unscaled.
    """
    n = window.shape[0]
    for i in range(n):
        work[i] = window[i]
    _insertion_sort(work)
    med = _median_of_sorted(work)

    for i in range(n):
        work[i] = abs(window[i] - med)
    _insertion_sort(work)
    return med, _median_of_sorted(work)


@njit(cache=True)
def linear_extrapolation(window: np.ndarray, oldest: int) -> float:
    """
    Least-squares line through the window, evaluated one step past the newest sample.

    The ring buffer is read in chronological order starting at ``oldest``; the
    samples sit at positions 0..n-1 and the return value is the fit at n.
    """
    n = window.shape[0]
    mu_x = 0.5 * (n - 1)

    mu_y = 0.0
    for i in range(n):
        mu_y += window[(oldest + i) % n]
    mu_y /= n

    numer = 0.0
    denom = 0.0
    for i in range(n):
        dev_x = i - mu_x
        numer += dev_x * (window[(oldest + i) % n] - mu_y)
        denom += dev_x * dev_x

    # denom > 0 for n >= 2
    slope = numer / denom
    intercept = mu_y - slope * mu_x
    return slope * n + intercept


def _as_scratch(values: np.ndarray | list[float]) -> np.ndarray:
    arr = np.asarray(values)
    if arr.ndim != 1:
        raise ValueError(f"Expected a 1-D array, got shape {arr.shape}")
    if arr.size == 0:
        raise ValueError("Cannot compute robust statistics of an empty array")
    if arr.dtype != np.float32:
        arr = arr.astype(np.float64)
    return np.ascontiguousarray(arr)


def median(values: np.ndarray | list[float]) -> float:
    """Median of a 1-D array using the same even/odd rule as the window."""
    arr = _as_scratch(values)
    med, _ = median_and_mad(arr, np.empty(arr.shape, dtype=np.float64))
    return float(med)


def median_absolute_deviation(
    values: np.ndarray | list[float], scale: float = 1.0
) -> float:
    """
    Median absolute deviation of a 1-D array.

    Args:
        values: Samples to summarise.
        scale: Multiplier applied to the raw MAD. Pass :data:`MAD_SCALE` (or use
            :func:`robust_sigma`) for a standard-deviation estimate.

    Returns:
        ``scale * MAD``.
    """
    arr = _as_scratch(values)
    _, mad = median_and_mad(arr, np.empty(arr.shape, dtype=np.float64))
    LOGGER.debug(f"MAD of {arr.size} samples: {mad:.6e}")
    return float(mad) * scale


def robust_sigma(values: np.ndarray | list[float]) -> float:
    """Standard deviation estimate ``MAD * 1.4826``."""
    return median_absolute_deviation(values, scale=MAD_SCALE)
