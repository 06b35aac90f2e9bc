# src/hampel/config.py
"""
Configuration constants and settings for the Hampel filter.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass, field

import numpy as np

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

# Makes the MAD a consistent estimator of the standard deviation for normal data
MAD_SCALE = 1.4826

# Median and MAD degenerate below this
MIN_WINDOW_SIZE = 3

SUPPORTED_DTYPES: tuple[type[np.floating], ...] = (np.float32, np.float64)
REPLACEMENT_MODES = ("median", "extrapolate")
NON_FINITE_POLICIES = ("reject", "raise")


class InvalidCapacityError(ValueError):
    """Raised when a window is requested with fewer than ``MIN_WINDOW_SIZE`` slots."""


class NonFiniteSampleError(ValueError):
    """Raised for NaN/Inf samples when the filter uses the ``"raise"`` policy."""


def resolve_dtype(dtype: str | type | np.dtype) -> np.dtype:
    """
    Convert a user supplied dtype into one of the supported NumPy float dtypes.

    Args:
        dtype: ``np.float32``, ``np.float64``, a NumPy dtype or its string name.

    Returns:
        The matching ``np.dtype``.

    Raises:
        TypeError: If the dtype is not a supported floating-point width.
    """
    try:
        resolved = np.dtype(dtype)
    except TypeError as err:
        raise TypeError(f"Unsupported dtype: {dtype!r}") from err
    if resolved.type not in SUPPORTED_DTYPES:
        supported = ", ".join(t.__name__ for t in SUPPORTED_DTYPES)
        raise TypeError(f"Unsupported dtype {resolved}; expected one of {supported}")
    return resolved


def validate_window_size(window_size: int) -> int:
    """Return ``window_size`` as an int, or raise if it cannot hold a median."""
    if isinstance(window_size, bool) or not isinstance(window_size, (int, np.integer)):
        raise InvalidCapacityError(
            f"window_size must be an integer, got {type(window_size).__name__}"
        )
    if window_size < MIN_WINDOW_SIZE:
        raise InvalidCapacityError(
            f"window_size must be at least {MIN_WINDOW_SIZE}, got {window_size}"
        )
    return int(window_size)


def validate_real(
    name: str, value: float, dtype: np.dtype, *, non_negative: bool = False
) -> np.floating:
    """
    Cast a scalar parameter to the window dtype and check it is usable.

    The finiteness check runs after the cast, so values that overflow the
    dtype (e.g. 1e39 as float32) are rejected.

    Args:
        name: Parameter name for error messages.
        value: Real number to convert.
        dtype: Target float dtype.
        non_negative: Also reject negative values.

    Returns:
        ``value`` as a scalar of ``dtype``.

    Raises:
        TypeError: If ``value`` is not a real number.
        ValueError: If the converted value is not finite, or negative when forbidden.
    """
    if not isinstance(value, numbers.Real):
        raise TypeError(f"{name} must be a real number, got {type(value).__name__}")
    with np.errstate(over="ignore"):
        converted = dtype.type(value)
    if not np.isfinite(converted):
        raise ValueError(f"{name} must be finite as {dtype.name}, got {value}")
    if non_negative and converted < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return converted


def validate_options(replacement: str, non_finite: str) -> None:
    """Raise ``ValueError`` for an unknown replacement mode or non-finite policy."""
    if replacement not in REPLACEMENT_MODES:
        raise ValueError(f"Unknown replacement {replacement!r}; options: {REPLACEMENT_MODES}")
    if non_finite not in NON_FINITE_POLICIES:
        raise ValueError(
            f"Unknown non_finite policy {non_finite!r}; options: {NON_FINITE_POLICIES}"
        )


@dataclass
class FilterSettings:
    """Settings for a Hampel filter run."""

    window_size: int = 5
    init_value: float = 0.0
    n_sigma: float = 3.0
    dtype: str = field(default="float64")  # Options: "float32", "float64"
    replacement: str = field(default="median")  # Options: "median", "extrapolate"
    non_finite: str = field(default="reject")  # Options: "reject", "raise"

    def __post_init__(self):
        self.window_size = validate_window_size(self.window_size)
        resolved = resolve_dtype(self.dtype)
        self.dtype = resolved.name
        validate_real("init_value", self.init_value, resolved)
        validate_real("n_sigma", self.n_sigma, resolved, non_negative=True)
        validate_options(self.replacement, self.non_finite)

        if self.n_sigma == 0:
            logger.warning(
                "n_sigma is 0; every sample that differs from the window median will be replaced."
            )
        if self.replacement == "extrapolate" and self.window_size == MIN_WINDOW_SIZE:
            logger.warning(
                "Linear extrapolation over a window of 3 samples is very sensitive to noise."
            )


DEFAULT_SETTINGS = FilterSettings()
