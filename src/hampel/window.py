from __future__ import annotations

import logging
import numbers
from typing import TYPE_CHECKING

import numpy as np

from hampel.config import (
    MAD_SCALE,
    NonFiniteSampleError,
    resolve_dtype,
    validate_options,
    validate_real,
    validate_window_size,
)
from hampel.statistics import linear_extrapolation, median_and_mad

if TYPE_CHECKING:
    from hampel.config import FilterSettings

LOGGER = logging.getLogger(__name__)


class HampelWindow:
    """
    Sliding window Hampel filter for a stream of scalar samples.

    Each call to :meth:`update` compares the new sample against the median of
    the last ``window_size`` raw samples. If it deviates by more than
    ``n_sigma * 1.4826 * MAD`` it is replaced, otherwise it is passed through.
    The raw sample is always stored, never the replacement, so consecutive
    outliers do not bias each other.

    Usage:
        filt = HampelWindow(window_size=5, init_value=0.0, n_sigma=3.0)
        cleaned = [filt.update(x) for x in samples]

    The larger ``n_sigma`` is, the harder it is to flag a sample as an outlier.
    A single instance must not be updated from several threads at once.
    """

    def __init__(
        self,
        window_size: int,
        init_value: float = 0.0,
        n_sigma: float = 3.0,
        dtype: str | type | np.dtype = np.float64,
        replacement: str = "median",
        non_finite: str = "reject",
    ):
        """
        Initialise the window state.

        Args:
            window_size: Number of samples kept in the window (>= 3).
            init_value: Value every slot of the window starts with.
            n_sigma: Threshold multiplier, in units of the robust sigma.
            dtype: ``np.float32`` or ``np.float64``; used for state and outputs.
            replacement: ``"median"`` or ``"extrapolate"``; value returned for outliers.
            non_finite: ``"reject"`` or ``"raise"``; policy for NaN/Inf samples.
        """
        self._window_size = validate_window_size(window_size)
        self._dtype = resolve_dtype(dtype)

        init = validate_real("init_value", init_value, self._dtype)
        self._n_sigma = validate_real("n_sigma", n_sigma, self._dtype, non_negative=True)
        validate_options(replacement, non_finite)

        self.replacement = replacement
        self.non_finite = non_finite
        self._to_dtype = self._dtype.type
        with np.errstate(over="ignore"):
            # inf for n_sigma near the dtype maximum
            self._coef = self._to_dtype(MAD_SCALE) * self._n_sigma

        self._init_value = init
        self._window = np.full(self._window_size, init, dtype=self._dtype)
        # Scratch space for the median/MAD kernel, reused on every step
        self._working_array = np.empty(self._window_size, dtype=np.float64)
        self._oldest = 0

        self.last_median: np.floating | None = None
        self.last_sigma: np.floating | None = None
        self.last_was_outlier: bool | None = None
        self.n_updates = 0
        self.n_outliers = 0

        LOGGER.debug(
            f"Initialising Hampel window with window_size={self._window_size}, init_value={init_value}, "
            f"n_sigma={n_sigma}, dtype={self._dtype.name}, replacement={replacement}, non_finite={non_finite}"
        )

    @classmethod
    def from_settings(cls, settings: FilterSettings) -> HampelWindow:
        """Build a window from a :class:`hampel.config.FilterSettings`."""
        return cls(
            window_size=settings.window_size,
            init_value=settings.init_value,
            n_sigma=settings.n_sigma,
            dtype=settings.dtype,
            replacement=settings.replacement,
            non_finite=settings.non_finite,
        )

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def n_sigma(self) -> np.floating:
        return self._n_sigma

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def oldest(self) -> int:
        """Index of the slot the next stored sample overwrites."""
        return self._oldest

    @property
    def window(self) -> np.ndarray:
        """Copy of the stored raw samples, oldest first."""
        return np.roll(self._window, -self._oldest)

    def __len__(self) -> int:
        return self._window_size

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(window_size={self._window_size}, n_sigma={self._n_sigma}, "
            f"dtype={self._dtype.name}, replacement={self.replacement!r}, non_finite={self.non_finite!r})"
        )

    def reset(self, init_value: float | None = None) -> None:
        """
        Return to the just-constructed state without reallocating.

        Args:
            init_value: New fill value. Defaults to the value the window was created with.
        """
        if init_value is None:
            fill = self._init_value
        else:
            fill = validate_real("init_value", init_value, self._dtype)
        self._init_value = fill
        self._window.fill(fill)
        self._oldest = 0
        self.last_median = None
        self.last_sigma = None
        self.last_was_outlier = None
        self.n_updates = 0
        self.n_outliers = 0
        LOGGER.debug(f"Reset Hampel window to {fill}")

    def update(self, x: float) -> np.floating:
        """
        Ingest one raw sample and return the filtered sample.

        Args:
            x: The new raw sample.

        Returns:
            ``x`` (as the window dtype) if it is not an outlier, otherwise the
            replacement value (window median, or the linear extrapolation).

        Raises:
            TypeError: If ``x`` is not a real number.
            NonFiniteSampleError: If ``x`` is NaN/Inf and the policy is ``"raise"``.
        """
        if not isinstance(x, numbers.Real):
            raise TypeError(f"Samples must be real numbers, got {type(x).__name__}")
        with np.errstate(over="ignore"):
            x = self._to_dtype(x)
        finite = bool(np.isfinite(x))
        if not finite and self.non_finite == "raise":
            raise NonFiniteSampleError(f"Non-finite sample {x} at update {self.n_updates}")

        # Statistics of the window before x is added
        med, mad = median_and_mad(self._window, self._working_array)
        w0 = self._to_dtype(med)
        s0 = self._to_dtype(mad)

        # sigma == 0 flags any x != w0 as the comparison is strict
        with np.errstate(over="ignore"):
            threshold = self._coef * s0 if s0 > 0 else s0
            is_outlier = not finite or bool(abs(x - w0) > threshold)

        if is_outlier:
            result = self._replacement_value(w0)
            self.n_outliers += 1
            if finite:
                LOGGER.debug(
                    f"Outlier at update {self.n_updates}: {x} replaced by {result} (median={w0}, mad={s0})"
                )
            else:
                LOGGER.warning(
                    f"Rejected non-finite sample {x} at update {self.n_updates}; returning {result}"
                )
        else:
            result = x

        # Raw samples only; non-finite ones never enter the window
        if finite:
            self._window[self._oldest] = x
            self._oldest = (self._oldest + 1) % self._window_size

        self.last_median = w0
        self.last_sigma = self._to_dtype(MAD_SCALE) * s0
        self.last_was_outlier = is_outlier
        self.n_updates += 1
        return result

    def _replacement_value(self, median: np.floating) -> np.floating:
        if self.replacement == "extrapolate":
            return self._to_dtype(linear_extrapolation(self._window, self._oldest))
        return median
