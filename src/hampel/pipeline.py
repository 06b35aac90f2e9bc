"""Batch helpers that drive a :class:`HampelWindow` over whole arrays.

The filter itself is strictly sequential; these functions only own the loop.
Every stream (array, series or column) gets its own freshly built window.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd
from tqdm import tqdm

from hampel.config import DEFAULT_SETTINGS, FilterSettings
from hampel.window import HampelWindow

if TYPE_CHECKING:
    from collections.abc import Iterable

LOGGER = logging.getLogger(__name__)


def _iter_samples(values: np.ndarray, desc: str, show_progress: bool) -> Iterable:
    if show_progress:
        return tqdm(values, desc=desc, total=len(values))
    return values


def _as_1d(values: np.ndarray | list[float]) -> np.ndarray:
    arr = np.asarray(values)
    if arr.ndim != 1:
        raise ValueError(f"Expected a 1-D array of samples, got shape {arr.shape}")
    return arr


def filter_array(
    values: np.ndarray | list[float],
    settings: FilterSettings | None = None,
    *,
    show_progress: bool = False,
) -> np.ndarray:
    """
    Run a Hampel filter across a 1-D array.

    Args:
        values: Raw samples in stream order.
        settings: Filter settings; :data:`hampel.config.DEFAULT_SETTINGS` if None.
        show_progress: Show a tqdm progress bar.

    Returns:
        Filtered samples, same length as ``values``, in the settings dtype.
    """
    settings = settings or DEFAULT_SETTINGS
    arr = _as_1d(values)
    filt = HampelWindow.from_settings(settings)

    out = np.empty(arr.shape, dtype=filt.dtype)
    for i, x in enumerate(_iter_samples(arr, "Hampel filtering", show_progress)):
        out[i] = filt.update(x)

    LOGGER.info(
        f"Filtered {len(arr)} samples: {filt.n_outliers} outliers replaced "
        f"(window_size={filt.window_size}, n_sigma={filt.n_sigma})"
    )
    return out


def filter_series(
    series: pd.Series,
    settings: FilterSettings | None = None,
    *,
    show_progress: bool = False,
) -> pd.DataFrame:
    """
    Run a Hampel filter across a pandas Series and report every decision.

    Args:
        series: Raw samples in stream order.
        settings: Filter settings; :data:`hampel.config.DEFAULT_SETTINGS` if None.
        show_progress: Show a tqdm progress bar.

    Returns:
        DataFrame indexed like ``series`` with columns ``raw``, ``filtered``,
        ``is_outlier``, ``median`` and ``sigma``. ``median`` and ``sigma`` are the
        window statistics the decision for that row was made against.
    """
    settings = settings or DEFAULT_SETTINGS
    filt = HampelWindow.from_settings(settings)
    raw = series.to_numpy(dtype=filt.dtype)

    n = len(raw)
    filtered = np.empty(n, dtype=filt.dtype)
    medians = np.empty(n, dtype=filt.dtype)
    sigmas = np.empty(n, dtype=filt.dtype)
    is_outlier = np.zeros(n, dtype=bool)

    desc = f"Hampel filtering {series.name}" if series.name is not None else "Hampel filtering"
    for i, x in enumerate(_iter_samples(raw, desc, show_progress)):
        filtered[i] = filt.update(x)
        medians[i] = filt.last_median
        sigmas[i] = filt.last_sigma
        is_outlier[i] = filt.last_was_outlier

    LOGGER.info(f"Filtered series {series.name!r}: {filt.n_outliers}/{n} outliers replaced")
    return pd.DataFrame(
        {
            "raw": raw,
            "filtered": filtered,
            "is_outlier": is_outlier,
            "median": medians,
            "sigma": sigmas,
        },
        index=series.index,
    )


def filter_dataframe(
    data: pd.DataFrame,
    columns: str | list[str],
    settings: FilterSettings | None = None,
) -> pd.DataFrame:
    """
    Filter selected columns of a DataFrame, each with an independent window.

    Args:
        data: Table whose rows are in stream order.
        columns: Column name or list of column names to filter.
        settings: Filter settings shared by all columns.

    Returns:
        A copy of ``data`` with the listed columns replaced by their filtered values.

    Raises:
        KeyError: If any column is missing from ``data``.
    """
    if isinstance(columns, str):
        columns = [columns]
    missing = [col for col in columns if col not in data.columns]
    if missing:
        raise KeyError(f"Columns not found in data: {missing}")

    LOGGER.debug(f"Filtering columns {columns} of a {len(data)} row DataFrame")
    data = data.copy()
    for col in columns:
        data[col] = filter_array(data[col].to_numpy(), settings)
    return data
