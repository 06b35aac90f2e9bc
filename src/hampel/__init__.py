"""Sequential outlier detection and removal using Hampel identifiers.

The package is built around :class:`hampel.window.HampelWindow`, a fixed-size
sliding window that flags and replaces outliers one sample at a time. Batch
helpers for NumPy arrays and pandas objects live in :mod:`hampel.pipeline`.
"""

# Importing * is a bad practice and you should be punished for using it
__all__: list[str] = []

__version__ = "0.1.0"
