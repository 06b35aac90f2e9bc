"""
Common pytest fixtures for the Hampel filter tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pytest

from hampel.window import HampelWindow

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator so stream tests are reproducible."""
    return np.random.default_rng(1234)


@pytest.fixture
def filled_window() -> Callable[..., HampelWindow]:
    """Factory returning a window that has already ingested ``values``."""

    def _make(values: Sequence[float], **kwargs) -> HampelWindow:
        kwargs.setdefault("window_size", len(values))
        filt = HampelWindow(**kwargs)
        for x in values:
            filt.update(x)
        return filt

    return _make
