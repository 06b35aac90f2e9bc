"""
Tests for hampel.config module.
"""

from __future__ import annotations

import logging

import numpy as np
import pytest

from hampel.config import (
    DEFAULT_SETTINGS,
    MAD_SCALE,
    MIN_WINDOW_SIZE,
    FilterSettings,
    InvalidCapacityError,
    NonFiniteSampleError,
    resolve_dtype,
    validate_options,
    validate_real,
    validate_window_size,
)


class TestConstants:
    def test_mad_scale(self):
        assert MAD_SCALE == 1.4826

    def test_min_window_size(self):
        assert MIN_WINDOW_SIZE == 3

    def test_errors_are_value_errors(self):
        assert issubclass(InvalidCapacityError, ValueError)
        assert issubclass(NonFiniteSampleError, ValueError)


class TestResolveDtype:
    @pytest.mark.parametrize(
        "dtype,expected",
        [
            (np.float32, np.dtype(np.float32)),
            (np.float64, np.dtype(np.float64)),
            ("float32", np.dtype(np.float32)),
            ("float64", np.dtype(np.float64)),
            (np.dtype("float64"), np.dtype(np.float64)),
        ],
    )
    def test_supported(self, dtype, expected):
        assert resolve_dtype(dtype) == expected

    @pytest.mark.parametrize("dtype", [np.float16, np.int64, "int32", "not_a_dtype"])
    def test_unsupported(self, dtype):
        with pytest.raises(TypeError):
            resolve_dtype(dtype)


class TestValidateWindowSize:
    @pytest.mark.parametrize("size", [3, 4, 5, 101, np.int64(7)])
    def test_valid(self, size):
        assert validate_window_size(size) == int(size)
        assert isinstance(validate_window_size(size), int)

    @pytest.mark.parametrize("size", [-1, 0, 1, 2])
    def test_too_small(self, size):
        with pytest.raises(InvalidCapacityError, match="at least 3"):
            validate_window_size(size)

    @pytest.mark.parametrize("size", [3.0, "5", True, None])
    def test_not_an_integer(self, size):
        with pytest.raises(InvalidCapacityError, match="integer"):
            validate_window_size(size)


class TestValidateReal:
    @pytest.mark.parametrize("dtype", [np.dtype(np.float32), np.dtype(np.float64)])
    def test_converted_to_dtype(self, dtype):
        value = validate_real("n_sigma", 2.5, dtype)
        assert value == 2.5
        assert isinstance(value, dtype.type)

    def test_overflow_checked_after_cast(self):
        # finite as a Python float, inf as float32
        with pytest.raises(ValueError, match="float32"):
            validate_real("n_sigma", 1e39, np.dtype(np.float32))
        assert validate_real("n_sigma", 1e39, np.dtype(np.float64)) == 1e39

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite(self, value):
        with pytest.raises(ValueError, match="finite"):
            validate_real("init_value", value, np.dtype(np.float64))

    def test_negative(self):
        assert validate_real("init_value", -1.0, np.dtype(np.float64)) == -1.0
        with pytest.raises(ValueError, match=">= 0"):
            validate_real("n_sigma", -1.0, np.dtype(np.float64), non_negative=True)

    @pytest.mark.parametrize("value", [None, "3", [1.0]])
    def test_not_a_real_number(self, value):
        with pytest.raises(TypeError, match="real number"):
            validate_real("n_sigma", value, np.dtype(np.float64))


class TestValidateOptions:
    def test_valid(self):
        validate_options("median", "reject")
        validate_options("extrapolate", "raise")

    @pytest.mark.parametrize(
        "replacement,non_finite", [("mean", "reject"), ("median", "propagate")]
    )
    def test_invalid(self, replacement, non_finite):
        with pytest.raises(ValueError, match="Unknown"):
            validate_options(replacement, non_finite)


class TestFilterSettings:
    def test_defaults(self):
        settings = FilterSettings()
        assert settings.window_size == 5
        assert settings.init_value == 0.0
        assert settings.n_sigma == 3.0
        assert settings.dtype == "float64"
        assert settings.replacement == "median"
        assert settings.non_finite == "reject"
        assert settings == DEFAULT_SETTINGS

    def test_dtype_normalised_to_name(self):
        assert FilterSettings(dtype=np.float32).dtype == "float32"

    def test_invalid_window_size(self):
        with pytest.raises(InvalidCapacityError):
            FilterSettings(window_size=2)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"n_sigma": -1.0},
            {"n_sigma": float("nan")},
            {"n_sigma": float("inf")},
            {"init_value": float("nan")},
            {"replacement": "mean"},
            {"non_finite": "ignore"},
            {"n_sigma": 1e39, "dtype": "float32"},
            {"init_value": -1e39, "dtype": "float32"},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            FilterSettings(**kwargs)

    def test_zero_n_sigma_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="hampel.config"):
            settings = FilterSettings(n_sigma=0.0)
        assert settings.n_sigma == 0.0
        assert "n_sigma is 0" in caplog.text

    def test_extrapolate_small_window_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="hampel.config"):
            FilterSettings(window_size=3, replacement="extrapolate")
        assert "extrapolation" in caplog.text
