"""Validation tests for ``ContaminationSettings``."""

from __future__ import annotations

import pytest

from contamination.contamination_errors import InvalidConfigError
from contamination.contamination_settings import ContaminationSettings
from contamination.contamination_settings import validate_cell_size


def test_defaults_are_valid_for_large_images() -> None:
    """Default settings validate against a typical image."""
    obj_settings = ContaminationSettings()
    obj_settings.validate_for(640, 480)
    assert obj_settings.float_merge_threshold == 24.0
    assert obj_settings.int_max_generations == 64


def test_rejects_negative_threshold() -> None:
    """A negative merge threshold is invalid."""
    with pytest.raises(InvalidConfigError):
        ContaminationSettings(float_merge_threshold=-1.0).validate()


def test_rejects_negative_generation_cap() -> None:
    """A negative generation cap is invalid."""
    with pytest.raises(InvalidConfigError):
        ContaminationSettings(int_max_generations=-5).validate()


def test_cell_size_must_fit_smaller_dimension() -> None:
    """Cell size is bounded by the smaller image dimension."""
    validate_cell_size(3, 3, 100)
    with pytest.raises(InvalidConfigError):
        validate_cell_size(4, 3, 100)


def test_cell_size_must_be_an_integer() -> None:
    """Non-integer cell sizes are rejected."""
    with pytest.raises(InvalidConfigError):
        validate_cell_size(2.5, 10, 10)  # type: ignore[arg-type]


def test_invalid_config_is_a_value_error() -> None:
    """Configuration failures remain catchable as ``ValueError``."""
    with pytest.raises(ValueError):
        ContaminationSettings(int_cell_size=0).validate_for(10, 10)
