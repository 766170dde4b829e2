"""Shared fixtures for the psychrometric engine tests."""

import pytest

from psychro import state_from_db_rh, state_from_db_wb
from psychro_constants import STD_PRESSURE_PSIA


@pytest.fixture
def sea_level():
    return STD_PRESSURE_PSIA


@pytest.fixture
def outdoor_air(sea_level):
    """Summer design outdoor air, 95°F db / 78°F wb."""
    return state_from_db_wb(95.0, 78.0, sea_level)


@pytest.fixture
def return_air(sea_level):
    """Room return air, 75°F / 50% RH."""
    return state_from_db_rh(75.0, 50.0, sea_level)


@pytest.fixture
def coil_entering(sea_level):
    return state_from_db_wb(80.0, 67.0, sea_level)


@pytest.fixture
def coil_leaving(sea_level):
    return state_from_db_wb(55.0, 54.0, sea_level)
