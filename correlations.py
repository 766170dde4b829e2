"""
correlations.py — Saturation-pressure & barometric-pressure correlations
========================================================================
The state-point engine never hard-codes these; every public calculation takes
them as injectable callables:

  saturation_pressure(temp_f)    -> psia   (default: Hyland-Wexler, water/ice)
  pressure_model(altitude_ft)    -> psia   (default: exponential scale height)

psychrolib-backed alternatives are provided for cross-checking and for callers
that prefer the ASHRAE standard atmosphere.
"""

import math
from typing import Callable

import psychrolib

from psychro_constants import (
    ALTITUDE_SCALE_FT,
    RANKINE_OFFSET,
    STD_PRESSURE_PSIA,
)

psychrolib.SetUnitSystem(psychrolib.IP)

SaturationPressureFn = Callable[[float], float]
PressureModelFn = Callable[[float], float]

PA_PER_PSI = 6894.757

# ── Hyland-Wexler coefficients (SI, T in K, Pws in Pa) ────────────────────────
_ICE = (-5.6745359e3, 6.3925247e0, -9.6778430e-3, 6.2215701e-7,
        2.0747825e-9, -9.4840240e-13, 4.1635019e0)
_WATER = (-5.8002206e3, 1.3914993e0, -4.8640239e-2, 4.1764768e-5,
          -1.4452093e-8, 6.5459673e0)


def _kelvin(temp_f: float) -> float:
    return (temp_f + RANKINE_OFFSET) * 5 / 9


def saturation_pressure_water(temp_f: float) -> float:
    """Saturation pressure over liquid water [psia], valid at and above 32°F.

    NaN at or below absolute zero, where a dew-point solve for a negative
    vapour pressure can land.
    """
    tk = _kelvin(temp_f)
    if tk <= 0:
        return math.nan
    c8, c9, c10, c11, c12, c13 = _WATER
    ln_pws = c8 / tk + c9 + c10 * tk + c11 * tk ** 2 + c12 * tk ** 3 + c13 * math.log(tk)
    return math.exp(ln_pws) / PA_PER_PSI


def saturation_pressure_ice(temp_f: float) -> float:
    """Saturation pressure over ice [psia], valid below 32°F; NaN at or below absolute zero."""
    tk = _kelvin(temp_f)
    if tk <= 0:
        return math.nan
    c1, c2, c3, c4, c5, c6, c7 = _ICE
    ln_pws = (c1 / tk + c2 + c3 * tk + c4 * tk ** 2 + c5 * tk ** 3
              + c6 * tk ** 4 + c7 * math.log(tk))
    return math.exp(ln_pws) / PA_PER_PSI


def get_saturation_pressure(temp_f: float) -> float:
    """Default saturation pressure [psia]; switches to the ice branch below 32°F."""
    if temp_f >= 32:
        return saturation_pressure_water(temp_f)
    return saturation_pressure_ice(temp_f)


def psychrolib_saturation_pressure(temp_f: float) -> float:
    """Saturation pressure [psia] from psychrolib (ASHRAE 2017, -148°F to 392°F)."""
    return psychrolib.GetSatVapPres(temp_f)


def barometric_pressure_at_altitude(altitude_ft: float) -> float:
    """Default barometric pressure [psia]: P0·exp(−z/27000 ft)."""
    return STD_PRESSURE_PSIA * math.exp(-altitude_ft / ALTITUDE_SCALE_FT)


def standard_atmosphere_pressure(altitude_ft: float) -> float:
    """ASHRAE standard-atmosphere pressure [psia] via psychrolib."""
    return psychrolib.GetStandardAtmPressure(altitude_ft)
