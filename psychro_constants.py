"""
psychro_constants.py — Physical constants, unit conversions & chart defaults
=============================================================================
Inch-Pound values from the ASHRAE Fundamentals Handbook. Every formula in the
engine reads its coefficients from here so they can be audited in one place.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

# ── Standard atmosphere ───────────────────────────────────────────────────────
STD_PRESSURE_PSIA = 14.696   # psia at sea level
STD_PRESSURE_IN_HG = 29.921  # in Hg at sea level

# ── Moist air properties ──────────────────────────────────────────────────────
MW_RATIO = 0.621945   # Mw/Ma = 18.015/28.966
CP_AIR = 0.240        # Btu/(lb·°F) dry air
CP_VAPOR = 0.444      # Btu/(lb·°F) water vapour
HG_0F = 1061.0        # Btu/lb vapour enthalpy reference at 0°F
GRAINS_PER_LB = 7000.0
R_AIR = 53.352        # ft·lbf/(lb·°R)
RANKINE_OFFSET = 459.67

# Specific volume: v = SPEC_VOL_COEFF·(Tdb + 459.67)·(1 + SPEC_VOL_W_COEFF·W)/P
SPEC_VOL_COEFF = 0.370486
SPEC_VOL_W_COEFF = 1.6078

# Wet-bulb psychrometric relation coefficients
# W = ((2830 − 0.24·Twb)·Wswb − 0.556·(Tdb − Twb)) / (2830 + 0.444·Tdb − Twb)
WB_HFG = 2830.0
WB_CP_LIQ = 0.24
WB_CP_AIR = 0.556

# Atmospheric model
DENSITY_REF_TEMP_R = 530.0   # 70°F reference for standard air density
ALTITUDE_SCALE_FT = 27000.0  # scale height of the exponential pressure model

# Process loads
BTUH_PER_TON = 12000.0

# Standard-air shortcut factors (sea level, 70°F)
QS_FACTOR = 1.08   # Btu/h per CFM·°F
QT_FACTOR = 4.5    # Btu/h per CFM·(Btu/lb)
QL_FACTOR = 0.68   # Btu/h per CFM·(gr/lb)

# ── Solver tuning ─────────────────────────────────────────────────────────────
DEW_POINT_SEED_F = 60.0
DEW_POINT_MAX_ITER = 20
DEW_POINT_TOL_PSIA = 0.0001
DEW_POINT_STEP_F = 0.1       # forward-difference step for dPws/dT

WET_BULB_SEED_DEPRESSION_F = 10.0
WET_BULB_MAX_ITER = 30
WET_BULB_TOL = 1e-6          # lb/lb
WET_BULB_GAIN = 100.0        # °F per lb/lb of humidity-ratio error
WET_BULB_MIN_F = -40.0


# ── Input modes ───────────────────────────────────────────────────────────────
class InputMode(str, Enum):
    """Which two properties define a state point."""
    DB_WB = "db_wb"
    DB_RH = "db_rh"
    DB_DP = "db_dp"
    DB_W = "db_w"


# ── Chart configuration ───────────────────────────────────────────────────────
@dataclass(frozen=True)
class ChartConfig:
    """Axis bounds and grid intervals of the psychrometric chart."""
    min_temp_f: float = 20.0
    max_temp_f: float = 120.0
    min_w_grains: float = 0.0
    max_w_grains: float = 200.0
    db_interval: float = 10.0     # °F
    w_interval: float = 20.0      # grains/lb
    rh_intervals: Tuple[float, ...] = field(
        default=(10, 20, 30, 40, 50, 60, 70, 80, 90, 100))


DEFAULT_CHART_CONFIG = ChartConfig()

# Wet bulb lines drawn on the default chart
CHART_WB_LINES_F = (40, 50, 60, 70, 80, 90)


# ── Unit conversions ──────────────────────────────────────────────────────────
def grains_to_lb(grains: float) -> float:
    return grains / GRAINS_PER_LB


def lb_to_grains(lb: float) -> float:
    return lb * GRAINS_PER_LB


def psia_to_in_hg(psia: float) -> float:
    return psia * (STD_PRESSURE_IN_HG / STD_PRESSURE_PSIA)

