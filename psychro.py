"""
Psychrometric state-point engine (Inch-Pound units).
Derives the full moist air state from dry bulb plus any one of wet bulb,
relative humidity, dew point or humidity ratio.

All functions are pure: the saturation-pressure correlation is passed in
(defaulting to correlations.get_saturation_pressure) and nothing is cached.
"""

from dataclasses import dataclass
from typing import Mapping, Union

from correlations import (
    PressureModelFn,
    SaturationPressureFn,
    barometric_pressure_at_altitude,
    get_saturation_pressure,
)
from psychro_constants import (
    CP_AIR,
    CP_VAPOR,
    DENSITY_REF_TEMP_R,
    DEW_POINT_MAX_ITER,
    DEW_POINT_SEED_F,
    DEW_POINT_STEP_F,
    DEW_POINT_TOL_PSIA,
    HG_0F,
    MW_RATIO,
    R_AIR,
    RANKINE_OFFSET,
    SPEC_VOL_COEFF,
    SPEC_VOL_W_COEFF,
    WB_CP_AIR,
    WB_CP_LIQ,
    WB_HFG,
    WET_BULB_GAIN,
    WET_BULB_MAX_ITER,
    WET_BULB_MIN_F,
    WET_BULB_SEED_DEPRESSION_F,
    WET_BULB_TOL,
    InputMode,
    grains_to_lb,
    lb_to_grains,
    psia_to_in_hg,
)
from psychro_log import get_logger

logger = get_logger("psychro")


class PsychroError(ValueError):
    """Base class for engine errors."""


class UnsupportedModeError(PsychroError):
    """Raised when a state point is requested with an unknown input mode."""


@dataclass(frozen=True)
class StatePointResult:
    """Represents a fully-defined moist air state."""
    dry_bulb_f: float
    wet_bulb_f: float
    dew_point_f: float
    relative_humidity: float          # % [0, 100]
    humidity_ratio_grains: float      # gr/lb dry air
    humidity_ratio_lb: float          # lb/lb dry air
    enthalpy_btu_lb: float            # Btu/lb dry air
    specific_volume_ft3_lb: float     # ft³/lb dry air
    vapor_pressure_psia: float
    saturation_pressure_psia: float


@dataclass(frozen=True)
class AtmosphericConditions:
    altitude_ft: float
    barometric_pressure_psia: float
    barometric_pressure_in_hg: float
    air_density_lb_ft3: float         # at the 70°F reference, not site temperature


@dataclass(frozen=True)
class SolverResult:
    """Outcome of an iterative solve; `converged` is False when the budget ran out."""
    value: float
    iterations: int
    residual: float
    converged: bool


# ── Atmospheric model ─────────────────────────────────────────────────────────

def get_atmospheric_conditions(
    altitude_ft: float,
    pressure_model: PressureModelFn = barometric_pressure_at_altitude,
) -> AtmosphericConditions:
    """Barometric pressure at altitude plus standard air density at 70°F."""
    pressure_psia = pressure_model(altitude_ft)
    density = (pressure_psia * 144) / (R_AIR * DENSITY_REF_TEMP_R)
    return AtmosphericConditions(
        altitude_ft=altitude_ft,
        barometric_pressure_psia=pressure_psia,
        barometric_pressure_in_hg=psia_to_in_hg(pressure_psia),
        air_density_lb_ft3=density,
    )


# ── Closed-form relations ─────────────────────────────────────────────────────

def humidity_ratio_from_vapor_pressure(vapor_pressure_psia: float,
                                       barometric_pressure_psia: float) -> float:
    """W = 0.621945·Pw / (P − Pw)  [lb/lb]"""
    return MW_RATIO * vapor_pressure_psia / (barometric_pressure_psia - vapor_pressure_psia)


def vapor_pressure_from_humidity_ratio(humidity_ratio_lb: float,
                                       barometric_pressure_psia: float) -> float:
    """Pw = W·P / (0.621945 + W)  [psia]"""
    return humidity_ratio_lb * barometric_pressure_psia / (MW_RATIO + humidity_ratio_lb)


def relative_humidity_from_pressures(vapor_pressure_psia: float,
                                     saturation_pressure_psia: float) -> float:
    """RH = 100·Pw / Pws  [%], unclamped."""
    return 100 * vapor_pressure_psia / saturation_pressure_psia


def calculate_enthalpy(dry_bulb_f: float, humidity_ratio_lb: float) -> float:
    """h = 0.240·Tdb + W·(1061 + 0.444·Tdb)  [Btu/lb dry air]"""
    return CP_AIR * dry_bulb_f + humidity_ratio_lb * (HG_0F + CP_VAPOR * dry_bulb_f)


def calculate_specific_volume(dry_bulb_f: float, humidity_ratio_lb: float,
                              barometric_pressure_psia: float) -> float:
    """v = 0.370486·(Tdb + 459.67)·(1 + 1.6078·W) / P  [ft³/lb dry air]"""
    t_r = dry_bulb_f + RANKINE_OFFSET
    return SPEC_VOL_COEFF * t_r * (1 + SPEC_VOL_W_COEFF * humidity_ratio_lb) / barometric_pressure_psia


def _wet_bulb_relation(dry_bulb_f: float, wet_bulb_f: float,
                       barometric_pressure_psia: float,
                       saturation_pressure: SaturationPressureFn) -> float:
    # Unclamped ASHRAE psychrometric relation
    pws_wb = saturation_pressure(wet_bulb_f)
    ws_wb = humidity_ratio_from_vapor_pressure(pws_wb, barometric_pressure_psia)
    return (((WB_HFG - WB_CP_LIQ * wet_bulb_f) * ws_wb - WB_CP_AIR * (dry_bulb_f - wet_bulb_f))
            / (WB_HFG + CP_VAPOR * dry_bulb_f - wet_bulb_f))


def humidity_ratio_from_wet_bulb(
    dry_bulb_f: float,
    wet_bulb_f: float,
    barometric_pressure_psia: float,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
) -> float:
    """Humidity ratio [lb/lb] from dry bulb and wet bulb; never negative."""
    w = _wet_bulb_relation(dry_bulb_f, wet_bulb_f, barometric_pressure_psia, saturation_pressure)
    return max(0.0, w)


# ── Iterative solvers ─────────────────────────────────────────────────────────

def solve_dew_point(
    vapor_pressure_psia: float,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
    max_iterations: int = DEW_POINT_MAX_ITER,
) -> SolverResult:
    """
    Newton-Raphson on Pws(T) = Pw with a forward-difference derivative.

    Returns the last iterate when the budget is exhausted (or the slope
    vanishes); callers decide whether an unconverged result is acceptable.
    Non-physical targets such as a negative vapour pressure end in NaN.
    """
    t = DEW_POINT_SEED_F
    iterations = 0
    while iterations < max_iterations:
        pws = saturation_pressure(t)
        error = pws - vapor_pressure_psia
        if abs(error) < DEW_POINT_TOL_PSIA:
            return SolverResult(t, iterations, error, True)
        dpws = (saturation_pressure(t + DEW_POINT_STEP_F) - pws) / DEW_POINT_STEP_F
        if dpws == 0:
            break
        iterations += 1
        t = t - error / dpws

    # Residual of the value actually returned
    error = saturation_pressure(t) - vapor_pressure_psia
    logger.debug("dew point not converged after %d iterations (Pw=%.6f psia, residual=%.3g)",
                 iterations, vapor_pressure_psia, error)
    return SolverResult(t, iterations, error, False)


def dew_point_from_vapor_pressure(
    vapor_pressure_psia: float,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
) -> float:
    """Dew point [°F]: temperature at which Pws equals the given vapour pressure."""
    return solve_dew_point(vapor_pressure_psia, saturation_pressure).value


def solve_wet_bulb(
    dry_bulb_f: float,
    humidity_ratio_lb: float,
    barometric_pressure_psia: float,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
    max_iterations: int = WET_BULB_MAX_ITER,
) -> SolverResult:
    """
    Damped fixed-point iteration on the ASHRAE wet-bulb relation.

    Twb starts 10°F below dry bulb and moves by a fixed gain times the
    humidity-ratio error, clamped to [-40°F, Tdb] after each step.
    """
    twb = dry_bulb_f - WET_BULB_SEED_DEPRESSION_F
    iterations = 0
    while iterations < max_iterations:
        w_calc = _wet_bulb_relation(dry_bulb_f, twb, barometric_pressure_psia, saturation_pressure)
        error = humidity_ratio_lb - w_calc
        if abs(error) < WET_BULB_TOL:
            return SolverResult(twb, iterations, error, True)
        iterations += 1
        twb = twb + error * WET_BULB_GAIN
        if twb > dry_bulb_f:
            twb = dry_bulb_f
        if twb < WET_BULB_MIN_F:
            twb = WET_BULB_MIN_F

    error = humidity_ratio_lb - _wet_bulb_relation(dry_bulb_f, twb, barometric_pressure_psia,
                                                   saturation_pressure)
    logger.debug("wet bulb not converged after %d iterations (Tdb=%.2f°F, W=%.6f, residual=%.3g)",
                 iterations, dry_bulb_f, humidity_ratio_lb, error)
    return SolverResult(twb, iterations, error, False)


def wet_bulb_from_state(
    dry_bulb_f: float,
    humidity_ratio_lb: float,
    barometric_pressure_psia: float,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
) -> float:
    """Wet bulb [°F] from dry bulb and humidity ratio."""
    return solve_wet_bulb(dry_bulb_f, humidity_ratio_lb, barometric_pressure_psia,
                          saturation_pressure).value


# ── Complete state points ─────────────────────────────────────────────────────

def _clamp_rh(rh: float) -> float:
    return min(100.0, max(0.0, rh))


def _grains_and_lb(humidity_ratio_lb: float):
    # Route through grains so that lb == grains / 7000 holds exactly
    grains = lb_to_grains(humidity_ratio_lb)
    return grains, grains_to_lb(grains)


def state_from_db_wb(
    dry_bulb_f: float,
    wet_bulb_f: float,
    barometric_pressure_psia: float,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
) -> StatePointResult:
    P = barometric_pressure_psia
    w_grains, w = _grains_and_lb(
        humidity_ratio_from_wet_bulb(dry_bulb_f, wet_bulb_f, P, saturation_pressure))
    pw = vapor_pressure_from_humidity_ratio(w, P)
    pws = saturation_pressure(dry_bulb_f)

    return StatePointResult(
        dry_bulb_f=dry_bulb_f,
        wet_bulb_f=wet_bulb_f,
        dew_point_f=dew_point_from_vapor_pressure(pw, saturation_pressure),
        relative_humidity=_clamp_rh(relative_humidity_from_pressures(pw, pws)),
        humidity_ratio_grains=w_grains,
        humidity_ratio_lb=w,
        enthalpy_btu_lb=calculate_enthalpy(dry_bulb_f, w),
        specific_volume_ft3_lb=calculate_specific_volume(dry_bulb_f, w, P),
        vapor_pressure_psia=pw,
        saturation_pressure_psia=pws,
    )


def state_from_db_rh(
    dry_bulb_f: float,
    relative_humidity: float,
    barometric_pressure_psia: float,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
) -> StatePointResult:
    P = barometric_pressure_psia
    pws = saturation_pressure(dry_bulb_f)
    pw = (relative_humidity / 100) * pws
    w_grains, w = _grains_and_lb(humidity_ratio_from_vapor_pressure(pw, P))

    return StatePointResult(
        dry_bulb_f=dry_bulb_f,
        wet_bulb_f=wet_bulb_from_state(dry_bulb_f, w, P, saturation_pressure),
        dew_point_f=dew_point_from_vapor_pressure(pw, saturation_pressure),
        relative_humidity=_clamp_rh(relative_humidity),
        humidity_ratio_grains=w_grains,
        humidity_ratio_lb=w,
        enthalpy_btu_lb=calculate_enthalpy(dry_bulb_f, w),
        specific_volume_ft3_lb=calculate_specific_volume(dry_bulb_f, w, P),
        vapor_pressure_psia=pw,
        saturation_pressure_psia=pws,
    )


def state_from_db_dp(
    dry_bulb_f: float,
    dew_point_f: float,
    barometric_pressure_psia: float,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
) -> StatePointResult:
    P = barometric_pressure_psia
    pw = saturation_pressure(dew_point_f)   # Pw is Pws at the dew point
    pws = saturation_pressure(dry_bulb_f)
    w_grains, w = _grains_and_lb(humidity_ratio_from_vapor_pressure(pw, P))

    return StatePointResult(
        dry_bulb_f=dry_bulb_f,
        wet_bulb_f=wet_bulb_from_state(dry_bulb_f, w, P, saturation_pressure),
        dew_point_f=dew_point_f,
        relative_humidity=_clamp_rh(relative_humidity_from_pressures(pw, pws)),
        humidity_ratio_grains=w_grains,
        humidity_ratio_lb=w,
        enthalpy_btu_lb=calculate_enthalpy(dry_bulb_f, w),
        specific_volume_ft3_lb=calculate_specific_volume(dry_bulb_f, w, P),
        vapor_pressure_psia=pw,
        saturation_pressure_psia=pws,
    )


def state_from_db_w(
    dry_bulb_f: float,
    humidity_ratio_grains: float,
    barometric_pressure_psia: float,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
) -> StatePointResult:
    P = barometric_pressure_psia
    w = grains_to_lb(humidity_ratio_grains)
    pw = vapor_pressure_from_humidity_ratio(w, P)
    pws = saturation_pressure(dry_bulb_f)

    return StatePointResult(
        dry_bulb_f=dry_bulb_f,
        wet_bulb_f=wet_bulb_from_state(dry_bulb_f, w, P, saturation_pressure),
        dew_point_f=dew_point_from_vapor_pressure(pw, saturation_pressure),
        relative_humidity=_clamp_rh(relative_humidity_from_pressures(pw, pws)),
        humidity_ratio_grains=humidity_ratio_grains,
        humidity_ratio_lb=w,
        enthalpy_btu_lb=calculate_enthalpy(dry_bulb_f, w),
        specific_volume_ft3_lb=calculate_specific_volume(dry_bulb_f, w, P),
        vapor_pressure_psia=pw,
        saturation_pressure_psia=pws,
    )


_MODE_INPUT = {
    InputMode.DB_WB: (state_from_db_wb, "wet_bulb_f"),
    InputMode.DB_RH: (state_from_db_rh, "relative_humidity"),
    InputMode.DB_DP: (state_from_db_dp, "dew_point_f"),
    InputMode.DB_W:  (state_from_db_w,  "humidity_ratio_grains"),
}


def calculate_state_point(
    mode: Union[InputMode, str],
    inputs: Mapping[str, float],
    barometric_pressure_psia: float,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
) -> StatePointResult:
    """
    Dispatch to the state-point function for `mode`.

    inputs: mapping with "dry_bulb_f" and the second property of the mode
            ("wet_bulb_f", "relative_humidity", "dew_point_f" or
            "humidity_ratio_grains").
    """
    try:
        input_mode = InputMode(mode)
    except ValueError:
        raise UnsupportedModeError(f"Unknown input mode: {mode}") from None

    solver, key = _MODE_INPUT[input_mode]
    return solver(inputs["dry_bulb_f"], inputs[key], barometric_pressure_psia, saturation_pressure)
