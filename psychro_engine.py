"""
psychro_engine.py — Air mixing & HVAC process load calculations
================================================================
Mixing (adiabatic, two streams):
  - ṁ        = CFM / v                                 [lb/min, per stream]
  - W_mix    = fA·W_A + fB·W_B,  h_mix = fA·h_A + fB·h_B   (mass fractions)
  - Tdb_mix  = (h − 1061·W) / (0.240 + 0.444·W)
  - the full mixed state is re-solved from (Tdb_mix, W_mix), never interpolated

Process loads (entering → leaving):
  - ṁ        = CFM·60 / v_avg                          [lb/h]
  - Q_total  = ṁ·Δh
  - Q_sens   = ṁ·(0.240 + 0.444·W_avg)·ΔT
  - Q_lat    = Q_total − Q_sens
  - SHR      = |Q_sens / Q_total|  (1 when Q_total = 0)
  - Moisture = ṁ·ΔW                                    [lb/h, +ve = humidification]
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from correlations import SaturationPressureFn, get_saturation_pressure
from psychro import PsychroError, StatePointResult, state_from_db_w
from psychro_constants import (
    BTUH_PER_TON,
    CP_AIR,
    CP_VAPOR,
    HG_0F,
    QL_FACTOR,
    QS_FACTOR,
    QT_FACTOR,
    lb_to_grains,
)
from psychro_log import get_logger

logger = get_logger("psychro_engine")


class ZeroFlowError(PsychroError):
    """Raised when two airstreams are mixed with no combined flow."""


# ── Air mixing ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AirStream:
    state: StatePointResult
    cfm: float


@dataclass(frozen=True)
class MixingResult:
    mixed_point: StatePointResult
    total_cfm: float
    mix_ratio_a: float    # mass-flow fraction of stream A
    mix_ratio_b: float    # mass-flow fraction of stream B


def calculate_mixing(
    stream_a: AirStream,
    stream_b: AirStream,
    barometric_pressure_psia: float,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
) -> MixingResult:
    """Adiabatic mixing of two airstreams on a dry-air mass basis."""
    total_cfm = stream_a.cfm + stream_b.cfm
    if total_cfm == 0:
        raise ZeroFlowError("Total CFM cannot be zero")

    mdot_a = stream_a.cfm / stream_a.state.specific_volume_ft3_lb
    mdot_b = stream_b.cfm / stream_b.state.specific_volume_ft3_lb
    mix_ratio_a = mdot_a / (mdot_a + mdot_b)
    mix_ratio_b = 1.0 - mix_ratio_a

    w_mix = (mix_ratio_a * stream_a.state.humidity_ratio_lb
             + mix_ratio_b * stream_b.state.humidity_ratio_lb)
    h_mix = (mix_ratio_a * stream_a.state.enthalpy_btu_lb
             + mix_ratio_b * stream_b.state.enthalpy_btu_lb)

    # Invert h = 0.240·Tdb + W·(1061 + 0.444·Tdb) for Tdb
    tdb_mix = (h_mix - HG_0F * w_mix) / (CP_AIR + CP_VAPOR * w_mix)

    mixed_point = state_from_db_w(tdb_mix, lb_to_grains(w_mix),
                                  barometric_pressure_psia, saturation_pressure)
    logger.debug("mixed %.0f + %.0f CFM -> Tdb=%.2f°F W=%.2f gr/lb",
                 stream_a.cfm, stream_b.cfm, mixed_point.dry_bulb_f,
                 mixed_point.humidity_ratio_grains)

    return MixingResult(
        mixed_point=mixed_point,
        total_cfm=total_cfm,
        mix_ratio_a=mix_ratio_a,
        mix_ratio_b=mix_ratio_b,
    )


# ── Process loads ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProcessResult:
    total_load_btuh: float
    sensible_load_btuh: float
    latent_load_btuh: float     # always total − sensible
    total_load_tons: float
    moisture_lb_hr: float       # +ve = humidification, −ve = dehumidification
    mass_flow_lb_hr: float
    sensible_heat_ratio: float


def calculate_process(entering: StatePointResult, leaving: StatePointResult,
                      cfm: float) -> ProcessResult:
    """Heat and moisture transfer between two states at a given airflow."""
    avg_v = (entering.specific_volume_ft3_lb + leaving.specific_volume_ft3_lb) / 2
    mass_flow = (cfm * 60) / avg_v

    delta_h = leaving.enthalpy_btu_lb - entering.enthalpy_btu_lb
    delta_t = leaving.dry_bulb_f - entering.dry_bulb_f
    delta_w = leaving.humidity_ratio_lb - entering.humidity_ratio_lb

    avg_w = (entering.humidity_ratio_lb + leaving.humidity_ratio_lb) / 2
    cp_moist = CP_AIR + CP_VAPOR * avg_w

    q_total = mass_flow * delta_h
    q_sens = mass_flow * cp_moist * delta_t
    q_lat = q_total - q_sens
    shr = abs(q_sens / q_total) if q_total != 0 else 1.0

    return ProcessResult(
        total_load_btuh=q_total,
        sensible_load_btuh=q_sens,
        latent_load_btuh=q_lat,
        total_load_tons=q_total / BTUH_PER_TON,
        moisture_lb_hr=mass_flow * delta_w,
        mass_flow_lb_hr=mass_flow,
        sensible_heat_ratio=shr,
    )


def calculate_ventilation_load(return_air: StatePointResult, mixed_air: StatePointResult,
                               cfm: float) -> ProcessResult:
    """Load the outdoor air adds, taken as the RA → MA process at total CFM."""
    return calculate_process(return_air, mixed_air, cfm)


# ── Process chains ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProcessStep:
    name: str
    entering: StatePointResult
    leaving: StatePointResult
    cfm: float
    result: Optional[ProcessResult]   # None when the step has no airflow


@dataclass(frozen=True)
class ProcessTotals:
    sensible_load_btuh: float
    latent_load_btuh: float
    total_load_btuh: float
    total_load_tons: float
    moisture_lb_hr: float


def compute_processes(
    steps: Iterable[Tuple[str, StatePointResult, StatePointResult, float]],
) -> List[ProcessStep]:
    """
    Evaluate a list of (name, entering, leaving, cfm) processes.
    Steps with cfm <= 0 are kept but carry no result.
    """
    out = []
    for name, entering, leaving, cfm in steps:
        result = calculate_process(entering, leaving, cfm) if cfm > 0 else None
        out.append(ProcessStep(name=name, entering=entering, leaving=leaving,
                               cfm=cfm, result=result))
    return out


def process_totals(steps: Sequence[ProcessStep]) -> ProcessTotals:
    results = [s.result for s in steps if s.result is not None]
    sensible = sum(r.sensible_load_btuh for r in results)
    latent = sum(r.latent_load_btuh for r in results)
    total = sum(r.total_load_btuh for r in results)
    return ProcessTotals(
        sensible_load_btuh=sensible,
        latent_load_btuh=latent,
        total_load_btuh=total,
        total_load_tons=total / BTUH_PER_TON,
        moisture_lb_hr=sum(r.moisture_lb_hr for r in results),
    )


def process_to_dict(step: ProcessStep) -> dict:
    r = step.result
    return {
        "name"      : step.name,
        "tdb_in"    : step.entering.dry_bulb_f,
        "tdb_out"   : step.leaving.dry_bulb_f,
        "w_in"      : step.entering.humidity_ratio_grains,
        "w_out"     : step.leaving.humidity_ratio_grains,
        "h_in"      : step.entering.enthalpy_btu_lb,
        "h_out"     : step.leaving.enthalpy_btu_lb,
        "cfm"       : step.cfm,
        "Q_sens"    : r.sensible_load_btuh if r else None,
        "Q_lat"     : r.latent_load_btuh if r else None,
        "Q_total"   : r.total_load_btuh if r else None,
        "tons"      : r.total_load_tons if r else None,
        "moisture"  : r.moisture_lb_hr if r else None,
        "SHR"       : r.sensible_heat_ratio if r else None,
    }


# ── Standard-air shortcuts (sea level, 70°F) ──────────────────────────────────

def quick_sensible_heat(cfm: float, delta_t: float) -> float:
    """Qs = 1.08 × CFM × ΔT  [Btu/h]"""
    return QS_FACTOR * cfm * delta_t


def quick_total_heat(cfm: float, delta_h: float) -> float:
    """Qt = 4.5 × CFM × Δh  [Btu/h]"""
    return QT_FACTOR * cfm * delta_h


def quick_latent_heat(cfm: float, delta_w_grains: float) -> float:
    """QL = 0.68 × CFM × ΔW(grains)  [Btu/h]"""
    return QL_FACTOR * cfm * delta_w_grains
