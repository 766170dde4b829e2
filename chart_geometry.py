"""
chart_geometry.py — Psychrometric chart geometry in normalized coordinates.

Layout (screen orientation, origin top-left):
  - x: dry bulb, 0 at config.min_temp_f → 1 at config.max_temp_f
  - y: humidity ratio, 0 at config.max_w_grains (top) → 1 at config.min_w_grains
  - Saturation curve, constant RH curves, constant wet bulb lines

Every generator samples the state-point solver along a dry-bulb sweep and
keeps only the samples that land inside the unit box. No rendering here.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from correlations import SaturationPressureFn, get_saturation_pressure
from psychro import (
    StatePointResult,
    humidity_ratio_from_vapor_pressure,
    state_from_db_rh,
    state_from_db_wb,
)
from psychro_constants import (
    CHART_WB_LINES_F,
    DEFAULT_CHART_CONFIG,
    ChartConfig,
    lb_to_grains,
)

WB_LINE_SPAN_F = 60.0


@dataclass(frozen=True)
class ChartPoint:
    x: float
    y: float
    temp: Optional[float] = None   # °F, saturation samples only
    w: Optional[float] = None      # gr/lb, saturation samples only


@dataclass(frozen=True)
class ChartLine:
    kind: str                      # "saturation" | "constant_rh" | "constant_wb"
    value: float
    points: List[ChartPoint]


# ── Coordinate transforms ─────────────────────────────────────────────────────

def _x(temp_f: float, config: ChartConfig) -> float:
    return (temp_f - config.min_temp_f) / (config.max_temp_f - config.min_temp_f)


def _y(w_grains: float, config: ChartConfig) -> float:
    return 1 - (w_grains - config.min_w_grains) / (config.max_w_grains - config.min_w_grains)


def _in_box(v: float) -> bool:
    return 0 <= v <= 1


def state_to_chart_coords(state: StatePointResult,
                          config: ChartConfig = DEFAULT_CHART_CONFIG) -> ChartPoint:
    """Normalized chart position of a state, clamped to the unit box."""
    x = _x(state.dry_bulb_f, config)
    y = _y(state.humidity_ratio_grains, config)
    return ChartPoint(x=max(0.0, min(1.0, x)), y=max(0.0, min(1.0, y)))


def chart_coords_to_inputs(coords: ChartPoint,
                           config: ChartConfig = DEFAULT_CHART_CONFIG) -> Dict[str, float]:
    """Inverse of state_to_chart_coords; result feeds calculate_state_point('db_w', ...)."""
    x = max(0.0, min(1.0, coords.x))
    y = max(0.0, min(1.0, coords.y))
    return {
        "dry_bulb_f": config.min_temp_f + x * (config.max_temp_f - config.min_temp_f),
        "humidity_ratio_grains": config.min_w_grains
                                 + (1 - y) * (config.max_w_grains - config.min_w_grains),
    }


# ── Curve generators ──────────────────────────────────────────────────────────

def generate_saturation_curve(
    config: ChartConfig,
    barometric_pressure_psia: float,
    num_points: int = 50,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
) -> List[ChartPoint]:
    """Saturation (100% RH) curve; samples above the chart top are dropped."""
    points = []
    for t in np.linspace(config.min_temp_f, config.max_temp_f, num_points + 1):
        temp = float(t)
        ws = humidity_ratio_from_vapor_pressure(saturation_pressure(temp), barometric_pressure_psia)
        ws_grains = lb_to_grains(ws)
        x, y = _x(temp, config), _y(ws_grains, config)
        if _in_box(y):
            points.append(ChartPoint(x=x, y=y, temp=temp, w=ws_grains))
    return points


def generate_constant_rh_curve(
    rh: float,
    config: ChartConfig,
    barometric_pressure_psia: float,
    num_points: int = 30,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
) -> List[ChartPoint]:
    """Constant relative humidity curve from full db_rh state solves."""
    points = []
    for t in np.linspace(config.min_temp_f, config.max_temp_f, num_points + 1):
        temp = float(t)
        state = state_from_db_rh(temp, rh, barometric_pressure_psia, saturation_pressure)
        x, y = _x(temp, config), _y(state.humidity_ratio_grains, config)
        if _in_box(x) and _in_box(y):
            points.append(ChartPoint(x=x, y=y))
    return points


def generate_constant_wb_line(
    wet_bulb_f: float,
    config: ChartConfig,
    barometric_pressure_psia: float,
    num_points: int = 20,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
) -> List[ChartPoint]:
    """Constant wet bulb line from its saturation point (Tdb = Twb) up to 60°F drier."""
    start = wet_bulb_f
    end = min(config.max_temp_f, wet_bulb_f + WB_LINE_SPAN_F)
    points = []
    for t in np.linspace(start, end, num_points + 1):
        temp = float(t)
        if temp < config.min_temp_f or temp > config.max_temp_f:
            continue
        state = state_from_db_wb(temp, wet_bulb_f, barometric_pressure_psia, saturation_pressure)
        x, y = _x(temp, config), _y(state.humidity_ratio_grains, config)
        if _in_box(x) and _in_box(y):
            points.append(ChartPoint(x=x, y=y))
    return points


def generate_chart_lines(
    config: ChartConfig,
    barometric_pressure_psia: float,
    saturation_pressure: SaturationPressureFn = get_saturation_pressure,
) -> List[ChartLine]:
    """Saturation curve plus the RH and wet bulb families for a full chart."""
    P = barometric_pressure_psia
    lines = [ChartLine("saturation", 100.0,
                       generate_saturation_curve(config, P, 60, saturation_pressure))]
    for rh in config.rh_intervals:
        if rh >= 100:
            continue
        lines.append(ChartLine("constant_rh", float(rh),
                               generate_constant_rh_curve(rh, config, P, 40, saturation_pressure)))
    for wb in CHART_WB_LINES_F:
        lines.append(ChartLine("constant_wb", float(wb),
                               generate_constant_wb_line(wb, config, P, 25, saturation_pressure)))
    return lines
