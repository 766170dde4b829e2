"""
excel_export.py — Export a psychrometric session to an .xlsx workbook
=====================================================================
Sheets:
  1. Summary           — session name, date, altitude, barometric pressure
  2. State Points      — every solved point with all properties and CFM
  3. Process Analysis  — loads between consecutive points (or given steps)
  4. Reference         — constants and formulas used by the engine

Returns the workbook as bytes; writing it anywhere is the caller's job.
"""

import io
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from correlations import PressureModelFn, barometric_pressure_at_altitude
from psychro import StatePointResult
from psychro_constants import GRAINS_PER_LB, STD_PRESSURE_PSIA, psia_to_in_hg
from psychro_engine import ProcessStep, compute_processes
from psychro_log import get_logger

logger = get_logger("excel_export")

DEFAULT_PROCESS_CFM = 1000.0

# ── Colour palette ────────────────────────────────────────────────────────────
C_TITLE_BG = "747474"
C_TITLE_FG = "FFFFFF"
C_SECT_BG = "86939F"
C_SECT_FG = "FFFFFF"
C_PROC_BG = "4EA72E"
C_PROC_FG = "FFFFFF"


@dataclass(frozen=True)
class ExportPoint:
    label: str
    point_type: str                # 'state' | 'entering' | 'leaving' | 'mixed'
    state: StatePointResult
    cfm: Optional[float] = None


# ── Style helpers ─────────────────────────────────────────────────────────────
def _fill(hex_color):
    return PatternFill("solid", fgColor=hex_color)

def _font(bold=False, color="000000", size=9, name="Arial"):
    return Font(bold=bold, color=color, size=size, name=name)

def _align(h="left", v="center", wrap=False):
    return Alignment(horizontal=h, vertical=v, wrap_text=wrap)

def _title(ws, row, text, ncols):
    for c in range(1, ncols + 1):
        ws.cell(row=row, column=c).fill = _fill(C_TITLE_BG)
    cell = ws.cell(row=row, column=1)
    cell.value, cell.font = text, _font(True, C_TITLE_FG, size=10)

def _section_hdr(ws, row, label, ncols=2):
    for c in range(1, ncols + 1):
        ws.cell(row=row, column=c).fill = _fill(C_SECT_BG)
    cell = ws.cell(row=row, column=1)
    cell.value, cell.font = label, _font(True, C_SECT_FG)

def _header_row(ws, row, headers, bg=C_SECT_BG, fg=C_SECT_FG):
    for col, hdr in enumerate(headers, start=1):
        cell = ws.cell(row=row, column=col)
        cell.value = hdr
        cell.font = _font(True, fg)
        cell.fill = _fill(bg)
        cell.alignment = _align(h="center", wrap=True)

def _set_widths(ws, widths):
    for i, w in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(i)].width = w


# ── Sheets ────────────────────────────────────────────────────────────────────

def _summary_sheet(ws, name, altitude_ft, pressure_psia, generated):
    ws.title = "Summary"
    _title(ws, 1, "PSYCHROMETRIC ANALYSIS - SUMMARY", 2)

    _section_hdr(ws, 3, "Analysis Information")
    rows = [
        (4, "Name",                name),
        (5, "Generated",           generated.isoformat()),
    ]
    _section_hdr(ws, 7, "Atmospheric Conditions")
    rows += [
        (8,  "Altitude (ft)",               altitude_ft),
        (9,  "Barometric Pressure (psia)",  round(pressure_psia, 3)),
        (10, "Barometric Pressure (in.Hg)", round(psia_to_in_hg(pressure_psia), 2)),
    ]
    for r, label, val in rows:
        ws.cell(row=r, column=1).value = label
        ws.cell(row=r, column=1).font = _font(True)
        ws.cell(row=r, column=2).value = val
        ws.cell(row=r, column=2).font = _font()
    _set_widths(ws, [28, 30])


POINT_HEADERS = [
    "Point", "Type", "Dry Bulb (°F)", "Wet Bulb (°F)", "Dew Point (°F)", "RH (%)",
    "Humidity Ratio (gr/lb)", "Humidity Ratio (lb/lb)", "Enthalpy (Btu/lb)",
    "Sp. Volume (ft³/lb)", "Vapor Pressure (psia)", "CFM",
]
POINT_FMTS = ["@", "@", "0.00", "0.00", "0.00", "0.00",
              "0.00", "0.000000", "0.00", "0.0000", "0.0000", "0"]


def _points_sheet(ws, points: Sequence[ExportPoint]):
    _header_row(ws, 1, POINT_HEADERS)
    for r, p in enumerate(points, start=2):
        s = p.state
        values = [
            p.label, p.point_type, s.dry_bulb_f, s.wet_bulb_f, s.dew_point_f,
            s.relative_humidity, s.humidity_ratio_grains, s.humidity_ratio_lb,
            s.enthalpy_btu_lb, s.specific_volume_ft3_lb, s.vapor_pressure_psia,
            p.cfm or 0,
        ]
        for col, (val, fmt) in enumerate(zip(values, POINT_FMTS), start=1):
            c = ws.cell(row=r, column=col)
            c.value, c.number_format, c.font = val, fmt, _font()
            if col > 2:
                c.alignment = _align(h="center")
    _set_widths(ws, [12, 10, 12, 12, 12, 8, 18, 18, 15, 18, 15, 10])


PROCESS_HEADERS = [
    "Process", "ΔT (°F)", "ΔW (gr/lb)", "Δh (Btu/lb)", "CFM",
    "Total (Btuh)", "Sensible (Btuh)", "Latent (Btuh)", "Tons",
]
PROCESS_FMTS = ["@", "0.00", "0.00", "0.00", "0", "#,##0", "#,##0", "#,##0", "0.00"]


def _consecutive_steps(points: Sequence[ExportPoint]) -> List[ProcessStep]:
    return compute_processes(
        (f"{a.label} → {b.label}", a.state, b.state, a.cfm or DEFAULT_PROCESS_CFM)
        for a, b in zip(points, points[1:])
    )


def _process_sheet(ws, steps: Sequence[ProcessStep]):
    _title(ws, 1, "PROCESS ANALYSIS", len(PROCESS_HEADERS))
    _header_row(ws, 3, PROCESS_HEADERS, bg=C_PROC_BG, fg=C_PROC_FG)
    r = 4
    for step in steps:
        if step.result is None:
            continue
        a, b, res = step.entering, step.leaving, step.result
        values = [
            step.name,
            b.dry_bulb_f - a.dry_bulb_f,
            b.humidity_ratio_grains - a.humidity_ratio_grains,
            b.enthalpy_btu_lb - a.enthalpy_btu_lb,
            step.cfm,
            round(res.total_load_btuh),
            round(res.sensible_load_btuh),
            round(res.latent_load_btuh),
            res.total_load_tons,
        ]
        for col, (val, fmt) in enumerate(zip(values, PROCESS_FMTS), start=1):
            c = ws.cell(row=r, column=col)
            c.value, c.number_format, c.font = val, fmt, _font(bold=(col == 6))
            if col > 1:
                c.alignment = _align(h="center")
        r += 1
    _set_widths(ws, [24, 10, 12, 12, 8, 14, 14, 14, 8])


REFERENCE_ROWS = [
    ("Constants", None),
    ("Standard Air Density", "0.075 lb/ft³"),
    ("Standard Pressure", f"{STD_PRESSURE_PSIA} psia"),
    ("Grains per Pound", f"{GRAINS_PER_LB:.0f}"),
    (None, None),
    ("Formulas Used", None),
    ("Humidity Ratio", "W = 0.621945 × Pw / (P - Pw)"),
    ("Enthalpy", "h = 0.240×Tdb + W×(1061 + 0.444×Tdb) Btu/lb"),
    ("Specific Volume", "v = 0.370486×(T+459.67)×(1+1.6078×W)/P ft³/lb"),
    (None, None),
    ("Standard Air Heat Transfer", None),
    ("Sensible Heat", "Qs = 1.08 × CFM × ΔT"),
    ("Total Heat", "Qt = 4.5 × CFM × Δh"),
    ("Latent Heat", "QL = 0.68 × CFM × ΔW (grains)"),
]


def _reference_sheet(ws):
    _title(ws, 1, "PSYCHROMETRIC REFERENCE", 2)
    for r, (label, text) in enumerate(REFERENCE_ROWS, start=3):
        if label is None:
            continue
        if text is None:
            _section_hdr(ws, r, label)
            continue
        ws.cell(row=r, column=1).value = label
        ws.cell(row=r, column=1).font = _font(True)
        ws.cell(row=r, column=2).value = text
        ws.cell(row=r, column=2).font = _font()
    _set_widths(ws, [26, 50])


# ── Main builder ──────────────────────────────────────────────────────────────

def build_workbook(
    name: str,
    altitude_ft: float,
    points: Sequence[ExportPoint],
    processes: Optional[Sequence[ProcessStep]] = None,
    pressure_model: PressureModelFn = barometric_pressure_at_altitude,
    generated: Optional[date] = None,
) -> bytes:
    """
    Build the session workbook and return it as .xlsx bytes.

    Parameters
    ----------
    points    : solved state points in display order
    processes : explicit process steps; when omitted, consecutive points are
                treated as a process chain using the first point's CFM
                (1000 CFM when it has none)
    """
    pressure = pressure_model(altitude_ft)

    wb = Workbook()
    _summary_sheet(wb.active, name, altitude_ft, pressure, generated or date.today())
    _points_sheet(wb.create_sheet("State Points"), points)

    steps = list(processes) if processes is not None else _consecutive_steps(points)
    if any(s.result is not None for s in steps):
        _process_sheet(wb.create_sheet("Process Analysis"), steps)

    _reference_sheet(wb.create_sheet("Reference"))

    buf = io.BytesIO()
    wb.save(buf)
    logger.debug("exported '%s': %d points, %d processes", name, len(points), len(steps))
    return buf.getvalue()
