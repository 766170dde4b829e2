import pytest

from psychro import PsychroError, state_from_db_w
from psychro_engine import (
    AirStream,
    ZeroFlowError,
    calculate_mixing,
    calculate_process,
    calculate_ventilation_load,
    compute_processes,
    process_to_dict,
    process_totals,
    quick_latent_heat,
    quick_sensible_heat,
    quick_total_heat,
)


# ── Mixing ────────────────────────────────────────────────────────────────────

def test_mix_ratios_sum_to_one(outdoor_air, return_air, sea_level):
    mix = calculate_mixing(AirStream(outdoor_air, 2000), AirStream(return_air, 8000), sea_level)
    assert mix.mix_ratio_a + mix.mix_ratio_b == 1.0
    assert mix.total_cfm == 10000


def test_mix_ratios_are_mass_fractions(outdoor_air, return_air, sea_level):
    mix = calculate_mixing(AirStream(outdoor_air, 5000), AirStream(return_air, 5000), sea_level)
    # Warmer outdoor air is less dense, so it carries less than half the mass
    assert mix.mix_ratio_a < 0.5
    expected = (5000 / outdoor_air.specific_volume_ft3_lb) / (
        5000 / outdoor_air.specific_volume_ft3_lb + 5000 / return_air.specific_volume_ft3_lb)
    assert mix.mix_ratio_a == pytest.approx(expected)


def test_mixing_conserves_moisture_and_energy(outdoor_air, return_air, sea_level):
    mix = calculate_mixing(AirStream(outdoor_air, 2000), AirStream(return_air, 8000), sea_level)
    fa, fb = mix.mix_ratio_a, mix.mix_ratio_b
    w_expected = fa * outdoor_air.humidity_ratio_lb + fb * return_air.humidity_ratio_lb
    h_expected = fa * outdoor_air.enthalpy_btu_lb + fb * return_air.enthalpy_btu_lb
    assert mix.mixed_point.humidity_ratio_lb == pytest.approx(w_expected, rel=1e-12)
    assert mix.mixed_point.enthalpy_btu_lb == pytest.approx(h_expected, rel=1e-9)
    assert return_air.dry_bulb_f < mix.mixed_point.dry_bulb_f < outdoor_air.dry_bulb_f


def test_mixing_independent_of_order(outdoor_air, return_air, sea_level):
    ab = calculate_mixing(AirStream(outdoor_air, 2000), AirStream(return_air, 8000), sea_level)
    ba = calculate_mixing(AirStream(return_air, 8000), AirStream(outdoor_air, 2000), sea_level)
    assert ab.mix_ratio_a == pytest.approx(ba.mix_ratio_b)
    assert ab.mix_ratio_b == pytest.approx(ba.mix_ratio_a)
    assert ab.mixed_point.dry_bulb_f == pytest.approx(ba.mixed_point.dry_bulb_f, rel=1e-9)
    assert ab.mixed_point.humidity_ratio_lb == pytest.approx(
        ba.mixed_point.humidity_ratio_lb, rel=1e-9)


def test_mixed_point_fully_resolved(outdoor_air, return_air, sea_level):
    mix = calculate_mixing(AirStream(outdoor_air, 2000), AirStream(return_air, 8000), sea_level)
    p = mix.mixed_point
    resolved = state_from_db_w(p.dry_bulb_f, p.humidity_ratio_grains, sea_level)
    assert p == resolved


def test_mixing_zero_flow(outdoor_air, return_air, sea_level):
    with pytest.raises(ZeroFlowError, match="Total CFM cannot be zero"):
        calculate_mixing(AirStream(outdoor_air, 0), AirStream(return_air, 0), sea_level)


def test_zero_flow_error_hierarchy():
    assert issubclass(ZeroFlowError, PsychroError)
    assert issubclass(ZeroFlowError, ValueError)


# ── Process loads ─────────────────────────────────────────────────────────────

def test_cooling_coil_loads(coil_entering, coil_leaving):
    r = calculate_process(coil_entering, coil_leaving, 10000)
    assert r.sensible_load_btuh + r.latent_load_btuh == r.total_load_btuh
    assert r.total_load_btuh < 0
    assert r.sensible_load_btuh < 0
    assert r.latent_load_btuh < 0
    assert r.moisture_lb_hr < 0
    assert 0.5 < r.sensible_heat_ratio < 1.0
    assert r.total_load_tons == pytest.approx(r.total_load_btuh / 12000)


def test_process_mass_flow(coil_entering, coil_leaving):
    r = calculate_process(coil_entering, coil_leaving, 10000)
    avg_v = (coil_entering.specific_volume_ft3_lb + coil_leaving.specific_volume_ft3_lb) / 2
    assert r.mass_flow_lb_hr == pytest.approx(10000 * 60 / avg_v)
    assert r.total_load_btuh == pytest.approx(
        r.mass_flow_lb_hr * (coil_leaving.enthalpy_btu_lb - coil_entering.enthalpy_btu_lb))


def test_sensible_heating(coil_leaving, sea_level):
    heated = state_from_db_w(90.0, coil_leaving.humidity_ratio_grains, sea_level)
    r = calculate_process(coil_leaving, heated, 5000)
    assert r.sensible_load_btuh + r.latent_load_btuh == r.total_load_btuh
    assert r.total_load_btuh > 0
    assert r.moisture_lb_hr == 0.0
    assert r.sensible_heat_ratio == pytest.approx(1.0, abs=1e-6)
    assert r.latent_load_btuh == pytest.approx(0.0, abs=1e-6 * r.total_load_btuh)


def test_no_change_process(return_air):
    r = calculate_process(return_air, return_air, 1000)
    assert r.total_load_btuh == 0.0
    assert r.sensible_load_btuh == 0.0
    assert r.latent_load_btuh == 0.0
    assert r.sensible_heat_ratio == 1.0


def test_sensible_approximates_standard_air_shortcut(coil_leaving, sea_level):
    heated = state_from_db_w(75.0, coil_leaving.humidity_ratio_grains, sea_level)
    r = calculate_process(coil_leaving, heated, 1000)
    assert r.sensible_load_btuh == pytest.approx(quick_sensible_heat(1000, 20.0), rel=0.05)


def test_ventilation_load(outdoor_air, return_air, sea_level):
    mix = calculate_mixing(AirStream(outdoor_air, 2000), AirStream(return_air, 8000), sea_level)
    vent = calculate_ventilation_load(return_air, mix.mixed_point, mix.total_cfm)
    assert vent == calculate_process(return_air, mix.mixed_point, 10000)
    assert vent.total_load_btuh > 0


# ── Process chains ────────────────────────────────────────────────────────────

def test_compute_processes_skips_zero_flow(coil_entering, coil_leaving, return_air):
    steps = compute_processes([
        ("Coil", coil_entering, coil_leaving, 10000),
        ("Idle", coil_leaving, return_air, 0),
    ])
    assert [s.name for s in steps] == ["Coil", "Idle"]
    assert steps[0].result == calculate_process(coil_entering, coil_leaving, 10000)
    assert steps[1].result is None


def test_process_totals(coil_entering, coil_leaving, return_air):
    steps = compute_processes([
        ("Coil", coil_entering, coil_leaving, 10000),
        ("Space", coil_leaving, return_air, 10000),
        ("Idle", coil_leaving, return_air, 0),
    ])
    totals = process_totals(steps)
    coil, space = steps[0].result, steps[1].result
    assert totals.total_load_btuh == pytest.approx(coil.total_load_btuh + space.total_load_btuh)
    assert totals.sensible_load_btuh == pytest.approx(
        coil.sensible_load_btuh + space.sensible_load_btuh)
    assert totals.total_load_tons == pytest.approx(totals.total_load_btuh / 12000)


def test_process_totals_empty():
    totals = process_totals([])
    assert totals.total_load_btuh == 0
    assert totals.moisture_lb_hr == 0


def test_process_to_dict(coil_entering, coil_leaving):
    computed, idle = compute_processes([
        ("Coil", coil_entering, coil_leaving, 10000),
        ("Idle", coil_entering, coil_leaving, 0),
    ])
    row = process_to_dict(computed)
    assert row["name"] == "Coil"
    assert row["tdb_in"] == 80.0
    assert row["tdb_out"] == 55.0
    assert row["Q_total"] == computed.result.total_load_btuh
    assert row["SHR"] == computed.result.sensible_heat_ratio
    assert process_to_dict(idle)["Q_total"] is None


# ── Standard-air shortcuts ────────────────────────────────────────────────────

def test_quick_formulas():
    assert quick_sensible_heat(1000, 20) == pytest.approx(21600)
    assert quick_total_heat(1000, 10) == pytest.approx(45000)
    assert quick_latent_heat(1000, 10) == pytest.approx(6800)
