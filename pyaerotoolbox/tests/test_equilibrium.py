#!/usr/bin/env python3
"""
Validation tests for the gas / aerosol equilibrium driver.
Run with: python3 -m pytest pyaerotoolbox/tests/ -v
"""

import sys
import os
import tempfile
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))
import pyaerotoolbox.equilibrium as eq
import pyaerotoolbox.equilibrium.equilibrium as eq_impl
import pyaerotoolbox.water as water
from pyaerotoolbox.classes import eq_regime, eq_outcome
from pyaerotoolbox.constants import (FLOOR, MW_SO4, MW_NO3, MW_HNO3, MW_NH3, MW_NH4, MAX_ITER)

TSO4 = 0.1  # umol/m3
SO4 = TSO4 * MW_SO4  # ug/m3

def total_ammonia(gnh3, anh4):
    return gnh3 / MW_NH3 + anh4 / MW_NH4

def assert_floored(res):
    for key, value in res.as_dict().items():
        assert np.isfinite(value), f"{key} = {value}"
        assert value >= FLOOR, f"{key} = {value} below floor"

def test_constants_reference_temperature():
    """At 298 K only the unit conversions remain"""
    k = eq.equilibrium_constants(298.0)
    assert abs(k.k2sa - 1.015e-2) / 1.015e-2 < 1e-12
    assert abs(k.kw - 1.010e-14) / 1.010e-14 < 1e-12
    assert abs(k.kna - 2.511e6 * 0.082e-9 * 298.0) / k.kna < 1e-12
    assert abs(k.khat - k.kph * k.k1a / k.kw) / k.khat < 1e-12
    assert abs(k.kan - k.kna * k.khat) / k.kan < 1e-12

def test_nh4no3_dissociation_rises_with_temperature():
    assert eq.equilibrium_constants(310.0).k3 > eq.equilibrium_constants(270.0).k3

def test_constants_bad_temperature():
    try:
        eq.equilibrium_constants(0.0)
        assert False, "Should have raised ValueError"
    except ValueError:
        pass

def test_dry_air_passthrough():
    """Below 1% RH only the water is set, everything else passes through"""
    res = eq.solve(so4=10.0, gno3=2.0, ano3=1.0, gnh3=3.0, anh4=1.5, rh=0.005, temp=290.0)
    assert res.regime == eq_regime.DRY_AIR
    assert res.outcome == eq_outcome.EARLY_EXIT
    assert res.ah2o == FLOOR
    assert res.aso4 == 10.0
    assert res.gno3 == 2.0
    assert res.ano3 == 1.0
    assert res.gnh3 == 3.0
    assert res.anh4 == 1.5
    assert res.iterations == 0

def test_negative_input_raises():
    for bad in [dict(so4=-1.0), dict(gno3=-0.1), dict(anh4=-1e-3)]:
        args = dict(so4=1.0, gno3=1.0, ano3=0.0, gnh3=1.0, anh4=0.0, rh=0.5, temp=290.0)
        args.update(bad)
        try:
            eq.solve(**args)
            assert False, f"Should have raised ValueError for {bad}"
        except ValueError:
            pass

def test_trace_loading():
    """Negligible sulfate and nitrate leave nothing in the aerosol"""
    res = eq.solve(so4=1e-8, gno3=1e-8, ano3=0.0, gnh3=0.5, anh4=0.2, rh=0.7, temp=290.0)
    assert res.regime == eq_regime.TRACE
    for value in [res.aso4, res.ahso4, res.ano3, res.anh4, res.ah2o]:
        assert value == FLOOR
    assert abs(total_ammonia(res.gnh3, res.anh4) - total_ammonia(0.5, 0.2)) < 1e-12
    assert abs(res.gno3 - 1e-8) < 1e-20

def test_rich_wet_no_nitrate():
    """Ratio 2.5 at 60% RH with no nitrate converges"""
    gnh3 = 2.5 * TSO4 * MW_NH3
    res = eq.solve(so4=SO4, gno3=0.0, ano3=0.0, gnh3=gnh3, anh4=0.0, rh=0.6, temp=298.0)
    assert res.regime == eq_regime.RICH_WET
    assert res.outcome == eq_outcome.CONVERGED
    assert 1 <= res.iterations <= MAX_ITER
    assert_floored(res)
    assert res.ah2o > 1.0
    assert res.ano3 == FLOOR
    assert abs(res.aso4 - SO4) / SO4 < 1e-12
    assert abs(res.anh4 - 2.0 * TSO4 * MW_NH4) / res.anh4 < 1e-9
    assert abs(total_ammonia(res.gnh3, res.anh4) - 2.5 * TSO4) < 1e-12

def test_rich_dry_forms_ammonium_nitrate():
    """Crystallized aerosol with excess ammonia and cold air takes up nitrate"""
    gno3 = 0.2 * MW_HNO3
    gnh3 = 0.5 * MW_NH3
    res = eq.solve(so4=SO4, gno3=gno3, ano3=0.0, gnh3=gnh3, anh4=0.0, rh=0.3, temp=270.0)
    assert res.regime == eq_regime.RICH_DRY
    assert res.outcome == eq_outcome.CONVERGED
    assert res.ah2o == FLOOR
    assert res.ano3 > 0.1 * MW_NO3
    assert res.ano3 <= 0.2 * MW_NO3
    assert abs((res.ano3 + res.gno3) - gno3) < 1e-9
    assert abs(total_ammonia(res.gnh3, res.anh4) - 0.5) < 1e-12

def test_rich_dry_warm_air_keeps_nitrate_gaseous():
    """Ammonium nitrate does not form when the dissociation constant exceeds the gas product"""
    res = eq.solve(so4=SO4, gno3=0.01 * MW_HNO3, ano3=0.0, gnh3=0.25 * MW_NH3, anh4=0.0, rh=0.3, temp=310.0)
    assert res.regime == eq_regime.RICH_DRY
    assert res.ano3 == FLOOR
    assert abs(res.gno3 - 0.01 * MW_HNO3) < 1e-12

def test_rich_conservation():
    """Nitrate mass and ammonia moles are conserved across humidities"""
    gno3, ano3 = 0.1 * MW_HNO3, 0.1 * MW_NO3
    gnh3, anh4 = 0.3 * MW_NH3, 0.2 * MW_NH4
    for rh in [0.3, 0.45, 0.6, 0.75, 0.9, 0.98]:
        res = eq.solve(so4=SO4, gno3=gno3, ano3=ano3, gnh3=gnh3, anh4=anh4, rh=rh, temp=290.0)
        assert res.regime in (eq_regime.RICH_DRY, eq_regime.RICH_WET)
        assert_floored(res)
        assert abs((res.ano3 + res.gno3) - (gno3 + ano3)) < 1e-9, f"Nitrate at RH={rh}"
        assert abs(total_ammonia(res.gnh3, res.anh4) - 0.5) < 1e-12, f"Ammonia at RH={rh}"
        assert res.ano3 <= 0.2 * MW_NO3 * (1 + 1e-12)

def test_poor_early_exit():
    """Ratio 0.3 returns immediately with sulfate as bisulfate"""
    anh4 = 0.3 * TSO4 * MW_NH4
    res = eq.solve(so4=SO4, gno3=1.0, ano3=0.5, gnh3=0.0, anh4=anh4, rh=0.7, temp=290.0)
    assert res.regime == eq_regime.POOR
    assert res.outcome == eq_outcome.EARLY_EXIT
    assert res.iterations == 0
    assert res.aso4 == FLOOR
    assert abs(res.ahso4 - SO4) / SO4 < 1e-12
    assert abs(res.gno3 - 1.0) < 1e-12
    assert res.ano3 == 0.5
    assert res.gnh3 == FLOOR
    assert abs(res.anh4 - anh4) / anh4 < 1e-12

def test_poor_crystallized_early_exit():
    """No liquid water below the crystallization humidity"""
    res = eq.solve(so4=SO4, gno3=1.0, ano3=0.0, gnh3=0.0, anh4=1.8 * TSO4 * MW_NH4, rh=0.3, temp=290.0)
    assert res.regime == eq_regime.POOR
    assert res.outcome == eq_outcome.EARLY_EXIT
    assert res.ah2o == FLOOR

def test_poor_iterates():
    """Ratio 1.5 at 80% RH solves for hydrogen ion and dissolved nitrate"""
    gno3 = 0.05 * MW_HNO3
    anh4 = 0.15 * MW_NH4
    res = eq.solve(so4=SO4, gno3=gno3, ano3=0.0, gnh3=0.0, anh4=anh4, rh=0.8, temp=290.0)
    assert res.regime == eq_regime.POOR
    assert res.outcome in (eq_outcome.CONVERGED, eq_outcome.ITERATION_LIMIT)
    assert res.iterations >= 1
    assert_floored(res)
    assert res.ah2o > 1.0
    assert res.gnh3 == FLOOR
    assert abs(res.anh4 - anh4) / anh4 < 1e-12
    assert abs((res.ano3 + res.gno3) - gno3) < 1e-9

def test_ratio_two_is_poor():
    """Exactly two ammonium per sulfate is not ammonia rich"""
    res = eq.solve(so4=MW_SO4, gno3=0.0, ano3=0.0, gnh3=2.0 * MW_NH3, anh4=0.0, rh=0.6, temp=298.0)
    assert res.regime == eq_regime.POOR

def test_as_dict_keys():
    res = eq.solve(so4=SO4, gno3=0.0, ano3=0.0, gnh3=2.5 * TSO4 * MW_NH3, anh4=0.0, rh=0.6, temp=298.0)
    assert set(res.as_dict()) == {'ASO4', 'AHSO4', 'ANO3', 'ANH4', 'AH2O', 'GNH3', 'GNO3'}

def test_equilibrium_table():
    """Scalars are broadcast against lists, one row per condition"""
    gnh3 = [2.5 * TSO4 * MW_NH3, 0.0, 0.0]
    anh4 = [0.0, 0.3 * TSO4 * MW_NH4, 0.0]
    rh = [0.6, 0.7, 0.005]
    df = eq.equilibrium_table(so4=SO4, gno3=1.0, ano3=0.0, gnh3=gnh3, anh4=anh4, rh=rh, temp=298.0)
    assert len(df) == 3
    assert list(df["Regime"]) == ['RICH_WET', 'POOR', 'DRY_AIR']
    for i in range(3):
        res = eq.solve(SO4, 1.0, 0.0, gnh3[i], anh4[i], rh[i], 298.0)
        assert abs(df["ANH4 (ug/m3)"].iloc[i] - res.anh4) <= 1e-12 * max(1.0, res.anh4)
        assert abs(df["GNO3 (ug/m3)"].iloc[i] - res.gno3) <= 1e-12 * max(1.0, res.gno3)

def test_equilibrium_table_mismatched_lengths():
    try:
        eq.equilibrium_table(so4=[1.0, 2.0], gno3=[1.0, 2.0, 3.0], ano3=0.0, gnh3=1.0, anh4=0.0,
                             rh=0.5, temp=290.0)
        assert False, "Should have raised ValueError"
    except ValueError:
        pass

def test_equilibrium_table_export():
    cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmp:
        os.chdir(tmp)
        try:
            eq.equilibrium_table(so4=SO4, gno3=1.0, ano3=0.0, gnh3=[0.5, 5.0], anh4=0.0, rh=0.6,
                                 temp=290.0, export=True)
            assert os.path.exists('equilibrium.xlsx')
            assert os.path.exists('EQUILIBRIUM.TXT')
            with open('EQUILIBRIUM.TXT') as f:
                assert 'Regime' in f.read()
        finally:
            os.chdir(cwd)


# =============================================================================
# Fallback paths
# =============================================================================
class cycling_activity:
    """Activity model stand-in returning a repeating sequence of uniform coefficients"""
    def __init__(self, values):
        self.values = values
        self.calls = 0

    def __call__(self, cat, an):
        g = self.values[self.calls % len(self.values)]
        self.calls += 1
        return np.full((2, 3), g), 0.0, 1.0

def solve_with_activity(model, *args):
    saved = eq_impl.activity_coefficients
    eq_impl.activity_coefficients = model
    try:
        return eq.solve(*args)
    finally:
        eq_impl.activity_coefficients = saved

# Ammonia rich, 60% RH, 0.01 umol/m3 sulfate with half the nitrate already in the aerosol
RICH_SO4 = 0.01 * MW_SO4
RICH_GNO3, RICH_ANO3 = 0.005 * MW_HNO3, 0.005 * MW_NO3
RICH_GNH3 = 0.04 * MW_NH3

def assert_nitrate_retained(res, so4, tso4, gno3, ano3):
    assert res.ano3 == ano3
    assert res.gno3 == gno3
    assert abs(res.aso4 - so4) / so4 < 1e-12
    assert res.ahso4 == FLOOR
    assert abs(res.anh4 - 2.0 * tso4 * MW_NH4) / res.anh4 < 1e-9

def test_rich_wet_iteration_limit():
    """Activity coefficients that never settle exhaust the iterations; initial nitrate retained"""
    res = solve_with_activity(cycling_activity([10.0, 20.0]), RICH_SO4, RICH_GNO3, RICH_ANO3, RICH_GNH3,
                              0.0, 0.6, 298.0)
    assert res.regime == eq_regime.RICH_WET
    assert res.outcome == eq_outcome.ITERATION_LIMIT
    assert res.iterations == MAX_ITER
    assert_nitrate_retained(res, RICH_SO4, 0.01, RICH_GNO3, RICH_ANO3)
    tso4 = RICH_SO4 / MW_SO4
    expected = water.water_content(60, tso4, 2.0 * tso4, RICH_ANO3 / MW_NO3)
    assert abs(res.ah2o - expected) / expected < 1e-12
    assert abs(total_ammonia(res.gnh3, res.anh4) - 0.04) < 1e-12

def test_rich_wet_degenerate():
    """Vanishing NH4NO3 activity coefficient stops the iteration with initial nitrate retained"""
    res = solve_with_activity(cycling_activity([0.0]), RICH_SO4, RICH_GNO3, RICH_ANO3, RICH_GNH3,
                              0.0, 0.6, 298.0)
    assert res.regime == eq_regime.RICH_WET
    assert res.outcome == eq_outcome.DEGENERATE
    assert res.iterations == 1
    assert_nitrate_retained(res, RICH_SO4, 0.01, RICH_GNO3, RICH_ANO3)
    assert res.ah2o > FLOOR
    assert abs(total_ammonia(res.gnh3, res.anh4) - 0.04) < 1e-12

def test_rich_wet_converges_without_fallback():
    """Same parcel with the real activity model converges"""
    res = eq.solve(RICH_SO4, RICH_GNO3, RICH_ANO3, RICH_GNH3, 0.0, 0.6, 298.0)
    assert res.regime == eq_regime.RICH_WET
    assert res.outcome == eq_outcome.CONVERGED
    assert res.iterations < MAX_ITER

def test_poor_high_molality_early_exit():
    """Total sulfate molality above 9 skips the nitrate solution"""
    so4, anh4 = MW_SO4, 1.9 * MW_NH4
    res = eq.solve(so4=so4, gno3=1.0, ano3=0.5, gnh3=0.0, anh4=anh4, rh=0.6, temp=290.0)
    assert res.regime == eq_regime.POOR
    assert res.outcome == eq_outcome.EARLY_EXIT
    assert res.iterations == 0
    assert res.aso4 == FLOOR
    assert abs(res.ahso4 - so4) / so4 < 1e-12
    assert res.ano3 == 0.5
    assert abs(res.gno3 - 1.0) < 1e-12
    # Water leaves more than 9 mol of sulfate per kg
    assert 1.0 / (1e-3 * res.ah2o) > 9.0

def test_poor_iteration_limit():
    """Non-settling coefficients in the ammonia poor loop retain the initial nitrate"""
    gno3, ano3 = 0.04 * MW_HNO3, 0.01 * MW_NO3
    anh4 = 0.15 * MW_NH4
    res = solve_with_activity(cycling_activity([2.0, 3.0]), SO4, gno3, ano3, 0.0, anh4, 0.8, 290.0)
    assert res.regime == eq_regime.POOR
    assert res.outcome == eq_outcome.ITERATION_LIMIT
    assert res.iterations == MAX_ITER
    assert abs(res.aso4 - SO4) / SO4 < 1e-12
    assert res.ahso4 == FLOOR
    assert res.ano3 == ano3
    assert res.gno3 == gno3
    assert res.gnh3 == FLOOR
    assert abs(res.anh4 - anh4) / anh4 < 1e-12
    expected = water.water_content(80, SO4 / MW_SO4, anh4 / MW_NH4, ano3 / MW_NO3 + gno3 / MW_HNO3)
    assert abs(res.ah2o - expected) / expected < 1e-12

def test_poor_no_positive_hydrogen_root():
    """Pure ammonium sulfate at 99% RH and 250 K has no positive H+ root; returns the bisulfate baseline"""
    so4 = 10.0 * MW_SO4
    res = eq.solve(so4, 0.0, 0.0, 20.0 * MW_NH3, 0.0, 0.99, 250.0)
    assert res.regime == eq_regime.POOR
    assert res.outcome == eq_outcome.DEGENERATE
    assert res.iterations == 1
    assert_floored(res)
    assert res.aso4 == FLOOR
    assert abs(res.ahso4 - so4) / so4 < 1e-12
    assert abs(total_ammonia(res.gnh3, res.anh4) - 20.0) < 1e-9


if __name__ == '__main__':
    print("=" * 70)
    print("EQUILIBRIUM MODULE VALIDATION TESTS")
    print("=" * 70)

    tests = [v for k, v in globals().items() if k.startswith('test_')]
    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
            print(f"  PASS: {test.__name__}")
        except Exception as e:
            failed += 1
            print(f"  FAIL: {test.__name__}: {e}")

    print(f"\n{'=' * 70}")
    print(f"Results: {passed} passed, {failed} failed out of {passed + failed}")
    print("=" * 70)
    sys.exit(1 if failed > 0 else 0)
