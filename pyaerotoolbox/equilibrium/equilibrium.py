#!/usr/bin/python3
# -*- coding: utf-8 -*-

"""
    pyAeroToolbox - A collection of Aerosol Thermodynamic Utilities
              Copyright (C) 2026, pyAeroToolbox Developers

    This program is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    This program is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
    GNU General Public License for more details.

    The GNU General Public License can be found in the LICENSE directory,
    and at  <https://www.gnu.org/licenses/>.
"""

import math
import logging
from dataclasses import dataclass, replace
from typing import Union, List

import numpy as np
import pandas as pd
from tabulate import tabulate

from pyaerotoolbox.classes import eq_regime, eq_outcome
from pyaerotoolbox.shared_fns import broadcast_inputs
from pyaerotoolbox.validate import validate_concentrations
from pyaerotoolbox.cubic import solve_cubic, NEG_ROOT_SENTINEL
from pyaerotoolbox.activity import activity_coefficients
from pyaerotoolbox.water import water_content, humidity_index
from pyaerotoolbox.constants import (MW_NO3, MW_HNO3, MW_SO4, MW_NH3, MW_NH4, FLOOR, MIN_SO4, MIN_NO3,
                                     MIN_HSO4_MOLALITY, RH_MIN, RATIO_RICH, RATIO_POOR_SKIP, WFRAC_DRY,
                                     MAX_SO4_MOLALITY, MAX_ITER, TOL_RICH, TOL_POOR, GAMMA_AN_INIT)

logger = logging.getLogger(__name__)

# =============================================================================
# Equilibrium constants
# =============================================================================
# Kim et al. (1993): K = K0 * exp[a * (T0/T - 1) + b * (1 + ln(T0/T) - T0/T)]
#
#   HSO4-(aq)         = H+(aq)   + SO4--(aq)  ; K2SA
#   NH3(g)            = NH3(aq)               ; KPH
#   NH3(aq) + H2O(aq) = NH4+(aq) + OH-(aq)    ; K1A
#   HNO3(g)           = H+(aq)   + NO3-(aq)   ; KNA
#   H2O(aq)           = H+(aq)   + OH-(aq)    ; KW
#
# KNA and KPH are converted from atm to micromoles/m3.
T_REF = 298.0  # K
R_ATM = 0.082  # L.atm/(mol.K)
K_COEFFS = {  # K0, a, b
    'KNA': (2.511e6, 29.17, 16.83),
    'K1A': (1.805e-5, -1.50, 26.92),
    'K2SA': (1.015e-2, 8.85, 25.14),
    'KW': (1.010e-14, -22.52, 26.92),
    'KPH': (57.639, 13.79, -5.39),
}
# NH3(g) + HNO3(g) = NH4NO3(s), Mozurkewich (1993): ln K3 = A - B/T - C ln T
K3_COEFFS = (118.87, 24084.0, 6.025)


@dataclass(frozen=True)
class EquilibriumConstants:
    """Temperature corrected equilibrium constants."""
    kna: float   # HNO3 dissociation (umol/m3 basis)
    k1a: float   # Ammonia to ammonium
    k2sa: float  # Bisulfate to sulfate
    kw: float    # Water dissociation
    kph: float   # Henry's law constant for ammonia (umol/m3 basis)
    khat: float  # KPH * K1A / KW
    kan: float   # KNA * KHAT
    k3: float    # NH4NO3 dissociation, (umol/m3)**2


def equilibrium_constants(temp: float) -> EquilibriumConstants:
    """ Returns EquilibriumConstants at temperature temp (deg K) """
    if temp <= 0:
        raise ValueError(f"Temperature must be positive Kelvin, got {temp}")
    convt = 1.0 / (R_ATM * temp)
    t6 = R_ATM * 1.0e-9 * temp
    t1 = T_REF / temp
    t3 = t1 - 1.0
    t4 = 1.0 + math.log(t1) - t1

    def kim(name):
        k0, a, b = K_COEFFS[name]
        return k0 * math.exp(a * t3 + b * t4)

    kna = kim('KNA') * t6
    k1a = kim('K1A')
    k2sa = kim('K2SA')
    kw = kim('KW')
    kph = kim('KPH') * t6
    khat = kph * k1a / kw

    a, b, c = K3_COEFFS
    k3 = math.exp(a - b / temp - c * math.log(temp)) * convt * convt
    return EquilibriumConstants(kna=kna, k1a=k1a, k2sa=k2sa, kw=kw, kph=kph,
                                khat=khat, kan=kna * khat, k3=k3)


# =============================================================================
# Results
# =============================================================================
@dataclass
class EquilibriumResult:
    """Gas/aerosol partitioning of one air parcel. Concentrations in ug/m3."""
    aso4: float   # Aerosol sulfate
    ahso4: float  # Aerosol bisulfate
    ano3: float   # Aerosol nitrate
    anh4: float   # Aerosol ammonium
    ah2o: float   # Aerosol liquid water
    gnh3: float   # Gas phase ammonia
    gno3: float   # Gas phase nitric acid
    regime: eq_regime
    outcome: eq_outcome
    iterations: int = 0

    _SPECIES = ('aso4', 'ahso4', 'ano3', 'anh4', 'ah2o', 'gnh3', 'gno3')

    def floored(self) -> 'EquilibriumResult':
        return replace(self, **{k: max(FLOOR, getattr(self, k)) for k in self._SPECIES})

    def as_dict(self) -> dict:
        return {k.upper(): getattr(self, k) for k in self._SPECIES}


@dataclass(frozen=True)
class _Parcel:
    # Totals for one solve, umol/m3 unless noted
    tso4: float
    tno3: float
    tnh4: float
    tmass_hno3: float  # Total nitrate, ug/m3 as supplied (HNO3 + NO3)
    gno3_in: float     # ug/m3
    ano3_in: float     # ug/m3
    irh: int
    k: EquilibriumConstants

    @property
    def ratio(self) -> float:
        return self.tnh4 / self.tso4


# =============================================================================
# Ammonia rich case: all sulfate is ammonium sulfate
# =============================================================================
def _retain_nitrate(p: _Parcel, ah2o: float, regime: eq_regime, outcome: eq_outcome,
                    iterations: int) -> EquilibriumResult:
    # Neutralized sulfate with the initial nitrate and nitric acid left untouched
    ynh4 = 2.0 * p.tso4
    return EquilibriumResult(
        aso4=p.tso4 * MW_SO4, ahso4=FLOOR, ano3=p.ano3_in, anh4=ynh4 * MW_NH4,
        ah2o=ah2o, gnh3=MW_NH3 * max(FLOOR, p.tnh4 - ynh4), gno3=p.gno3_in,
        regime=regime, outcome=outcome, iterations=iterations)


def _rich_dry(p: _Parcel, ah2o: float) -> EquilibriumResult:
    # "Dry" ammonium sulfate and ammonium nitrate; solve directly for the nitrate
    twoso4 = 2.0 * p.tso4
    fnh3 = p.tnh4 - twoso4  # Free ammonia
    cc = p.tno3 * fnh3 - p.k.k3
    xno3 = 0.0
    if cc > 0.0:
        bb = -(p.tno3 + fnh3)
        disc = bb * bb - 4.0 * cc
        if disc < 0.0:
            logger.debug("Complex NH4NO3 roots (disc = %g), retaining initial nitrate", disc)
            return _retain_nitrate(p, ah2o, eq_regime.RICH_DRY, eq_outcome.DEGENERATE, 0)
        # bb < 0 and cc > 0 here, so both roots are positive
        xxq = -0.5 * (bb + math.copysign(1.0, bb) * math.sqrt(disc))
        xno3 = min(xxq, cc / xxq)

    ynh4 = twoso4 + xno3
    ano3 = xno3 * MW_NO3
    return EquilibriumResult(
        aso4=p.tso4 * MW_SO4, ahso4=FLOOR, ano3=ano3, anh4=ynh4 * MW_NH4, ah2o=ah2o,
        gnh3=MW_NH3 * max(FLOOR, p.tnh4 - ynh4), gno3=max(FLOOR, p.tmass_hno3 - ano3),
        regime=eq_regime.RICH_DRY, outcome=eq_outcome.CONVERGED)


def _rich_wet(p: _Parcel, wh2o: float) -> EquilibriumResult:
    # Liquid phase of completely neutralized (supersaturated) sulfate and some nitrate
    twoso4 = 2.0 * p.tso4
    ynh4 = twoso4
    gamaan = GAMMA_AN_INIT
    gamold = 1.0

    for nitr in range(1, MAX_ITER + 1):
        kw2 = p.k.kan * wh2o * wh2o / (gamaan * gamaan)
        aa = 1.0 - kw2
        bb = twoso4 + kw2 * (p.tno3 + p.tnh4 - twoso4)
        cc = -kw2 * p.tno3 * (p.tnh4 - twoso4)

        # Quadratic for nitrate in solution (umol/m3)
        disc = bb * bb - 4.0 * aa * cc
        if disc < 0.0:
            logger.debug("Complex nitrate roots at iteration %d, retaining initial nitrate", nitr)
            return _retain_nitrate(p, 1000.0 * wh2o, eq_regime.RICH_WET, eq_outcome.DEGENERATE, nitr)

        if aa != 0.0:
            xxq = -0.5 * (bb + math.copysign(1.0, bb) * math.sqrt(disc))
            rr1 = xxq / aa
            rr2 = cc / xxq
            if rr1 * rr2 < 0.0:  # Minimum positive root
                xno3 = max(rr1, rr2)
            else:
                xno3 = min(rr1, rr2)
        else:
            xno3 = -cc / bb
        xno3 = min(max(xno3, 0.0), p.tno3)

        # Units of wh2o are 1e-6 kg water per m3 of air, so molalities follow directly
        ah2o = water_content(p.irh, p.tso4, ynh4, xno3)
        wh2o = 1.0e-3 * ah2o
        if wh2o <= 0.0:
            logger.debug("No liquid water at iteration %d, retaining initial nitrate", nitr)
            return _retain_nitrate(p, ah2o, eq_regime.RICH_WET, eq_outcome.DEGENERATE, nitr)

        # Ionic balance determines the ammonium in solution
        man = xno3 / wh2o
        mas = p.tso4 / wh2o
        mnh4 = 2.0 * mas + man
        ynh4 = mnh4 * wh2o

        gams, _, _ = activity_coefficients([0.0, mnh4], [mas, man, 0.0])
        gamaan = gams[1, 1]
        if gamaan <= 0.0:
            logger.debug("Vanishing NH4NO3 activity coefficient at iteration %d", nitr)
            return _retain_nitrate(p, ah2o, eq_regime.RICH_WET, eq_outcome.DEGENERATE, nitr)

        eror = abs(gamold - gamaan) / gamold
        gamold = gamaan
        if eror <= TOL_RICH:
            ano3 = xno3 * MW_NO3
            return EquilibriumResult(
                aso4=p.tso4 * MW_SO4, ahso4=0.0, ano3=ano3, anh4=ynh4 * MW_NH4,
                ah2o=1000.0 * wh2o, gnh3=MW_NH3 * max(FLOOR, p.tnh4 - ynh4),
                gno3=max(FLOOR, p.tmass_hno3 - ano3),
                regime=eq_regime.RICH_WET, outcome=eq_outcome.CONVERGED, iterations=nitr)

    logger.warning("Ammonia rich iteration did not converge in %d iterations, retaining initial nitrate",
                   MAX_ITER)
    ah2o = water_content(p.irh, p.tso4, twoso4, p.ano3_in / MW_NO3)
    return _retain_nitrate(p, ah2o, eq_regime.RICH_WET, eq_outcome.ITERATION_LIMIT, MAX_ITER)


def _rich(p: _Parcel) -> EquilibriumResult:
    # Start with an ammonium sulfate solution and the provisional nitrate guess
    ynh4 = 2.0 * p.tso4
    ah2o = water_content(p.irh, p.tso4, ynh4, p.tno3)
    aso4 = p.tso4 * MW_SO4
    anh4 = ynh4 * MW_NH4
    wfrac = ah2o / (aso4 + anh4 + ah2o)
    if wfrac < WFRAC_DRY:
        return _rich_dry(p, ah2o)
    return _rich_wet(p, 1.0e-3 * ah2o)


# =============================================================================
# Ammonia poor case: bisulfate is the preferred form of sulfate
# =============================================================================
def _poor(p: _Parcel) -> EquilibriumResult:
    ah2o = water_content(p.irh, p.tso4, p.tnh4, p.tno3)
    wh2o = 1.0e-3 * ah2o
    anh4 = p.tnh4 * MW_NH4
    baseline = EquilibriumResult(
        aso4=FLOOR, ahso4=p.tso4 * MW_SO4, ano3=p.ano3_in, anh4=anh4, ah2o=ah2o,
        gnh3=FLOOR, gno3=p.tmass_hno3 - p.ano3_in,
        regime=eq_regime.POOR, outcome=eq_outcome.EARLY_EXIT)

    # Further iteration would return the same composition
    if p.ratio < RATIO_POOR_SKIP:
        return baseline
    if wh2o == 0.0:
        return baseline

    # Total sulfate molality (SO4-- + HSO4-); the model parameters break down above the limit
    zso4 = p.tso4 / wh2o
    if zso4 > MAX_SO4_MOLALITY:
        logger.debug("Total sulfate molality %.2f above %.1f, nitrate not solved", zso4, MAX_SO4_MOLALITY)
        return baseline

    # All ammonia is aerosol ammonium; start from unit activity coefficients
    mnh4 = p.tnh4 / wh2o
    ynh4 = p.tnh4
    gamana = gamas1 = gamas2 = 1.0
    gamaab = 1.0
    gamold = 1.0

    for nitr in range(1, MAX_ITER + 1):
        rk2sa = p.k.k2sa * gamas2 * gamas2 / (gamas1 * gamas1 * gamas1)
        rkna = p.k.kna / (gamana * gamana)
        rknwet = rkna * wh2o
        t21 = zso4 - mnh4

        # Cubic for hydrogen ion molality, then sulfate and nitrate
        a2 = rk2sa + rknwet - t21
        a1 = rk2sa * rknwet - t21 * (rk2sa + rknwet) - rk2sa * zso4 - rkna * p.tno3
        a0 = -(t21 * rk2sa * rknwet + rk2sa * rknwet * zso4 + rk2sa * rkna * p.tno3)
        _, crutes = solve_cubic(a2, a1, a0)
        hplus = crutes[0]
        if hplus <= 0.0 or hplus >= NEG_ROOT_SENTINEL:
            logger.debug("No positive hydrogen ion root at iteration %d (H+ = %g)", nitr, hplus)
            return replace(baseline, outcome=eq_outcome.DEGENERATE, iterations=nitr)

        mso4 = rk2sa * zso4 / (hplus + rk2sa)
        mhso4 = max(MIN_HSO4_MOLALITY, zso4 - mso4)
        mna = rkna * p.tno3 / (hplus + rknwet)
        mna = min(max(0.0, mna), p.tno3 / wh2o)

        xno3 = mna * wh2o
        ano3 = xno3 * MW_NO3
        gno3 = max(FLOOR, p.tmass_hno3 - ano3)
        aso4 = mso4 * wh2o * MW_SO4
        ahso4 = mhso4 * wh2o * MW_SO4

        ah2o = water_content(p.irh, p.tso4, ynh4, xno3)
        wh2o = 1.0e-3 * ah2o
        if wh2o <= 0.0:
            logger.debug("No liquid water at iteration %d", nitr)
            return replace(baseline, outcome=eq_outcome.DEGENERATE, iterations=nitr)

        gams, _, _ = activity_coefficients([hplus, mnh4], [mso4, mna, mhso4])
        gamana = gams[0, 1]
        gamas1 = gams[0, 0]
        gamas2 = gams[0, 2]

        # Convergence on the ammonia solubility activity term
        gamahat = gamas2 * gamas2 / (gamaab * gamaab)
        eror = abs(gamold - gamahat) / gamold
        gamold = gamahat
        if eror <= TOL_POOR:
            return EquilibriumResult(
                aso4=aso4, ahso4=ahso4, ano3=ano3, anh4=anh4, ah2o=ah2o, gnh3=FLOOR, gno3=gno3,
                regime=eq_regime.POOR, outcome=eq_outcome.CONVERGED, iterations=nitr)

    logger.warning("Ammonia poor iteration did not converge in %d iterations, retaining initial nitrate",
                   MAX_ITER)
    return EquilibriumResult(
        aso4=p.tso4 * MW_SO4, ahso4=FLOOR, ano3=p.ano3_in, anh4=anh4,
        ah2o=water_content(p.irh, p.tso4, p.tnh4, p.tno3), gnh3=FLOOR, gno3=p.gno3_in,
        regime=eq_regime.POOR, outcome=eq_outcome.ITERATION_LIMIT, iterations=MAX_ITER)


# =============================================================================
# Driver
# =============================================================================
def solve(so4: float, gno3: float, ano3: float, gnh3: float, anh4: float, rh: float,
          temp: float) -> EquilibriumResult:
    """ Sulfate / nitrate / ammonium / water aerosol composition at thermodynamic equilibrium
        Returns EquilibriumResult with aso4, ahso4, ano3, anh4, ah2o, gnh3, gno3 (ug/m3)

        so4: Total sulfate (ug/m3, as sulfate)
        gno3: Gas phase nitric acid (ug/m3)
        ano3: Aerosol nitrate (ug/m3)
        gnh3: Gas phase ammonia (ug/m3)
        anh4: Aerosol ammonium (ug/m3)
        rh: Fractional relative humidity (0 - 1)
        temp: Temperature (deg K)

        For an NH4/SO4 molar ratio above 2 all sulfate is ammonium sulfate and the
        ammonium nitrate partitioning is solved. Otherwise a cubic for H+ is solved
        and dissolved nitric acid computed if enough ammonium and water are present.
        Raises ValueError for negative concentrations.
    """
    validate_concentrations(so4=so4, gno3=gno3, ano3=ano3, gnh3=gnh3, anh4=anh4)

    # Water set to minimum and nothing else touched below 1% RH
    if rh < RH_MIN:
        return EquilibriumResult(aso4=so4, ahso4=0.0, ano3=ano3, anh4=anh4, ah2o=FLOOR,
                                 gnh3=gnh3, gno3=gno3, regime=eq_regime.DRY_AIR,
                                 outcome=eq_outcome.EARLY_EXIT)

    # Convert to umol/m3
    tso4 = max(FLOOR, so4 / MW_SO4)
    tno3 = ano3 / MW_NO3 + gno3 / MW_HNO3
    tnh4 = gnh3 / MW_NH3 + anh4 / MW_NH4

    # Very little sulfate and nitrate; nothing left in the aerosol phase
    if tso4 < MIN_SO4 and tno3 < MIN_NO3:
        return EquilibriumResult(
            aso4=FLOOR, ahso4=FLOOR, ano3=FLOOR, anh4=FLOOR, ah2o=FLOOR,
            gnh3=gnh3 + anh4 * MW_NH3 / MW_NH4, gno3=gno3 + ano3,
            regime=eq_regime.TRACE, outcome=eq_outcome.EARLY_EXIT).floored()

    p = _Parcel(tso4=tso4, tno3=tno3, tnh4=tnh4, tmass_hno3=gno3 + ano3, gno3_in=gno3,
                ano3_in=ano3, irh=humidity_index(rh), k=equilibrium_constants(temp))

    if p.ratio > RATIO_RICH:
        result = _rich(p)
    else:
        result = _poor(p)
    logger.debug("Equilibrium %s/%s after %d iterations", result.regime.name, result.outcome.name,
                 result.iterations)
    return result.floored()


def equilibrium_table(so4: Union[float, List[float]], gno3: Union[float, List[float]],
                      ano3: Union[float, List[float]], gnh3: Union[float, List[float]],
                      anh4: Union[float, List[float]], rh: Union[float, List[float]],
                      temp: Union[float, List[float]], export: bool = False) -> pd.DataFrame:
    """ Equilibrium composition for a set of conditions, one row per condition
        Any argument may be a scalar or a list / array; scalars are repeated.
        Returns Pandas DataFrame of inputs, outputs (ug/m3), regime, outcome and iterations
        export: If True, writes equilibrium.xlsx and EQUILIBRIUM.TXT to the working directory
    """
    (so4, gno3, ano3, gnh3, anh4, rh, temp), _ = broadcast_inputs(so4, gno3, ano3, gnh3, anh4, rh, temp)

    results = [solve(*args) for args in zip(so4, gno3, ano3, gnh3, anh4, rh, temp)]

    df = pd.DataFrame()
    df["RH (frac)"] = rh
    df["T (K)"] = temp
    df["SO4 (ug/m3)"] = so4
    df["HNO3 in (ug/m3)"] = gno3
    df["NO3 in (ug/m3)"] = ano3
    df["NH3 in (ug/m3)"] = gnh3
    df["NH4 in (ug/m3)"] = anh4
    for key in EquilibriumResult._SPECIES:
        df[f"{key.upper()} (ug/m3)"] = np.array([getattr(r, key) for r in results])
    df["Regime"] = [r.regime.name for r in results]
    df["Outcome"] = [r.outcome.name for r in results]
    df["Iterations"] = [r.iterations for r in results]

    if export:
        df.to_excel("equilibrium.xlsx", index=False, engine="openpyxl")
        fileout = tabulate(df, headers="keys", showindex=False, floatfmt=".4g")
        with open("EQUILIBRIUM.TXT", "w") as text_file:
            text_file.write(fileout)
    return df
