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


# Molecular weights (g/mol) used for gas/aerosol mass budgets
MW_NO3 = 62.0049  # Nitrate
MW_HNO3 = 63.01287  # Nitric acid
MW_SO4 = 96.0576  # Sulfate
MW_NH3 = 17.03061  # Ammonia
MW_NH4 = 18.03858  # Ammonium

# Molecular weights (g/mol) the ZSR water polynomials were fitted with
ZSR_MW_SO4 = 96.0636
ZSR_MW_NH4 = 18.0985
ZSR_MW_NO3 = 62.0649
ZSR_MW_AS = ZSR_MW_SO4 + 2.0 * ZSR_MW_NH4  # Ammonium sulfate
ZSR_MW_AN = ZSR_MW_NO3 + ZSR_MW_NH4  # Ammonium nitrate

# Concentration floors
FLOOR = 1.0e-30  # Minimum returned concentration (ug/m3)
CONMIN = 1.0e-30  # Minimum tracer concentration in the host bridge (ug/m3)
MIN_SO4 = 1.0e-6 / MW_SO4  # Minimum total sulfate (umol/m3), 1 pg/m3
MIN_NO3 = 1.0e-6 / MW_NO3  # Minimum total nitrate (umol/m3)
MIN_HSO4_MOLALITY = 1.0e-10  # Lower limit on bisulfate molality (mol/kg)

# Regime selection thresholds
RH_MIN = 0.01  # Below this fractional RH no equilibrium is computed
RATIO_RICH = 2.0  # NH4/SO4 molar ratio above which sulfate is fully neutralized
RATIO_POOR_SKIP = 0.5  # NH4/SO4 molar ratio below which no iteration is done
WFRAC_DRY = 0.20  # Water mass fraction below which ammonium nitrate is solid
MAX_SO4_MOLALITY = 9.0  # Total sulfate molality above which nitrate is not solved

# Crystallization thresholds for the water content model
IRH_CRYST = 40  # Percent RH below which sulfates crystallize
AW_CRYST = 0.40  # Same threshold as water activity
AWC_SLOPE = 0.80  # Crystallization RH = AWC_SLOPE * (X - 1) for 1 <= X < 1.5
X_NO_SULFATE = 10.0  # NH4/SO4 ratio used when sulfate is absent

# Iteration control
MAX_ITER = 50
TOL_RICH = 1.0e-5  # Relative change in NH4NO3 activity coefficient
TOL_POOR = 1.0e-3  # Relative change in ammonia solubility activity term
GAMMA_AN_INIT = 0.1  # Starting NH4NO3 activity coefficient, ammonia rich case

# Unit conversion
KG_TO_UG = 1.0e9
UG_TO_KG = 1.0e-9
