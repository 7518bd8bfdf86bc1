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

from pyaerotoolbox.shared_fns import poly_horner
from pyaerotoolbox.constants import (ZSR_MW_SO4, ZSR_MW_NH4, ZSR_MW_AS, ZSR_MW_AN,
                                     IRH_CRYST, AW_CRYST, AWC_SLOPE, X_NO_SULFATE)

# =============================================================================
# Mass fraction of solute (mfs) as a function of water activity
# =============================================================================
# Fits to Tang & Munkelwitz, JGR 99: 18801-18808, 1994
C1 = (0.9995178, -0.7952896, 0.99683673, -1.143874)  # Ammonium bisulfate (X = 1)
C15 = (1.697092, -4.045936, 5.833688, -3.463783)  # Letovicite (X = 1.5)

# Fit to Nair & Vohra, J. Aerosol Sci. 6: 265-271, 1975; Giauque et al.,
# J. Am. Chem. Soc. 82: 62-70, 1960; Zeleznik, J. Phys. Chem. Ref. Data 20: 157-1200
C0 = (0.798079, -1.574367, 2.536686, -1.735297)  # Sulfuric acid (X = 0)

# Chan et al. 1992, Atmospheric Environment (26A): 1661-1673
KNO3 = (0.2906, 6.83665, -26.9093, 46.6983, -38.803, 11.8837)  # Ammonium nitrate
KSO4 = (2.27515, -11.147, 36.3369, -64.2134, 56.8341, -20.0953)  # Ammonium sulfate

IRH_MAX = 100
IRH_INDEX_MAX = 99  # Largest humidity index handed to the water model by the driver


def humidity_index(rh: float) -> int:
    """ Fractional relative humidity quantized to an integer percent in [1, 99] """
    irh = int(math.floor(100.0 * rh + 0.5))
    return min(IRH_INDEX_MAX, max(1, irh))


def _y(coeffs, aw: float) -> float:
    # Water to solute mass ratio from a mass fraction of solute polynomial
    mfs = poly_horner(coeffs, aw)
    return (1.0 - mfs) / mfs


def water_content(irh: int, so4: float, nh4: float, no3: float) -> float:
    """ Aerosol liquid water (ug/m3) from the ZSR relationship
        irh: Relative humidity (percent, 1 - 100)
        so4: Sulfate (umol/m3)
        nh4: Ammonium (umol/m3)
        no3: Nitrate (umol/m3)

        Sulfates are treated as metastable between deliquescence and crystallization.
        Four sections of X = NH4/SO4 are interpolated between pure solution curves;
        X >= 2 sums ammonium sulfate and ammonium nitrate contributions.
        Returns zero for crystallized aerosol.
    """
    irh = min(IRH_MAX, max(1, int(irh)))
    aw = irh / 100.0  # Water activity = fractional RH
    tso4 = max(so4, 0.0)
    tnh4 = max(nh4, 0.0)
    tno3 = max(no3, 0.0)

    x = 0.0
    if tso4 > 0.0:
        x = tnh4 / tso4
    elif tno3 > 0.0 and tnh4 > 0.0:
        x = X_NO_SULFATE

    y = 0.0
    y2 = 0.0
    y3 = 0.0
    if x < 1.0:
        y = (1.0 - x) * _y(C0, aw) + x * _y(C1, aw)

    elif x < 1.5:
        if irh >= IRH_CRYST:
            y = 2.0 * (_y(C1, aw) * (1.5 - x) + _y(C15, aw) * (x - 1.0))
        else:
            # Crystallization curve runs from y15(0.40) at X = 1.5 to zero at X = 1
            awc = AWC_SLOPE * (x - 1.0)
            if aw >= awc:
                y140 = _y(C1, AW_CRYST)
                y1540 = _y(C15, AW_CRYST)
                y40 = 2.0 * (y140 * (1.5 - x) + y1540 * (x - 1.0))
                yc = 2.0 * y1540 * (x - 1.0)
                y = y40 - (y40 - yc) * (AW_CRYST - aw) / (AW_CRYST - awc)

    elif x < 2.0:
        if irh >= IRH_CRYST:
            y = 2.0 * (_y(C15, aw) * (2.0 - x) + _y(KSO4, aw) * (x - 1.5))

    else:  # Fully neutralized sulfate, excess ammonium as ammonium nitrate
        if irh >= IRH_CRYST:
            y2 = _y(KSO4, aw)
            y3 = _y(KNO3, aw)

    if x < 2.0:
        return y * (tso4 * ZSR_MW_SO4 + ZSR_MW_NH4 * tnh4)
    return y2 * tso4 * ZSR_MW_AS + y3 * tno3 * ZSR_MW_AN
