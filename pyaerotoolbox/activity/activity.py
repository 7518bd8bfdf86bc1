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

# Multicomponent activity coefficients of (2H+, SO4--), (H+, NO3-), (H+, HSO4-),
# (2NH4+, SO4--), (NH4+, NO3-) and (NH4+, HSO4-) in aqueous solution. Binary
# terms follow Bromley's extended Debye-Huckel form; the multicomponent values
# are mixed by charge fraction following Pilinis & Seinfeld (1987).
#
# Sources for BETA0, BETA1, CGAMA:
#     (H+, SO4--), (H+, HSO4-)    - Clegg & Brimblecombe (1988)
#     (H+, NO3-)                  - Clegg & Brimblecombe (1990)
#     (NH4+, SO4--), (NH4+, NO3-) - Chan, Flagan & Seinfeld (1992)
#     (NH4+, HSO4-)               - Pilinis & Seinfeld (1987), CGAMA different
#
# Rows are cations [H+, NH4+], columns are anions [SO4--, NO3-, HSO4-].

import logging
from typing import Tuple

import numpy as np
import numpy.typing as npt

logger = logging.getLogger(__name__)

LN10 = np.log(10.0)

def _frozen(a) -> np.ndarray:
    a = np.array(a, dtype=np.float64)
    a.setflags(write=False)
    return a

# Absolute charges
ZP = _frozen([1.0, 1.0])
ZM = _frozen([2.0, 1.0, 1.0])

BETA0 = _frozen([[2.98e-2, 1.2556e-1, 2.0651e-1],
                 [4.6465e-2, -7.26224e-3, 4.494e-2]])
BETA1 = _frozen([[0.0, 2.8778e-1, 5.556e-1],
                 [-0.54196, -1.168858, 2.3594e-1]])
CGAMA = _frozen([[4.38e-2, -5.59e-3, 0.0],
                 [-1.2683e-3, 3.51217e-5, -2.962e-3]])

# Number of cations (V1) and anions (V2) in each electrolyte formula
V1 = _frozen([[2.0, 1.0, 1.0],
              [2.0, 1.0, 1.0]])
V2 = _frozen([[1.0, 1.0, 1.0],
              [1.0, 1.0, 1.0]])

A_PHI = 0.392  # Debye-Huckel osmotic slope, kg^0.5/mol^0.5
B_PITZER = 1.2
ALPHA = 2.0
ZOT_SLOPE = 0.511
TRM_MAX = 30.0  # log10 gamma above which gamma is clamped
GAMMA_MAX = 1.0e30

# Charge products and derived per-electrolyte factors
_ZZ = _frozen(np.outer(ZP, ZM))
_ZSUM = _frozen(ZP[:, None] + ZM[None, :])
_ZBAR2 = _frozen((_ZSUM * 0.5) ** 2)
_VSUM = _frozen(V1 + V2)
_BFAC = _frozen(2.0 * V1 * V2 / _VSUM)
_CFAC = _frozen(2.0 * (V1 * V2) ** 1.5 / _VSUM)


def ionic_strength(cat: npt.ArrayLike, an: npt.ArrayLike) -> float:
    """ Ionic strength (mol/kg) of cations [H+, NH4+] and anions [SO4--, NO3-, HSO4-] """
    cat = np.asarray(cat, dtype=np.float64)
    an = np.asarray(an, dtype=np.float64)
    return 0.5 * (np.dot(cat, ZP * ZP) + np.dot(an, ZM * ZM))


def osmotic_coefficient(cat: np.ndarray, an: np.ndarray, ionic: float) -> float:
    """ Multicomponent practical osmotic coefficient from the Pitzer expression,
        using the same binary parameters and neglecting mixing terms
    """
    molnu = cat.sum() + an.sum()
    if molnu <= 0:
        return 0.0
    sri = np.sqrt(ionic)
    bphi = BETA0 + BETA1 * np.exp(-ALPHA * sri)
    cmx = (2.0 / 3.0) * CGAMA / (2.0 * np.sqrt(_ZZ))
    zsum = np.dot(cat, ZP) + np.dot(an, ZM)
    mm = np.outer(cat, an)
    total = -A_PHI * ionic ** 1.5 / (1.0 + B_PITZER * sri) + np.sum(mm * (bphi + zsum * cmx))
    return 1.0 + 2.0 * total / molnu


def activity_coefficients(cat: npt.ArrayLike, an: npt.ArrayLike) -> Tuple[np.ndarray, float, float]:
    """ Returns tuple of (gamma[2, 3], total moles of ions (mol/kg), practical osmotic coefficient)

        cat: Cation molalities [H+, NH4+] (mol/kg water)
        an: Anion molalities [SO4--, NO3-, HSO4-] (mol/kg water)

        Zero ionic strength returns an all-zero table. Negative ionic strength
        (negative concentrations) raises ValueError.
    """
    cat = np.asarray(cat, dtype=np.float64)
    an = np.asarray(an, dtype=np.float64)

    ionic = ionic_strength(cat, an)
    if ionic == 0.0:
        logger.debug("Ionic strength is zero...returning zero activities")
        return np.zeros((2, 3)), 0.0, 0.0
    if ionic < 0.0:
        raise ValueError(f"Ionic strength below zero ({ionic})...negative concentrations")

    sri = np.sqrt(ionic)
    twosri = 2.0 * sri
    twoi = 2.0 * ionic
    texpv = 1.0 - np.exp(-twosri) * (1.0 + twosri - twoi)
    zot1 = ZOT_SLOPE * sri / (1.0 + sri)

    # Binary activity coefficients
    fgama = -A_PHI * (sri / (1.0 + B_PITZER * sri) + (2.0 / B_PITZER) * np.log(1.0 + B_PITZER * sri))
    bgama = 2.0 * BETA0 + (2.0 * BETA1 / (4.0 * ionic)) * texpv
    m = (cat[:, None] ** V1 * an[None, :] ** V2) ** (1.0 / _VSUM)  # Molality of each electrolyte
    lgama0 = (_ZZ * fgama + m * _BFAC * bgama + m * m * _CFAC * CGAMA) / LN10

    # Charge fraction weights
    x = _ZBAR2 * cat[:, None] / ionic
    y = _ZBAR2 * an[None, :] / ionic
    f1 = np.sum(x * lgama0 + zot1 * _ZZ * x, axis=0)  # Per anion
    f2 = np.sum(y * lgama0 + zot1 * _ZZ * y, axis=1)  # Per cation

    trm = -zot1 * _ZZ + _ZZ / _ZSUM * (f2[:, None] / ZP[:, None] + f1[None, :] / ZM[None, :])
    gama = np.where(trm > TRM_MAX, GAMMA_MAX, 10.0 ** np.minimum(trm, TRM_MAX))

    molnu = float(cat.sum() + an.sum())
    phimult = osmotic_coefficient(cat, an, ionic)
    return gama, molnu, phimult
