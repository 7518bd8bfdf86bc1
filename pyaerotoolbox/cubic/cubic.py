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
from typing import List, Tuple

logger = logging.getLogger(__name__)

SQRT3 = math.sqrt(3.0)
ONE3RD = 1.0 / 3.0
NEG_ROOT_SENTINEL = 1.0e9  # Replaces negative roots so the minimum is non-negative
PHI_MIN = 1.0e-20  # Below this the three-root solution is undefined

def solve_cubic(a2: float, a1: float, a0: float) -> Tuple[int, List[float]]:
    """ Real roots of x**3 + a2*x**2 + a1*x + a0 = 0 (Numerical Recipes trigonometric / Cardano form)
        Returns tuple of (number of real roots, [root1, root2, root3])

        Three real roots: negative roots are replaced by 1e9 and the smallest
        non-negative root is placed in the first slot.
        One real root: it is returned in the first slot, the others are zero.
        Raises ValueError if Q**3 is too close to zero to take the arccosine.
    """
    a2sq = a2 * a2
    qq = (a2sq - 3.0 * a1) / 9.0
    rr = (a2 * (2.0 * a2sq - 9.0 * a1) + 27.0 * a0) / 54.0

    dum1 = qq * qq * qq
    rrsq = rr * rr
    dum2 = dum1 - rrsq

    if dum2 >= 0.0:  # Three real roots
        phi = math.sqrt(dum1)
        if abs(phi) < PHI_MIN:
            logger.error("Cubic solver failed: phi = %g (a2=%g, a1=%g, a0=%g)", phi, a2, a1, a0)
            raise ValueError(f"Cubic discriminant term too small (phi = {phi}), coefficients outside valid range")

        theta = math.acos(max(-1.0, min(1.0, rr / phi))) / 3.0
        costh = math.cos(theta)
        sinth = math.sin(theta)

        part1 = math.sqrt(qq)
        yy1 = part1 * costh
        yy2 = yy1 - a2 / 3.0
        yy3 = SQRT3 * part1 * sinth
        roots = [yy2 - yy3, yy2 + yy3, -2.0 * yy1 - a2 / 3.0]

        roots = [r if r >= 0.0 else NEG_ROOT_SENTINEL for r in roots]
        roots[0] = min(roots)
        return 3, roots

    # Only one real root
    part1 = math.sqrt(rrsq - dum1)
    part2 = abs(rr)
    part3 = (part1 + part2) ** ONE3RD
    root = -math.copysign(1.0, rr) * (part3 + qq / part3) - a2 / 3.0
    return 1, [root, 0.0, 0.0]
