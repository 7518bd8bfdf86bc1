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

from enum import Enum

class eq_regime(Enum):  # Equilibrium regime selected by the driver
    DRY_AIR = 0  # RH below 1%, nothing computed
    TRACE = 1  # Negligible sulfate and nitrate
    RICH_DRY = 2  # Ammonia rich, low water fraction
    RICH_WET = 3  # Ammonia rich, supersaturated solution
    POOR = 4  # Ammonia poor, sulfate held as bisulfate

class eq_outcome(Enum):  # How a regime branch terminated
    CONVERGED = 0
    DEGENERATE = 1  # Negative discriminant or no liquid water
    ITERATION_LIMIT = 2  # Iteration budget exhausted
    EARLY_EXIT = 3  # Returned before any iteration
