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

import logging

logger = logging.getLogger(__name__)

def validate_concentrations(**totals):
    """ Raises ValueError if any named total concentration is negative or NaN.
        Usage: validate_concentrations(tso4=tso4, tno3=tno3, tnh4=tnh4)
    """
    for name, value in totals.items():
        if value != value or value < 0:  # NaN fails the first test
            logger.error("Invalid total concentration %s = %s", name, value)
            raise ValueError(f"Total concentration {name} = {value} must be non-negative")
    return True
